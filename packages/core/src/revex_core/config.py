import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import yaml

from revex_core.errors import ConfigError
from revex_core.models import KNOWN_PROVIDERS, RepositoryConfig

DEFAULT_CONFIG: dict = {
    "repositories": [],
    "github": {"token": None, "base_url": None, "host": None},
    "gitlab": {"token": None, "base_url": None, "host": None},
    "output_file": "reviews.json",
    "max_workers": 4,
}

# Sections merged key by key rather than replaced wholesale.
_NESTED_SECTIONS = ("github", "gitlab")


def load_config(config_path: str, cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. The YAML config file (required)
      3. CLI argument overrides (None values are ignored)

    Platform tokens missing from the file are taken from GITHUB_TOKEN /
    GITLAB_TOKEN.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        try:
            file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{config_path}: invalid YAML: {e}") from e
    if not isinstance(file_config, dict):
        raise ConfigError(f"{config_path}: expected a mapping at the top level")

    config = {**DEFAULT_CONFIG, "repositories": []}
    for section in _NESTED_SECTIONS:
        config[section] = dict(DEFAULT_CONFIG[section])

    for key, value in file_config.items():
        if key in _NESTED_SECTIONS:
            if value is None:
                continue
            if not isinstance(value, dict):
                raise ConfigError(f"{config_path}: '{key}' must be a mapping")
            config[key].update(value)
        else:
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["max_workers"] = _parse_max_workers(config.get("max_workers"))

    # Resolve credentials from environment variables
    if not config["github"].get("token"):
        config["github"]["token"] = os.environ.get("GITHUB_TOKEN")
    if not config["gitlab"].get("token"):
        config["gitlab"]["token"] = os.environ.get("GITLAB_TOKEN")

    return config


def _parse_max_workers(value) -> int:
    try:
        workers = int(value) if not isinstance(value, bool) else 0
    except (TypeError, ValueError):
        workers = 0
    if workers < 1:
        raise ConfigError(f"'max_workers' must be a positive integer, got {value!r}")
    return workers


def parse_repositories(config: dict) -> list[RepositoryConfig]:
    """Validate the ``repositories`` list and return it as RepositoryConfigs, in order.

    Each entry is either a mapping with ``url`` (and optionally ``provider``)
    or a bare URL string. A missing provider is inferred from the URL host.
    """
    entries = config.get("repositories") or []
    if not isinstance(entries, list) or not entries:
        raise ConfigError("'repositories' must be a non-empty list")

    repositories = []
    for i, entry in enumerate(entries):
        if isinstance(entry, str):
            entry = {"url": entry}
        if not isinstance(entry, dict) or not entry.get("url"):
            raise ConfigError(f"repositories[{i}]: missing 'url'")

        url = str(entry["url"]).strip()
        provider = entry.get("provider") or infer_provider(url)
        if not provider:
            raise ConfigError(f"repositories[{i}]: cannot infer provider from {url!r}; set 'provider'")
        repositories.append(RepositoryConfig(provider=str(provider).lower(), url=url))
    return repositories


def infer_provider(url: str) -> Optional[str]:
    """Return the known provider named by a label of the URL host, or None.

    Labels are compared whole, so github.com and gitlab.example.com match but
    github-mirror.example.com does not. With several matching labels the
    leftmost wins.
    """
    host = urlparse(url).hostname or ""
    for label in host.lower().split("."):
        if label in KNOWN_PROVIDERS:
            return label
    return None
