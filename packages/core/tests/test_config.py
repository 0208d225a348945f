"""Tests for configuration loading."""

import pytest

from revex_core.config import infer_provider, load_config, parse_repositories
from revex_core.errors import ConfigError
from revex_core.models import RepositoryConfig


@pytest.fixture(autouse=True)
def _no_env_tokens(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITLAB_TOKEN", raising=False)


def _write(tmp_path, text):
    cfg = tmp_path / "revex.yml"
    cfg.write_text(text)
    return str(cfg)


def test_missing_config_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(config_path=str(tmp_path / "nonexistent.yml"))


def test_defaults_applied_for_empty_file(tmp_path):
    config = load_config(_write(tmp_path, ""))
    assert config["repositories"] == []
    assert config["output_file"] == "reviews.json"
    assert config["max_workers"] == 4
    assert config["github"]["token"] is None
    assert config["gitlab"]["base_url"] is None


def test_config_file_overrides_defaults(tmp_path):
    config = load_config(_write(tmp_path, "output_file: out.yaml\nmax_workers: 8\n"))
    assert config["output_file"] == "out.yaml"
    assert config["max_workers"] == 8


def test_nested_sections_merged_key_by_key(tmp_path):
    config = load_config(_write(tmp_path, "gitlab:\n  base_url: https://git.example.com\n"))
    assert config["gitlab"]["base_url"] == "https://git.example.com"
    assert "token" in config["gitlab"]
    assert "host" in config["gitlab"]


def test_defaults_not_mutated_between_loads(tmp_path):
    load_config(_write(tmp_path, "github:\n  token: abc\n"))
    config = load_config(_write(tmp_path, ""))
    assert config["github"]["token"] is None


def test_cli_overrides_config_file(tmp_path):
    path = _write(tmp_path, "output_file: from-file.json\n")
    config = load_config(path, cli_overrides={"output_file": "from-cli.json"})
    assert config["output_file"] == "from-cli.json"


def test_none_cli_override_ignored(tmp_path):
    path = _write(tmp_path, "max_workers: 2\n")
    config = load_config(path, cli_overrides={"max_workers": None})
    assert config["max_workers"] == 2


def test_tokens_fall_back_to_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-env")
    monkeypatch.setenv("GITLAB_TOKEN", "gl-env")
    config = load_config(_write(tmp_path, ""))
    assert config["github"]["token"] == "gh-env"
    assert config["gitlab"]["token"] == "gl-env"


def test_file_token_wins_over_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-env")
    config = load_config(_write(tmp_path, "github:\n  token: gh-file\n"))
    assert config["github"]["token"] == "gh-file"


def test_non_mapping_top_level_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, "- just\n- a list\n"))


def test_non_mapping_section_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, "github: not-a-mapping\n"))


class TestParseRepositories:
    def test_entries_kept_in_order(self):
        config = {
            "repositories": [
                {"url": "https://gitlab.com/g/p", "provider": "gitlab"},
                {"url": "https://github.com/o/r", "provider": "GitHub"},
            ]
        }
        assert parse_repositories(config) == [
            RepositoryConfig(provider="gitlab", url="https://gitlab.com/g/p"),
            RepositoryConfig(provider="github", url="https://github.com/o/r"),
        ]

    def test_bare_url_entries_infer_provider(self):
        (repo,) = parse_repositories({"repositories": ["https://github.com/o/r"]})
        assert repo.provider == "github"

    def test_unknown_provider_passed_through(self):
        (repo,) = parse_repositories({"repositories": [{"url": "https://example.com/o/r", "provider": "gitea"}]})
        assert repo.provider == "gitea"

    @pytest.mark.parametrize("entries", [[], None, "https://github.com/o/r"])
    def test_empty_or_malformed_list_rejected(self, entries):
        with pytest.raises(ConfigError):
            parse_repositories({"repositories": entries})

    def test_missing_url_rejected(self):
        with pytest.raises(ConfigError, match=r"repositories\[1\]"):
            parse_repositories({"repositories": [{"url": "https://github.com/o/r"}, {"provider": "github"}]})

    def test_uninferable_provider_rejected(self):
        with pytest.raises(ConfigError, match="cannot infer provider"):
            parse_repositories({"repositories": [{"url": "https://example.com/o/r"}]})


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://github.com/o/r", "github"),
        ("https://gitlab.com/g/sub/p", "gitlab"),
        ("https://bitbucket.org/o/r", "bitbucket"),
        ("https://gitlab.example.com/g/p", "gitlab"),
        ("https://example.com/github/r", None),
        ("https://github-mirror.gitlab.example/g/p", "gitlab"),
        ("https://github-mirror.example.com/o/r", None),
        ("https://GitHub.com:443/o/r", "github"),
    ],
)
def test_infer_provider(url, expected):
    assert infer_provider(url) == expected


def test_malformed_yaml_rejected(tmp_path):
    with pytest.raises(ConfigError, match="invalid YAML"):
        load_config(_write(tmp_path, "repositories: [unclosed\n"))


@pytest.mark.parametrize("value", ["many", "0", "-2", "true"])
def test_invalid_max_workers_rejected(tmp_path, value):
    with pytest.raises(ConfigError, match="max_workers"):
        load_config(_write(tmp_path, f"max_workers: {value}\n"))


def test_numeric_string_max_workers_accepted(tmp_path):
    config = load_config(_write(tmp_path, "max_workers: '3'\n"))
    assert config["max_workers"] == 3
