"""init command: interactive wizard writing a starter config file.

Detects the current repository from the git remote, asks for the provider
and the output file, and writes a config `revex extract --config` accepts.
Existing keys are preserved; a repository already listed is not added twice.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

import click
import yaml
from rich.console import Console

from revex_core.config import infer_provider
from revex_core.models import GITHUB, GITLAB

console = Console()
logger = logging.getLogger(__name__)


@click.command("init")
@click.option("--path", "config_path", default="revex.yml", show_default=True, help="Config file to write.")
@click.option("--repo", "repo_url", default=None, help="Repository URL. Auto-detected from git remote.")
def init_cmd(config_path: str, repo_url: str | None):
    """Write a starter revex config file."""
    console.print("\n[bold cyan]revex init[/bold cyan]: config setup wizard\n")

    # --- Detect repo from git remote ---
    if repo_url is None:
        repo_url = _detect_repo_from_git()
        if repo_url:
            console.print(f"[dim]Detected repository: {repo_url}[/dim]")
        else:
            repo_url = click.prompt("Repository URL (e.g. https://github.com/owner/repo)")

    # --- Choose provider ---
    provider = click.prompt(
        "Provider",
        type=click.Choice([GITHUB, GITLAB]),
        default=infer_provider(repo_url) or GITHUB,
    )

    output_file = click.prompt("Output file (.json, .yml or .yaml)", default="reviews.json")

    _write_config(Path(config_path), {"url": repo_url, "provider": provider}, output_file)
    console.print(f"[green]Wrote {config_path}[/green]")

    token_env = "GITHUB_TOKEN" if provider == GITHUB else "GITLAB_TOKEN"
    console.print(
        f"\n[yellow]Set [bold]{token_env}[/bold] for authenticated access "
        "(unauthenticated requests are heavily rate-limited).[/yellow]"
    )
    console.print(f"Run an extraction with: [bold]revex extract --config {config_path}[/bold]")


def _detect_repo_from_git() -> str | None:
    """Return the origin remote as an https URL, or None if unavailable."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return _normalize_remote(result.stdout.strip())


def _normalize_remote(url: str) -> str | None:
    """Convert a git remote to an https URL.

    https://github.com/owner/repo.git  →  https://github.com/owner/repo
    git@gitlab.com:group/repo.git      →  https://gitlab.com/group/repo
    """
    if not url:
        return None
    if url.startswith("git@"):
        host, _, path = url[len("git@") :].partition(":")
        if not path:
            return None
        url = f"https://{host}/{path}"
    if not url.startswith(("https://", "http://")):
        logger.debug("Unrecognized remote URL: %s", url)
        return None
    return url.removesuffix(".git").rstrip("/")


def _write_config(path: Path, repository: dict, output_file: str) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}

    repositories = existing.get("repositories") or []
    if not any(isinstance(r, dict) and r.get("url") == repository["url"] for r in repositories):
        repositories.append(repository)
    existing["repositories"] = repositories
    existing["output_file"] = output_file

    path.write_text(yaml.safe_dump(existing, default_flow_style=False, sort_keys=False))
