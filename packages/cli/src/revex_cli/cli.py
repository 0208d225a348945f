"""CLI entry point for revex.

Commands:
  extract : extract review comments from the configured repositories
  stats   : summarize a previously written extraction
  init    : interactive wizard writing a starter config file
"""

from __future__ import annotations

import importlib.metadata
from pathlib import Path

import click

from revex_cli.commands.extract import extract_cmd
from revex_cli.commands.init import init_cmd
from revex_cli.commands.stats import stats_cmd


def _build_store(output_path: str):
    """Instantiate the store matching the output file's suffix.

      *.yml / *.yaml → YAMLStore
      anything else  → JSONStore
    """
    suffix = Path(output_path).suffix.lower()

    if suffix in (".yml", ".yaml"):
        from revex_store.yaml_store import YAMLStore

        return YAMLStore(output_path)

    from revex_store.json_store import JSONStore

    return JSONStore(output_path)


def _build_extractors(config: dict) -> dict:
    """Instantiate one extractor per supported provider.

    Clients are created without any network activity; a missing token means
    unauthenticated access.
    """
    from revex_cli.auth import resolve_github_token, resolve_gitlab_token
    from revex_core.models import GITHUB, GITLAB
    from revex_core.providers.github import GitHubClient, GitHubExtractor
    from revex_core.providers.gitlab import GitLabClient, GitLabExtractor

    gh_cfg = config.get("github") or {}
    gl_cfg = config.get("gitlab") or {}

    github = GitHubClient(token=resolve_github_token(gh_cfg.get("token")), base_url=gh_cfg.get("base_url"))
    gitlab = GitLabClient(token=resolve_gitlab_token(gl_cfg.get("token")), base_url=gl_cfg.get("base_url"))

    return {
        GITHUB: GitHubExtractor(github, host=gh_cfg.get("host") or "github.com"),
        GITLAB: GitLabExtractor(gitlab, host=gl_cfg.get("host") or "gitlab.com"),
    }


@click.group()
@click.version_option(
    version=importlib.metadata.version("revex"),
    prog_name="revex",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """Extract code review comments from Git hosting platforms."""
    from revex_cli.log import setup_logging

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose)


main.add_command(extract_cmd)
main.add_command(stats_cmd)
main.add_command(init_cmd)
