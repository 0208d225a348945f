"""extract command: pull review comments from every configured repository."""

from __future__ import annotations

import threading

import click
import yaml
from rich.console import Console

from revex_core.errors import ConfigError, ExtractionCancelled, ExtractionError

console = Console()


@click.command("extract")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="Path to the YAML configuration file.",
    envvar="REVEX_CONFIG",
)
@click.option(
    "--output",
    "output_path",
    default=None,
    help="Output file (.json, .yml or .yaml). Overrides output_file in the config.",
)
@click.option(
    "--workers",
    "max_workers",
    type=click.IntRange(min=1),
    default=None,
    help="Repositories extracted in parallel. Overrides max_workers in the config.",
)
def extract_cmd(config_path: str, output_path: str | None, max_workers: int | None):
    """Extract code review comments from Git platforms.

    Fetches every pull request of each configured repository, collects inline
    comments (with surrounding diff context) and review bodies, and writes
    them together with aggregate statistics to a single file.

    Nothing is written unless every repository was extracted successfully.

    \b
    Optional environment variables:
      GITHUB_TOKEN    GitHub token (or use gh CLI); unauthenticated otherwise
      GITLAB_TOKEN    GitLab personal access token
    """
    from revex_cli.cli import _build_extractors, _build_store
    from revex_core.config import load_config, parse_repositories
    from revex_core.extractor import ReviewExtractor

    try:
        config = load_config(
            config_path,
            cli_overrides={"output_file": output_path, "max_workers": max_workers},
        )
        repositories = parse_repositories(config)
    except (FileNotFoundError, ConfigError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"failed to load config: {e}")

    extractor = ReviewExtractor(
        repositories,
        _build_extractors(config),
        max_workers=config["max_workers"],
    )

    console.print(f"Extracting reviews from {len(repositories)} repositor{'y' if len(repositories) == 1 else 'ies'}...")
    cancel = threading.Event()
    try:
        result = extractor.extract_reviews(cancel_event=cancel)
    except KeyboardInterrupt:
        cancel.set()
        raise click.ClickException("extraction interrupted")
    except ExtractionCancelled as e:
        raise click.ClickException(str(e))
    except ExtractionError as e:
        raise click.ClickException(f"failed to extract reviews: {e}")

    store = _build_store(config["output_file"])
    try:
        store.save(result)
    except OSError as e:
        raise click.ClickException(f"failed to write output: {e}")
    finally:
        store.close()

    console.print(
        f"[green]Successfully extracted {result.total_comments} reviews "
        f"from {result.repositories_processed} repositories[/green]"
    )
    console.print(f"[dim]Written to {config['output_file']}[/dim]")
