"""stats command: summarize a previously written extraction."""

from __future__ import annotations

from collections import Counter

import click
import yaml
from rich.console import Console
from rich.table import Table

console = Console()


@click.command("stats")
@click.argument("output_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--top", default=5, show_default=True, type=click.IntRange(min=1), help="Entries per ranking.")
def stats_cmd(output_file: str, top: int):
    """Show aggregated review statistics for an extraction file.

    Reports totals, the most active reviewers and the repositories with the
    most review comments. Rankings are recomputed from the stored reviews,
    so --top may exceed the five entries kept in the file.
    """
    from revex_cli.cli import _build_store
    from revex_core.stats import aggregate

    store = _build_store(output_file)
    try:
        result = store.load()
    except (ValueError, KeyError, TypeError, AttributeError, yaml.YAMLError) as e:
        raise click.ClickException(f"{output_file} is not a revex extraction: {e}")
    finally:
        store.close()

    if not result.reviews:
        console.print("[yellow]No review records found in this extraction.[/yellow]")
        return

    stats = aggregate(result.reviews, top_n=top)
    reviewer_counts = Counter(r.comment_author for r in result.reviews)
    repository_counts = Counter(r.repository for r in result.reviews)
    line_comments = sum(1 for r in result.reviews if r.is_line_comment)

    # --- Summary ---
    extracted_at = result.extracted_at.isoformat()[:19].replace("T", " ") if result.extracted_at else "unknown"
    console.print(f"\n[bold]Review stats for [cyan]{output_file}[/cyan][/bold]  [dim]({extracted_at})[/dim]")
    console.print(f"  Repositories:     {result.repositories_processed}")
    console.print(f"  Pull requests:    {stats.total_prs}")
    console.print(f"  Total reviews:    {stats.total_reviews}")
    console.print(f"  Inline comments:  {line_comments}")
    console.print(f"  Review bodies:    {stats.total_reviews - line_comments}")
    console.print(f"  Avg per PR:       {stats.average_pr_size:.1f}")

    # --- Rankings ---
    for title, keys, counts in (
        (f"Top {top} Reviewers", stats.top_reviewers, reviewer_counts),
        (f"Top {top} Repositories", stats.top_repositories, repository_counts),
    ):
        table = Table(title=title, show_header=True)
        table.add_column("Name")
        table.add_column("Comments", justify="right")
        table.add_column("% of total", justify="right")
        for key in keys:
            count = counts[key]
            table.add_row(key or "[dim](unknown)[/dim]", str(count), f"{count / stats.total_reviews * 100:.1f}%")
        console.print(table)
