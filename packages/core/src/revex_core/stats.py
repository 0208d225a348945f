"""Aggregate statistics over extracted review records."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from revex_core.models import ReviewRecord, Statistics

TOP_N = 5


def aggregate(records: Sequence[ReviewRecord], top_n: int = TOP_N) -> Statistics:
    """Compute Statistics for ``records``. Never raises; [] gives all zeros.

    Pull requests are distinguished by (repository, pr_id) rather than by pr_id
    alone, so PR #1 of two different repositories counts as two PRs.
    """
    reviewer_counts: Counter[str] = Counter()
    repository_counts: Counter[str] = Counter()
    pr_counts: Counter[tuple[str, int]] = Counter()

    for record in records:
        reviewer_counts[record.comment_author] += 1
        repository_counts[record.repository] += 1
        pr_counts[(record.repository, record.pr_id)] += 1

    total_prs = len(pr_counts)
    average_pr_size = sum(pr_counts.values()) / total_prs if total_prs else 0.0
    review_frequency = len(records) / total_prs if total_prs else 0.0

    return Statistics(
        total_reviews=len(records),
        total_prs=total_prs,
        top_reviewers=top_keys(reviewer_counts.items(), top_n),
        top_repositories=top_keys(repository_counts.items(), top_n),
        average_pr_size=average_pr_size,
        review_frequency=review_frequency,
    )


def top_keys(counts: Iterable[tuple[str, int]], n: int) -> list[str]:
    """Return up to ``n`` keys by count descending, ties broken alphabetically."""
    if n <= 0:
        return []
    ranked = sorted(counts, key=lambda kv: (-kv[1], kv[0]))
    return [key for key, _ in ranked[:n]]
