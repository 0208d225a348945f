"""ExtractionResult ⇄ plain dict conversion.

The dict shape is the output document format; its keys are stable for
downstream consumers. Timestamps are ISO-8601 strings.
"""

from __future__ import annotations

from datetime import datetime

from revex_core.models import ExtractionResult, ReviewRecord, Statistics


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_iso(value) -> datetime | None:
    if value is None or value == "":
        return None
    # YAML may already have produced a datetime for an unquoted timestamp.
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def review_to_dict(review: ReviewRecord) -> dict:
    return {
        "pr_id": review.pr_id,
        "pr_title": review.pr_title,
        "pr_author": review.pr_author,
        "repository": review.repository,
        "provider": review.provider,
        "comment_id": review.comment_id,
        "comment_author": review.comment_author,
        "comment_text": review.comment_text,
        "comment_created": _iso(review.comment_created),
        "file_path": review.file_path,
        "line_number": review.line_number,
        "diff_context": review.diff_context,
    }


def review_from_dict(d: dict) -> ReviewRecord:
    return ReviewRecord(
        pr_id=int(d.get("pr_id", 0)),
        pr_title=d.get("pr_title", ""),
        pr_author=d.get("pr_author", ""),
        repository=d.get("repository", ""),
        provider=d.get("provider", ""),
        comment_id=str(d.get("comment_id", "")),
        comment_author=d.get("comment_author", ""),
        comment_text=d.get("comment_text", ""),
        comment_created=_parse_iso(d.get("comment_created")),
        file_path=d.get("file_path", "") or "",
        line_number=int(d.get("line_number", 0) or 0),
        diff_context=d.get("diff_context", "") or "",
    )


def statistics_to_dict(stats: Statistics) -> dict:
    return {
        "total_reviews": stats.total_reviews,
        "total_prs": stats.total_prs,
        "top_reviewers": list(stats.top_reviewers),
        "top_repositories": list(stats.top_repositories),
        "average_pr_size": stats.average_pr_size,
        "review_frequency": stats.review_frequency,
    }


def statistics_from_dict(d: dict) -> Statistics:
    return Statistics(
        total_reviews=d.get("total_reviews", 0),
        total_prs=d.get("total_prs", 0),
        top_reviewers=list(d.get("top_reviewers") or []),
        top_repositories=list(d.get("top_repositories") or []),
        average_pr_size=float(d.get("average_pr_size", 0.0)),
        review_frequency=float(d.get("review_frequency", 0.0)),
    )


def result_to_dict(result: ExtractionResult) -> dict:
    return {
        "extracted_at": _iso(result.extracted_at),
        "total_comments": result.total_comments,
        "repositories_processed": result.repositories_processed,
        "reviews": [review_to_dict(r) for r in result.reviews],
        "statistics": statistics_to_dict(result.statistics),
    }


def result_from_dict(d: dict) -> ExtractionResult:
    reviews = [review_from_dict(r) for r in d.get("reviews") or []]
    return ExtractionResult(
        extracted_at=_parse_iso(d.get("extracted_at")),
        total_comments=d.get("total_comments", len(reviews)),
        repositories_processed=d.get("repositories_processed", 0),
        reviews=reviews,
        statistics=statistics_from_dict(d.get("statistics") or {}),
    )
