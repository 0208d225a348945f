"""Review extraction data models.

These are the only types that cross package boundaries: providers produce
ReviewRecords, the orchestrator wraps them in an ExtractionResult, and the
store layer serializes that result without knowing how it was built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# Provider tags. The set is open: configuration may name any provider; it is
# extractable only if an extractor is registered for it.
GITHUB = "github"
GITLAB = "gitlab"
BITBUCKET = "bitbucket"

KNOWN_PROVIDERS = (GITHUB, GITLAB, BITBUCKET)


@dataclass(frozen=True)
class ReviewRecord:
    """One inline review comment or one non-empty review body.

    A record is either a line comment (file_path set, line_number >= 1) or a
    review body (no file_path, line_number 0, no diff_context): never a mix.
    """

    pr_id: int
    pr_title: str
    pr_author: str
    repository: str
    provider: str
    comment_id: str
    comment_author: str
    comment_text: str
    comment_created: datetime | None
    file_path: str = ""
    line_number: int = 0
    diff_context: str = ""

    def __post_init__(self):
        line_comment = bool(self.file_path) and self.line_number >= 1
        review_body = not self.file_path and self.line_number == 0 and not self.diff_context
        if not (line_comment or review_body):
            raise ValueError(
                f"ReviewRecord {self.comment_id!r} must be either a line comment or a review body "
                f"(file_path={self.file_path!r}, line_number={self.line_number})"
            )

    @property
    def is_line_comment(self) -> bool:
        return bool(self.file_path)


@dataclass(frozen=True)
class RepositoryConfig:
    provider: str
    url: str


@dataclass
class Statistics:
    total_reviews: int = 0
    total_prs: int = 0
    top_reviewers: list[str] = field(default_factory=list)
    top_repositories: list[str] = field(default_factory=list)
    average_pr_size: float = 0.0
    review_frequency: float = 0.0


@dataclass
class ExtractionResult:
    """Everything produced by one extraction run.

    Built once by ReviewExtractor after every repository succeeded; the store
    layer writes it as-is.
    """

    extracted_at: datetime
    total_comments: int
    repositories_processed: int
    reviews: list[ReviewRecord] = field(default_factory=list)
    statistics: Statistics = field(default_factory=Statistics)
