"""Base extractor implementing the Template Method pattern.

All providers share the same extraction algorithm:
    extract_reviews() → parse_repository_url()   ← differs per provider
                      → client.list_pull_requests()
                      → per PR: client.list_comments() / list_reviews() / get_diff()
                      → ReviewRecords (diff context via resolve_diff_context)

Subclasses implement two things only:
  - provider: the provider tag written into every record
  - parse_repository_url: split a repository URL into (owner, repo)

The platform API itself sits behind PlatformClient, so the same extractor
can be driven by a real SDK client or an in-memory fake.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, TypeVar

from revex_core.errors import ExtractionCancelled, UpstreamFetchFailure
from revex_core.models import ReviewRecord
from revex_core.utils.diff import resolve_diff_context

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


# ---------------------------------------------------------------------- #
# Provider-neutral platform objects                                       #
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class PullRequest:
    number: int
    title: str
    author: str


@dataclass(frozen=True)
class InlineComment:
    id: str
    author: str
    body: str
    created_at: datetime | None
    path: str
    # None for comments that are no longer anchored to a line (outdated or
    # file-level comments).
    line: int | None


@dataclass(frozen=True)
class Review:
    id: str
    author: str
    body: str
    submitted_at: datetime | None


class PlatformClient(ABC):
    """Read-only access to one hosting platform's pull request data.

    List methods return lazily paginated iterables: pages are requested as
    the caller iterates, one after another.
    """

    @abstractmethod
    def list_pull_requests(self, owner: str, repo: str) -> Iterable[PullRequest]:
        """Every pull request of the repository, whatever its state."""

    @abstractmethod
    def list_comments(self, owner: str, repo: str, number: int) -> Iterable[InlineComment]:
        """Every inline (file/line anchored) comment on a pull request."""

    @abstractmethod
    def list_reviews(self, owner: str, repo: str, number: int) -> Iterable[Review]:
        """Every review of a pull request, including ones without a body."""

    @abstractmethod
    def get_diff(self, owner: str, repo: str, number: int) -> str:
        """The full unified diff of a pull request."""


class BaseExtractor(ABC):
    provider: str = ""

    def __init__(self, client: PlatformClient):
        self.client = client

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def extract_reviews(self, repo_url: str, cancel_event: CancelSignal | None = None) -> list[ReviewRecord]:
        """Return one record per inline comment and per non-empty review body.

        All-or-nothing: the first failing platform call raises
        UpstreamFetchFailure and nothing collected so far is returned.
        """
        owner, repo = self.parse_repository_url(repo_url)
        logger.info("Extracting %s reviews from %s/%s", self.provider, owner, repo)

        pulls = self._fetch(
            "list_pull_requests", None, cancel_event, lambda: self.client.list_pull_requests(owner, repo)
        )

        records: list[ReviewRecord] = []
        for pr in pulls:
            comments = self._fetch(
                "list_comments", pr.number, cancel_event, lambda: self.client.list_comments(owner, repo, pr.number)
            )
            reviews = self._fetch(
                "list_reviews", pr.number, cancel_event, lambda: self.client.list_reviews(owner, repo, pr.number)
            )
            diff = self._fetch("get_diff", pr.number, cancel_event, lambda: self.client.get_diff(owner, repo, pr.number))

            records.extend(self._comment_record(pr, repo, c, diff) for c in comments)
            records.extend(self._review_record(pr, repo, r) for r in reviews if r.body)
            logger.debug(
                "PR #%d: %d inline comment(s), %d review(s)", pr.number, len(comments), len(reviews)
            )

        logger.info("Extracted %d record(s) from %d PR(s) in %s/%s", len(records), len(pulls), owner, repo)
        return records

    # ------------------------------------------------------------------ #
    # Abstract: implement in each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def parse_repository_url(self, url: str) -> tuple[str, str]:
        """Split a repository URL into (owner, repo).

        Raises InvalidRepositoryReference when the URL does not name a
        repository on this provider.
        """

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    def _fetch(self, stage: str, pr_number: int | None, cancel_event: CancelSignal | None, call: Callable[[], T]):
        """Run one platform call to completion, draining paginated results.

        Cancellation is checked before the call and between items, so a
        cancelled run stops after at most one more page request.
        """
        _raise_if_cancelled(cancel_event)
        try:
            result = call()
            if isinstance(result, str):
                return result
            items = []
            for item in result:
                _raise_if_cancelled(cancel_event)
                items.append(item)
            return items
        except ExtractionCancelled:
            raise
        except Exception as e:
            raise UpstreamFetchFailure(stage, pr_number, e) from e

    def _comment_record(self, pr: PullRequest, repo: str, comment: InlineComment, diff: str) -> ReviewRecord:
        anchored = bool(comment.path) and comment.line is not None and comment.line >= 1
        if not anchored:
            logger.debug("Comment %s on PR #%d has no line anchor; storing it unanchored", comment.id, pr.number)
        return ReviewRecord(
            pr_id=pr.number,
            pr_title=pr.title,
            pr_author=pr.author,
            repository=repo,
            provider=self.provider,
            comment_id=comment.id,
            comment_author=comment.author,
            comment_text=comment.body,
            comment_created=comment.created_at,
            file_path=comment.path if anchored else "",
            line_number=comment.line if anchored else 0,
            diff_context=resolve_diff_context(diff, comment.path, comment.line) if anchored else "",
        )

    def _review_record(self, pr: PullRequest, repo: str, review: Review) -> ReviewRecord:
        return ReviewRecord(
            pr_id=pr.number,
            pr_title=pr.title,
            pr_author=pr.author,
            repository=repo,
            provider=self.provider,
            comment_id=review.id,
            comment_author=review.author,
            comment_text=review.body,
            comment_created=review.submitted_at,
        )


def _raise_if_cancelled(cancel_event: CancelSignal | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ExtractionCancelled()
