"""Exceptions raised by the extraction pipeline.

Every ExtractionError is terminal for a run: there is no partial output.
The CLI is the only place these are turned into user-facing messages.
"""

from __future__ import annotations

from collections.abc import Sequence


class ExtractionError(Exception):
    """Base class for all extraction failures."""


class ConfigError(ValueError):
    """The configuration file is structurally invalid."""


class InvalidRepositoryReference(ExtractionError):
    """A repository URL cannot be split into owner and repository name."""

    def __init__(self, url: str, provider: str, reason: str = "expected <host>/<owner>/<repo>"):
        self.url = url
        self.provider = provider
        self.reason = reason
        super().__init__(f"invalid {provider} repository URL {url!r}: {reason}")


class UpstreamFetchFailure(ExtractionError):
    """A platform API call failed.

    ``stage`` names the call (list_pull_requests, list_comments, list_reviews,
    get_diff); ``pr_number`` is None when no pull request was being processed.
    """

    def __init__(self, stage: str, pr_number: int | None, cause: BaseException):
        self.stage = stage
        self.pr_number = pr_number
        self.cause = cause
        where = f" for PR #{pr_number}" if pr_number is not None else ""
        super().__init__(f"{stage} failed{where}: {cause}")


class NoExtractorForProvider(ExtractionError):
    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"no extractor found for provider: {provider}")


class ExtractionCancelled(ExtractionError):
    """The run was cancelled before it could complete."""

    def __init__(self, message: str = "extraction cancelled"):
        super().__init__(message)


class RepositoryExtractionFailed(ExtractionError):
    """Extraction of one repository failed.

    When several repositories failed in the same run, this is raised for the
    first one in configuration order and the rest are listed in ``others``.
    """

    def __init__(
        self,
        repository_url: str,
        cause: BaseException,
        others: Sequence[RepositoryExtractionFailed] = (),
    ):
        self.repository_url = repository_url
        self.cause = cause
        self.others = list(others)
        message = f"failed to extract reviews from {repository_url}: {cause}"
        if self.others:
            extra = "; ".join(f"{o.repository_url}: {o.cause}" for o in self.others)
            message += f" (and {len(self.others)} more: {extra})"
        super().__init__(message)

    @property
    def failures(self) -> list[RepositoryExtractionFailed]:
        """This failure followed by every other failure from the same run."""
        return [self, *self.others]
