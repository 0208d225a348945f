"""Multi-repository extraction orchestration."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone

from revex_core.errors import ExtractionCancelled, NoExtractorForProvider, RepositoryExtractionFailed
from revex_core.models import ExtractionResult, RepositoryConfig, ReviewRecord
from revex_core.providers.base import BaseExtractor, CancelSignal
from revex_core.stats import aggregate

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class _LinkedSignal:
    """Set when either the caller's cancel signal or the run's abort flag is set."""

    def __init__(self, parent: CancelSignal | None, abort: threading.Event):
        self._parent = parent
        self._abort = abort

    def is_set(self) -> bool:
        return self._abort.is_set() or (self._parent is not None and self._parent.is_set())


class ReviewExtractor:
    """Runs extraction over every configured repository.

    ``extractors`` maps a provider tag to the extractor handling it.
    """

    def __init__(
        self,
        repositories: Sequence[RepositoryConfig],
        extractors: Mapping[str, BaseExtractor],
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self.repositories = list(repositories)
        self.extractors = dict(extractors)
        self.max_workers = max(1, max_workers)

    def extract_reviews(self, cancel_event: CancelSignal | None = None) -> ExtractionResult:
        """Extract every repository and return the combined, aggregated result.

        All-or-nothing: any failure raises and no ExtractionResult is built.
        Records are merged in configuration order regardless of which
        repository finished first.
        """
        plan = [(repo, self._extractor_for(repo)) for repo in self.repositories]

        abort = threading.Event()
        signal = _LinkedSignal(cancel_event, abort)
        outcomes = self._run_all(plan, signal, abort)

        if cancel_event is not None and cancel_event.is_set():
            raise ExtractionCancelled()

        failures = [
            RepositoryExtractionFailed(repo.url, outcome)
            for repo, outcome in zip(self.repositories, outcomes)
            if isinstance(outcome, BaseException) and not isinstance(outcome, ExtractionCancelled)
        ]
        if failures:
            first, *others = failures
            raise RepositoryExtractionFailed(first.repository_url, first.cause, others)

        all_reviews: list[ReviewRecord] = []
        for records in outcomes:
            all_reviews.extend(records)

        return ExtractionResult(
            extracted_at=datetime.now(timezone.utc),
            total_comments=len(all_reviews),
            repositories_processed=len(self.repositories),
            reviews=all_reviews,
            statistics=aggregate(all_reviews),
        )

    def _extractor_for(self, repo: RepositoryConfig) -> BaseExtractor:
        extractor = self.extractors.get(repo.provider)
        if extractor is None:
            raise NoExtractorForProvider(repo.provider)
        return extractor

    def _run_all(self, plan, signal: _LinkedSignal, abort: threading.Event) -> list:
        """Run one task per repository; return records or the exception, per repository."""
        if not plan:
            return []

        def task(repo: RepositoryConfig, extractor: BaseExtractor) -> list[ReviewRecord]:
            try:
                return extractor.extract_reviews(repo.url, signal)
            except ExtractionCancelled:
                raise
            except Exception:
                # Fail fast: the remaining repositories stop at their next checkpoint.
                abort.set()
                raise

        workers = min(self.max_workers, len(plan))
        outcomes: list = []
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="revex") as pool:
            futures: list[Future] = [pool.submit(task, repo, extractor) for repo, extractor in plan]
            try:
                for (repo, _), future in zip(plan, futures):
                    try:
                        outcomes.append(future.result())
                    except ExtractionCancelled as e:
                        logger.debug("Extraction of %s stopped early", repo.url)
                        outcomes.append(e)
                    except Exception as e:
                        logger.warning("Extraction failed for %s: %s", repo.url, e)
                        outcomes.append(e)
            except BaseException:
                # KeyboardInterrupt while waiting: stop the workers before the
                # executor joins them.
                abort.set()
                raise
        return outcomes
