"""GitHub provider backed by PyGithub."""

from __future__ import annotations

from collections.abc import Iterator

from revex_core.errors import InvalidRepositoryReference
from revex_core.gh.pull_request import (
    build_unified_diff,
    get_client,
    get_diff,
    get_pull,
    get_pull_requests,
    get_repo,
    get_review_comments,
    get_reviews,
)
from revex_core.models import GITHUB
from revex_core.providers.base import BaseExtractor, InlineComment, PlatformClient, PullRequest, Review


def _login(user) -> str:
    # Deleted accounts come back as user=None ("ghost").
    return user.login if user is not None else ""


class GitHubClient(PlatformClient):
    def __init__(self, token: str | None = None, base_url: str | None = None, gh=None):
        self._gh = gh if gh is not None else get_client(token, base_url)
        # Pulls seen while listing, keyed by (owner, repo, number); per-PR calls
        # reuse them instead of issuing get_pull.
        self._pulls: dict[tuple[str, str, int], object] = {}

    def _repo(self, owner: str, repo: str):
        return get_repo(self._gh, f"{owner}/{repo}")

    def _pull(self, owner: str, repo: str, number: int):
        pr = self._pulls.get((owner, repo, number))
        if pr is None:
            pr = get_pull(self._repo(owner, repo), number)
            self._pulls[(owner, repo, number)] = pr
        return pr

    def list_pull_requests(self, owner: str, repo: str) -> Iterator[PullRequest]:
        for pr in get_pull_requests(self._repo(owner, repo), state="all"):
            self._pulls[(owner, repo, pr.number)] = pr
            yield PullRequest(number=pr.number, title=pr.title or "", author=_login(pr.user))

    def list_comments(self, owner: str, repo: str, number: int) -> Iterator[InlineComment]:
        pr = self._pull(owner, repo, number)
        for c in get_review_comments(pr):
            # c.line is None for comments whose line no longer exists in the
            # current diff (e.g. after a force-push). Fall back to original_line.
            line = c.line if c.line is not None else getattr(c, "original_line", None)
            yield InlineComment(
                id=str(c.id),
                author=_login(c.user),
                body=c.body or "",
                created_at=c.created_at,
                path=c.path or "",
                line=line,
            )

    def list_reviews(self, owner: str, repo: str, number: int) -> Iterator[Review]:
        pr = self._pull(owner, repo, number)
        for r in get_reviews(pr):
            yield Review(id=str(r.id), author=_login(r.user), body=r.body or "", submitted_at=r.submitted_at)

    def get_diff(self, owner: str, repo: str, number: int) -> str:
        pr = self._pull(owner, repo, number)
        try:
            return build_unified_diff(get_diff(pr))
        finally:
            # Diff is the last per-PR call.
            self._pulls.pop((owner, repo, number), None)


class GitHubExtractor(BaseExtractor):
    provider = GITHUB

    def __init__(self, client: PlatformClient, host: str = "github.com"):
        super().__init__(client)
        self.host = host

    def parse_repository_url(self, url: str) -> tuple[str, str]:
        """https://github.com/owner/repo[/...] → (owner, repo)."""
        parts = url.split(f"{self.host}/")
        if len(parts) != 2:
            raise InvalidRepositoryReference(url, self.provider, f"expected exactly one '{self.host}/'")

        segments = parts[1].split("/")
        if len(segments) < 2 or not segments[0] or not segments[1].removesuffix(".git"):
            raise InvalidRepositoryReference(url, self.provider, "expected <owner>/<repo> after the host")

        return segments[0], segments[1].removesuffix(".git")
