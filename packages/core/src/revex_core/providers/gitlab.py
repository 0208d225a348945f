"""GitLab provider over the REST v4 API.

GitLab has no separate "review" object with a body: a merge request carries
notes. Notes with a diff ``position`` are inline comments; the remaining
non-system notes play the role of review bodies.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime
from urllib.parse import quote

import requests

from revex_core.errors import InvalidRepositoryReference
from revex_core.models import GITLAB
from revex_core.providers.base import BaseExtractor, InlineComment, PlatformClient, PullRequest, Review

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://gitlab.com"
_PER_PAGE = 100
_TIMEOUT = 30


def _parse_time(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _username(author: dict | None) -> str:
    return (author or {}).get("username", "")


class GitLabClient(PlatformClient):
    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        session: requests.Session | None = None,
    ):
        self._api = (base_url or DEFAULT_BASE_URL).rstrip("/") + "/api/v4"
        self._session = session if session is not None else requests.Session()
        if token:
            self._session.headers["PRIVATE-TOKEN"] = token

    def _project_url(self, owner: str, repo: str) -> str:
        return f"{self._api}/projects/{quote(f'{owner}/{repo}', safe='')}"

    def _get(self, url: str, **params) -> requests.Response:
        resp = self._session.get(url, params=params or None, timeout=_TIMEOUT)
        resp.raise_for_status()
        return resp

    def _paginate(self, url: str, **params) -> Iterator[dict]:
        """Yield items across pages, following the x-next-page header."""
        params = {**params, "per_page": _PER_PAGE, "page": 1}
        while True:
            logger.debug("GET %s page %d", url, params["page"])
            resp = self._get(url, **params)
            yield from resp.json()
            next_page = resp.headers.get("x-next-page")
            if not next_page:
                return
            params["page"] = int(next_page)

    def _notes(self, owner: str, repo: str, number: int) -> Iterator[dict]:
        url = f"{self._project_url(owner, repo)}/merge_requests/{number}/notes"
        for note in self._paginate(url, sort="asc", order_by="created_at"):
            if not note.get("system"):
                yield note

    def list_pull_requests(self, owner: str, repo: str) -> Iterator[PullRequest]:
        url = f"{self._project_url(owner, repo)}/merge_requests"
        for mr in self._paginate(url, state="all"):
            yield PullRequest(number=mr["iid"], title=mr.get("title") or "", author=_username(mr.get("author")))

    def list_comments(self, owner: str, repo: str, number: int) -> Iterator[InlineComment]:
        for note in self._notes(owner, repo, number):
            position = note.get("position")
            if not position:
                continue
            yield InlineComment(
                id=str(note["id"]),
                author=_username(note.get("author")),
                body=note.get("body") or "",
                created_at=_parse_time(note.get("created_at")),
                path=position.get("new_path") or position.get("old_path") or "",
                line=position.get("new_line") or position.get("old_line"),
            )

    def list_reviews(self, owner: str, repo: str, number: int) -> Iterator[Review]:
        for note in self._notes(owner, repo, number):
            if note.get("position"):
                continue
            yield Review(
                id=str(note["id"]),
                author=_username(note.get("author")),
                body=note.get("body") or "",
                submitted_at=_parse_time(note.get("created_at")),
            )

    def get_diff(self, owner: str, repo: str, number: int) -> str:
        url = f"{self._project_url(owner, repo)}/merge_requests/{number}/changes"
        data = self._get(url).json()
        parts = []
        for change in data.get("changes", []):
            old, new = change.get("old_path", ""), change.get("new_path", "")
            parts.append(f"diff --git a/{old} b/{new}")
            parts.append("--- /dev/null" if change.get("new_file") else f"--- a/{old}")
            parts.append("+++ /dev/null" if change.get("deleted_file") else f"+++ b/{new}")
            if change.get("diff"):
                parts.append(change["diff"].rstrip("\n"))
        return "\n".join(parts)


class GitLabExtractor(BaseExtractor):
    provider = GITLAB

    def __init__(self, client: PlatformClient, host: str = "gitlab.com"):
        super().__init__(client)
        self.host = host

    def parse_repository_url(self, url: str) -> tuple[str, str]:
        """https://gitlab.com/group/sub/project[/-/...] → ("group/sub", "project")."""
        parts = url.split(f"{self.host}/")
        if len(parts) != 2:
            raise InvalidRepositoryReference(url, self.provider, f"expected exactly one '{self.host}/'")

        path = parts[1].split("/-/")[0].strip("/").removesuffix(".git")
        segments = path.split("/")
        if len(segments) < 2 or not all(segments):
            raise InvalidRepositoryReference(url, self.provider, "expected <namespace>/<project> after the host")

        return "/".join(segments[:-1]), segments[-1]
