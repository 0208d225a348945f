from __future__ import annotations

from github import Auth, Github

DEFAULT_BASE_URL = "https://api.github.com"


def get_client(token: str | None = None, base_url: str | None = None) -> Github:
    """Return a PyGithub client; no token means unauthenticated (rate-limited) access."""
    auth = Auth.Token(token) if token else None
    return Github(auth=auth, base_url=base_url or DEFAULT_BASE_URL)


def get_repo(gh: Github, full_name: str):
    # lazy: no request until an attribute or listing is needed
    return gh.get_repo(full_name, lazy=True)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_pull_requests(repo, state: str = "all"):
    return repo.get_pulls(state=state)


def get_review_comments(pr):
    return pr.get_review_comments()


def get_reviews(pr):
    return pr.get_reviews()


def get_diff(pr):
    return pr.get_files()


def build_unified_diff(files) -> str:
    """Assemble a unified diff from the changed files of a pull request.

    GitHub returns one ``patch`` per file (hunks only); each gets the usual
    ``diff --git`` / ``---`` / ``+++`` header so the result reads like the
    output of ``git diff``. Files without a patch (binary, too large) keep
    their header only.
    """
    parts = []
    for f in files:
        old = getattr(f, "previous_filename", None) or f.filename
        new = f.filename
        parts.append(f"diff --git a/{old} b/{new}")
        parts.append("--- /dev/null" if f.status == "added" else f"--- a/{old}")
        parts.append("+++ /dev/null" if f.status == "removed" else f"+++ b/{new}")
        if f.patch:
            parts.append(f.patch)
    return "\n".join(parts)
