"""Tests for the thin PyGithub wrapper and diff assembly."""

from unittest.mock import MagicMock, patch

from revex_core.gh.pull_request import (
    build_unified_diff,
    get_client,
    get_diff,
    get_pull_requests,
    get_repo,
    get_review_comments,
    get_reviews,
)


def _file(filename, status="modified", patch="@@ -1,1 +1,1 @@\n-a\n+b", previous_filename=None):
    f = MagicMock()
    f.filename = filename
    f.status = status
    f.patch = patch
    f.previous_filename = previous_filename
    return f


class TestClient:
    def test_token_uses_token_auth(self):
        with patch("revex_core.gh.pull_request.Github") as mock_github:
            get_client("tok")
        kwargs = mock_github.call_args.kwargs
        assert kwargs["auth"] is not None
        assert kwargs["base_url"] == "https://api.github.com"

    def test_no_token_is_anonymous(self):
        with patch("revex_core.gh.pull_request.Github") as mock_github:
            get_client(None, base_url="https://ghe.example.com/api/v3")
        kwargs = mock_github.call_args.kwargs
        assert kwargs["auth"] is None
        assert kwargs["base_url"] == "https://ghe.example.com/api/v3"


def test_get_repo_is_lazy():
    gh = MagicMock()
    get_repo(gh, "owner/repo")
    gh.get_repo.assert_called_once_with("owner/repo", lazy=True)


def test_get_pull_requests_defaults_to_all_states():
    repo = MagicMock()
    get_pull_requests(repo)
    repo.get_pulls.assert_called_once_with(state="all")


def test_pr_listings_delegate():
    pr = MagicMock()
    assert get_review_comments(pr) is pr.get_review_comments.return_value
    assert get_reviews(pr) is pr.get_reviews.return_value
    assert get_diff(pr) is pr.get_files.return_value


class TestBuildUnifiedDiff:
    def test_modified_file(self):
        diff = build_unified_diff([_file("src/app.py")])
        assert diff.splitlines() == [
            "diff --git a/src/app.py b/src/app.py",
            "--- a/src/app.py",
            "+++ b/src/app.py",
            "@@ -1,1 +1,1 @@",
            "-a",
            "+b",
        ]

    def test_added_file_has_dev_null_source(self):
        diff = build_unified_diff([_file("new.py", status="added", patch="@@ -0,0 +1,1 @@\n+x")])
        assert "--- /dev/null" in diff.splitlines()

    def test_removed_file_has_dev_null_target(self):
        diff = build_unified_diff([_file("old.py", status="removed", patch="@@ -1,1 +0,0 @@\n-x")])
        assert "+++ /dev/null" in diff.splitlines()

    def test_renamed_file_uses_previous_name(self):
        diff = build_unified_diff([_file("b.py", status="renamed", previous_filename="a.py")])
        assert diff.splitlines()[0] == "diff --git a/a.py b/b.py"

    def test_file_without_patch_keeps_header_only(self):
        diff = build_unified_diff([_file("logo.png", patch=None)])
        assert diff.splitlines() == ["diff --git a/logo.png b/logo.png", "--- a/logo.png", "+++ b/logo.png"]

    def test_multiple_files_in_order(self):
        diff = build_unified_diff([_file("a.py"), _file("b.py")])
        headers = [line for line in diff.splitlines() if line.startswith("diff --git")]
        assert headers == ["diff --git a/a.py b/a.py", "diff --git a/b.py b/b.py"]

    def test_no_files(self):
        assert build_unified_diff([]) == ""
