"""Platform token resolution with gh CLI fallback.

Resolution order for GitHub (stops at first success):
  1. github.token in the config file
  2. GITHUB_TOKEN environment variable
  3. `gh auth token` (GitHub CLI session: works after `gh auth login`)

GitLab: gitlab.token in the config file, then GITLAB_TOKEN.

No token is not an error: the extractors fall back to unauthenticated,
rate-limited access.
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)


def resolve_github_token(configured: str | None = None) -> str | None:
    """Return a GitHub token or None if no source provides one. Never raises."""
    if configured:
        return configured

    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            gh_token = result.stdout.strip()
            if gh_token:
                logger.debug("Resolved GitHub token via gh CLI session.")
                return gh_token
    except (FileNotFoundError, subprocess.TimeoutExpired):
        # gh is not installed or timed out.
        pass

    logger.debug("No GitHub token found; using unauthenticated access.")
    return None


def resolve_gitlab_token(configured: str | None = None) -> str | None:
    """Return a GitLab token or None. Never raises."""
    token = configured or os.environ.get("GITLAB_TOKEN")
    if not token:
        logger.debug("No GitLab token found; using unauthenticated access.")
    return token or None
