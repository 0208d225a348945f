"""Logging configuration with token redaction."""

from __future__ import annotations

import logging
import re

from rich.console import Console
from rich.logging import RichHandler

_SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # GitHub tokens (ghp_, gho_, ghu_, ghs_, ghr_) and fine-grained PATs
    (re.compile(r"gh[pousr]_[A-Za-z0-9]{20,}"), "[REDACTED_GH_TOKEN]"),
    (re.compile(r"github_pat_[A-Za-z0-9_]+"), "[REDACTED_GH_PAT]"),
    # GitLab personal/project access tokens
    (re.compile(r"glpat-[A-Za-z0-9_\-]{20,}"), "[REDACTED_GL_TOKEN]"),
    (re.compile(r"Bearer\s+[A-Za-z0-9_\-\.]+"), "Bearer [REDACTED]"),
    (re.compile(r"(PRIVATE-TOKEN['\"]?[:=]\s*['\"]?)[^\s,'\"}]+", re.IGNORECASE), r"\1[REDACTED]"),
]


class SecretRedactingFilter(logging.Filter):
    """Redact platform tokens from log messages and their arguments."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact(str(record.msg))
        if record.args:
            record.args = tuple(redact(a) if isinstance(a, str) else a for a in record.args)
        return True


def redact(text: str) -> str:
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr through rich; DEBUG when verbose, WARNING otherwise.

    User-facing progress is printed by the commands themselves, so the
    default level keeps the log channel for problems only.
    """
    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=verbose)
    handler.addFilter(SecretRedactingFilter())
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # PyGithub and urllib3 log every request at DEBUG.
    for name in ("github", "urllib3"):
        logging.getLogger(name).setLevel(logging.INFO if verbose else logging.WARNING)
