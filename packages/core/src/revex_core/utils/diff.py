"""Diff context for inline review comments.

Given the unified diff of a pull request, recover the handful of lines around
the line a reviewer commented on, so the comment can be read without opening
the pull request.
"""

from __future__ import annotations

import re

# Lines collected on each side of the target line.
_CONTEXT_RADIUS = 3

_FILE_HEADER = "diff --git"
_HUNK_START_RE = re.compile(r"^@@ -(\d+)")


def resolve_diff_context(diff: str, file_path: str, line_number: int) -> str:
    """Return the diff lines surrounding ``line_number`` in ``file_path``.

    The file's section is the first ``diff --git`` segment whose header
    contains ``file_path``: a plain substring match, so ``a.py`` also matches
    ``data.py`` if that segment comes first.

    Each hunk header resets the running line counter to the hunk's first
    start line. Added lines advance the counter; context and removed lines do
    not. Lines whose counter is within ``_CONTEXT_RADIUS`` of the target are
    returned without their diff marker, newline-joined. Returns "" when there
    is nothing to show; never raises.
    """
    if not diff or not file_path or line_number < 1:
        return ""

    segment = _find_file_segment(diff, file_path)
    if not segment:
        return ""

    low, high = line_number - _CONTEXT_RADIUS, line_number + _CONTEXT_RADIUS
    current: int | None = None  # None until the first hunk header
    entered = False
    collected: list[str] = []

    for line in segment:
        if line.startswith("@@"):
            match = _HUNK_START_RE.match(line)
            if match:
                current = int(match.group(1))
            continue
        if current is None or not line or line.startswith("\\"):
            continue

        if line.startswith("+"):
            current += 1

        if low <= current <= high:
            entered = True
            collected.append(_strip_marker(line))
        elif entered:
            break

    return "\n".join(collected)


def _find_file_segment(diff: str, file_path: str) -> list[str]:
    """Return the lines after the first file header mentioning ``file_path``."""
    segment: list[str] | None = None
    for line in diff.splitlines():
        if line.startswith(_FILE_HEADER):
            if segment is not None:
                return segment
            if file_path in line:
                segment = []
            continue
        if segment is not None:
            segment.append(line)
    return segment or []


def _strip_marker(line: str) -> str:
    if line[:1] in ("+", "-", " "):
        line = line[1:]
    return line.strip()
