"""Unified diff hunk parsing.

Contains:
- parse_hunks: Parse all hunk headers in a diff into DiffHunk ranges
- parse_hunk_header: Parse a single @@ header line
- iter_changed_lines: Walk the added and removed lines of a diff
"""

import re
from typing import Iterator, Optional

from hunkscope.models import DiffHunk


# Format: @@ -old_start[,old_count] +new_start[,new_count] @@ optional context
_HUNK_HEADER_RE = re.compile(r"^@@\s*-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s*@@")


def parse_hunk_header(line: str) -> Optional[DiffHunk]:
    """Parse a single hunk header line.

    Args:
        line: A line from a unified diff.

    Returns:
        DiffHunk if the line is a hunk header, None otherwise.
    """
    match = _HUNK_HEADER_RE.match(line)
    if not match:
        return None

    old_start = int(match.group(1))
    old_count = int(match.group(2)) if match.group(2) else 1
    new_start = int(match.group(3))
    new_count = int(match.group(4)) if match.group(4) else 1

    return DiffHunk(
        old_start=old_start,
        old_count=old_count,
        new_start=new_start,
        new_count=new_count,
    )


def parse_hunks(diff_text: str) -> list[DiffHunk]:
    """Parse hunk ranges from unified diff text.

    Lines that are not hunk headers are ignored.

    Args:
        diff_text: Unified diff for one or more files.

    Returns:
        Hunks in the order they appear.
    """
    hunks: list[DiffHunk] = []
    for line in diff_text.splitlines():
        hunk = parse_hunk_header(line)
        if hunk:
            hunks.append(hunk)
    return hunks


def iter_changed_lines(diff_text: str) -> Iterator[tuple[int, str, str]]:
    """Yield added and removed lines of a unified diff.

    ``+++``/``---`` lines are file headers only before the first hunk of a
    file section; inside a hunk they are content (e.g. a removed ``-- x``
    SQL comment shows up as ``--- x``).

    Args:
        diff_text: Unified diff for one or more files.

    Returns:
        Iterator of (line_number, marker, content), where line_number is
        1-based within diff_text and marker is ``+`` or ``-``.
    """
    in_hunk = False
    for line_num, line in enumerate(diff_text.splitlines(), start=1):
        if line.startswith("diff --git "):
            in_hunk = False
            continue
        if line.startswith("@@"):
            in_hunk = True
            continue
        if not in_hunk and line.startswith(("+++", "---")):
            continue
        if line.startswith(("+", "-")):
            yield line_num, line[0], line[1:]
