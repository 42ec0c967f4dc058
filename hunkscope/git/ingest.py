"""Parsing of git output into a StagedChanges value.

Contains:
- split_unified_diff: Split a multi-file unified diff into per-file sections
- count_changes: Count added and removed lines in a diff
- is_binary_path: Guess binary files from their extension
- unquote_path: Decode git C-style quoted paths
- parse_name_status: Parse ``git diff --name-status -z`` output
- build_staged_changes: Combine status and diff output into StagedChanges

Everything here is pure text processing; running git lives in staged.py.
"""

import logging
from pathlib import PurePosixPath
from typing import Optional

from hunkscope.git.exceptions import NoStagedChangesError
from hunkscope.hunks import iter_changed_lines
from hunkscope.models import ChangeStatus, FileCategory, FileChange, StagedChanges

logger = logging.getLogger(__name__)


BINARY_EXTENSIONS = {
    "png", "jpg", "jpeg", "gif", "ico", "webp",
    "woff", "woff2", "ttf", "otf",
    "zip", "tar", "gz", "7z", "pdf",
    "exe", "dll", "so", "dylib",
    "mp3", "mp4", "wav",
}

_STATUS_CODES = {
    "A": ChangeStatus.ADDED,
    "M": ChangeStatus.MODIFIED,
    "D": ChangeStatus.DELETED,
}

# Single-character escapes used by git's C-style path quoting
_C_ESCAPES = {
    "a": 0x07, "b": 0x08, "t": 0x09, "n": 0x0A,
    "v": 0x0B, "f": 0x0C, "r": 0x0D, '"': 0x22, "\\": 0x5C,
}

_OCTAL_DIGITS = "01234567"


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of a path.

    git wraps paths with unusual characters in double quotes and escapes
    bytes as ``\\ooo`` octal (``"caf\\303\\251.py"``). Unquoted paths are
    returned unchanged.

    Args:
        path: A path as printed by git.

    Returns:
        The decoded path.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    inner = path[1:-1]
    out = bytearray()
    i = 0
    while i < len(inner):
        ch = inner[i]
        if ch == "\\" and i + 1 < len(inner):
            octal = inner[i + 1:i + 4]
            if len(octal) == 3 and all(c in _OCTAL_DIGITS for c in octal):
                out.append(int(octal, 8))
                i += 4
                continue
            if inner[i + 1] in _C_ESCAPES:
                out.append(_C_ESCAPES[inner[i + 1]])
                i += 2
                continue
        out.extend(ch.encode("utf-8"))
        i += 1
    return out.decode("utf-8", errors="replace")


def _header_path(rest: str, prefix: str) -> Optional[str]:
    """Path from the remainder of a ``---``/``+++`` line, or None for /dev/null."""
    # git appends a tab when the path contains a space
    if rest.endswith("\t"):
        rest = rest[:-1]
    rest = unquote_path(rest)
    if rest.startswith(prefix):
        return rest[len(prefix):]
    return None


def _path_from_git_header(line: str) -> Optional[str]:
    """Path from a ``diff --git a/<path> b/<path>`` line (renames disabled)."""
    rest = line[len("diff --git "):]
    if rest.endswith('"'):
        idx = rest.rfind(' "b/')
        return unquote_path(rest[idx + 1:])[2:] if idx != -1 else None

    # Both sides name the same path, so the split point follows from the length
    n = (len(rest) - 5) // 2
    if n > 0 and rest.startswith("a/") and rest[2 + n:5 + n] == " b/":
        return rest[5 + n:]
    return None


def split_unified_diff(diff: str) -> dict[str, str]:
    """Split a unified diff into per-file sections keyed by file path.

    The path comes from the ``+++ b/<path>`` header, or for deleted files
    (``+++ /dev/null``) from the preceding ``--- a/<path>`` header. Sections
    without those headers (binary files) use the ``diff --git`` line.
    Quoted paths are decoded and the tab git appends to paths containing
    spaces is dropped.

    Args:
        diff: Output of ``git diff --cached``.

    Returns:
        Mapping of path to that file's diff section (starting at ``diff --git``).
    """
    result: dict[str, str] = {}
    current_path = None
    old_path = None
    current_lines: list[str] = []
    in_hunk = False

    for line in diff.splitlines():
        if line.startswith("diff --git "):
            if current_path is not None:
                result[current_path] = "\n".join(current_lines)
            current_path = _path_from_git_header(line)
            old_path = None
            current_lines = []
            in_hunk = False
        elif line.startswith("@@"):
            in_hunk = True
        elif not in_hunk and line.startswith("--- "):
            old_path = _header_path(line[4:], "a/")
        elif not in_hunk and line.startswith("+++ "):
            new_path = _header_path(line[4:], "b/")
            if new_path is not None:
                current_path = new_path
            elif old_path is not None:
                current_path = old_path

        current_lines.append(line)

    if current_path is not None:
        result[current_path] = "\n".join(current_lines)

    return result


def count_changes(diff: str) -> tuple[int, int]:
    """Count added and removed lines, ignoring the ``+++``/``---`` file headers.

    Returns:
        Tuple of (additions, deletions).
    """
    additions = 0
    deletions = 0
    for _, marker, _ in iter_changed_lines(diff):
        if marker == "+":
            additions += 1
        else:
            deletions += 1
    return additions, deletions


def is_binary_path(path: str) -> bool:
    """Check whether a path has a well-known binary extension."""
    suffix = PurePosixPath(path).suffix
    return suffix[1:].lower() in BINARY_EXTENSIONS if suffix else False


def _has_binary_marker(diff: str) -> bool:
    return any(
        line.startswith(("Binary files ", "GIT binary patch")) for line in diff.splitlines()
    )


def parse_name_status(output: str) -> list[tuple[ChangeStatus, str]]:
    """Parse ``git diff --cached --name-status --no-renames -z`` output.

    Entries are NUL-separated ``status``/``path`` pairs with paths verbatim.
    Only added, modified and deleted entries are kept.

    Args:
        output: Raw command output.

    Returns:
        List of (status, path) in output order.
    """
    entries: list[tuple[ChangeStatus, str]] = []
    fields = iter(output.split("\0"))
    for code, path in zip(fields, fields):
        status = _STATUS_CODES.get(code.strip())
        if status is None or not path:
            continue
        entries.append((status, path))
    return entries


def build_staged_changes(status_output: str, diff_output: str) -> StagedChanges:
    """Build the staged change set from git output.

    Files with a known binary extension are left out entirely; files whose
    diff git reports as binary are kept and flagged.

    Args:
        status_output: Output of ``git diff --cached --name-status --no-renames -z``.
        diff_output: Output of ``git diff --cached --no-renames``.

    Returns:
        StagedChanges with derived stats.

    Raises:
        NoStagedChangesError: If no usable staged files remain.
    """
    file_diffs = split_unified_diff(diff_output)
    files: list[FileChange] = []

    for status, path in parse_name_status(status_output):
        if is_binary_path(path):
            logger.debug("Skipping binary file %s", path)
            continue

        diff = file_diffs.get(path, "")
        additions, deletions = count_changes(diff)

        files.append(
            FileChange(
                path=path,
                status=status,
                diff=diff,
                additions=additions,
                deletions=deletions,
                category=FileCategory.from_path(path),
                is_binary=_has_binary_marker(diff),
            )
        )

    if not files:
        raise NoStagedChangesError(
            "No staged changes found. Stage your changes first with: git add <files>"
        )

    return StagedChanges.from_files(files)
