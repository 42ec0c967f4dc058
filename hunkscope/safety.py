"""Safety checks on staged diffs.

Contains:
- scan_for_secrets: Find likely credentials in added diff lines
- check_for_conflicts: Detect merge conflict markers in added diff lines
"""

import re
from dataclasses import dataclass
from typing import Optional

from hunkscope.hunks import iter_changed_lines
from hunkscope.models import StagedChanges


@dataclass(frozen=True)
class SecretMatch:
    """A line in a staged diff that looks like a secret."""

    pattern_name: str
    file: str
    line: Optional[int]  # 1-based line within the file's diff text


SECRET_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("API Key", re.compile(r"""(?i)(api[_-]?key|apikey)\s*[:=]\s*["']?[a-zA-Z0-9_-]{20,}""")),
    ("AWS Key", re.compile(r"AKIA[0-9A-Z]{16}")),
    ("Private Key", re.compile(r"-----BEGIN .* PRIVATE KEY-----")),
    ("OpenAI Key", re.compile(r"sk-[a-zA-Z0-9]{48}")),
    ("Anthropic Key", re.compile(r"sk-ant-[a-zA-Z0-9-]{80,}")),
    ("Generic Secret", re.compile(r"""(?i)(password|secret|token)\s*[:=]\s*["'][^"']{8,}["']""")),
    ("Connection String", re.compile(r"(?i)(mongodb|postgres|mysql|redis)://\S+")),
]

CONFLICT_MARKERS = ("<<<<<<<", "=======", ">>>>>>>")


def _added_lines(diff: str):
    """Yield (line_number, content) for added lines of a diff."""
    for line_num, marker, content in iter_changed_lines(diff):
        if marker == "+":
            yield line_num, content


def scan_for_secrets(changes: StagedChanges) -> list[SecretMatch]:
    """Scan added lines of non-binary files for likely secrets.

    Args:
        changes: The staged change set.

    Returns:
        One match per offending line, in file order.
    """
    found: list[SecretMatch] = []

    for f in changes.files:
        if f.is_binary:
            continue
        for line_num, content in _added_lines(f.diff):
            for name, pattern in SECRET_PATTERNS:
                if pattern.search(content):
                    found.append(SecretMatch(pattern_name=name, file=f.path, line=line_num))
                    break

    return found


def check_for_conflicts(changes: StagedChanges) -> bool:
    """Check whether any added line starts with a merge conflict marker.

    This can false-positive in docs and test fixtures, so callers should
    treat it as a warning.
    """
    for f in changes.files:
        if f.is_binary:
            continue
        for _, content in _added_lines(f.diff):
            if content.startswith(CONFLICT_MARKERS):
                return True
    return False
