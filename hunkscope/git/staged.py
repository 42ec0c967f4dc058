"""Staged change and file content retrieval.

Contains:
- check_repo_state: Refuse to analyze during merges or with conflicts
- get_staged_changes: Read the staged change set from git
- get_staged_content / get_head_content: Per-file content lookups
- load_contents: Resolve a content lookup for many files concurrently
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, Optional

from hunkscope.git.exceptions import GitError, MergeConflictError, MergeInProgressError
from hunkscope.git.ingest import build_staged_changes
from hunkscope.git.runner import _run_git_command
from hunkscope.models import StagedChanges

logger = logging.getLogger(__name__)


def _has_unresolved_conflicts(repo_root: Path) -> bool:
    status = _run_git_command(["status", "--porcelain=v1"], cwd=repo_root)
    for line in status.split("\n"):
        if len(line) >= 2:
            # Unmerged states: UU, AA, DD, AU, UA, DU, UD
            xy = line[:2]
            if "U" in xy or xy in ("AA", "DD"):
                return True
    return False


def check_repo_state(repo_root: Path) -> None:
    """Check that the repository is in a state that can be analyzed.

    Args:
        repo_root: The root directory of the git repository.

    Raises:
        MergeConflictError: If there are unresolved conflicts.
        MergeInProgressError: If a merge is in progress.
    """
    if _has_unresolved_conflicts(repo_root):
        raise MergeConflictError(
            "Merge conflicts detected. Resolve conflicts before committing."
        )
    if (repo_root / ".git" / "MERGE_HEAD").exists():
        raise MergeInProgressError("Merge in progress. Complete or abort the merge first.")


def get_staged_changes(repo_root: Path) -> StagedChanges:
    """Read the staged change set.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        StagedChanges for the index.

    Raises:
        NoStagedChangesError: If nothing is staged.
        GitError: If git fails or the repository state is unsupported.
    """
    check_repo_state(repo_root)

    # Paths are read verbatim rather than octal-quoted
    status_output = _run_git_command(
        [
            "-c", "core.quotepath=false",
            "diff", "--cached", "--name-status", "--no-renames", "-z",
        ],
        cwd=repo_root,
        strip=False,
    )
    diff_output = _run_git_command(
        [
            "-c", "core.quotepath=false",
            "diff", "--cached", "--no-ext-diff", "--unified=3", "--no-renames",
        ],
        cwd=repo_root,
        strip=False,
    )
    return build_staged_changes(status_output, diff_output)


def _show(revision: str, repo_root: Optional[Path]) -> Optional[str]:
    try:
        return _run_git_command(["show", revision], cwd=repo_root, strip=False)
    except (GitError, UnicodeDecodeError):
        # Absent in this version, or not text
        return None


def get_staged_content(path: str, repo_root: Optional[Path] = None) -> Optional[str]:
    """Get the staged (index) content of a file, or None if not present."""
    return _show(f":0:{path}", repo_root)


def get_head_content(path: str, repo_root: Optional[Path] = None) -> Optional[str]:
    """Get the HEAD content of a file, or None if not present."""
    return _show(f"HEAD:{path}", repo_root)


def load_contents(
    paths: Iterable[str],
    loader: Callable[[str], Optional[str]],
    max_workers: int = 8,
) -> dict[str, Optional[str]]:
    """Resolve a content lookup for many paths concurrently.

    Args:
        paths: File paths to load.
        loader: Function returning a file's content or None.
        max_workers: Thread pool size.

    Returns:
        Mapping of path to content (None when not present).
    """
    paths = list(paths)
    if not paths:
        return {}

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        contents = list(pool.map(loader, paths))

    logger.debug("Loaded content for %d/%d files", sum(c is not None for c in contents), len(paths))
    return dict(zip(paths, contents))
