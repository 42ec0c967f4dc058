"""Git collaborator for hunkscope.

This package provides:
- exceptions: GitError, NoStagedChangesError, MergeInProgressError, MergeConflictError
- runner: _run_git_command, get_repo_root
- ingest: split_unified_diff, count_changes, is_binary_path, parse_name_status,
          unquote_path, build_staged_changes
- staged: check_repo_state, get_staged_changes, get_staged_content,
          get_head_content, load_contents
"""

# Exceptions
from hunkscope.git.exceptions import (
    GitError,
    MergeConflictError,
    MergeInProgressError,
    NoStagedChangesError,
)

# Runner utilities
from hunkscope.git.runner import (
    _run_git_command,
    get_repo_root,
)

# Output parsing
from hunkscope.git.ingest import (
    build_staged_changes,
    count_changes,
    is_binary_path,
    parse_name_status,
    split_unified_diff,
    unquote_path,
)

# Staged changes and content
from hunkscope.git.staged import (
    check_repo_state,
    get_head_content,
    get_staged_changes,
    get_staged_content,
    load_contents,
)


__all__ = [
    # Exceptions
    "GitError",
    "NoStagedChangesError",
    "MergeInProgressError",
    "MergeConflictError",
    # Runner
    "_run_git_command",
    "get_repo_root",
    # Ingest
    "split_unified_diff",
    "count_changes",
    "is_binary_path",
    "parse_name_status",
    "unquote_path",
    "build_staged_changes",
    # Staged
    "check_repo_state",
    "get_staged_changes",
    "get_staged_content",
    "get_head_content",
    "load_contents",
]
