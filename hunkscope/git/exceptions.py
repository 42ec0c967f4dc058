"""Git-related exception classes.

Contains all exception classes for git operations:
- GitError: Base exception for git-related errors
- NoStagedChangesError: Raised when there are no staged changes
- MergeInProgressError: Raised when a merge has not been completed
- MergeConflictError: Raised when unresolved conflicts are present
"""


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class NoStagedChangesError(GitError):
    """Raised when there are no staged changes."""

    pass


class MergeInProgressError(GitError):
    """Raised when a merge is in progress."""

    pass


class MergeConflictError(GitError):
    """Raised when the index has unresolved merge conflicts."""

    pass
