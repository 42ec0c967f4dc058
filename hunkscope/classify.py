"""Commit type and scope inference.

Both functions work on any subset of staged changes, so the commit splitter
reuses them per candidate group.
"""

from pathlib import PurePosixPath
from typing import Optional

from hunkscope.models import (
    ChangeStatus,
    CodeSymbol,
    CommitType,
    FileCategory,
    StagedChanges,
    SymbolKind,
)


# Directories whose next path component names the scope (src/<scope>/...)
CONTAINER_DIRS = ("src", "lib")

# Monorepo roots whose next path component names the package
MONOREPO_DIRS = ("packages", "crates", "apps")

# Entry-point names that never make a useful scope
GENERIC_NAMES = ("main", "lib", "mod")

# Symbol kinds whose public addition signals a new feature
FEATURE_KINDS = {
    SymbolKind.FUNCTION,
    SymbolKind.STRUCT,
    SymbolKind.TRAIT,
    SymbolKind.INTERFACE,
}

SMALL_CHANGE_LINES = 20


def infer_commit_type(changes: StagedChanges, symbols: list[CodeSymbol]) -> CommitType:
    """Infer the conventional commit type of a change set.

    Rules are evaluated in order and the first match wins.

    Args:
        changes: The staged change set (or a subset of it).
        symbols: Symbols extracted for the same files.

    Returns:
        The inferred CommitType.
    """
    categories = [f.category for f in changes.files]

    if all(c == FileCategory.DOCS for c in categories):
        return CommitType.DOCS
    if all(c == FileCategory.TEST for c in categories):
        return CommitType.TEST
    if all(c == FileCategory.CONFIG for c in categories):
        return CommitType.CHORE
    if all(c == FileCategory.BUILD for c in categories):
        return CommitType.BUILD

    if any(s.is_added and s.is_public and s.kind in FEATURE_KINDS for s in symbols):
        return CommitType.FEAT

    new_files = sum(1 for f in changes.files if f.status == ChangeStatus.ADDED)
    if new_files > len(changes.files) // 2:
        return CommitType.FEAT

    stats = changes.stats
    if stats.deletions > stats.insertions * 2:
        return CommitType.REFACTOR

    if stats.insertions < SMALL_CHANGE_LINES and stats.deletions < SMALL_CHANGE_LINES:
        return CommitType.FIX

    return CommitType.FEAT


def scope_from_path(path: str) -> Optional[str]:
    """Derive a scope candidate from a single file path.

    Args:
        path: Repository-relative file path.

    Returns:
        The scope candidate, or None.
    """
    pure = PurePosixPath(path)
    components = pure.parts

    for i, component in enumerate(components[:-1]):
        following = components[i + 1]
        if component in CONTAINER_DIRS:
            if "." not in following and following not in GENERIC_NAMES:
                return following
        elif component in MONOREPO_DIRS:
            if "." not in following:
                return following

    parent = pure.parent.name
    if parent in ("", ".") or parent in CONTAINER_DIRS:
        return None
    return parent


def infer_scope(changes: StagedChanges) -> Optional[str]:
    """Infer a scope shared by every source file in the change set.

    Args:
        changes: The staged change set (or a subset of it).

    Returns:
        The common scope, or None when there is none or it is ambiguous.
    """
    scopes = []
    for f in changes.files:
        if f.category != FileCategory.SOURCE:
            continue
        scope = scope_from_path(f.path)
        if scope is not None:
            scopes.append(scope)

    if not scopes:
        return None

    first = scopes[0]
    if all(s == first for s in scopes):
        return first
    return None
