"""Commit split analysis.

Partitions staged source files into modules, attaches support files (tests,
docs, config) to them, classifies each group and decides whether splitting
carries any information.
"""

import logging
from pathlib import PurePosixPath
from typing import Iterable, Optional

from hunkscope.classify import infer_commit_type, infer_scope
from hunkscope.config import DEFAULT_GENERIC_MODULE_DIRS
from hunkscope.models import (
    CodeSymbol,
    CommitGroup,
    FileCategory,
    FileChange,
    SplitSuggestion,
    StagedChanges,
)

logger = logging.getLogger(__name__)


def detect_module(path: str, generic_dirs: Iterable[str] = DEFAULT_GENERIC_MODULE_DIRS) -> str:
    """Detect the module a source file belongs to.

    Uses the parent directory name, falling back to the file stem when the
    parent is too generic (e.g. ``src/sanitizer.rs`` -> ``sanitizer``).

    Args:
        path: Repository-relative file path.
        generic_dirs: Directory names too broad to name a module.

    Returns:
        The module key.
    """
    pure = PurePosixPath(path)
    parent_name = pure.parent.name
    if parent_name == ".":
        parent_name = ""
    if parent_name not in set(generic_dirs):
        return parent_name
    return pure.stem or "unknown"


def _size(files: Iterable[FileChange]) -> int:
    return sum(f.lines_changed for f in files)


def _attach_support_files(
    modules: dict[str, list[FileChange]],
    support_files: list[FileChange],
) -> None:
    """Attach non-source files to module groups in place."""
    if not modules:
        return

    # max() keeps the first module on ties
    largest = max(modules, key=lambda name: _size(modules[name]))

    for f in support_files:
        target = largest
        if f.category == FileCategory.TEST:
            stem = PurePosixPath(f.path).stem
            if stem in modules:
                target = stem
        modules[target].append(f)


def analyze_split(
    changes: StagedChanges,
    symbols: list[CodeSymbol],
    generic_dirs: Optional[Iterable[str]] = None,
) -> SplitSuggestion:
    """Decide whether staged changes should become several commits.

    Args:
        changes: The staged change set.
        symbols: Symbols extracted for the change set.
        generic_dirs: Directory names too broad to name a module.

    Returns:
        SplitSuggestion; empty when a single commit is appropriate, otherwise
        groups ordered largest first.
    """
    if generic_dirs is None:
        generic_dirs = DEFAULT_GENERIC_MODULE_DIRS
    generic = set(generic_dirs)

    modules: dict[str, list[FileChange]] = {}
    support_files: list[FileChange] = []

    for f in changes.files:
        if f.category == FileCategory.SOURCE:
            modules.setdefault(detect_module(f.path, generic), []).append(f)
        else:
            support_files.append(f)

    if len(modules) <= 1:
        return SplitSuggestion.single()

    _attach_support_files(modules, support_files)

    sized_groups: list[tuple[int, CommitGroup]] = []
    for files in modules.values():
        paths = [f.path for f in files]
        path_set = set(paths)
        sub_changes = changes.subset(paths)
        sub_symbols = [s for s in symbols if s.file in path_set]

        group = CommitGroup(
            files=paths,
            commit_type=infer_commit_type(sub_changes, sub_symbols),
            scope=infer_scope(sub_changes),
        )
        sized_groups.append((_size(files), group))

    signatures = {(g.commit_type, g.scope) for _, g in sized_groups}
    if len(signatures) == 1:
        logger.debug("All %d module groups share one type/scope; no split", len(sized_groups))
        return SplitSuggestion.single()

    # sorted() is stable, so equal-sized groups keep module discovery order
    sized_groups = sorted(sized_groups, key=lambda item: item[0], reverse=True)
    groups = [g for _, g in sized_groups]
    logger.debug("Suggesting split into %d groups", len(groups))
    return SplitSuggestion(groups=groups)
