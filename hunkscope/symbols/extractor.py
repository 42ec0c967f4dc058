"""Symbol extraction from staged and HEAD file content.

Declarations are found by walking a tree-sitter syntax tree and are kept only
when their line span intersects a changed hunk. This is a heuristic for
"this declaration changed", not a precise tree diff.
"""

import logging
from collections.abc import Mapping
from typing import Callable, Optional, Union

from tree_sitter import Node, Parser

from hunkscope.hunks import parse_hunks
from hunkscope.models import CodeSymbol, DiffHunk, FileChange
from hunkscope.symbols.languages import (
    ANONYMOUS,
    LanguageRegistry,
    LanguageProfile,
    default_registry,
)

logger = logging.getLogger(__name__)

ContentLookup = Union[Callable[[str], Optional[str]], Mapping[str, Optional[str]]]


def _as_callable(lookup: Optional[ContentLookup]) -> Callable[[str], Optional[str]]:
    """Normalize a mapping or callable content lookup into a callable."""
    if lookup is None:
        return lambda path: None
    if isinstance(lookup, Mapping):
        return lookup.get
    return lookup


def extract_symbols(
    changes: list[FileChange],
    staged_content: Optional[ContentLookup],
    head_content: Optional[ContentLookup],
    registry: Optional[LanguageRegistry] = None,
) -> list[CodeSymbol]:
    """Extract changed declarations from a set of file changes.

    Args:
        changes: Staged files, in order.
        staged_content: Lookup of staged (new) content by path; None means absent.
        head_content: Lookup of HEAD (old) content by path; None means absent.
        registry: Language registry (defaults to the built-in languages).

    Returns:
        Symbols in file order, then syntax-tree traversal order. Staged
        symbols of a file come before its HEAD symbols.
    """
    if registry is None:
        registry = default_registry()

    get_staged = _as_callable(staged_content)
    get_head = _as_callable(head_content)

    symbols: list[CodeSymbol] = []

    for change in changes:
        if change.is_binary:
            continue

        profile = registry.for_path(change.path)
        if profile is None:
            continue

        hunks = parse_hunks(change.diff)

        new_source = get_staged(change.path)
        if new_source is not None:
            symbols.extend(_changed_symbols(profile, change.path, new_source, hunks, is_added=True))

        old_source = get_head(change.path)
        if old_source is not None:
            symbols.extend(_changed_symbols(profile, change.path, old_source, hunks, is_added=False))

    logger.debug("Extracted %d symbols from %d files", len(symbols), len(changes))
    return symbols


def _changed_symbols(
    profile: LanguageProfile,
    path: str,
    source: str,
    hunks: list[DiffHunk],
    is_added: bool,
) -> list[CodeSymbol]:
    """Parse one version of a file and collect declarations touched by hunks."""
    if not hunks:
        return []

    try:
        data = source.encode("utf-8")
    except UnicodeEncodeError:
        logger.debug("Skipping %s: content is not encodable as UTF-8", path)
        return []

    parser = Parser(profile.language)
    tree = parser.parse(data)
    if tree is None:
        logger.debug("Skipping %s: %s parser produced no tree", path, profile.name)
        return []

    symbols: list[CodeSymbol] = []
    _visit(tree.root_node, profile, path, hunks, is_added, symbols)
    return symbols


def _visit(
    node: Node,
    profile: LanguageProfile,
    path: str,
    hunks: list[DiffHunk],
    is_added: bool,
    symbols: list[CodeSymbol],
) -> None:
    """Depth-first, document-order walk collecting intersecting declarations."""
    # Explicit stack to survive deeply nested trees
    stack = [node]
    while stack:
        current = stack.pop()

        kind = profile.kind_of(current.type)
        if kind is not None:
            line_start = current.start_point[0] + 1
            line_end = current.end_point[0] + 1

            if is_added:
                touched = any(h.intersects_new(line_start, line_end) for h in hunks)
            else:
                touched = any(h.intersects_old(line_start, line_end) for h in hunks)

            if touched:
                name = _node_name(current)
                symbols.append(
                    CodeSymbol(
                        kind=kind,
                        name=name,
                        file=path,
                        line=line_start,
                        is_public=profile.is_public(current, name),
                        is_added=is_added,
                    )
                )

        stack.extend(reversed(current.children))


def _node_name(node: Node) -> str:
    name_node = node.child_by_field_name("name")
    if name_node is None or name_node.text is None:
        return ANONYMOUS
    return name_node.text.decode("utf-8", errors="replace")
