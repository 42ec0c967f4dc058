"""Prompt context builder with character budget management.

Splits a hard character budget between the change summary, the file
breakdown, the symbol deltas and the diff itself. Budget exhaustion is
reported in-band with literal markers in the produced text.
"""

import io
import logging
from pathlib import PurePosixPath
from typing import Iterable, Optional

from hunkscope.classify import infer_commit_type, infer_scope
from hunkscope.config import AnalysisConfig
from hunkscope.models import (
    ChangeStatus,
    CodeSymbol,
    FileCategory,
    PromptContext,
    StagedChanges,
)

logger = logging.getLogger(__name__)


SKIPPED_CONTENT_NOTE = "(lock file - content skipped)"
BUDGET_EXCEEDED_NOTE = "... (budget exceeded)"

# Room a file header must leave for at least a little content
HEADER_SLACK = 50

# Per-file line budget tuning. Source gets the most room, docs/config the least.
CATEGORY_WEIGHTS = {
    FileCategory.SOURCE: 3,
    FileCategory.TEST: 2,
}
MIN_FILE_LINES = 20
MANY_FILES_MIN_LINES = 30


def build_prompt_context(
    changes: StagedChanges,
    symbols: list[CodeSymbol],
    total_budget: Optional[int] = None,
    config: Optional[AnalysisConfig] = None,
) -> PromptContext:
    """Build the budgeted prompt context for a change set.

    Args:
        changes: The staged change set (never empty).
        symbols: Symbols extracted for the change set.
        total_budget: Hard character ceiling (defaults to config.max_context_chars).
        config: Analysis configuration (defaults to AnalysisConfig()).

    Returns:
        PromptContext with summary, file list, symbol blocks, type/scope and diff.
    """
    if config is None:
        config = AnalysisConfig()
    if total_budget is None:
        total_budget = config.max_context_chars

    change_summary = summarize_changes(changes)
    file_breakdown = format_files(changes)

    used = config.scaffold_reserve + len(change_summary) + len(file_breakdown)
    remaining = max(total_budget - used, 0)

    # Symbols get 20% of what is left, the diff 80% but never below the floor
    diff_share = max(remaining - remaining // 5, config.min_diff_budget)
    symbol_share = max(remaining - diff_share, 0)

    symbols_added = format_symbols(symbols, added=True, char_budget=symbol_share // 2)
    symbols_removed = format_symbols(symbols, added=False, char_budget=symbol_share // 2)

    diff_budget = max(total_budget - used - len(symbols_added) - len(symbols_removed), 0)
    logger.debug(
        "Context budget: total=%d used=%d symbols=%d diff=%d approx_tokens=%d",
        total_budget,
        used,
        len(symbols_added) + len(symbols_removed),
        diff_budget,
        config.approx_token_budget,
    )

    truncated_diff = truncate_diff(changes, diff_budget, config)

    return PromptContext(
        change_summary=change_summary,
        file_breakdown=file_breakdown,
        symbols_added=symbols_added,
        symbols_removed=symbols_removed,
        suggested_type=infer_commit_type(changes, symbols),
        suggested_scope=infer_scope(changes),
        truncated_diff=truncated_diff,
    )


def summarize_changes(changes: StagedChanges) -> str:
    """One-line summary, e.g. ``3 files (1 added, 2 modified, 0 deleted) | +10 -4``."""
    added = sum(1 for f in changes.files if f.status == ChangeStatus.ADDED)
    modified = sum(1 for f in changes.files if f.status == ChangeStatus.MODIFIED)
    deleted = sum(1 for f in changes.files if f.status == ChangeStatus.DELETED)

    return (
        f"{len(changes.files)} files ({added} added, {modified} modified, {deleted} deleted)"
        f" | +{changes.stats.insertions} -{changes.stats.deletions}"
    )


def format_files(changes: StagedChanges) -> str:
    """List non-binary files in priority order with their line counts."""
    lines = []
    for f in changes.files_by_priority():
        if f.is_binary:
            continue
        lines.append(f"{f.status.marker} {f.path} (+{f.additions} -{f.deletions})\n")
    return "".join(lines)


def format_symbols(symbols: Iterable[CodeSymbol], added: bool, char_budget: int) -> str:
    """Render added or removed symbols, one per line, within a character budget.

    Args:
        symbols: All extracted symbols.
        added: Render symbols from the staged version (True) or HEAD (False).
        char_budget: Maximum characters for the rendered lines.

    Returns:
        Rendered block, ending with ``... and N more symbols`` if truncated.
    """
    filtered = [s for s in symbols if s.is_added == added]
    if not filtered:
        return ""

    output = ""
    count = 0
    for symbol in filtered:
        line = str(symbol)
        if len(output) + len(line) + 1 > char_budget:
            break
        output = f"{output}\n{line}" if output else line
        count += 1

    hidden = len(filtered) - count
    if hidden > 0:
        marker = f"... and {hidden} more symbols"
        output = f"{output}\n{marker}" if output else marker

    return output


def should_skip_content(path: str, skip_files: Iterable[str]) -> bool:
    """Check whether a file's diff content is replaced by a placeholder."""
    return PurePosixPath(path).name in set(skip_files)


def calculate_file_budget(file_count: int, category: FileCategory, max_diff_lines: int) -> int:
    """Adaptive per-file line budget.

    Args:
        file_count: Number of files whose content will be shown.
        category: Category of the file being budgeted.
        max_diff_lines: Configured overall diff line ceiling.

    Returns:
        Number of diff lines this file may use (before the per-file cap).
    """
    weight = CATEGORY_WEIGHTS.get(category, 1)

    if file_count <= 1:
        base_per_file = max_diff_lines
    elif file_count <= 3:
        base_per_file = max_diff_lines // 2
    elif file_count <= 6:
        base_per_file = max_diff_lines // file_count
    else:
        base_per_file = max(max_diff_lines // file_count, MANY_FILES_MIN_LINES)

    return max(base_per_file * weight // 2, MIN_FILE_LINES)


def truncate_diff(changes: StagedChanges, char_budget: int, config: AnalysisConfig) -> str:
    """Truncate per-file diffs to fit a character budget.

    Files are visited in category priority order; binary files are skipped
    and lock files only get a header and placeholder.

    Args:
        changes: The staged change set.
        char_budget: Characters available for diff text.
        config: Analysis configuration providing line ceilings and skip list.

    Returns:
        The truncated diff text with in-band truncation markers.
    """
    skip_files = set(config.skip_content_files)
    files = changes.files_by_priority()
    content_count = sum(
        1 for f in files if not f.is_binary and not should_skip_content(f.path, skip_files)
    )

    out = io.StringIO()
    included = 0

    for f in files:
        if f.is_binary:
            continue
        if out.tell() >= char_budget:
            break

        header = f"\n--- {f.path} ---\n"
        if out.tell() + len(header) + HEADER_SLACK > char_budget:
            break

        out.write(header)
        included += 1

        if should_skip_content(f.path, skip_files):
            out.write(f"{SKIPPED_CONTENT_NOTE}\n")
            continue

        line_budget = min(
            calculate_file_budget(content_count, f.category, config.max_diff_lines),
            config.max_file_lines,
        )
        lines = f.diff.splitlines()
        take = min(len(lines), line_budget)

        exhausted = False
        for line in lines[:take]:
            if out.tell() + len(line) + 1 > char_budget:
                out.write(f"{BUDGET_EXCEEDED_NOTE}\n")
                exhausted = True
                break
            out.write(f"{line}\n")

        if exhausted:
            break

        if len(lines) > take:
            out.write(f"... ({len(lines) - take} lines truncated)\n")

    not_shown = len(changes.files) - included
    if not_shown > 0:
        out.write(f"\n... ({not_shown} files not shown due to budget)\n")

    return out.getvalue()
