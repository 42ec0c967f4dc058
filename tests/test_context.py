"""Tests for hunkscope.context module."""

import logging

import pytest

from hunkscope.config import AnalysisConfig
from hunkscope.context import (
    BUDGET_EXCEEDED_NOTE,
    SKIPPED_CONTENT_NOTE,
    build_prompt_context,
    calculate_file_budget,
    format_files,
    format_symbols,
    should_skip_content,
    summarize_changes,
    truncate_diff,
)
from hunkscope.models import ChangeStatus, CodeSymbol, CommitType, FileCategory, SymbolKind


def _symbols(count, is_added=True):
    return [
        CodeSymbol(
            kind=SymbolKind.FUNCTION,
            name=f"handler_{i}",
            file="src/api/routes.rs",
            line=i * 10 + 1,
            is_public=True,
            is_added=is_added,
        )
        for i in range(count)
    ]


def _big_diff(line_count, width=10):
    return "\n".join(f"+{str(i).ljust(width, 'x')}" for i in range(line_count))


class TestSummarizeChanges:
    """Tests for summarize_changes function."""

    def test_summary_line(self, make_change, make_changes):
        """Test counts by status and line totals."""
        changes = make_changes(
            make_change("src/a.py", status=ChangeStatus.ADDED, additions=10),
            make_change("src/b.py", additions=2, deletions=1),
            make_change("src/c.py", status=ChangeStatus.DELETED, deletions=3),
        )
        assert summarize_changes(changes) == (
            "3 files (1 added, 1 modified, 1 deleted) | +12 -4"
        )


class TestFormatFiles:
    """Tests for format_files function."""

    def test_priority_order_and_markers(self, make_change, make_changes):
        """Test files are listed source first with status markers."""
        changes = make_changes(
            make_change("README.md", additions=1),
            make_change("src/lib.rs", status=ChangeStatus.ADDED, additions=20, deletions=0),
        )
        assert format_files(changes) == "[+] src/lib.rs (+20 -0)\n[M] README.md (+1 -0)\n"

    def test_binary_files_omitted(self, make_change, make_changes):
        """Test that binary files are not listed."""
        changes = make_changes(
            make_change("src/lib.rs", additions=1),
            make_change("assets/blob.dat", is_binary=True),
        )
        assert "blob.dat" not in format_files(changes)


class TestFormatSymbols:
    """Tests for format_symbols function."""

    def test_all_fit(self):
        """Test that symbols are rendered one per line."""
        symbols = _symbols(2)
        output = format_symbols(symbols, added=True, char_budget=10_000)
        assert output == f"{symbols[0]}\n{symbols[1]}"

    def test_filters_by_side(self):
        """Test that only the requested side is rendered."""
        symbols = _symbols(2, is_added=True) + _symbols(1, is_added=False)
        removed = format_symbols(symbols, added=False, char_budget=10_000)
        assert removed.startswith("[-]")
        assert "\n" not in removed

    def test_empty(self):
        """Test that no matching symbols renders nothing."""
        assert format_symbols(_symbols(2), added=False, char_budget=10_000) == ""

    def test_budget_truncation_marker(self):
        """Test that symbols beyond the budget are counted in a marker."""
        symbols = _symbols(3)
        budget = len(str(symbols[0])) + 1
        output = format_symbols(symbols, added=True, char_budget=budget)
        assert output == f"{symbols[0]}\n... and 2 more symbols"

    def test_zero_budget(self):
        """Test that a zero budget yields only the marker."""
        assert format_symbols(_symbols(3), added=True, char_budget=0) == "... and 3 more symbols"


class TestShouldSkipContent:
    """Tests for should_skip_content function."""

    def test_lock_files(self):
        """Test that lock files match by file name."""
        skip = AnalysisConfig().skip_content_files
        assert should_skip_content("Cargo.lock", skip)
        assert should_skip_content("web/package-lock.json", skip)
        assert not should_skip_content("Cargo.toml", skip)


class TestCalculateFileBudget:
    """Tests for calculate_file_budget function."""

    @pytest.mark.parametrize("file_count,category,max_lines,expected", [
        (1, FileCategory.SOURCE, 500, 750),
        (2, FileCategory.DOCS, 500, 125),
        (3, FileCategory.TEST, 500, 250),
        (5, FileCategory.SOURCE, 500, 150),
        (10, FileCategory.OTHER, 500, 25),
        (50, FileCategory.TEST, 500, 30),
        (20, FileCategory.DOCS, 100, 20),
    ])
    def test_budgets(self, file_count, category, max_lines, expected):
        """Test the adaptive per-file line budget."""
        assert calculate_file_budget(file_count, category, max_lines) == expected


class TestTruncateDiff:
    """Tests for truncate_diff function."""

    def test_line_truncation(self, make_change, make_changes):
        """Test that a huge diff is capped at max_file_lines."""
        diff = _big_diff(10_000)
        changes = make_changes(make_change("src/big.py", diff=diff, additions=10_000))

        output = truncate_diff(changes, 5000, AnalysisConfig())

        assert len(output) < len(diff)
        assert output.startswith("\n--- src/big.py ---\n")
        assert "... (9900 lines truncated)" in output
        assert "files not shown" not in output

    def test_budget_exceeded_stops_output(self, make_change, make_changes):
        """Test that character exhaustion stops all further file output."""
        config = AnalysisConfig(max_file_lines=10_000, max_diff_lines=10_000)
        changes = make_changes(
            make_change("src/a.py", diff=_big_diff(200, width=100), additions=200),
            make_change("src/b.py", diff=_big_diff(200, width=100), additions=200),
        )

        output = truncate_diff(changes, 5000, config)

        assert BUDGET_EXCEEDED_NOTE in output
        assert "--- src/b.py ---" not in output
        assert output.endswith("\n... (1 files not shown due to budget)\n")

    def test_lock_file_placeholder(self, make_change, make_changes):
        """Test that lock files show only a header and placeholder."""
        changes = make_changes(
            make_change("Cargo.lock", diff="+[[package]]\n+name = \"serde\"\n", additions=2)
        )
        output = truncate_diff(changes, 5000, AnalysisConfig())

        assert output == f"\n--- Cargo.lock ---\n{SKIPPED_CONTENT_NOTE}\n"

    def test_binary_files_skipped(self, make_change, make_changes):
        """Test that binary files are skipped and counted as not shown."""
        changes = make_changes(
            make_change("assets/blob.dat", is_binary=True),
            make_change("src/lib.rs", diff="+fn main() {}", additions=1),
        )
        output = truncate_diff(changes, 5000, AnalysisConfig())

        assert "blob.dat" not in output.split("\n... (")[0]
        assert "+fn main() {}\n" in output
        assert output.endswith("\n... (1 files not shown due to budget)\n")

    def test_tiny_budget_shows_only_footer(self, make_change, make_changes):
        """Test that a budget too small for any header lists every file as not shown."""
        changes = make_changes(make_change("src/a.py", diff="+x", additions=1))
        output = truncate_diff(changes, 40, AnalysisConfig())

        assert output == "\n... (1 files not shown due to budget)\n"

    def test_priority_order(self, make_change, make_changes):
        """Test that source diffs come before docs."""
        changes = make_changes(
            make_change("README.md", diff="+docs", additions=1),
            make_change("src/lib.rs", diff="+code", additions=1),
        )
        output = truncate_diff(changes, 5000, AnalysisConfig())

        assert output.index("src/lib.rs") < output.index("README.md")

    def test_deterministic(self, make_change, make_changes):
        """Test that identical inputs produce identical output."""
        changes = make_changes(
            make_change("src/a.py", diff=_big_diff(300), additions=300),
            make_change("tests/test_a.py", diff=_big_diff(50), additions=50),
        )
        config = AnalysisConfig()
        assert truncate_diff(changes, 3000, config) == truncate_diff(changes, 3000, config)


class TestBuildPromptContext:
    """Tests for build_prompt_context function."""

    def test_populates_all_fields(self, make_change, make_changes):
        """Test a typical context build."""
        changes = make_changes(
            make_change(
                "src/api/routes.rs",
                diff="@@ -1,2 +1,3 @@\n fn a() {}\n+pub fn handler_0() {}\n",
                additions=1,
            )
        )
        symbols = _symbols(1)

        context = build_prompt_context(changes, symbols)

        assert context.change_summary == "1 files (0 added, 1 modified, 0 deleted) | +1 -0"
        assert context.file_breakdown == "[M] src/api/routes.rs (+1 -0)\n"
        assert context.symbols_added == str(symbols[0])
        assert context.symbols_removed == ""
        assert context.suggested_type == CommitType.FEAT
        assert context.suggested_scope == "api"
        assert "+pub fn handler_0() {}" in context.truncated_diff

    def test_tight_budget_drops_symbols(self, make_change, make_changes):
        """Test that the diff floor leaves no room for symbols under a tight budget."""
        changes = make_changes(make_change("src/api/routes.rs", diff="+x", additions=1))

        context = build_prompt_context(changes, _symbols(5), total_budget=6000)

        assert context.symbols_added == "... and 5 more symbols"

    def test_large_budget_keeps_symbols(self, make_change, make_changes):
        """Test that symbols get a fifth of a large remaining budget."""
        changes = make_changes(make_change("src/api/routes.rs", diff="+x", additions=1))

        context = build_prompt_context(changes, _symbols(5), total_budget=100_000)

        assert "more symbols" not in context.symbols_added
        assert len(context.symbols_added.splitlines()) == 5

    def test_budget_from_config(self, make_change, make_changes):
        """Test that the config's max_context_chars is the default budget."""
        changes = make_changes(
            make_change("src/a.py", diff=_big_diff(400, width=200), additions=400)
        )
        config = AnalysisConfig(max_context_chars=3000, max_file_lines=1000)

        context = build_prompt_context(changes, [], config=config)

        assert BUDGET_EXCEEDED_NOTE in context.truncated_diff
        assert len(context.truncated_diff) < 3000

    def test_deterministic(self, make_change, make_changes):
        """Test that the same input yields the same context."""
        changes = make_changes(
            make_change("src/a.py", diff=_big_diff(100), additions=100),
            make_change("docs/a.md", diff=_big_diff(10), additions=10),
        )
        first = build_prompt_context(changes, _symbols(3))
        second = build_prompt_context(changes, _symbols(3))
        assert first == second

    def test_logs_token_budget(self, make_change, make_changes, caplog):
        """Test that the approximate token budget is logged."""
        changes = make_changes(make_change("src/a.py", diff=_big_diff(5), additions=5))

        with caplog.at_level(logging.DEBUG, logger="hunkscope.context"):
            build_prompt_context(changes, [])

        assert "approx_tokens=6000" in caplog.text
