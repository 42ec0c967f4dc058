"""Tests for hunkscope.models module."""

import pytest

from hunkscope.models import (
    ChangeStatus,
    CodeSymbol,
    CommitGroup,
    CommitType,
    FileCategory,
    PromptContext,
    SplitSuggestion,
    StagedChanges,
    SymbolKind,
)


class TestFileCategory:
    """Tests for FileCategory.from_path."""

    @pytest.mark.parametrize("path", [
        "tests/test_parser.py",
        "src/parser_test.go",
        "web/app.test.ts",
        "spec/models_spec.rb",
        "test_main.py",
        "crates/core/tests/integration.rs",
    ])
    def test_test_files(self, path):
        """Test paths recognized as tests."""
        assert FileCategory.from_path(path) == FileCategory.TEST

    @pytest.mark.parametrize("path", [
        "README.md",
        "docs/guide.html",
        "CHANGELOG.rst",
        "notes.txt",
    ])
    def test_docs_files(self, path):
        """Test paths recognized as documentation."""
        assert FileCategory.from_path(path) == FileCategory.DOCS

    def test_requirements_txt_is_config(self):
        """Test that requirements.txt is config despite the .txt extension."""
        assert FileCategory.from_path("requirements.txt") == FileCategory.CONFIG

    @pytest.mark.parametrize("path", [
        "Dockerfile",
        "Makefile",
        ".github/workflows/ci.yml",
        "deploy/api.dockerfile",
    ])
    def test_build_files(self, path):
        """Test paths recognized as build or CI files."""
        assert FileCategory.from_path(path) == FileCategory.BUILD

    @pytest.mark.parametrize("path", [
        "Cargo.toml",
        "package.json",
        "pyproject.toml",
        "go.mod",
    ])
    def test_config_files(self, path):
        """Test exact filenames recognized as config."""
        assert FileCategory.from_path(path) == FileCategory.CONFIG

    @pytest.mark.parametrize("path", ["src/main.rs", "app/index.tsx", "pkg/server.go", "lib/util.py"])
    def test_source_files(self, path):
        """Test source extensions."""
        assert FileCategory.from_path(path) == FileCategory.SOURCE

    def test_other_files(self):
        """Test that unknown extensions fall through to OTHER."""
        assert FileCategory.from_path("assets/logo.svg") == FileCategory.OTHER

    def test_test_directory_name_must_be_a_directory(self):
        """Test that a file literally named tests is not treated as a test dir."""
        assert FileCategory.from_path("src/tests.py") == FileCategory.SOURCE

    def test_priority_order(self):
        """Test that source sorts before everything else."""
        ordered = sorted(FileCategory, key=lambda c: c.priority)
        assert ordered[0] == FileCategory.SOURCE
        assert ordered[-1] == FileCategory.OTHER


class TestChangeStatus:
    """Tests for ChangeStatus markers."""

    def test_markers(self):
        """Test the listing markers."""
        assert ChangeStatus.ADDED.marker == "[+]"
        assert ChangeStatus.MODIFIED.marker == "[M]"
        assert ChangeStatus.DELETED.marker == "[-]"


class TestStagedChanges:
    """Tests for StagedChanges."""

    def test_from_files_derives_stats(self, make_change):
        """Test that aggregate stats are summed from files."""
        changes = StagedChanges.from_files([
            make_change("src/a.py", additions=3, deletions=1),
            make_change("src/b.py", additions=7, deletions=2),
        ])
        assert changes.stats.files_changed == 2
        assert changes.stats.insertions == 10
        assert changes.stats.deletions == 3

    def test_is_empty(self):
        """Test empty change set."""
        assert StagedChanges.from_files([]).is_empty()

    def test_files_by_priority_is_stable(self, make_change, make_changes):
        """Test priority ordering keeps original order within a category."""
        changes = make_changes(
            make_change("README.md"),
            make_change("src/b.py"),
            make_change("tests/test_b.py"),
            make_change("src/a.py"),
        )
        paths = [f.path for f in changes.files_by_priority()]
        assert paths == ["src/b.py", "src/a.py", "tests/test_b.py", "README.md"]

    def test_subset(self, make_change, make_changes):
        """Test restricting a change set to some paths."""
        changes = make_changes(
            make_change("src/a.py", additions=1),
            make_change("src/b.py", additions=5),
        )
        sub = changes.subset(["src/b.py"])
        assert [f.path for f in sub.files] == ["src/b.py"]
        assert sub.stats.insertions == 5

    def test_lines_changed(self, make_change):
        """Test lines_changed sums additions and deletions."""
        assert make_change("a.py", additions=4, deletions=6).lines_changed == 10


class TestCodeSymbol:
    """Tests for CodeSymbol rendering."""

    def test_public_added(self):
        """Test rendering of a public added symbol."""
        symbol = CodeSymbol(
            kind=SymbolKind.FUNCTION,
            name="greet",
            file="src/lib.rs",
            line=3,
            is_public=True,
            is_added=True,
        )
        assert str(symbol) == "[+] pub function greet (src/lib.rs:3)"

    def test_private_removed(self):
        """Test rendering of a private removed symbol."""
        symbol = CodeSymbol(
            kind=SymbolKind.STRUCT,
            name="Cache",
            file="src/cache.rs",
            line=10,
            is_public=False,
            is_added=False,
        )
        assert str(symbol) == "[-] struct Cache (src/cache.rs:10)"


class TestCommitTypes:
    """Tests for CommitType, CommitGroup and SplitSuggestion."""

    def test_commit_type_str(self):
        """Test that commit types render as their lowercase token."""
        assert str(CommitType.FEAT) == "feat"
        assert str(CommitType.CI) == "ci"

    def test_group_header_with_scope(self):
        """Test header includes the scope in parentheses."""
        group = CommitGroup(files=["src/api/x.rs"], commit_type=CommitType.FEAT, scope="api")
        assert group.header == "feat(api)"

    def test_group_header_without_scope(self):
        """Test header without scope."""
        group = CommitGroup(files=["x.rs"], commit_type=CommitType.FIX)
        assert group.header == "fix"

    def test_single_suggestion(self):
        """Test that an empty suggestion means a single commit."""
        assert SplitSuggestion.single().should_split is False
        assert SplitSuggestion(groups=[]).groups == []


class TestPromptContext:
    """Tests for PromptContext."""

    def test_defaults(self):
        """Test optional fields default to empty."""
        context = PromptContext(
            change_summary="1 files",
            file_breakdown="[M] a.py (+1 -0)\n",
            suggested_type=CommitType.FIX,
        )
        assert context.symbols_added == ""
        assert context.suggested_scope is None
        assert context.truncated_diff == ""
