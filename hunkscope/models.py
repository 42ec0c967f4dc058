"""Data models for hunkscope.

Contains:
- ChangeStatus, FileCategory: Per-file classification enums
- FileChange, DiffStats, StagedChanges: The staged change set
- DiffHunk: Line ranges of a single unified-diff hunk
- SymbolKind, CodeSymbol: Declaration-level change records
- CommitType, CommitGroup, SplitSuggestion: Classification and split results
- PromptContext: Budgeted evidence package for commit message generation
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import Iterable, Optional

from pydantic import BaseModel


class ChangeStatus(Enum):
    """Status of a staged file."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"

    @property
    def marker(self) -> str:
        """Short marker used in file listings."""
        return {
            ChangeStatus.ADDED: "[+]",
            ChangeStatus.MODIFIED: "[M]",
            ChangeStatus.DELETED: "[-]",
        }[self]


# Exact filenames treated as project/dependency configuration
CONFIG_FILENAMES = {
    "Cargo.toml",
    "Cargo.lock",
    "package.json",
    "package-lock.json",
    "tsconfig.json",
    "pyproject.toml",
    "requirements.txt",
    "setup.cfg",
    "poetry.lock",
    "uv.lock",
    ".gitignore",
    ".env.example",
    "go.mod",
    "go.sum",
    "bun.lockb",
}

BUILD_FILENAMES = {
    "Dockerfile",
    "docker-compose.yml",
    "Makefile",
    "justfile",
    ".dockerignore",
}

SOURCE_EXTENSIONS = {
    "rs", "ts", "tsx", "js", "jsx", "py", "go", "java", "kt", "c", "cpp", "h", "hpp",
}

DOC_EXTENSIONS = {"md", "rst", "txt"}


def _is_under(parts: tuple[str, ...], directory: str) -> bool:
    """Check whether any directory component (not the filename) equals directory."""
    return directory in parts[:-1]


class FileCategory(Enum):
    """Broad category of a changed file."""

    SOURCE = "source"
    TEST = "test"
    CONFIG = "config"
    DOCS = "docs"
    BUILD = "build"
    OTHER = "other"

    @classmethod
    def from_path(cls, path: str) -> "FileCategory":
        """Classify a repository-relative path.

        Args:
            path: File path with forward slashes.

        Returns:
            The FileCategory for the path.
        """
        pure = PurePosixPath(path)
        parts = pure.parts
        name = pure.name
        ext = pure.suffix[1:].lower() if pure.suffix else ""

        if (
            "_test." in name
            or ".test." in name
            or "_spec." in name
            or name.startswith("test_")
            or _is_under(parts, "tests")
            or _is_under(parts, "test")
        ):
            return cls.TEST

        if _is_under(parts, "docs") or (ext in DOC_EXTENSIONS and name not in CONFIG_FILENAMES):
            return cls.DOCS

        if _is_under(parts, ".github") or name in BUILD_FILENAMES or ext == "dockerfile":
            return cls.BUILD

        if name in CONFIG_FILENAMES:
            return cls.CONFIG

        if ext in SOURCE_EXTENSIONS:
            return cls.SOURCE

        return cls.OTHER

    @property
    def priority(self) -> int:
        """Ordering used when laying out files (lower comes first)."""
        return _CATEGORY_PRIORITY[self]


_CATEGORY_PRIORITY = {
    FileCategory.SOURCE: 0,
    FileCategory.TEST: 1,
    FileCategory.CONFIG: 2,
    FileCategory.DOCS: 3,
    FileCategory.BUILD: 4,
    FileCategory.OTHER: 5,
}


@dataclass(frozen=True)
class FileChange:
    """A single staged file and its diff."""

    path: str
    status: ChangeStatus
    diff: str
    additions: int
    deletions: int
    category: FileCategory
    is_binary: bool = False

    @property
    def lines_changed(self) -> int:
        return self.additions + self.deletions


@dataclass(frozen=True)
class DiffStats:
    """Aggregate statistics of a staged change set."""

    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class StagedChanges:
    """Ordered staged files plus aggregate stats."""

    files: tuple[FileChange, ...]
    stats: DiffStats

    @classmethod
    def from_files(cls, files: Iterable[FileChange]) -> "StagedChanges":
        """Build a change set and derive its stats from the files."""
        files = tuple(files)
        return cls(
            files=files,
            stats=DiffStats(
                files_changed=len(files),
                insertions=sum(f.additions for f in files),
                deletions=sum(f.deletions for f in files),
            ),
        )

    def is_empty(self) -> bool:
        return not self.files

    def files_by_priority(self) -> list[FileChange]:
        """Files sorted by category priority, source first. Ties keep input order."""
        return sorted(self.files, key=lambda f: f.category.priority)

    def subset(self, paths: Iterable[str]) -> "StagedChanges":
        """Return a new change set restricted to the given paths."""
        wanted = set(paths)
        return StagedChanges.from_files(f for f in self.files if f.path in wanted)


@dataclass(frozen=True)
class DiffHunk:
    """Line ranges of a single unified-diff hunk."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int

    def intersects_new(self, line_start: int, line_end: int) -> bool:
        """Check if a line range intersects this hunk in the new file."""
        hunk_end = self.new_start + self.new_count
        return line_start < hunk_end and line_end > self.new_start

    def intersects_old(self, line_start: int, line_end: int) -> bool:
        """Check if a line range intersects this hunk in the old file."""
        hunk_end = self.old_start + self.old_count
        return line_start < hunk_end and line_end > self.old_start


class SymbolKind(Enum):
    """Kind of a named declaration."""

    FUNCTION = "function"
    METHOD = "method"
    STRUCT = "struct"
    ENUM = "enum"
    TRAIT = "trait"
    INTERFACE = "interface"
    IMPL = "impl"
    CLASS = "class"
    CONST = "const"
    TYPE = "type"


@dataclass(frozen=True)
class CodeSymbol:
    """A declaration touched by the staged changes.

    is_added is True when the symbol was observed in the staged version,
    False when it was observed in the HEAD version.
    """

    kind: SymbolKind
    name: str
    file: str
    line: int
    is_public: bool
    is_added: bool

    def __str__(self) -> str:
        visibility = "pub " if self.is_public else ""
        action = "+" if self.is_added else "-"
        return f"[{action}] {visibility}{self.kind.value} {self.name} ({self.file}:{self.line})"


class CommitType(Enum):
    """Conventional commit types."""

    FEAT = "feat"
    FIX = "fix"
    REFACTOR = "refactor"
    DOCS = "docs"
    TEST = "test"
    CHORE = "chore"
    STYLE = "style"
    PERF = "perf"
    BUILD = "build"
    CI = "ci"
    REVERT = "revert"

    def __str__(self) -> str:
        return self.value


@dataclass
class CommitGroup:
    """A logical group of files that belong in a single commit."""

    files: list[str]
    commit_type: CommitType
    scope: Optional[str] = None

    @property
    def header(self) -> str:
        """Conventional commit prefix, e.g. ``feat(api)``."""
        if self.scope:
            return f"{self.commit_type.value}({self.scope})"
        return self.commit_type.value


@dataclass
class SplitSuggestion:
    """Result of split analysis. No groups means a single commit."""

    groups: list[CommitGroup] = field(default_factory=list)

    @classmethod
    def single(cls) -> "SplitSuggestion":
        return cls()

    @property
    def should_split(self) -> bool:
        return bool(self.groups)


class PromptContext(BaseModel):
    """Budgeted evidence package handed to the prompt formatter."""

    change_summary: str
    file_breakdown: str
    symbols_added: str = ""
    symbols_removed: str = ""
    suggested_type: CommitType
    suggested_scope: Optional[str] = None
    truncated_diff: str = ""
