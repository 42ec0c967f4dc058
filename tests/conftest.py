"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from hunkscope.models import ChangeStatus, FileCategory, FileChange, StagedChanges


def _make_change(
    path: str,
    status: ChangeStatus = ChangeStatus.MODIFIED,
    diff: str = "",
    additions: int = 0,
    deletions: int = 0,
    is_binary: bool = False,
) -> FileChange:
    return FileChange(
        path=path,
        status=status,
        diff=diff,
        additions=additions,
        deletions=deletions,
        category=FileCategory.from_path(path),
        is_binary=is_binary,
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_repo_root(temp_dir):
    """Create a mock git repository root directory."""
    git_dir = temp_dir / ".git"
    git_dir.mkdir()
    return temp_dir


@pytest.fixture
def make_change():
    """Factory for FileChange values with the category derived from the path."""
    return _make_change


@pytest.fixture
def make_changes():
    """Factory for StagedChanges built from FileChange values."""
    def factory(*files: FileChange) -> StagedChanges:
        return StagedChanges.from_files(files)

    return factory


@pytest.fixture
def sample_diff():
    """Sample staged diff covering a modified, an added and a deleted file."""
    return """diff --git a/src/main.py b/src/main.py
index 1234567..abcdefg 100644
--- a/src/main.py
+++ b/src/main.py
@@ -10,6 +10,8 @@ def main():
     print("Hello")
+    print("World")
+    print("!")
     return 0
@@ -20,3 +22,5 @@ def helper():
     pass
+    # New comment
+    return True
diff --git a/tests/test_main.py b/tests/test_main.py
new file mode 100644
index 0000000..1234567
--- /dev/null
+++ b/tests/test_main.py
@@ -0,0 +1,4 @@
+import pytest
+
+def test_main():
+    assert True
diff --git a/old_module.py b/old_module.py
deleted file mode 100644
index 1234567..0000000
--- a/old_module.py
+++ /dev/null
@@ -1,3 +0,0 @@
-def legacy():
-    pass
-
"""


@pytest.fixture
def sample_name_status():
    """NUL-separated name-status output matching sample_diff."""
    return "M\0src/main.py\0A\0tests/test_main.py\0D\0old_module.py\0"
