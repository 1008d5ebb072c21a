"""Shared test fixtures: captured git diff outputs and temp git repos."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

NUMSTAT_SECTION = (
    "3\t1\tlib/foo.rb\n"
    "5\t0\tlib/new.rb\n"
    "0\t4\tlib/old.rb\n"
    "-\t-\timg.png\n"
    "2\t2\tlib/{before => after}/moved.rb\n"
    " 5 files changed, 10 insertions(+), 7 deletions(-)\n"
)

DIRSTAT_SECTION = (
    "  60.0% lib/after/\n"
    "  40.0% lib/\n"
)

RAW_SECTION = (
    ":100644 100644 1234567 89abcde M\tlib/foo.rb\n"
    ":000000 100644 0000000 1111111 A\tlib/new.rb\n"
    ":100644 000000 2222222 0000000 D\tlib/old.rb\n"
    ":100644 100644 3333333 4444444 M\timg.png\n"
    ":100644 100644 5555555 6666666 R080\tlib/before/moved.rb\tlib/after/moved.rb\n"
)

FOO_PATCH = (
    "diff --git a/lib/foo.rb b/lib/foo.rb\n"
    "index 1234567..89abcde 100644\n"
    "--- a/lib/foo.rb\n"
    "+++ b/lib/foo.rb\n"
    "@@ -1,2 +1,4 @@\n"
    " class Foo\n"
    "-  def bar; end\n"
    "+  def bar\n"
    "+    :baz\n"
    "+  end\n"
    " end\n"
)

NEW_PATCH = (
    "diff --git a/lib/new.rb b/lib/new.rb\n"
    "new file mode 100644\n"
    "index 0000000..1111111\n"
    "--- /dev/null\n"
    "+++ b/lib/new.rb\n"
    "@@ -0,0 +1,5 @@\n"
    "+module New\n"
    "+  def self.call\n"
    "+    42\n"
    "+  end\n"
    "+end\n"
)

OLD_PATCH = (
    "diff --git a/lib/old.rb b/lib/old.rb\n"
    "deleted file mode 100644\n"
    "index 2222222..0000000\n"
    "--- a/lib/old.rb\n"
    "+++ /dev/null\n"
    "@@ -1,4 +0,0 @@\n"
    "-module Old\n"
    "-  def self.call\n"
    "-  end\n"
    "-end\n"
)

BINARY_PATCH = (
    "diff --git a/img.png b/img.png\n"
    "index 3333333..4444444 100644\n"
    "Binary files a/img.png and b/img.png differ\n"
)

RENAME_PATCH = (
    "diff --git a/lib/before/moved.rb b/lib/after/moved.rb\n"
    "similarity index 80%\n"
    "rename from lib/before/moved.rb\n"
    "rename to lib/after/moved.rb\n"
    "index 5555555..6666666 100644\n"
    "--- a/lib/before/moved.rb\n"
    "+++ b/lib/after/moved.rb\n"
    "@@ -1,4 +1,4 @@\n"
    "-# before\n"
    "+# after\n"
    " class Moved\n"
    "-  X = 1\n"
    "+  X = 2\n"
    " end\n"
)


@pytest.fixture
def numstat_output() -> str:
    """numstat + shortstat output for five files."""
    return NUMSTAT_SECTION


@pytest.fixture
def numstat_dirstat_output() -> str:
    """numstat + shortstat + dirstat output."""
    return NUMSTAT_SECTION + DIRSTAT_SECTION


@pytest.fixture
def raw_output() -> str:
    """raw + numstat + shortstat output, in the order git prints them."""
    return RAW_SECTION + NUMSTAT_SECTION


@pytest.fixture
def raw_dirstat_output() -> str:
    return RAW_SECTION + NUMSTAT_SECTION + DIRSTAT_SECTION


@pytest.fixture
def patch_output() -> str:
    """numstat + shortstat followed by the unified diff of the same five files."""
    return (
        NUMSTAT_SECTION
        + "\n"
        + FOO_PATCH
        + NEW_PATCH
        + OLD_PATCH
        + BINARY_PATCH
        + RENAME_PATCH
    )


@pytest.fixture
def foo_patch() -> str:
    """The patch block of lib/foo.rb as it appears in ``patch_output``."""
    return FOO_PATCH


@pytest.fixture
def patch_dirstat_output() -> str:
    return NUMSTAT_SECTION + DIRSTAT_SECTION + "\n" + FOO_PATCH + RENAME_PATCH


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    # Initial commit
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "foo.rb").write_text("class Foo\nend\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path
