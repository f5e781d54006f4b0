"""Shared test fixtures: sample status output, fake binaries, temp git repos."""

from __future__ import annotations

import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from gitreport.git.command_line import set_config

SHA_HEAD = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
SHA_INDEX = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
SHA_THEIRS = "d670460b4b4aece5915caf5c68d12f560a9fe3e4"
ZERO_SHA = "0" * 40

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals and shell scripts")


@pytest.fixture(autouse=True)
def _reset_process_config():
    """CLI commands install a process-wide config; never leak it across tests."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def sample_status_full() -> str:
    """Every record type plus all branch and stash headers."""
    return "".join([
        f"# branch.oid {SHA_HEAD}\0",
        "# branch.head main\0",
        "# branch.upstream origin/main\0",
        "# branch.ab +2 -1\0",
        "# stash 3\0",
        f"1 M. N... 100644 100644 100644 {SHA_HEAD} {SHA_INDEX} staged.txt\0",
        f"1 .M N... 100644 100644 100644 {SHA_HEAD} {SHA_HEAD} unstaged file.txt\0",
        f"1 MM N... 100644 100644 100755 {SHA_HEAD} {SHA_INDEX} both.sh\0",
        f"2 R. N... 100644 100644 100644 {SHA_HEAD} {SHA_HEAD} R100 new.txt\0old.txt\0",
        f"u UU N... 100644 100644 100644 100644 {SHA_HEAD} {SHA_INDEX} {SHA_THEIRS} conflict.txt\0",
        "? untracked.txt\0",
        "! build/ignored.log\0",
    ])


@pytest.fixture
def sample_status_rename() -> str:
    """A staged rename whose worktree copy was then deleted."""
    return f"2 RD N... 100644 100755 000000 {SHA_HEAD} {SHA_INDEX} R100 file2.txt\0file1.txt\0"


@pytest.fixture
def sample_status_detached() -> str:
    return f"# branch.oid {SHA_HEAD}\0# branch.head (detached)\0"


@pytest.fixture
def sample_status_initial() -> str:
    """A freshly initialised repository with no commits."""
    return "# branch.oid (initial)\0# branch.head main\0? README.md\0"


@pytest.fixture
def sample_status_submodule() -> str:
    return f"1 .M SC.U 160000 160000 160000 {SHA_HEAD} {SHA_HEAD} vendor/lib\0"


@pytest.fixture
def fake_binary(tmp_path: Path):
    """Build an executable shell script standing in for git."""

    def _make(body: str, name: str = "fake-git") -> Path:
        script = tmp_path / name
        script.write_text("#!/bin/sh\n" + textwrap.dedent(body))
        script.chmod(0o755)
        return script

    return _make


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", str(repo)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=repo, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=repo, capture_output=True, check=True,
    )
    # Initial commit
    readme = repo / "README.md"
    readme.write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=repo, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=repo, capture_output=True, check=True,
    )
    return repo
