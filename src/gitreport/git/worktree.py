"""Worktree and repository objects backed by the git command line."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional, Union

from gitreport.command.errors import GitReportError, UnexpectedResultError
from gitreport.command.result import CommandResult
from gitreport.config.schema import GitReportConfig
from gitreport.git import command_line
from gitreport.status.models import Report
from gitreport.status.parser import parse_status

PathLike = Union[str, os.PathLike]

_CLONING_INTO_RE = re.compile(r"Cloning into ['\"](.+)['\"]\.\.\.")

log = logging.getLogger(__name__)


class Repository:
    """A git repository directory (what ``--git-dir`` points at)."""

    def __init__(self, repository_path: PathLike) -> None:
        self.path = Path(repository_path).resolve(strict=True)

    def __repr__(self) -> str:
        return f"Repository({str(self.path)!r})"


class Worktree:
    """A checked-out working tree.

    Usage::

        worktree = Worktree.open(".")
        report = worktree.status()
        print(report.branch.name, len(report.unstaged))
    """

    def __init__(self, worktree_path: PathLike, *, config: Optional[GitReportConfig] = None) -> None:
        _require_directory(worktree_path)
        self.config = config
        self.path = self._root_path(Path(worktree_path))
        self._repository: Optional[Repository] = None
        log.debug("Created %r", self)

    def __repr__(self) -> str:
        return f"Worktree({str(self.path)!r})"

    # --- constructors ---

    @classmethod
    def init(cls, worktree_path: PathLike, *, config: Optional[GitReportConfig] = None) -> Worktree:
        """Run ``git init`` in an existing directory."""
        _require_directory(worktree_path)
        command_line.run("init", chdir=worktree_path, config=config)
        return cls(worktree_path, config=config)

    @classmethod
    def open(cls, worktree_path: PathLike, *, config: Optional[GitReportConfig] = None) -> Worktree:
        """Open the worktree containing *worktree_path*."""
        return cls(worktree_path, config=config)

    @classmethod
    def clone(
        cls,
        repository_url: str,
        to_path: Optional[PathLike] = None,
        *,
        config: Optional[GitReportConfig] = None,
    ) -> Worktree:
        """Clone *repository_url* and open the new worktree."""
        command = ["clone", "--", repository_url]
        if to_path is not None:
            command.append(str(to_path))
        clone_output = command_line.run(*command, config=config).stderr or ""
        return cls(cloned_to(clone_output), config=config)

    # --- queries ---

    @property
    def repository(self) -> Repository:
        if self._repository is None:
            git_dir = command_line.run(
                "rev-parse", "--git-dir", chdir=self.path, chomp=True, config=self.config
            ).stdout
            self._repository = Repository(self.path / git_dir)
        return self._repository

    def status(
        self,
        *path_specs: PathLike,
        untracked_files: str = "all",
        ignored: str = "no",
        ignore_submodules: str = "all",
    ) -> Report:
        """Run ``git status --porcelain=v2`` and parse it into a Report."""
        command = [
            "status",
            "--porcelain=v2",
            "--branch",
            "--show-stash",
            "--ahead-behind",
            "--renames",
            "-z",
            f"--untracked-files={untracked_files}",
            f"--ignored={ignored}",
            f"--ignore-submodules={ignore_submodules}",
        ]
        if path_specs:
            command.append("--")
            command.extend(str(spec) for spec in path_specs)

        return parse_status(self.run(*command).stdout or "")

    def run(self, *args: Any, **options: Any) -> CommandResult:
        """Run a git command against this worktree and its repository."""
        return command_line.run(
            *args,
            repository_path=self.repository.path,
            worktree_path=self.path,
            config=self.config,
            **options,
        )

    def _root_path(self, worktree_path: Path) -> Path:
        top_level = command_line.run(
            "rev-parse", "--show-toplevel", chdir=worktree_path, chomp=True, config=self.config
        ).stdout
        return Path(top_level).resolve(strict=True)


def _require_directory(path: PathLike) -> None:
    if not Path(path).is_dir():
        raise GitReportError(f"Path '{path}' not valid.")


def cloned_to(clone_output: str) -> str:
    """Extract the target directory from ``git clone`` progress output."""
    match = _CLONING_INTO_RE.search(clone_output)
    if match is None:
        raise UnexpectedResultError(f"Could not find the clone target in {clone_output!r}")
    return match.group(1)
