"""Run git: environment, global options, and the process-wide defaults.

This is the composition root: the only place that reads the process-wide
:class:`GitReportConfig`.  Everything below it receives values explicitly.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Union

from gitreport.command.result import CommandResult
from gitreport.command.runner import CommandRunner
from gitreport.config.schema import GitReportConfig
from gitreport.git.binary import default_binary_path

PathArg = Optional[Union[str, os.PathLike]]

log = logging.getLogger(__name__)

_COLOR_SETTINGS = (
    "ui",
    "advice",
    "diff",
    "grep",
    "push",
    "remote",
    "showBranch",
    "status",
    "transport",
)

_config: Optional[GitReportConfig] = None


def get_config() -> GitReportConfig:
    """Return the process-wide config, creating the default on first use."""
    global _config
    if _config is None:
        _config = GitReportConfig()
    return _config


def set_config(config: Optional[GitReportConfig]) -> None:
    """Replace the process-wide config. Not safe while a command is running."""
    global _config
    _config = config


def git_env(locale: str = "en_US.UTF-8") -> Dict[str, Optional[str]]:
    """Environment overrides for every git call; None unsets a variable."""
    return {
        "GIT_DIR": None,
        "GIT_WORK_TREE": None,
        "GIT_INDEX_FILE": None,
        "LC_ALL": locale,
    }


def global_options(
    repository_path: PathArg = None,
    worktree_path: PathArg = None,
    git_chdir: PathArg = None,
) -> List[str]:
    """Options placed between the git binary and the subcommand."""
    opts: List[str] = []
    if repository_path is not None:
        opts.append(f"--git-dir={repository_path}")
    if worktree_path is not None:
        opts.append(f"--work-tree={worktree_path}")
    if git_chdir is not None:
        opts.extend(["-C", str(git_chdir)])
    opts.extend(["-c", "core.quotePath=true"])
    for setting in _COLOR_SETTINGS:
        opts.extend(["-c", f"color.{setting}=false"])
    return opts


def build_runner(
    config: GitReportConfig,
    repository_path: PathArg = None,
    worktree_path: PathArg = None,
    git_chdir: PathArg = None,
) -> CommandRunner:
    return CommandRunner(
        git_env(config.git.locale),
        config.git.binary_path or default_binary_path(),
        global_options(repository_path, worktree_path, git_chdir),
        logger=log,
    )


def run(
    *args: Any,
    repository_path: PathArg = None,
    worktree_path: PathArg = None,
    git_chdir: PathArg = None,
    config: Optional[GitReportConfig] = None,
    **options: Any,
) -> CommandResult:
    """Run a git command and return its result.

    Example::

        run("rev-parse", "--show-toplevel", git_chdir=path, chomp=True).stdout

    Raises the runner's errors (see :meth:`CommandRunner.call`).
    """
    cfg = config or get_config()
    options.setdefault("timeout_after", cfg.git.timeout_after)
    options.setdefault("normalize_encoding", cfg.git.normalize_encoding)
    runner = build_runner(cfg, repository_path, worktree_path, git_chdir)
    return runner.call(*args, **options)
