"""Git interface layer: command line composition, binary lookup, worktrees."""

from gitreport.git.binary import GitBinary, default_binary_path, which
from gitreport.git.command_line import get_config, git_env, global_options, run, set_config
from gitreport.git.worktree import Repository, Worktree

__all__ = [
    "GitBinary",
    "Repository",
    "Worktree",
    "default_binary_path",
    "get_config",
    "git_env",
    "global_options",
    "run",
    "set_config",
    "which",
]
