"""Locating the git executable and asking it for its version."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from gitreport.command.errors import ArgumentError, UnexpectedResultError
from gitreport.command.runner import CommandRunner

_VERSION_RE = re.compile(r"\d+\.\d+(?:\.\d+)+")


def _split_path(path: Optional[str]) -> List[str]:
    return path.split(os.pathsep) if path is not None else [""]


def which(
    cmd_basename: str,
    path: Optional[str] = None,
    path_ext: Optional[str] = None,
) -> Optional[Path]:
    """Return the first executable named *cmd_basename* on *path*, or None.

    *path* defaults to ``$PATH`` and *path_ext* to ``$PATHEXT`` (Windows
    extensions such as ``.EXE``; unset elsewhere).
    """
    if path is None:
        path = os.environ.get("PATH")
    if path_ext is None:
        path_ext = os.environ.get("PATHEXT")
    if not path:
        raise ArgumentError("path can not be None or empty")

    for path_dir in _split_path(path):
        for ext in _split_path(path_ext):
            candidate = Path(path_dir) / f"{cmd_basename}{ext}"
            if candidate.is_file() and os.access(candidate, os.X_OK):
                return candidate
    return None


def default_binary_path() -> str:
    """The git found on PATH, or plain ``git`` and let the OS resolve it."""
    try:
        found = which("git")
    except ArgumentError:
        found = None
    return str(found) if found else "git"


class GitBinary:
    """A git executable on disk."""

    def __init__(self, path: Union[str, os.PathLike] = "git") -> None:
        self.path = Path(path)

    def version(self, timeout_after: Optional[float] = None) -> Tuple[int, ...]:
        """Return the version as a tuple of ints, e.g. ``(2, 43, 0)``."""
        result = CommandRunner({"LC_ALL": "C"}, self.path).call(
            "--version", chomp=True, timeout_after=timeout_after
        )
        match = _VERSION_RE.search(result.stdout or "")
        if match is None:
            raise UnexpectedResultError(f"Could not find a version number in {result.stdout!r}")
        return tuple(int(part) for part in match.group(0).split("."))

    def __str__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return f"GitBinary({str(self.path)!r})"
