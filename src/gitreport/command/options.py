"""Runner options: validated eagerly so bad values fail at construction."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from gitreport.command.errors import ArgumentError

Sink = Any  # a file object exposing fileno(), or a raw file descriptor


def _is_bool(value: Any) -> bool:
    return value is True or value is False


def _is_sink(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, int) and not isinstance(value, bool):
        return value >= 0
    return callable(getattr(value, "fileno", None))


@dataclass(frozen=True)
class CommandOptions:
    raise_on_error: bool = True
    normalize_encoding: bool = False
    chomp: bool = False
    timeout_after: Optional[float] = None  # None or 0 = no deadline
    chdir: Optional[Union[str, os.PathLike]] = None
    out: Sink = None  # stdout goes here instead of being captured
    err: Sink = None

    def __post_init__(self) -> None:
        errors: List[str] = []
        for name in ("raise_on_error", "normalize_encoding", "chomp"):
            value = getattr(self, name)
            if not _is_bool(value):
                errors.append(f"{name} must be true or false but was {value!r}")

        timeout = self.timeout_after
        if timeout is not None and (
            _is_bool(timeout) or not isinstance(timeout, (int, float)) or timeout < 0
        ):
            errors.append(
                f"timeout_after must be a non-negative number or None but was {timeout!r}"
            )

        if self.chdir is not None and not isinstance(self.chdir, (str, os.PathLike)):
            errors.append(f"chdir must be a path or None but was {self.chdir!r}")

        for name in ("out", "err"):
            value = getattr(self, name)
            if not _is_sink(value):
                errors.append(f"{name} must be a file object, a file descriptor or None but was {value!r}")

        if errors:
            raise ArgumentError("; ".join(errors))

    @property
    def deadline(self) -> Optional[float]:
        """Timeout in seconds to hand to the process, or None for no deadline."""
        return self.timeout_after or None
