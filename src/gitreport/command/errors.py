"""Error taxonomy for the command runner and the status parser."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitreport.command.result import CommandResult


class GitReportError(Exception):
    """Base class for every error raised by gitreport."""


class ArgumentError(GitReportError):
    """Raised on malformed caller input (nested args, invalid option values)."""


class ProcessIOError(GitReportError):
    """Raised when reading from the subprocess pipes fails."""


class SpawnError(GitReportError):
    """Raised when the binary could not be started at all."""


class UnexpectedResultError(GitReportError):
    """Raised when a command succeeded but its output was not understood."""


class StatusParseError(GitReportError):
    """Raised on a structurally malformed status record."""


class CommandLineError(GitReportError):
    """A command ran but did not succeed.

    The full :class:`CommandResult` is kept on ``result`` so callers can
    inspect the command, status and captured output without re-running it.
    """

    def __init__(self, result: CommandResult) -> None:
        self.result = result
        super().__init__(self.error_message())

    def error_message(self) -> str:
        return (
            f"{self.result.command}, status: {self.result.status}, "
            f"stderr: {self.result.stderr!r}"
        )


class CommandFailedError(CommandLineError):
    """The command exited with a non-zero status."""


class CommandSignaledError(CommandLineError):
    """The command was terminated by an uncaught signal."""


class CommandTimeoutError(CommandSignaledError):
    """The command was killed after exceeding its deadline."""

    def error_message(self) -> str:
        return f"{super().error_message()}, timed out after {self.result.options.timeout_after}s"
