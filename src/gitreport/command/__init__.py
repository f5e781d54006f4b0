"""Command execution layer: runner, options, results, errors."""

from gitreport.command.errors import (
    ArgumentError,
    CommandFailedError,
    CommandLineError,
    CommandSignaledError,
    CommandTimeoutError,
    GitReportError,
    ProcessIOError,
    SpawnError,
    StatusParseError,
    UnexpectedResultError,
)
from gitreport.command.options import CommandOptions
from gitreport.command.result import CommandResult, ProcessOutcome
from gitreport.command.runner import CommandRunner

__all__ = [
    "ArgumentError",
    "CommandFailedError",
    "CommandLineError",
    "CommandOptions",
    "CommandResult",
    "CommandRunner",
    "CommandSignaledError",
    "CommandTimeoutError",
    "GitReportError",
    "ProcessIOError",
    "ProcessOutcome",
    "SpawnError",
    "StatusParseError",
    "UnexpectedResultError",
]
