"""Command result: raw process outcome plus per-stream post-processing."""

from __future__ import annotations

import signal
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from gitreport.command.options import CommandOptions

Output = Optional[Union[bytes, str]]
OutputProcessor = Callable[[Output, "CommandResult"], Output]


@dataclass(frozen=True)
class ProcessOutcome:
    """What the operating system reported about one finished process.

    ``returncode`` follows the :mod:`subprocess` convention: a negative value
    means the process was terminated by that signal number.  ``stdout`` and
    ``stderr`` are the raw captured bytes, or ``None`` when the stream was
    sent to a caller-supplied sink.
    """

    command: List[str]
    pid: int
    returncode: int
    timed_out: bool = False
    stdout: Optional[bytes] = None
    stderr: Optional[bytes] = None


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"SIG{signum}"


@dataclass
class CommandResult:
    """A finished command with idempotent, chainable output hooks.

    ``stdout``/``stderr`` answer the current (possibly processed) value,
    ``unprocessed_stdout``/``unprocessed_stderr`` always answer the original.

    Usage::

        result.process_stdout(lambda out, r: out.strip()).process_stderr(...)
    """

    outcome: ProcessOutcome
    options: CommandOptions = field(default_factory=CommandOptions)
    _stdout: Output = field(default=None, init=False, repr=False)
    _stderr: Output = field(default=None, init=False, repr=False)
    _stdout_processed: bool = field(default=False, init=False, repr=False)
    _stderr_processed: bool = field(default=False, init=False, repr=False)

    # --- process status ---

    @property
    def command(self) -> List[str]:
        return self.outcome.command

    @property
    def pid(self) -> int:
        return self.outcome.pid

    @property
    def signaled(self) -> bool:
        return self.outcome.returncode < 0

    @property
    def termsig(self) -> Optional[int]:
        return -self.outcome.returncode if self.signaled else None

    @property
    def exit_status(self) -> Optional[int]:
        return None if self.signaled else self.outcome.returncode

    @property
    def timed_out(self) -> bool:
        return self.outcome.timed_out

    @property
    def success(self) -> bool:
        return not self.timed_out and self.exit_status == 0

    @property
    def status(self) -> str:
        """Human readable status, e.g. ``pid 4242 exit 1``."""
        if self.signaled:
            return f"pid {self.pid} {_signal_name(self.termsig)} (signal {self.termsig})"
        return f"pid {self.pid} exit {self.exit_status}"

    # --- stdout ---

    @property
    def stdout(self) -> Output:
        return self._stdout if self._stdout_processed else self.unprocessed_stdout

    @property
    def unprocessed_stdout(self) -> Optional[bytes]:
        return self.outcome.stdout

    def process_stdout(self, processor: Optional[OutputProcessor]) -> Optional[CommandResult]:
        """Replace the current stdout with ``processor(stdout, self)``."""
        if processor is None:
            return None
        self._stdout = processor(self.stdout, self)
        self._stdout_processed = True
        return self

    # --- stderr ---

    @property
    def stderr(self) -> Output:
        return self._stderr if self._stderr_processed else self.unprocessed_stderr

    @property
    def unprocessed_stderr(self) -> Optional[bytes]:
        return self.outcome.stderr

    def process_stderr(self, processor: Optional[OutputProcessor]) -> Optional[CommandResult]:
        """Replace the current stderr with ``processor(stderr, self)``."""
        if processor is None:
            return None
        self._stderr = processor(self.stderr, self)
        self._stderr_processed = True
        return self
