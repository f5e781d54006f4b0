"""Subprocess runner: argv/env assembly, capture, timeout, classification."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from typing import Any, List, Mapping, Optional, Sequence

from gitreport.command import encoding
from gitreport.command.errors import (
    ArgumentError,
    CommandFailedError,
    CommandSignaledError,
    CommandTimeoutError,
    ProcessIOError,
    SpawnError,
)
from gitreport.command.options import CommandOptions
from gitreport.command.result import CommandResult, Output, ProcessOutcome

log = logging.getLogger(__name__)

_POSIX = os.name == "posix"

# Seconds to wait for the pipes to close once a timed-out group is killed.
KILL_DRAIN_TIMEOUT = 1.0


def _merge_env(overrides: Mapping[str, Optional[str]]) -> dict:
    """Snapshot os.environ and apply *overrides*; ``None`` unsets a variable."""
    env = os.environ.copy()
    for key, value in overrides.items():
        if value is None:
            env.pop(key, None)
        else:
            env[key] = str(value)
    return env


def _chomp(text: str) -> str:
    """Remove one trailing line terminator (\\r\\n, \\n or \\r)."""
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith(("\n", "\r")):
        return text[:-1]
    return text


def _kill(proc: subprocess.Popen) -> None:
    """SIGKILL *proc* and, on POSIX, every process in its group."""
    if not _POSIX:
        proc.kill()
        return
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        # the whole group has already exited
        pass


def _close_pipes(proc: subprocess.Popen) -> None:
    for pipe in (proc.stdout, proc.stderr):
        if pipe is not None:
            pipe.close()


def execute(
    command: List[str],
    env: Mapping[str, str],
    options: CommandOptions,
) -> ProcessOutcome:
    """Run *command* to completion, killing it if the deadline passes.

    On POSIX the child leads its own process group, and a timeout kills the
    whole group so grandchildren such as ssh cannot hold the pipes open.
    """
    stdout_target = subprocess.PIPE if options.out is None else options.out
    stderr_target = subprocess.PIPE if options.err is None else options.err

    try:
        proc = subprocess.Popen(
            command,
            env=env,
            cwd=options.chdir,
            stdin=subprocess.DEVNULL,
            stdout=stdout_target,
            stderr=stderr_target,
            start_new_session=_POSIX,
        )
    except OSError as exc:
        raise SpawnError(f"Could not start {command[0]!r}: {exc}") from exc

    timed_out = False
    try:
        try:
            stdout, stderr = proc.communicate(timeout=options.deadline)
        except subprocess.TimeoutExpired:
            timed_out = True
            _kill(proc)
            try:
                stdout, stderr = proc.communicate(timeout=KILL_DRAIN_TIMEOUT)
            except subprocess.TimeoutExpired as exc:
                # something outside the group still holds the pipes
                log.warning("Abandoning output of %s after kill", command)
                _close_pipes(proc)
                proc.wait()
                stdout = (exc.output or b"") if options.out is None else None
                stderr = (exc.stderr or b"") if options.err is None else None
    except OSError as exc:
        _kill(proc)
        _close_pipes(proc)
        proc.wait()
        raise ProcessIOError(f"Error collecting output of {command}: {exc}") from exc

    return ProcessOutcome(
        command=command,
        pid=proc.pid,
        returncode=proc.returncode,
        timed_out=timed_out,
        stdout=stdout,
        stderr=stderr,
    )


class CommandRunner:
    """Run one external binary with a fixed environment and global options.

    Usage::

        runner = CommandRunner({"LC_ALL": "C"}, "git", ["-c", "color.ui=false"])
        result = runner.call("status", "--porcelain=v2", chomp=True)
        print(result.stdout)
    """

    def __init__(
        self,
        env: Mapping[str, Optional[str]],
        binary_path: Any,
        global_options: Sequence[Any] = (),
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.env = dict(env)
        self.binary_path = binary_path
        self.global_options = list(global_options)
        self.logger = logger or log

    def call(self, *args: Any, **options: Any) -> CommandResult:
        """Run ``binary_path *global_options *args`` and return its result.

        Raises:
            ArgumentError: *args* contains a list, or an option is invalid.
            SpawnError: the binary could not be started.
            ProcessIOError: reading the subprocess output failed.
            CommandTimeoutError, CommandSignaledError, CommandFailedError:
                the command did not succeed and ``raise_on_error`` is true.
        """
        try:
            opts = CommandOptions(**options)
        except TypeError as exc:
            raise ArgumentError(str(exc)) from exc
        command = self.build_command(args)

        self.logger.debug("Running %s", command)
        outcome = execute(command, _merge_env(self.env), opts)
        result = CommandResult(outcome, opts)
        self.logger.debug(
            "%s finished: %s%s",
            command,
            result.status,
            ", timed out" if result.timed_out else "",
        )
        return self._process_result(result)

    def build_command(self, args: Sequence[Any]) -> List[str]:
        if any(isinstance(arg, (list, tuple)) for arg in args):
            raise ArgumentError("The args array can not contain an array")
        return [str(part) for part in (self.binary_path, *self.global_options, *args)]

    def _process_result(self, result: CommandResult) -> CommandResult:
        result.process_stdout(self._process_output)
        result.process_stderr(self._process_output)
        if result.options.raise_on_error:
            self._raise_any_errors(result)
        return result

    @staticmethod
    def _raise_any_errors(result: CommandResult) -> None:
        if result.timed_out:
            raise CommandTimeoutError(result)
        if result.signaled:
            raise CommandSignaledError(result)
        if not result.success:
            raise CommandFailedError(result)

    @staticmethod
    def _process_output(output: Output, result: CommandResult) -> Optional[str]:
        if output is None:
            return None
        if isinstance(output, bytes):
            if result.options.normalize_encoding:
                output = "".join(
                    encoding.normalize(line) for line in output.splitlines(keepends=True)
                )
            else:
                output = output.decode(encoding.DEFAULT_ENCODING, errors="replace")
        if result.options.chomp:
            output = _chomp(output)
        return output
