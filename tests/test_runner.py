"""Tests for the command runner: argv, env, capture, and outcome classification."""

import errno
import os
import signal
import subprocess
import sys
import time
from pathlib import Path

import pytest

from gitreport.command import (
    ArgumentError,
    CommandFailedError,
    CommandLineError,
    CommandRunner,
    CommandSignaledError,
    CommandTimeoutError,
    ProcessIOError,
    SpawnError,
)

from conftest import posix_only


def python_runner(env=None, global_options=()) -> CommandRunner:
    return CommandRunner(env or {}, sys.executable, global_options)


class TestCommandLine:
    def test_global_options_prepended(self):
        runner = python_runner(global_options=["-c", "import sys; print(sys.argv[1:])"])
        result = runner.call("status", 1, Path("x"), chomp=True)
        assert result.stdout == "['status', '1', 'x']"

    def test_build_command_coerces_to_str(self):
        runner = CommandRunner({}, Path("/usr/bin/git"), ["-c", "color.ui=false"])
        assert runner.build_command(["status", 2]) == [
            "/usr/bin/git", "-c", "color.ui=false", "status", "2",
        ]

    def test_empty_args_allowed(self):
        runner = python_runner(global_options=["-c", "print('ran')"])
        assert runner.call(chomp=True).stdout == "ran"

    def test_nested_list_rejected_before_spawn(self):
        runner = CommandRunner({}, "/nonexistent/binary", [])
        with pytest.raises(ArgumentError, match="can not contain an array"):
            runner.call("status", ["--short"])

    def test_invalid_option_rejected(self):
        with pytest.raises(ArgumentError):
            python_runner().call("-c", "pass", chomp="yes")

    def test_unknown_option_rejected(self):
        with pytest.raises(ArgumentError):
            python_runner().call("-c", "pass", no_such_option=True)

    def test_missing_binary_raises_spawn_error(self):
        with pytest.raises(SpawnError):
            CommandRunner({}, "/nonexistent/binary", []).call("status")


class TestEnvironment:
    def test_override_and_unset(self, monkeypatch):
        monkeypatch.setenv("GITREPORT_TEST_UNSET", "present")
        runner = python_runner(env={"GITREPORT_TEST_SET": "yes", "GITREPORT_TEST_UNSET": None})
        script = (
            "import os; "
            "print(os.environ.get('GITREPORT_TEST_SET'), os.environ.get('GITREPORT_TEST_UNSET'))"
        )
        assert runner.call("-c", script, chomp=True).stdout == "yes None"

    def test_ambient_environment_inherited(self, monkeypatch):
        monkeypatch.setenv("GITREPORT_TEST_AMBIENT", "inherited")
        script = "import os; print(os.environ['GITREPORT_TEST_AMBIENT'])"
        assert python_runner().call("-c", script, chomp=True).stdout == "inherited"

    def test_chdir(self, tmp_path):
        result = python_runner().call("-c", "import os; print(os.getcwd())", chdir=tmp_path, chomp=True)
        assert Path(result.stdout).resolve() == tmp_path.resolve()


class TestOutcomes:
    def test_success(self):
        result = python_runner().call("-c", "print('hello')")
        assert result.success is True
        assert result.exit_status == 0
        assert result.signaled is False
        assert result.timed_out is False
        assert result.stdout == "hello\n"
        assert result.stderr == ""

    def test_failure_raises(self):
        with pytest.raises(CommandFailedError) as exc_info:
            python_runner().call("-c", "import sys; sys.stderr.write('oops'); sys.exit(3)")
        result = exc_info.value.result
        assert result.exit_status == 3
        assert result.stderr == "oops"
        assert "exit 3" in str(exc_info.value)
        assert "stderr: 'oops'" in str(exc_info.value)

    def test_failure_returned_when_not_raising(self):
        result = python_runner().call("-c", "import sys; sys.exit(1)", raise_on_error=False)
        assert result.success is False
        assert result.exit_status == 1

    @posix_only
    def test_signaled_raises(self):
        script = "import os, signal; os.kill(os.getpid(), signal.SIGKILL)"
        with pytest.raises(CommandSignaledError) as exc_info:
            python_runner().call("-c", script)
        assert not isinstance(exc_info.value, CommandTimeoutError)
        result = exc_info.value.result
        assert result.signaled is True
        assert result.termsig == 9
        assert result.exit_status is None
        assert "SIGKILL (signal 9)" in result.status

    @posix_only
    def test_signaled_returned_when_not_raising(self):
        script = "import os, signal; os.kill(os.getpid(), signal.SIGTERM)"
        result = python_runner().call("-c", script, raise_on_error=False)
        assert result.success is False
        assert result.termsig == 15
        assert result.timed_out is False

    @posix_only
    def test_timeout_raises(self):
        with pytest.raises(CommandTimeoutError) as exc_info:
            python_runner().call("-c", "import time; time.sleep(10)", timeout_after=0.5)
        assert isinstance(exc_info.value, CommandSignaledError)
        assert isinstance(exc_info.value, CommandLineError)
        assert str(exc_info.value).endswith("timed out after 0.5s")
        assert exc_info.value.result.timed_out is True
        assert exc_info.value.result.termsig == 9

    @posix_only
    def test_timeout_returned_when_not_raising(self):
        result = python_runner().call(
            "-c", "import time; time.sleep(10)", timeout_after=0.5, raise_on_error=False
        )
        assert result.timed_out is True
        assert result.signaled is True
        assert result.termsig == 9
        assert result.success is False

    def test_zero_timeout_means_no_deadline(self):
        result = python_runner().call("-c", "import time; time.sleep(0.2); print('done')", timeout_after=0)
        assert result.stdout == "done\n"


class TestOutputProcessing:
    def test_chomp(self):
        assert python_runner().call("-c", "print('hello')", chomp=True).stdout == "hello"

    def test_no_chomp(self):
        assert python_runner().call("-c", "print('hello')", chomp=False).stdout == "hello\n"

    def test_chomp_only_one_newline(self):
        result = python_runner().call("-c", "print('hello\\n')", chomp=True)
        assert result.stdout == "hello\n"

    def test_chomp_applies_on_failure(self):
        result = python_runner().call(
            "-c", "import sys; print('hello'); sys.exit(1)", chomp=True, raise_on_error=False
        )
        assert result.success is False
        assert result.stdout == "hello"

    def test_raised_error_carries_processed_output(self):
        with pytest.raises(CommandFailedError) as exc_info:
            python_runner().call("-c", "import sys; print('partial'); sys.exit(2)", chomp=True)
        assert exc_info.value.result.stdout == "partial"
        assert exc_info.value.result.unprocessed_stdout.rstrip() == b"partial"

    def test_normalize_encoding(self):
        script = "import sys; sys.stdout.buffer.write('caf\\xe9 au lait\\nok\\n'.encode('latin-1'))"
        result = python_runner().call("-c", script, normalize_encoding=True)
        assert isinstance(result.stdout, str)
        assert result.stdout.startswith("caf")
        assert result.stdout.endswith("ok\n")
        assert result.stdout.count("\n") == 2

    def test_invalid_utf8_replaced_without_normalizing(self):
        script = "import sys; sys.stdout.buffer.write(b'caf\\xe9')"
        result = python_runner().call("-c", script)
        assert result.stdout == "caf\ufffd"

    def test_output_to_sink_is_not_captured(self, tmp_path):
        out_path = tmp_path / "out.txt"
        with open(out_path, "w") as sink:
            result = python_runner().call("-c", "print('to file')", out=sink, chomp=True)
        assert result.stdout is None
        assert result.stderr == ""
        assert out_path.read_text() == "to file" + os.linesep


class TestTimeoutKillsChildren:
    @posix_only
    def test_grandchild_does_not_outlive_deadline(self, fake_binary):
        script = fake_binary("""\
            sleep 5
            echo done
        """)
        runner = CommandRunner({}, script, [])
        started = time.monotonic()
        result = runner.call(timeout_after=0.5, raise_on_error=False)
        assert time.monotonic() - started < 2.0
        assert result.timed_out is True
        assert result.termsig == 9
        assert result.stdout == ""

    @posix_only
    def test_output_abandoned_when_pipes_stay_open(self, fake_binary):
        # the sleeper leaves the process group, so only the drain bound ends the call
        script = fake_binary(f"""\
            echo partial
            "{sys.executable}" -c "import os, time; os.setsid(); time.sleep(5)"
        """)
        runner = CommandRunner({}, script, [])
        started = time.monotonic()
        result = runner.call(timeout_after=0.5, raise_on_error=False)
        assert time.monotonic() - started < 4.0
        assert result.timed_out is True
        assert result.termsig == 9


class TestPipeErrors:
    @posix_only
    def test_io_error_raised_and_child_killed(self, monkeypatch):
        started = []

        def broken_communicate(self, input=None, timeout=None):
            started.append(self)
            raise OSError(errno.EPIPE, "Broken pipe")

        monkeypatch.setattr(subprocess.Popen, "communicate", broken_communicate)
        with pytest.raises(ProcessIOError, match="Broken pipe"):
            python_runner().call("-c", "import time; time.sleep(10)", raise_on_error=False)
        (proc,) = started
        assert proc.returncode == -signal.SIGKILL
        assert proc.stdout.closed
