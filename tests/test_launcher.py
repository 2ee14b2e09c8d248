from __future__ import annotations

from pathlib import Path

import allure
import pytest

from cmdline_worker.worker.launcher import (
    MISSING_EXECUTABLE_MESSAGE,
    LaunchFailed,
    LaunchSucceeded,
    ProcessLauncher,
    decode_output,
    split_command,
)
from cmdline_worker.worker.models import FailureKind

pytestmark = [
    allure.epic("Command Line Worker"),
    allure.feature("Process Launch"),
]


def test_launch_lists_current_directory(listing_dirs: Path, monkeypatch) -> None:
    monkeypatch.chdir(listing_dirs)

    result = ProcessLauncher().launch("ls .")

    assert isinstance(result, LaunchSucceeded)
    assert "pyproject.toml" in result.output
    assert "README.md" in result.output


def test_launch_with_exec_dir_lists_that_directory(listing_dirs: Path, monkeypatch) -> None:
    monkeypatch.chdir(listing_dirs)

    default_result = ProcessLauncher().launch("ls .")
    result = ProcessLauncher().launch("ls .", "./src")

    assert isinstance(result, LaunchSucceeded)
    assert "main.py" in result.output
    assert "message.py" in result.output
    assert result.output != default_result.output


def test_launch_error_reports_program_and_argument(tmp_path: Path) -> None:
    result = ProcessLauncher().launch("ls sdjqenfdcnekbnbsdvjhqr", str(tmp_path))

    assert isinstance(result, LaunchFailed)
    assert result.kind == FailureKind.NON_ZERO_EXIT
    assert "ls" in result.diagnostic
    assert "sdjqenfdcnekbnbsdvjhqr" in result.diagnostic


def test_launch_failure_puts_stderr_before_stdout(python_script) -> None:
    command = python_script(
        "import sys\n"
        "sys.stdout.write('from-stdout')\n"
        "sys.stdout.flush()\n"
        "sys.stderr.write('from-stderr')\n"
        "sys.exit(3)\n",
    )

    result = ProcessLauncher().launch(command)

    assert isinstance(result, LaunchFailed)
    assert result.diagnostic == "from-stderrfrom-stdout"


def test_launch_success_ignores_stderr(python_script) -> None:
    command = python_script(
        "import sys\nsys.stderr.write('noise')\nsys.stdout.write('payload')\n",
    )

    result = ProcessLauncher().launch(command)

    assert result == LaunchSucceeded(output="payload")


def test_launch_replaces_invalid_output_bytes(python_script) -> None:
    command = python_script("import sys\nsys.stdout.buffer.write(b'ok\\xff\\xfe!')\n")

    result = ProcessLauncher().launch(command)

    assert isinstance(result, LaunchSucceeded)
    assert result.output == "ok\ufffd\ufffd!"


def test_launch_passes_arguments_split_on_spaces(python_script) -> None:
    command = python_script("import sys\nprint('|'.join(sys.argv[1:]))\n")

    result = ProcessLauncher().launch(f"{command} -l  .   last")

    assert result == LaunchSucceeded(output="-l|.|last\n")


def test_launch_keeps_whitespace_only_arguments(python_script) -> None:
    command = python_script("import sys\nprint(repr(sys.argv[1:]))\n")

    result = ProcessLauncher().launch(f"{command} a \t b")

    assert result == LaunchSucceeded(output="['a', '\\t', 'b']\n")


def test_launch_unknown_program_is_spawn_failure() -> None:
    command = "definitely-not-a-real-program-qwxz --flag"

    result = ProcessLauncher().launch(command)

    assert isinstance(result, LaunchFailed)
    assert result.kind == FailureKind.SPAWN_FAILURE
    assert command in result.diagnostic
    assert "No such file or directory" in result.diagnostic


def test_launch_missing_exec_dir_is_spawn_failure(tmp_path: Path) -> None:
    result = ProcessLauncher().launch("ls .", str(tmp_path / "missing"))

    assert isinstance(result, LaunchFailed)
    assert result.kind == FailureKind.SPAWN_FAILURE
    assert "ls ." in result.diagnostic


def test_launch_empty_exec_dir_is_spawn_failure(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    result = ProcessLauncher().launch("pwd", "")

    assert isinstance(result, LaunchFailed)
    assert result.kind == FailureKind.SPAWN_FAILURE
    assert "pwd" in result.diagnostic


@pytest.mark.parametrize("command", ["", " ", "   ", " \t "])
def test_launch_empty_command_spawns_nothing(command: str, monkeypatch) -> None:
    def _fail_run(*args, **kwargs):
        raise AssertionError("subprocess must not be started")

    monkeypatch.setattr("cmdline_worker.worker.launcher.subprocess.run", _fail_run)

    result = ProcessLauncher().launch(command)

    assert result == LaunchFailed(
        diagnostic=MISSING_EXECUTABLE_MESSAGE,
        kind=FailureKind.EMPTY_COMMAND,
    )


def test_split_command_drops_empty_tokens() -> None:
    assert split_command("ls  -l .") == ["ls", "-l", "."]
    assert split_command("") == []
    assert split_command("cut -d \t -f1") == ["cut", "-d", "\t", "-f1"]


def test_split_command_cannot_group_quoted_arguments() -> None:
    assert split_command('echo "hello world"') == ["echo", '"hello', 'world"']


def test_decode_output_is_lossy() -> None:
    assert decode_output(b"caf\xc3\xa9") == "café"
    assert decode_output(b"\x80") == "\ufffd"
