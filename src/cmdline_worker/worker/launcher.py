"""Subprocess launcher for compiled command lines."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

from cmdline_worker.worker.models import FailureKind

logger = logging.getLogger(__name__)

OUTPUT_ENCODING = "utf-8"

MISSING_EXECUTABLE_MESSAGE = "missing executable in the command line template"


@dataclass(slots=True)
class ExecutionOutcome:
    """Captured result of one finished child process."""

    exited_successfully: bool
    stdout: bytes
    stderr: bytes
    returncode: int


@dataclass(slots=True)
class LaunchSucceeded:
    """Command exited with status zero."""

    output: str


@dataclass(slots=True)
class LaunchFailed:
    """Command could not be started or exited with a failure status."""

    diagnostic: str
    kind: FailureKind


LaunchResult = LaunchSucceeded | LaunchFailed


def split_command(command: str) -> list[str]:
    """Split a compiled command on spaces into program and arguments.

    Empty tokens from repeated spaces are dropped; other whitespace is kept.
    There is no quoting: an argument can never contain a space.
    """

    return [token for token in command.split(" ") if token]


def decode_output(data: bytes) -> str:
    """Decode process output, replacing invalid byte sequences."""

    return data.decode(OUTPUT_ENCODING, errors="replace")


class ProcessLauncher:
    """Run one compiled command to completion and classify its exit."""

    def launch(self, command: str, exec_dir: str | None = None) -> LaunchResult:
        if not command.strip():
            return LaunchFailed(
                diagnostic=MISSING_EXECUTABLE_MESSAGE,
                kind=FailureKind.EMPTY_COMMAND,
            )

        argv = split_command(command)
        logger.debug("Launching %s (cwd=%r)", argv, exec_dir)
        try:
            outcome = self._run(argv, exec_dir)
        except OSError as error:
            logger.warning("Failed to start command %r: %s", command, error)
            return LaunchFailed(
                diagnostic=f"An error occurred while processing command: {command}.\n{error}",
                kind=FailureKind.SPAWN_FAILURE,
            )

        if outcome.exited_successfully:
            return LaunchSucceeded(output=decode_output(outcome.stdout))

        logger.info("Command %r exited with status %d", argv[0], outcome.returncode)
        return LaunchFailed(
            diagnostic=decode_output(outcome.stderr + outcome.stdout),
            kind=FailureKind.NON_ZERO_EXIT,
        )

    def _run(self, argv: list[str], exec_dir: str | None) -> ExecutionOutcome:
        completed = subprocess.run(  # noqa: S603
            argv,
            cwd=exec_dir,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            check=False,
        )
        return ExecutionOutcome(
            exited_successfully=completed.returncode == 0,
            stdout=completed.stdout,
            stderr=completed.stderr,
            returncode=completed.returncode,
        )
