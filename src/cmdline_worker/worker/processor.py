"""Job processing: compile the template, launch it and map the outcome."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cmdline_worker import __version__
from cmdline_worker.worker.launcher import LaunchFailed, LaunchResult, ProcessLauncher
from cmdline_worker.worker.models import (
    COMMAND_TEMPLATE_PARAMETER,
    CommandLineParameters,
    FailureKind,
    JobResult,
)
from cmdline_worker.worker.template import compile_command_template, template_placeholders

logger = logging.getLogger(__name__)

# Bounds the size of whatever transport carries the result downstream.
MAX_MESSAGE_BYTES = 1024 * 1024


class JobProcessingError(RuntimeError):
    """Job ended with an error status; carries the finalized result."""

    def __init__(self, job_result: JobResult, *, kind: FailureKind) -> None:
        super().__init__(job_result.message or kind.value)
        self.job_result = job_result
        self.kind = kind


@dataclass(frozen=True, slots=True)
class WorkerDescription:
    """Registration values announced to the job framework."""

    name: str = "command_line"
    short_description: str = "Execute command lines"
    description: str = (
        "Run a command line built from a template and job parameters, "
        "and report its output."
    )
    version: str = __version__


def truncate_message(message: str, max_bytes: int = MAX_MESSAGE_BYTES) -> str:
    """Cut ``message`` to at most ``max_bytes`` UTF-8 bytes.

    A multi-byte character that would straddle the limit is dropped whole.
    """

    encoded = message.encode("utf-8")
    if len(encoded) <= max_bytes:
        return message
    return encoded[:max_bytes].decode("utf-8", errors="ignore")


def map_launch_result(
    job_result: JobResult,
    launch_result: LaunchResult,
    *,
    max_message_bytes: int = MAX_MESSAGE_BYTES,
) -> JobResult:
    """Finalize ``job_result`` from a launch result.

    Success output is truncated to ``max_message_bytes``; failure
    diagnostics are passed through whole.
    """

    if isinstance(launch_result, LaunchFailed):
        job_result.fail(launch_result.diagnostic)
        raise JobProcessingError(job_result, kind=launch_result.kind)

    message = truncate_message(launch_result.output, max_message_bytes)
    if len(message) < len(launch_result.output):
        logger.warning(
            "Job %s output truncated to %d bytes",
            job_result.job_id,
            max_message_bytes,
        )
    return job_result.complete(message)


@dataclass(slots=True)
class CommandLineWorker:
    """Explicit worker value passed to the job framework entry point."""

    description: WorkerDescription = field(default_factory=WorkerDescription)
    launcher: ProcessLauncher = field(default_factory=ProcessLauncher)
    max_message_bytes: int = MAX_MESSAGE_BYTES
    default_exec_dir: str | None = None

    def process(
        self,
        parameters: CommandLineParameters,
        job_result: JobResult,
        channel: object | None = None,  # noqa: ARG002
    ) -> JobResult:
        """Run one job and return its completed result.

        Raises ``JobProcessingError`` with an error-status result when the
        template is missing, the command cannot be started or it exits with
        a failure status.
        """

        logger.info("Processing job %s", job_result.job_id)
        if parameters.command_template is None:
            job_result.fail(f"missing {COMMAND_TEMPLATE_PARAMETER} parameter")
            logger.warning(
                "Job %s rejected: no %s parameter",
                job_result.job_id,
                COMMAND_TEMPLATE_PARAMETER,
            )
            raise JobProcessingError(job_result, kind=FailureKind.MISSING_PARAMETER)

        substitutions = parameters.substitutions
        command = compile_command_template(parameters.command_template, substitutions)
        unresolved = [
            name
            for name in template_placeholders(parameters.command_template)
            if name not in substitutions
        ]
        if unresolved:
            logger.debug("Job %s leaves placeholders as-is: %s", job_result.job_id, unresolved)

        exec_dir = parameters.exec_dir
        if exec_dir is None:
            exec_dir = self.default_exec_dir
        launch_result = self.launcher.launch(command, exec_dir)
        try:
            result = map_launch_result(
                job_result,
                launch_result,
                max_message_bytes=self.max_message_bytes,
            )
        except JobProcessingError as error:
            logger.warning("Job %s failed (%s)", job_result.job_id, error.kind.value)
            raise
        logger.info("Job %s completed", job_result.job_id)
        return result


def process(
    parameters: CommandLineParameters,
    job_result: JobResult,
    channel: object | None = None,
) -> JobResult:
    """Process one job with a default ``CommandLineWorker``."""

    return CommandLineWorker().process(parameters, job_result, channel)
