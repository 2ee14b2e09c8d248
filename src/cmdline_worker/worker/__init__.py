"""Command-line job execution: template compilation, launch and result mapping."""

from cmdline_worker.worker.launcher import (
    ExecutionOutcome,
    LaunchFailed,
    LaunchResult,
    LaunchSucceeded,
    ProcessLauncher,
)
from cmdline_worker.worker.models import (
    COMMAND_TEMPLATE_PARAMETER,
    EXEC_DIR_PARAMETER,
    RESERVED_PARAMETER_KEYS,
    CommandLineParameters,
    FailureKind,
    JobMessage,
    JobMessageError,
    JobResult,
    JobStatus,
)
from cmdline_worker.worker.processor import (
    MAX_MESSAGE_BYTES,
    CommandLineWorker,
    JobProcessingError,
    WorkerDescription,
    process,
    truncate_message,
)
from cmdline_worker.worker.template import compile_command_template

__all__ = [
    "COMMAND_TEMPLATE_PARAMETER",
    "EXEC_DIR_PARAMETER",
    "MAX_MESSAGE_BYTES",
    "RESERVED_PARAMETER_KEYS",
    "CommandLineParameters",
    "CommandLineWorker",
    "ExecutionOutcome",
    "FailureKind",
    "JobMessage",
    "JobMessageError",
    "JobProcessingError",
    "JobResult",
    "JobStatus",
    "LaunchFailed",
    "LaunchResult",
    "LaunchSucceeded",
    "ProcessLauncher",
    "WorkerDescription",
    "compile_command_template",
    "process",
    "truncate_message",
]
