"""Controllers for command-line worker CLI commands."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from cmdline_worker.config import Settings
from cmdline_worker.worker import (
    COMMAND_TEMPLATE_PARAMETER,
    EXEC_DIR_PARAMETER,
    CommandLineParameters,
    CommandLineWorker,
    JobMessage,
    JobProcessingError,
    JobResult,
)

LOCAL_JOB_ID = 0


@dataclass(slots=True)
class RunCommand:
    """CLI input for one ad-hoc command run."""

    template: str
    params: tuple[str, ...] = ()
    exec_dir: Path | None = None


@dataclass(slots=True)
class ProcessMessageCommand:
    """CLI input for processing one job message."""

    message_text: str


@dataclass(slots=True)
class ControllerResult:
    """Lines to print plus whether the job completed."""

    ok: bool
    lines: list[str] = field(default_factory=list)


class WorkerCliController:
    """Builds the worker from settings and runs jobs for the CLI."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            settings = Settings.from_env()
            settings.validate()
            self._settings = settings
        return self._settings

    def build_worker(self) -> CommandLineWorker:
        settings = self.settings
        return CommandLineWorker(
            max_message_bytes=settings.max_message_bytes,
            default_exec_dir=(
                str(settings.default_exec_dir) if settings.default_exec_dir is not None else None
            ),
        )

    def run(self, command: RunCommand) -> ControllerResult:
        parameters = CommandLineParameters(
            command_template=command.template,
            exec_dir=str(command.exec_dir) if command.exec_dir is not None else None,
            parameters=parse_param_assignments(command.params),
        )
        try:
            result = self.build_worker().process(parameters, JobResult(job_id=LOCAL_JOB_ID))
        except JobProcessingError as error:
            return ControllerResult(ok=False, lines=[error.job_result.message or ""])
        return ControllerResult(ok=True, lines=[result.message or ""])

    def process_message(self, command: ProcessMessageCommand) -> ControllerResult:
        message = JobMessage.from_json(command.message_text)
        job_result = JobResult(job_id=message.job_id)
        ok = True
        try:
            job_result = self.build_worker().process(
                message.to_command_line_parameters(),
                job_result,
            )
        except JobProcessingError as error:
            job_result = error.job_result
            ok = False
        return ControllerResult(ok=ok, lines=[json.dumps(job_result.to_dict(), indent=2)])

    def describe(self) -> list[str]:
        description = self.build_worker().description
        return [
            f"name: {description.name}",
            f"version: {description.version}",
            f"short_description: {description.short_description}",
            f"description: {description.description}",
            f"reserved parameters: {COMMAND_TEMPLATE_PARAMETER} (required), "
            f"{EXEC_DIR_PARAMETER} (optional)",
        ]


def parse_param_assignments(values: tuple[str, ...] | list[str]) -> dict[str, str]:
    """Parse ``key=value`` CLI assignments; later keys win."""

    parsed: dict[str, str] = {}
    for raw in values:
        if "=" not in raw:
            raise ValueError(f"Invalid parameter {raw!r}. Expected format 'key=value'.")
        key, value = raw.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid parameter {raw!r}: empty key.")
        parsed[key] = value
    return parsed
