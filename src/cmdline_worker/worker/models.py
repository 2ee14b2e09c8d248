"""Domain models for command-line jobs and their results."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

COMMAND_TEMPLATE_PARAMETER = "command_template"
EXEC_DIR_PARAMETER = "exec_dir"

RESERVED_PARAMETER_KEYS: frozenset[str] = frozenset(
    {COMMAND_TEMPLATE_PARAMETER, EXEC_DIR_PARAMETER},
)

STRING_PARAMETER_TYPE = "string"


class JobStatus(str, Enum):
    """Terminal states reported back to the job framework."""

    UNKNOWN = "unknown"
    COMPLETED = "completed"
    ERROR = "error"


class FailureKind(str, Enum):
    """Why a job ended with an error status."""

    MISSING_PARAMETER = "missing_parameter"
    EMPTY_COMMAND = "empty_command"
    SPAWN_FAILURE = "spawn_failure"
    NON_ZERO_EXIT = "non_zero_exit"


class JobMessageError(ValueError):
    """Raised when a job message cannot be parsed."""


@dataclass(slots=True)
class CommandLineParameters:
    """Parsed job parameters.

    Reserved keys live in their own fields. ``parameters`` holds the
    free-form substitution values.
    """

    command_template: str | None = None
    exec_dir: str | None = None
    parameters: dict[str, str] = field(default_factory=dict)

    @property
    def substitutions(self) -> dict[str, str]:
        """Parameters eligible for template substitution."""

        return {
            key: value
            for key, value in self.parameters.items()
            if key not in RESERVED_PARAMETER_KEYS
        }


@dataclass(slots=True)
class JobParameter:
    """One ``{id, type, value}`` entry of a job message."""

    id: str
    type: str
    value: Any


@dataclass(slots=True)
class JobMessage:
    """Job message as delivered by the worker framework."""

    job_id: int
    parameters: list[JobParameter] = field(default_factory=list)

    @classmethod
    def from_json(cls, text: str) -> JobMessage:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as error:
            raise JobMessageError(f"Job message is not valid JSON: {error}") from error
        return cls.from_payload(payload)

    @classmethod
    def from_payload(cls, payload: object) -> JobMessage:
        if not isinstance(payload, dict):
            raise JobMessageError("Job message must be a JSON object.")

        job_id = payload.get("job_id")
        if isinstance(job_id, bool) or not isinstance(job_id, int):
            raise JobMessageError(f"Job message has invalid job_id: {job_id!r}")

        raw_parameters = payload.get("parameters", [])
        if not isinstance(raw_parameters, list):
            raise JobMessageError("Job message parameters must be a list.")

        parameters: list[JobParameter] = []
        for index, raw in enumerate(raw_parameters):
            if not isinstance(raw, dict):
                raise JobMessageError(f"Job parameter #{index} must be an object.")
            parameter_id = raw.get("id")
            parameter_type = raw.get("type")
            if not isinstance(parameter_id, str) or not parameter_id:
                raise JobMessageError(f"Job parameter #{index} has no id.")
            if not isinstance(parameter_type, str) or not parameter_type:
                raise JobMessageError(f"Job parameter {parameter_id!r} has no type.")
            value = raw.get("value")
            if parameter_type == STRING_PARAMETER_TYPE and not isinstance(value, str):
                raise JobMessageError(
                    f"Job parameter {parameter_id!r} is declared as string "
                    f"but has value {value!r}",
                )
            parameters.append(JobParameter(id=parameter_id, type=parameter_type, value=value))

        return cls(job_id=job_id, parameters=parameters)

    def string_parameters(self) -> dict[str, str]:
        return {
            parameter.id: parameter.value
            for parameter in self.parameters
            if parameter.type == STRING_PARAMETER_TYPE
        }

    def to_command_line_parameters(self) -> CommandLineParameters:
        """Split string parameters into reserved fields and substitution values."""

        values = self.string_parameters()
        return CommandLineParameters(
            command_template=values.get(COMMAND_TEMPLATE_PARAMETER),
            exec_dir=values.get(EXEC_DIR_PARAMETER),
            parameters={
                key: value for key, value in values.items() if key not in RESERVED_PARAMETER_KEYS
            },
        )


@dataclass(slots=True)
class JobResult:
    """Result accumulator handed back to the job framework.

    Created by the caller with a job id and finalized exactly once.
    """

    job_id: int
    status: JobStatus = JobStatus.UNKNOWN
    message: str | None = None

    @property
    def is_finalized(self) -> bool:
        return self.status is not JobStatus.UNKNOWN

    def complete(self, message: str) -> JobResult:
        return self._finalize(JobStatus.COMPLETED, message)

    def fail(self, message: str) -> JobResult:
        return self._finalize(JobStatus.ERROR, message)

    def _finalize(self, status: JobStatus, message: str) -> JobResult:
        if self.is_finalized:
            raise ValueError(
                f"Job result {self.job_id} is already finalized as {self.status.value}.",
            )
        self.status = status
        self.message = message
        return self

    def to_dict(self) -> dict[str, object]:
        parameters: list[dict[str, object]] = []
        if self.message is not None:
            parameters.append(
                {"id": "message", "type": STRING_PARAMETER_TYPE, "value": self.message},
            )
        return {
            "job_id": self.job_id,
            "status": self.status.value,
            "parameters": parameters,
        }
