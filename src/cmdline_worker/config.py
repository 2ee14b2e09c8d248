"""Runtime configuration for the command-line worker."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from cmdline_worker.worker.processor import MAX_MESSAGE_BYTES


@dataclass(slots=True)
class Settings:
    """Worker settings loaded from the environment."""

    max_message_bytes: int = MAX_MESSAGE_BYTES
    default_exec_dir: Path | None = None

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with defaults matching the job framework."""

        default_exec_dir = os.getenv("CMDLINE_WORKER_DEFAULT_EXEC_DIR", "").strip()
        return cls(
            max_message_bytes=_env_int(
                "CMDLINE_WORKER_MAX_MESSAGE_BYTES",
                default=MAX_MESSAGE_BYTES,
            ),
            default_exec_dir=Path(default_exec_dir) if default_exec_dir else None,
        )

    def validate(self) -> None:
        """Raise configuration error for values the worker cannot run with."""

        if self.max_message_bytes <= 0:
            raise ValueError("CMDLINE_WORKER_MAX_MESSAGE_BYTES must be > 0.")
        if self.default_exec_dir is not None and not self.default_exec_dir.is_dir():
            raise ValueError(
                f"CMDLINE_WORKER_DEFAULT_EXEC_DIR is not a directory: {self.default_exec_dir}",
            )


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {value!r}") from error
