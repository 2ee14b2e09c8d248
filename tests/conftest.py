"""Shared test fixtures."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from cmdline_worker.worker import LaunchResult, ProcessLauncher


class RecordingLauncher(ProcessLauncher):
    """Launcher that records calls and returns a canned result."""

    def __init__(self, result: LaunchResult) -> None:
        self.result = result
        self.calls: list[tuple[str, str | None]] = []

    def launch(self, command: str, exec_dir: str | None = None) -> LaunchResult:
        self.calls.append((command, exec_dir))
        return self.result


@pytest.fixture()
def listing_dirs(tmp_path: Path) -> Path:
    """Directory with a ``src`` subdirectory holding different files."""

    (tmp_path / "pyproject.toml").write_text("", "utf-8")
    (tmp_path / "README.md").write_text("", "utf-8")
    src_dir = tmp_path / "src"
    src_dir.mkdir()
    (src_dir / "main.py").write_text("", "utf-8")
    (src_dir / "message.py").write_text("", "utf-8")
    return tmp_path


@pytest.fixture()
def python_script(tmp_path: Path) -> Callable[[str], str]:
    """Write a Python script and return the command line that runs it."""

    scripts_dir = tmp_path / "scripts"
    scripts_dir.mkdir()

    def _write(source: str) -> str:
        script_path = scripts_dir / f"script_{len(list(scripts_dir.iterdir()))}.py"
        script_path.write_text(source, "utf-8")
        return f"{sys.executable} {script_path}"

    return _write


@pytest.fixture()
def recording_launcher() -> type[RecordingLauncher]:
    return RecordingLauncher
