"""CLI entrypoint for cmdline-worker."""

import logging
import sys
from pathlib import Path

import rich_click as click

from cmdline_worker import __version__
from cmdline_worker.controllers import (
    ControllerResult,
    ProcessMessageCommand,
    RunCommand,
    WorkerCliController,
)
from cmdline_worker.worker import JobMessageError

click.rich_click.USE_MARKDOWN = True
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@click.group()
@click.version_option(version=__version__, prog_name="cmdline-worker")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    envvar="CMDLINE_WORKER_LOG_LEVEL",
    default="WARNING",
    show_default=True,
    help="Logging level for diagnostics written to stderr.",
)
@click.pass_context
def cmdline_worker(ctx: click.Context, log_level: str) -> None:
    """Run command lines built from templates and job parameters."""

    logging.basicConfig(
        level=log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = WorkerCliController()


@cmdline_worker.command("run")
@click.argument("template")
@click.option(
    "--param",
    "params",
    multiple=True,
    help="Template parameter as `key=value`. Can be repeated.",
)
@click.option(
    "--exec-dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Working directory of the command.",
)
@click.pass_obj
def run(
    controller: WorkerCliController,
    template: str,
    params: tuple[str, ...],
    exec_dir: Path | None,
) -> None:
    """Compile TEMPLATE with the given parameters and run it once."""

    try:
        result = controller.run(RunCommand(template=template, params=params, exec_dir=exec_dir))
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    _emit_result(result, failure="Command failed.")


@cmdline_worker.command("process")
@click.argument("message_file", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_obj
def process_message(controller: WorkerCliController, message_file) -> None:
    """Process one JSON job message read from MESSAGE_FILE (stdin by default)."""

    try:
        result = controller.process_message(
            ProcessMessageCommand(message_text=message_file.read()),
        )
    except JobMessageError as error:
        raise click.ClickException(f"Invalid job message: {error}") from error
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    _emit_result(result, failure="Job finished with error status.")


@cmdline_worker.command("describe")
@click.pass_obj
def describe(controller: WorkerCliController) -> None:
    """Show the worker registration values."""

    try:
        lines = controller.describe()
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    _emit_lines(lines)


def _emit_result(result: ControllerResult, *, failure: str) -> None:
    _emit_lines(result.lines)
    if not result.ok:
        raise click.ClickException(failure)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    cmdline_worker()
