"""Typer application and CLI entry point for modelhint.

This module wires together the top-level Typer application and registers the
sub-commands (``models``, ``list``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, registers commands and
invokes the Typer app. :class:`~modelhint.exceptions.ModelhintError` exits
with the error's code; any other exception is written to a crash log under
the data directory.

See Also:
    :mod:`modelhint.config`: Configuration resolution.
    :mod:`modelhint.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer
from rich.logging import RichHandler

from modelhint import __version__
from modelhint.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="modelhint",
    help="Generate docstring annotations for active-record ORM models.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"modelhint {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    no_input: bool = typer.Option(
        False, "--no-input", help="Disable interactive prompts."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~modelhint.output.OutputManager` from
    CLI flags, routes library log records to stderr when ``--verbose`` is
    active, and stores shared options in the Typer context so that
    sub-commands can read them via ``ctx.obj``.
    """
    from modelhint.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    _configure_logging(output.stderr_console if verbose else None)

    ctx.ensure_object(dict)
    ctx.obj["no_input"] = no_input
    ctx.obj["verbose"] = verbose


def _configure_logging(console: Any) -> None:
    """Attach a single RichHandler to the ``modelhint`` logger, or none when *console* is None."""
    logger = logging.getLogger("modelhint")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    if console is None:
        logger.setLevel(logging.WARNING)
        return
    logger.addHandler(RichHandler(console=console, show_time=False, show_path=False))
    logger.setLevel(logging.DEBUG)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from modelhint.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def register_commands() -> None:
    """Attach the sub-commands to :data:`app` (idempotent)."""
    from modelhint.commands.config import config_app
    from modelhint.commands.list import list_command
    from modelhint.commands.models import models_command

    registered = {info.name for info in app.registered_commands}
    if "models" not in registered:
        app.command("models")(models_command)
        app.command("list")(list_command)
        app.add_typer(config_app, name="config", help="Configuration management.")


def main() -> None:
    """CLI entry point invoked by the ``modelhint`` console script.

    Unhandled :class:`~modelhint.exceptions.ModelhintError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from modelhint.exceptions import ModelhintError
        from modelhint.output import error

        if isinstance(exc, ModelhintError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
