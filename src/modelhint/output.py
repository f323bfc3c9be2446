"""User-facing output for modelhint commands.

Two streams, two purposes:

* **stdout** carries the data a command was asked for: the configuration
  dump of ``config show`` and the class table of ``list``. It is rendered as
  JSON (``--json``), tab-separated text (``--plain``, or whenever stdout is
  not a terminal) or a Rich table.
* **stderr** carries everything else: per-model progress, the
  "schema unavailable" warning, per-model analysis failures and debug
  traces. ``--quiet`` silences progress, ``--verbose`` adds debug lines.

Colour is dropped for ``--no-color``, ``NO_COLOR`` and ``TERM=dumb``. In that
mode diagnostics are written with :func:`print` so tests and log scrapers see
exactly the message text, prefixed with ``Warning:``/``Error:``/``[debug]``.

A single :class:`OutputManager` is installed by
:func:`~modelhint.app.main_callback`; library code reports through the
module-level functions (:func:`info`, :func:`warning`, ...).
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(str, Enum):
    """Rendering of stdout data. ``AUTO`` picks ``RICH`` on a colour terminal."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# (plain prefix, rich markup prefix, body style) per diagnostic level
_LEVELS: dict[str, tuple[str, str, str]] = {
    "info": ("", "", ""),
    "success": ("", "", "green"),
    "warning": ("Warning: ", "[yellow]Warning:[/yellow] ", ""),
    "error": ("Error: ", "[bold red]Error:[/bold red] ", ""),
    "debug": ("[debug] ", "\\[debug] ", "dim"),
}


class OutputManager:
    """Routes command data to stdout and diagnostics to stderr.

    Every diagnostic is passed through :func:`rich.markup.escape`, since type
    expressions such as ``Collection|Comment[]`` would otherwise be read as
    Rich markup and silently lose their brackets.

    Args:
        format: Rendering of stdout data.
        no_color: Disable colour on both streams.
        quiet: Hide ``info`` and ``success`` messages.
        verbose: Show ``debug`` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        if format == OutputFormat.AUTO:
            format = OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
        self.format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def stderr_console(self) -> Console:
        """Console shared with the ``--verbose`` log handler."""
        return self._stderr

    # -- stdout ---------------------------------------------------------

    def print_mapping(self, data: dict[str, Any]) -> None:
        """Print a nested mapping such as a configuration dump.

        JSON mode prints the mapping as is. The other modes flatten it to
        dotted keys (``orm.model_base``), the same keys ``config set``
        accepts, and print one key/value pair per line or table row.
        """
        if self.format == OutputFormat.JSON:
            self._write(json.dumps(data, indent=2, ensure_ascii=False, default=str))
            return
        rows = [[key, _display(value)] for key, value in _flatten(data)]
        self.print_table(["Key", "Value"], rows)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as JSON records, tab-separated lines or a Rich table."""
        if self.format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self._write(json.dumps(records, indent=2, ensure_ascii=False))
        elif self.format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self._write("\t".join(line))
        else:
            table = Table(title=title, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*(escape(cell) for cell in row))
            self._stdout.print(table)

    def _write(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    # -- stderr ---------------------------------------------------------

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit("info", message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit("success", message)

    def warning(self, message: str) -> None:
        self._emit("warning", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit("debug", message)

    def _emit(self, level: str, message: str) -> None:
        plain_prefix, rich_prefix, style = _LEVELS[level]
        if self._no_color:
            print(f"{plain_prefix}{message}", file=sys.stderr, flush=True)
            return
        body = escape(message)
        if style:
            body = f"[{style}]{body}[/{style}]"
        self._stderr.print(f"{rich_prefix}{body}")


def _flatten(data: dict[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    items: list[tuple[str, Any]] = []
    for key, value in data.items():
        path = f"{prefix}{key}"
        # Empty mappings stay as one row so the key remains visible.
        if isinstance(value, dict) and value:
            items.extend(_flatten(value, f"{path}."))
        else:
            items.append((path, value))
    return items


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` (any value) or ``TERM=dumb`` turn colour off."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# -- global instance ----------------------------------------------------

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """The installed :class:`OutputManager`, created with defaults on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed manager; the next call creates a fresh one."""
    global _output
    _output = None


def print_mapping(data: dict[str, Any]) -> None:
    get_output().print_mapping(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
