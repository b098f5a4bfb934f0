"""Terminal output for the oasvalidator CLI.

Results and diagnostics travel on separate streams so that
``oasvalidator --json check ... | jq`` always receives a clean document:

* **stdout** carries results: the validation payload of ``validate`` and
  ``check``, the table printed by ``paths``, the effective configuration.
* **stderr** carries everything said *about* a run: progress, warnings,
  the rejection message, hints.

Three renderings are available for results (:class:`OutputFormat`). ``AUTO``
picks Rich on an interactive terminal and plain text otherwise; colour is
dropped when ``NO_COLOR`` is set, when ``TERM=dumb``, or with ``--no-color``.

The CLI callback builds one :class:`OutputManager` and installs it with
:func:`set_output`; commands then use the module-level helpers
(:func:`format_data`, :func:`error`, ...) instead of passing it around.
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
    """How results are written to stdout."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# name -> (plain prefix, rich markup template, hidden by --quiet)
_DIAGNOSTICS: dict[str, tuple[str, str, bool]] = {
    "info": ("", "{text}", True),
    "success": ("", "[green]{text}[/green]", True),
    "warning": ("Warning: ", "[yellow]Warning:[/yellow] {text}", False),
    "error": ("Error: ", "[bold red]Error:[/bold red] {text}", False),
    "suggest": ("→ ", "[dim]→ {text}[/dim]", True),
    "debug": ("[debug] ", "[dim]\\[debug] {text}[/dim]", False),
}


class OutputManager:
    """Writes results to stdout and diagnostics to stderr.

    Args:
        format: Requested result format. ``AUTO`` is resolved once, here.
        no_color: Force colourless output regardless of the environment.
        quiet: Hide info, success and suggestion lines. Warnings, errors
            and results are always written.
        verbose: Show debug lines.
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
            interactive = _is_tty() and not self._no_color
            format = OutputFormat.RICH if interactive else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved format; never ``AUTO``."""
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Results (stdout)
    # ------------------------------------------------------------------ #

    def format_data(self, data: Any) -> None:
        """Write a result in the active format.

        A result is usually a flat dict such as the payload of ``check``:
        JSON prints it verbatim, plain text prints one ``key<TAB>value``
        line per field, and Rich prints a two-column grid.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        else:
            self._stdout.print(_rich_renderable(data))

    def print_data(self, text: str) -> None:
        """Write one line of text to stdout unchanged."""
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows under *headers*.

        JSON mode emits a list of objects keyed by header; plain mode emits
        tab-separated lines with the headers first; Rich mode draws a table
        captioned with *title*.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return
        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*(escape(cell) for cell in row))
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        self._diagnose("info", message)

    def success(self, message: str) -> None:
        self._diagnose("success", message)

    def warning(self, message: str) -> None:
        self._diagnose("warning", message)

    def error(self, message: str) -> None:
        self._diagnose("error", message)

    def suggest(self, message: str) -> None:
        """Print a next step for the user, e.g. ``Use --force to overwrite it.``"""
        self._diagnose("suggest", message)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnose("debug", message)

    def _diagnose(self, kind: str, message: str) -> None:
        prefix, markup, quietable = _DIAGNOSTICS[kind]
        if quietable and self._quiet:
            return
        if self._no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
        else:
            # Messages quote user input ("anyOf [1]"), which must not be read as markup.
            self._stderr.print(markup.format(text=escape(message)))


# ------------------------------------------------------------------ #
# Renderers
# ------------------------------------------------------------------ #


def _plain_value(value: Any) -> str:
    if isinstance(value, dict):
        return ", ".join(f"{k}={v}" for k, v in value.items())
    return str(value)


def _plain_lines(data: Any) -> list[str]:
    if isinstance(data, dict):
        return [f"{key}\t{_plain_value(value)}" for key, value in data.items()]
    if isinstance(data, list):
        return [str(item) for item in data]
    return [str(data)]


def _rich_renderable(data: Any) -> Any:
    if not isinstance(data, dict):
        return escape(str(data))
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column()
    for key, value in data.items():
        if isinstance(value, bool):
            cell = "[green]yes[/green]" if value else "[red]no[/red]"
        else:
            cell = escape(_plain_value(value))
        grid.add_row(escape(str(key)), cell)
    return grid


# ------------------------------------------------------------------ #
# Environment
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` with any value, or ``TERM=dumb``, turns colour off."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating an ``AUTO`` one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


def format_data(data: Any) -> None:
    get_output().format_data(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
