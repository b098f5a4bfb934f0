"""The ``oasvalidator`` command line.

:data:`app` is the root Typer application. Its callback (:func:`main_callback`)
runs before every command: it resolves the configuration, installs the
:class:`~oasvalidator.output.OutputManager` that commands write through, and
routes the package's log records to stderr.

Commands live in :mod:`oasvalidator.commands` and are attached by
:func:`register_commands`. :func:`main` is the console-script entry point: it
registers the commands, runs the app and turns anything a command failed to
handle into an exit status. Known failures
(:class:`~oasvalidator.exceptions.OASValidatorError`) exit with their own
code; anything else is written to a crash log.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from oasvalidator import __version__
from oasvalidator.exit_codes import EXIT_GENERIC_FAILURE

_EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="oasvalidator",
    help="Validate OpenAPI 3.x documents and check requests against them.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_registered = False


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"oasvalidator {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, no_color: bool) -> None:
    """Send ``oasvalidator.*`` log records to stderr.

    Only warnings (such as ambiguous path templates) are shown by default;
    ``--verbose`` also shows how each request was resolved.
    """
    logger = logging.getLogger("oasvalidator")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)

    handler: logging.Handler
    if no_color:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    else:
        handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Print the oasvalidator version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Write results as JSON."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Write results as tab-separated text."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Never use colour or styling."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only print results, warnings and errors."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Explain how documents and requests are resolved."
    ),
    enforce: Optional[bool] = typer.Option(
        None,
        "--enforce/--report",
        help="Set the effective enforce mode, overriding config files and OASVALIDATOR_ENFORCE.",
    ),
) -> None:
    """Set up configuration, output and logging for the chosen command.

    The effective :class:`~oasvalidator.models.ValidatorConfig` is stored in
    ``ctx.obj["config"]``. A broken config file does not stop the command:
    defaults are used and a warning is printed.
    """
    from oasvalidator.config import resolve_config
    from oasvalidator.exceptions import ConfigError
    from oasvalidator.models import ValidatorConfig
    from oasvalidator.output import OutputFormat, OutputManager, set_output, warning

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    config_problem: Optional[ConfigError] = None
    try:
        config = resolve_config(cli_enforce=enforce, cli_format=cli_format)
    except ConfigError as exc:
        config_problem = exc
        config = ValidatorConfig()
        if cli_format is not None:
            config.output.format = cli_format
        if enforce is not None:
            config.enforce = enforce

    try:
        fmt = OutputFormat(config.output.format)
    except ValueError:
        fmt = OutputFormat.AUTO

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose, no_color)
    if config_problem is not None:
        warning(f"{config_problem} (using defaults)")

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


def register_commands() -> None:
    """Attach the built-in commands to :data:`app`. Safe to call repeatedly."""
    global _registered
    if _registered:
        return

    from oasvalidator.commands.config import config_app
    from oasvalidator.commands.document import check_command, paths_command, validate_command

    app.command("validate")(validate_command)
    app.command("check")(check_command)
    app.command("paths")(paths_command)
    app.add_typer(config_app, name="config", help="Show or create configuration files.")
    _registered = True


def _exit_interrupted(signum: int, frame: Any) -> None:  # noqa: ANN401
    sys.stderr.write("\nCancelled.\n")
    sys.exit(_EXIT_INTERRUPTED)


def _write_crash_log(exc: BaseException) -> Path:
    """Save the traceback of *exc* under the data directory.

    Returns:
        The path of the new ``crash-<timestamp>.log`` file.
    """
    from oasvalidator.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        encoding="utf-8",
    )
    return log_path


def main() -> None:
    """Console-script entry point.

    Raises:
        SystemExit: Always; with the command's status, the status of an
            unhandled :class:`~oasvalidator.exceptions.OASValidatorError`,
            130 on Ctrl-C, or 1 after writing a crash log.
    """
    from oasvalidator.exceptions import OASValidatorError
    from oasvalidator.output import error

    signal.signal(signal.SIGINT, _exit_interrupted)
    register_commands()
    try:
        app()
    except KeyboardInterrupt:
        _exit_interrupted(signal.SIGINT, None)
    except OASValidatorError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
