"""Config commands -- view and initialise configuration.

Provides the ``oasvalidator config`` sub-command group. ``show`` prints the
effective configuration after the full precedence chain
(:func:`~oasvalidator.config.resolve_config`); ``init`` writes a default
global config file for the user to edit.
"""

from __future__ import annotations

import typer

from oasvalidator.output import error, format_data, info, success, suggest


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Prints the global config file location, then the configuration that
    results from merging defaults, the global file, ``./oasvalidator.json``
    and ``OASVALIDATOR_*`` environment variables.

    Example::

        oasvalidator config show
        oasvalidator --json config show
    """
    from oasvalidator.config import global_config_path, resolve_config
    from oasvalidator.exceptions import ConfigError

    try:
        config = resolve_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config file: {global_config_path()}")
    format_data(config.model_dump(mode="json"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing config file."
    ),
) -> None:
    """Write a default global configuration file.

    Refuses to overwrite an existing file unless ``--force`` is given.

    Example::

        oasvalidator config init
        oasvalidator config init --force
    """
    from oasvalidator.config import global_config_path, save_global_config
    from oasvalidator.exit_codes import EXIT_INVALID_USAGE
    from oasvalidator.models import ValidatorConfig

    path = global_config_path()
    if path.is_file() and not force:
        error(f"Config file already exists: {path}")
        suggest("Use --force to overwrite it.")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    written = save_global_config(ValidatorConfig())
    success(f"Wrote default configuration to {written}")
