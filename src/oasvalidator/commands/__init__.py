"""Built-in CLI sub-commands for oasvalidator.

This package groups the Typer command modules that form the CLI's
top-level command tree:

* :mod:`~oasvalidator.commands.document` -- ``validate``, ``check`` and
  ``paths``, each operating on a document source.
* :mod:`~oasvalidator.commands.config` -- view and initialise settings.

Single commands are exported as plain callback functions registered
directly on the root app; the ``config`` group is a :class:`typer.Typer`
sub-application.
"""
