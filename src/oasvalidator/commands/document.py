"""Document commands -- validate a document and check requests against it.

Provides the top-level ``validate``, ``check`` and ``paths`` commands. Each
takes the document source (file path, URL, or ``-`` for stdin) as its first
argument and reports through :mod:`oasvalidator.output`, so ``--json`` and
``--plain`` apply uniformly.
"""

from __future__ import annotations

from typing import NoReturn, Optional

import typer

from oasvalidator.exceptions import OASValidatorError, StructuralError
from oasvalidator.models import ValidatorConfig
from oasvalidator.output import OutputFormat, debug, error, format_data, get_output, info, success


def _fail(exc: OASValidatorError, payload: Optional[dict] = None) -> NoReturn:
    """Report *exc* and exit with its code.

    In JSON mode *payload* is also written to stdout so that scripted
    callers always receive a result document.
    """
    if payload is not None and get_output().format == OutputFormat.JSON:
        format_data(payload)
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def _config(ctx: typer.Context) -> ValidatorConfig:
    if ctx.obj and isinstance(ctx.obj.get("config"), ValidatorConfig):
        return ctx.obj["config"]
    return ValidatorConfig()


def _load(source: str):  # noqa: ANN202
    from oasvalidator.parser import load_document

    try:
        document = load_document(source)
    except OASValidatorError as exc:
        _fail(exc, {"valid": False, "source": source, "error": str(exc)})
    debug(f"Loaded {source} (OpenAPI {document.openapi})")
    return document


def validate_command(
    ctx: typer.Context,
    source: str = typer.Argument(help="Document path, URL, or '-' for stdin."),
    skip_operation_ids: bool = typer.Option(
        False,
        "--skip-operation-ids",
        help="Do not fail on duplicate operationId values.",
    ),
) -> None:
    """Check a document against the OpenAPI structural rules.

    Stops at the first violation and prints it with the chain of fields
    leading to it. Duplicate ``operationId`` values are also reported
    unless disabled here or via ``check_operation_ids`` in the config.

    Example::

        oasvalidator validate petstore.yaml
        oasvalidator --json validate https://example.com/openapi.json
    """
    config = _config(ctx)
    document = _load(source)

    try:
        document.validate()
        if config.check_operation_ids and not skip_operation_ids:
            document.check_operation_ids()
    except StructuralError as exc:
        _fail(
            exc,
            {"valid": False, "source": source, "error": str(exc), "location": exc.location},
        )

    path_count = len(document.paths) if document.paths else 0
    if get_output().format == OutputFormat.JSON:
        format_data({
            "valid": True,
            "source": source,
            "openapi": document.openapi,
            "title": document.info.title,
            "paths": path_count,
        })
    success(f"{source} is a valid OpenAPI {document.openapi} document ({path_count} paths)")


def check_command(
    source: str = typer.Argument(help="Document path, URL, or '-' for stdin."),
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    path: str = typer.Argument(help="Request path, e.g. /pets/42."),
) -> None:
    """Check whether a request method and path are permitted by a document.

    Prints the matched path template, the operationId and the extracted
    path parameters. Exits with code 9 when the request is not permitted.

    Example::

        oasvalidator check petstore.yaml GET /pets/42
    """
    from oasvalidator.validator import RequestValidator

    document = _load(source)
    result = RequestValidator(document).check(method, path)

    if not result.is_valid:
        assert result.error is not None
        _fail(
            result.error,
            {"valid": False, "method": method.upper(), "path": path, "error": result.message},
        )

    context = result.context
    assert context is not None
    format_data({
        "valid": True,
        "method": context.method,
        "path": context.path,
        "template": context.template,
        "operationId": context.operation_id or "",
        "pathParameters": context.path_parameters,
    })


def paths_command(
    source: str = typer.Argument(help="Document path, URL, or '-' for stdin."),
) -> None:
    """List every path template with its methods and operationIds.

    Example::

        oasvalidator paths petstore.yaml
        oasvalidator --plain paths petstore.yaml | cut -f1
    """
    from oasvalidator.parser import resolve_path_item

    document = _load(source)
    if not document.paths:
        info("No paths defined in this document.")
        return

    headers = ["Path", "Method", "Operation ID", "Summary"]
    rows: list[list[str]] = []
    try:
        for template, path_item in sorted(document.paths.items()):
            for method, operation in resolve_path_item(document, path_item).operations:
                rows.append([
                    template,
                    method.value.upper(),
                    operation.operation_id or "-",
                    operation.summary or "-",
                ])
    except OASValidatorError as exc:
        _fail(exc)

    get_output().print_table(
        headers, rows, title=f"{document.info.title or 'API'} -- Paths ({len(rows)})"
    )
