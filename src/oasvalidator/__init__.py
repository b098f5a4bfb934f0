"""oasvalidator -- Validate OpenAPI 3.x documents and the requests made against them.

This package loads an OpenAPI document into an immutable graph of typed
entities, checks it against the structural rules of the OpenAPI format, and
answers the question "is this ``METHOD /path`` permitted by the document?"
for incoming or outgoing HTTP requests.

Typical usage::

    from oasvalidator.parser import load_document
    from oasvalidator.validator import RequestValidator

    document = load_document("petstore.yaml")
    document.validate()
    RequestValidator(document).validate_request("GET", "/pets/42")

Modules:
    app: Typer application and CLI entry point.
    openapi: The OpenAPI entity graph and its structural rules.
    parser: Document loading and ``$ref`` resolution.
    validator: Request validation against a loaded document.
    transport: An httpx transport that validates outgoing requests.
    models: Enumerations and configuration models.
    config: XDG-aware configuration management.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
