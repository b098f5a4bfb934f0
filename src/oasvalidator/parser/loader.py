"""Load OpenAPI documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw OpenAPI documents and turning
them into the typed :class:`~oasvalidator.openapi.OpenAPI` graph. Local files
are dispatched on their extension (``.json``, ``.yaml``, ``.yml``); any other
extension is rejected. URLs and stdin have no extension, so their content is
parsed as JSON with a YAML fallback.

The public functions are:

* :func:`load_document` -- Load, version-check and deserialise a document.
* :func:`load_raw` -- Load a document as a plain dictionary.
* :func:`validate_openapi_version` -- Check and return the ``openapi``
  version string, rejecting Swagger 2.x and non-3.x versions.

Loading never runs structural validation; call
:meth:`~oasvalidator.openapi.OpenAPI.validate` on the result.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import pydantic
import yaml

from oasvalidator.exceptions import SpecParseError
from oasvalidator.openapi import OpenAPI

logger = logging.getLogger(__name__)

_EXTENSION_FORMATS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def load_document(source: str) -> OpenAPI:
    """Load an OpenAPI document from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The deserialised, not yet validated, document graph.

    Raises:
        SpecParseError: If the source cannot be read, parsed, is not an
            OpenAPI 3.x document, or does not fit the entity graph.
    """
    raw = load_raw(source)
    validate_openapi_version(raw)
    return build_document(raw, source)


def build_document(raw: dict[str, Any], source: str = "<dict>") -> OpenAPI:
    """Deserialise an already-parsed document dictionary into the entity graph.

    Raises:
        SpecParseError: If a value has the wrong type for its field.
    """
    try:
        document = OpenAPI.model_validate(raw)
    except pydantic.ValidationError as exc:
        raise SpecParseError(f"Invalid OpenAPI document {source}: {exc}") from exc
    logger.debug(
        "Loaded %s: OpenAPI %s, %d paths",
        source, document.openapi, len(document.paths) if document.paths else 0,
    )
    return document


def load_raw(source: str) -> dict[str, Any]:
    """Load a document from URL, file path, or stdin as a plain dictionary."""
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin, trying JSON then YAML.

    Raises:
        SpecParseError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _parse_content(content, hint="")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document from a URL, using the response content type as a hint.

    Raises:
        SpecParseError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file, choosing the format by extension.

    Raises:
        SpecParseError: If the extension is not .json/.yaml/.yml, or the
            file cannot be read or parsed.
    """
    file_path = Path(path)
    fmt = _EXTENSION_FORMATS.get(file_path.suffix.lower())
    if fmt is None:
        raise SpecParseError(
            f"Unsupported file extension {file_path.suffix!r} for {path}: "
            "expected .json, .yaml or .yml"
        )

    if not file_path.is_file():
        raise SpecParseError(f"Document not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read document {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Document is empty: {path}")

    return _parse_content(content, hint=fmt)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    With a ``json`` or ``yaml`` hint only that format is tried. Without a
    hint JSON is tried first, then YAML.

    Raises:
        SpecParseError: If the content cannot be parsed, or is not a mapping.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            json_error = exc

    try:
        return _require_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        if hint == "yaml":
            raise SpecParseError(f"Invalid YAML: {exc}") from exc
        raise SpecParseError(
            "Failed to parse document as JSON or YAML"
            f"\n  JSON error: {json_error}\n  YAML error: {exc}"
        ) from exc


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        got = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Document must be a JSON/YAML object (got {got})")
    return result


def validate_openapi_version(raw: dict[str, Any]) -> str:
    """Validate and return the OpenAPI version string.

    Any 3.x version is accepted.

    Raises:
        SpecParseError: If the version is missing, not 3.x, or the document
            is Swagger 2.x.
    """
    if "swagger" in raw:
        raise SpecParseError(
            f"Swagger {raw['swagger']} is not supported. "
            "Only OpenAPI 3.x documents are supported. "
            "Consider converting with https://converter.swagger.io"
        )

    version = raw.get("openapi")
    if version is None:
        raise SpecParseError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(version)
    if not version_str.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version_str}. "
            "Only OpenAPI 3.x documents are supported."
        )
    return version_str
