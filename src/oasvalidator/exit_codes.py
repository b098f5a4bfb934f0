"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~oasvalidator.exceptions.OASValidatorError` subclass.
CI scripts can inspect the exit code to tell a malformed document apart from
a rejected request without parsing stderr.

Example::

    $ oasvalidator check petstore.yaml DELETE /pets
    $ echo $?
    9   # EXIT_REQUEST_INVALID -- the document does not allow the request
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be read or deserialised."""

EXIT_STRUCTURAL_ERROR = 8
"""The OpenAPI document was loaded but violates a structural invariant."""

EXIT_REQUEST_INVALID = 9
"""The request is not permitted by the OpenAPI document."""
