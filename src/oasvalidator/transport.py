"""An :mod:`httpx` transport that checks outgoing requests against a document.

:class:`ValidatingTransport` sits between an :class:`httpx.Client` and the
transport that actually performs I/O. Each request's method and URL path are
passed to a :class:`~oasvalidator.validator.RequestValidator`:

- **Report mode** (default) -- a rejected request is recorded in
  :attr:`ValidatingTransport.failures` and forwarded unchanged.
- **Enforce mode** -- a rejected request is answered locally with a JSON
  problem body and the configured status; nothing is sent.

Example::

    transport = ValidatingTransport(RequestValidator(document))
    with httpx.Client(transport=transport, base_url="https://api.example.com") as client:
        client.get("/pets/42")
    assert not transport.failures
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from oasvalidator.models import ValidatorConfig
from oasvalidator.validator import RequestValidator, ValidationResult

logger = logging.getLogger(__name__)


class ValidatingTransport(httpx.BaseTransport):
    """Validate each request before handing it to the wrapped transport.

    Args:
        validator: The validator holding the document to check against.
        transport: The transport that performs I/O. Defaults to a fresh
            :class:`httpx.HTTPTransport`.
        enforce: When ``True``, rejected requests are not forwarded.
        rejection_status: Status code of the local response returned for a
            rejected request in enforce mode.

    Attributes:
        failures: The :class:`~oasvalidator.validator.ValidationResult` of
            every rejected request, oldest first, until :meth:`clear` is
            called. Intended for test harnesses that assert on it after a
            run.
    """

    def __init__(
        self,
        validator: RequestValidator,
        transport: Optional[httpx.BaseTransport] = None,
        enforce: bool = False,
        rejection_status: int = 400,
    ) -> None:
        self._validator = validator
        self._transport = transport if transport is not None else httpx.HTTPTransport()
        self._enforce = enforce
        self._rejection_status = rejection_status
        self.failures: list[ValidationResult] = []

    @classmethod
    def from_config(
        cls,
        validator: RequestValidator,
        config: ValidatorConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> ValidatingTransport:
        """Build a transport whose mode and rejection status come from *config*."""
        return cls(
            validator,
            transport=transport,
            enforce=config.enforce,
            rejection_status=config.rejection_status,
        )

    def clear(self) -> None:
        """Forget the recorded failures.

        :attr:`failures` grows with every rejected request for as long as the
        transport lives; long-running clients should drain it periodically.
        """
        self.failures.clear()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        result = self._validator.check(method, path)

        if not result.is_valid:
            self.failures.append(result)
            if self._enforce:
                logger.info("Rejected %s %s: %s", method, path, result.message)
                return httpx.Response(
                    status_code=self._rejection_status,
                    headers={"content-type": "application/json"},
                    json={"error": result.message, "method": method, "path": path},
                    request=request,
                )
            logger.warning("Request not permitted by document: %s %s: %s", method, path, result.message)

        return self._transport.handle_request(request)

    def close(self) -> None:
        self._transport.close()
