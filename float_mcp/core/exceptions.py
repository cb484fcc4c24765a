"""Custom exception hierarchy.

Every failure that crosses the gateway is one of these classes. Callers
branch on the class (or on ``kind``), never on the message text.
"""

from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    kind = "gateway"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        """Structured representation used in tool responses."""
        data: dict[str, Any] = {
            "kind": self.kind,
            "message": self.message,
            "status_code": self.status_code,
        }
        if self.body not in (None, {}, ""):
            data["body"] = self.body
        return data


class ConfigurationError(GatewayError):
    """Settings are missing or invalid at startup."""

    kind = "configuration"


class ValidationError(GatewayError):
    """Caller input, routing key or upstream payload failed validation.

    Raised for malformed or missing parameters, for unknown
    ``(family, operation)`` pairs, and when a 2xx response cannot be decoded
    or does not match the expected output shape.
    """

    kind = "validation"

    def __init__(
        self,
        message: str,
        *,
        family: str | None = None,
        operation: str | None = None,
        details: list[dict[str, Any]] | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message, body=body)
        self.family = family
        self.operation = operation
        self.details = details or []

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.family is not None:
            data["family"] = self.family
        if self.operation is not None:
            data["operation"] = self.operation
        if self.details:
            data["details"] = self.details
        return data


class UpstreamError(GatewayError):
    """Non-2xx response or transport failure talking to the remote service.

    ``status_code`` is ``None`` when no response was received at all.
    """

    kind = "upstream"


class AuthError(UpstreamError):
    """Bearer token rejected (401/403)."""

    kind = "auth"


class NotFoundError(UpstreamError):
    """Requested resource does not exist (404)."""

    kind = "not_found"


class RateLimitError(UpstreamError):
    """Remote service rate limit exceeded (429)."""

    kind = "rate_limit"

    def __init__(
        self,
        message: str,
        retry_after: float | None = None,
        body: Any = None,
        status_code: int | None = 429,
    ) -> None:
        super().__init__(message, status_code=status_code, body=body)
        self.retry_after = retry_after

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.retry_after is not None:
            data["retry_after"] = self.retry_after
        return data


class AdmissionTimeoutError(RateLimitError):
    """Local admission queue did not grant quota within the configured bound."""

    def __init__(self, message: str, waited_ms: float) -> None:
        super().__init__(message, status_code=None)
        self.waited_ms = waited_ms


def error_for_status(
    status: int,
    body: Any,
    *,
    method: str,
    path: str,
    retry_after: float | None = None,
) -> UpstreamError:
    """Map a non-2xx status to the matching error class."""
    message = f"{method} {path} failed with status {status}"
    if status in (401, 403):
        return AuthError(message, status_code=status, body=body)
    if status == 404:
        return NotFoundError(message, status_code=status, body=body)
    if status == 429:
        return RateLimitError(message, retry_after=retry_after, body=body)
    return UpstreamError(message, status_code=status, body=body)


def validation_details(error: Any) -> list[dict[str, Any]]:
    """Flatten a pydantic ValidationError into JSON-safe field errors."""
    return [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in error.errors()
    ]
