"""
Upstream error variants. Each carries the HTTP status the gateway answers with.
"""

from __future__ import annotations


class UpstreamError(Exception):
    """Base for failures of an outbound Workers AI call."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class UpstreamHttpError(UpstreamError):
    """Upstream answered with a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.body = body
        super().__init__(
            f"Upstream AI API request failed: {status_code} - {body}",
            status_code=status_code,
        )


class UpstreamProtocolError(UpstreamError):
    """Upstream answered 2xx but the body lacks an expected field."""


class TransportError(UpstreamError):
    """The outbound call could not be completed (DNS, connect, timeout)."""
