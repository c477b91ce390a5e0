"""Exceptions raised by the proxy and rendered as `{error, details?}` bodies."""

from __future__ import annotations

from typing import Any, Dict, Optional


class ProxyError(Exception):
    """Base error carrying the HTTP status and the message shown to callers."""

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationFailed(ProxyError):
    """Required input was missing or malformed."""

    status_code = 400


class BlockedURL(ProxyError):
    """A scrape target was rejected before any request was sent."""

    status_code = 400


class UpstreamError(ProxyError):
    """A provider was unreachable, timed out, or answered with an error."""

    status_code = 500


class GenerationError(RuntimeError):
    """Raised by text generators; the message is the provider's error detail."""
