"""core.exceptions

Centralised exception hierarchy for *deepseek_bridge*.

Each error carries an `http_status` attribute so that upper layers (REST API
controllers, host plugin frameworks, etc.) can translate exceptions to
appropriate HTTP responses *without* scattering status-code logic throughout
adapter code.

"Not configured" is deliberately absent: an unusable provider reports it via
`is_configured()` and degrades to defaults instead of raising.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import ClassVar


# ---------------------------------------------------------------------------
# Base mixin with HTTP status information
# ---------------------------------------------------------------------------


class DeepSeekBridgeError(Exception):
    """Base class for all *deepseek_bridge* domain errors."""

    #: Default HTTP status if not overridden by subclass.
    http_status: ClassVar[HTTPStatus] = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__name__)


# ---------------------------------------------------------------------------
# Registry / lookup errors
# ---------------------------------------------------------------------------


class ProviderNotFoundError(DeepSeekBridgeError):
    """Raised when `ProviderRegistry` cannot find a requested provider key."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.NOT_IMPLEMENTED  # 501


# ---------------------------------------------------------------------------
# Upstream (vendor) errors
# ---------------------------------------------------------------------------


class ProviderAPIError(DeepSeekBridgeError):
    """Generic upstream provider error.

    `status_code` holds the vendor HTTP status, or ``0`` when the request
    never produced a response (transport failure).
    """

    http_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_GATEWAY  # 502

    def __init__(self, message: str | None = None, *, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code: int = status_code

class AuthenticationError(ProviderAPIError):
    """Raised on HTTP 401 or when no API key is available."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.UNAUTHORIZED  # 401

class RateLimitExceededError(ProviderAPIError):
    """Raised when the vendor answers HTTP 429."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.TOO_MANY_REQUESTS  # 429

class ServerError(ProviderAPIError):
    """Vendor 5xx answer or a network/transport failure."""

class MalformedResponseError(ProviderAPIError):
    """Vendor answered 200 but the body is not the expected JSON shape."""

class StreamingError(ProviderAPIError):
    """Transport failure while reading a streamed completion.

    The underlying cause is always chained (``raise ... from exc``); partial
    content read before the failure is discarded.
    """
