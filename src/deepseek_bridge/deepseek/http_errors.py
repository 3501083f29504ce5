"""deepseek.http_errors

Maps non-200 vendor answers and transport failures onto the
`deepseek_bridge.core.exceptions` taxonomy.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any

from deepseek_bridge.core.exceptions import (
    AuthenticationError,
    ProviderAPIError,
    RateLimitExceededError,
    ServerError,
)

#: Pseudo status for requests that never produced a response.
TRANSPORT_FAILURE = 0


def extract_error_message(body: str | bytes) -> str | None:
    """Pull a human-readable message out of a vendor error body.

    Accepted shapes, in order: ``{"error": "..."}``,
    ``{"error": {"message": "..."}}``, ``{"error": {"code": "..."}}``,
    ``{"message": "..."}``. Anything else falls back to the trimmed raw
    body, and an empty body yields ``None``.
    """
    if isinstance(body, bytes):
        body = body.decode('utf-8', errors='replace')
    if body == '':
        return None

    try:
        decoded: Any = json.loads(body)
    except ValueError:
        decoded = None

    if isinstance(decoded, dict):
        error = decoded.get('error')
        if isinstance(error, str):
            return error
        if isinstance(error, dict):
            for key in ('message', 'code'):
                if (value := error.get(key)) and isinstance(value, str):
                    return value
        if (message := decoded.get('message')) and isinstance(message, str):
            return message

    return body.strip() or None


def classify_http_error(status: int, body: str | bytes = '') -> ProviderAPIError:
    """Return (not raise) the exception matching a failed vendor call."""
    message = extract_error_message(body)
    if status == HTTPStatus.UNAUTHORIZED:
        return AuthenticationError('Invalid API key', status_code=status)
    if status == HTTPStatus.TOO_MANY_REQUESTS:
        return RateLimitExceededError(message or 'Rate limit exceeded', status_code=status)
    if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        return ServerError(message or 'DeepSeek API server error', status_code=status)
    if status == TRANSPORT_FAILURE:
        return ServerError(message or 'Unable to reach DeepSeek API', status_code=status)
    return ProviderAPIError(message or f'DeepSeek API error (HTTP {status})', status_code=status)


def network_error(exc: Exception) -> ServerError:
    """Wrap a transport exception; callers chain it with ``raise ... from exc``."""
    return ServerError(f'Network error: {exc}', status_code=TRANSPORT_FAILURE)
