"""core.cache

Cache collaborators used by the model catalog.

The host normally owns persistent storage; the adapter only needs simple
get/put with a time-to-live. `InMemoryTTLCache` serves tests and standalone
use, `NullCache` stands in when the host offers no cache at all.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

#: 24 hours, the freshness window for model listings and UI options.
DEFAULT_TTL_SECONDS = 86_400


@runtime_checkable
class ModelCache(Protocol):
    """Minimal key/value cache with per-entry expiry."""

    def get(self, key: str) -> Any | None:  # noqa: ANN401
        """Return the stored value, or ``None`` when missing or expired."""

    def put(self, key: str, value: Any, ttl: int = DEFAULT_TTL_SECONDS) -> None:  # noqa: ANN401
        """Store *value* under *key* for *ttl* seconds."""


class NullCache:
    """Cache that never stores anything."""

    def get(self, key: str) -> Any | None:  # noqa: ANN401, ARG002
        return None

    def put(self, key: str, value: Any, ttl: int = DEFAULT_TTL_SECONDS) -> None:  # noqa: ANN401
        pass


class InMemoryTTLCache:
    """Process-local cache with lazy expiry.

    Parameters
    ----------
    clock
        Monotonic time source, injectable for tests.

    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:  # noqa: ANN401
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def put(self, key: str, value: Any, ttl: int = DEFAULT_TTL_SECONDS) -> None:  # noqa: ANN401
        self._entries[key] = (self._clock() + ttl, value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
