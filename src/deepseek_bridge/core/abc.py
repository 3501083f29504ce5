"""core.abc

Abstract base class that *all* provider adapters must implement.

Design goals
============
1. **Provider-agnostic public API** - hosts interact exclusively via
    `chat()` / `stream_chat()` passing domain models (`ChatRequest`) and get
    `ChatResponse` back. They never touch vendor payloads.
2. **Opt-in retry** - `chat()` runs `_invoke()` under `with_retry()` using
    the strategy given at construction (a single attempt by default).
3. **No exceptions for "not configured"** - `is_configured()` reports it and
    discovery methods degrade to defaults.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from deepseek_bridge.core.retry import RetryStrategy, with_retry

if TYPE_CHECKING:
    from collections.abc import Callable

    from deepseek_bridge.core.settings import Settings
    from deepseek_bridge.core.types import ChatRequest, ChatResponse, ModelDescriptor


class AbstractChatProvider(ABC):
    """Provider-independent chat-completion interface."""

    #: Registry slug, also used to namespace cache keys.
    provider_name: ClassVar[str]

    # ---------------------------------------------------------------------
    # Construction
    # ---------------------------------------------------------------------

    def __init__(
        self,
        settings: Settings,
        *,
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        """Store resolved *settings* and the retry strategy for `chat()`."""
        self._settings: Settings = settings
        self._retry_strategy: RetryStrategy = retry_strategy or RetryStrategy()

    @property
    def settings(self) -> Settings:
        return self._settings

    def is_configured(self) -> bool:
        return self._settings.is_usable

    # ------------------------------------------------------------------
    # Public synchronous API
    # ------------------------------------------------------------------

    def chat(self, request: ChatRequest) -> ChatResponse:
        """Run a non-streaming completion.

        Subclasses **must not** override this - override `_invoke()` instead.
        """

        @with_retry(self._retry_strategy)
        def _call() -> ChatResponse:
            return self._invoke(request)

        return _call()

    @abstractmethod
    def stream_chat(self, request: ChatRequest, on_fragment: Callable[[str], None]) -> ChatResponse:
        """Stream a completion, calling *on_fragment* with every content delta."""

    @abstractmethod
    def estimate_cost(self, prompt_tokens: int, completion_tokens: int, model: str | None = None) -> float:
        """Return the price of a call in USD."""

    @abstractmethod
    def count_tokens(self, text: str) -> int:
        """Approximate the token count of *text*."""

    @abstractmethod
    def validate_credentials(self) -> bool:
        """Return ``False`` for rejected credentials; raise for anything else."""

    @abstractmethod
    def get_models(self) -> list[ModelDescriptor]:
        """Return the model catalog (possibly empty, meaning "use defaults")."""

    @abstractmethod
    def get_supported_languages(self) -> list[str]:
        """Return the code languages understood by the provider."""

    @classmethod
    @abstractmethod
    def get_model_options(cls) -> dict[str, str]:
        """Return ``{model id: label}`` for configuration UIs."""

    # ------------------------------------------------------------------
    # Methods to implement in concrete adapters
    # ------------------------------------------------------------------

    @abstractmethod
    def _invoke(self, request: ChatRequest) -> ChatResponse:
        """Provider-specific **blocking** implementation (to be overridden)."""

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f'<{self.__class__.__name__} model={self._settings.model!r} configured={self.is_configured()}>'
