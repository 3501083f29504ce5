"""adapters.deepseek_adapter

Concrete adapter that bridges :class:`deepseek_bridge.core.abc.AbstractChatProvider`
with the **DeepSeek** OpenAI-compatible Chat Completions HTTP API.

Collaborators (HTTP client, cache, logger, retry strategy) are injected; when
the host has none to offer, a private ``httpx.Client``, a `NullCache` and the
module logger stand in.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, ClassVar

import httpx

from deepseek_bridge.core.abc import AbstractChatProvider
from deepseek_bridge.core.cache import DEFAULT_TTL_SECONDS, ModelCache, NullCache
from deepseek_bridge.core.exceptions import (
    AuthenticationError,
    DeepSeekBridgeError,
    MalformedResponseError,
    StreamingError,
)
from deepseek_bridge.core.settings import Settings, load_stored_settings, resolve_settings
from deepseek_bridge.core.types import ChatRequest
from deepseek_bridge.deepseek import pricing
from deepseek_bridge.deepseek.catalog import ModelCatalog, default_model_options, model_options
from deepseek_bridge.deepseek.constants import (
    CHAT_PATH,
    DEFAULT_CHAT_TIMEOUT,
    OPTIONS_CACHE_KEY_TEMPLATE,
    PROVIDER_NAME,
    STREAM_CHUNK_SIZE,
    SUPPORTED_LANGUAGES,
)
from deepseek_bridge.deepseek.http_errors import classify_http_error, network_error
from deepseek_bridge.deepseek.request_builder import build_request
from deepseek_bridge.deepseek.response_parser import parse_response
from deepseek_bridge.deepseek.stream_decoder import decode_stream
from deepseek_bridge.registry.provider_registry import provider_registry

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from deepseek_bridge.core.retry import RetryStrategy
    from deepseek_bridge.core.types import ChatResponse, ModelDescriptor

logger = logging.getLogger(__name__)

#: Substrings (lower-case) that mark an error as "credentials rejected".
AUTH_FAILURE_MARKERS: tuple[str, ...] = ('invalid api key', '401')

# ---------------------------------------------------------------------------
# Adapter implementation
# ---------------------------------------------------------------------------


class DeepSeekProvider(AbstractChatProvider):
    """Adapter for the DeepSeek Chat Completions API."""

    provider_name: ClassVar[str] = PROVIDER_NAME

    capabilities: ClassVar[Mapping[str, bool]] = {
        'chat': True,
        'streaming': True,
        'vision': False,
        'function_calling': True,
        'embeddings': False,
        'translation': True,
        'code_generation': True,
    }

    # Process-wide memo for get_model_options(); see reset_model_options()
    _model_options_memo: ClassVar[dict[str, str] | None] = None

    def __init__(
        self,
        model: str | None = None,
        *,
        settings: Settings | Mapping[str, Any] | None = None,
        stored_settings: Settings | Mapping[str, Any] | None = None,
        http_client: httpx.Client | None = None,
        cache: ModelCache | None = None,
        diagnostics: logging.Logger | None = None,
        retry_strategy: RetryStrategy | None = None,
    ) -> None:
        """Resolve settings and wire collaborators.

        Parameters
        ----------
        model
            Default model override (as passed by the client factory).
        settings
            Explicit settings; merged over *stored_settings* field by field.
        stored_settings
            Persisted configuration. Read from ``.env``/environment when
            omitted.
        http_client
            Shared transport. A private client is created when omitted.
        cache
            External model cache.
        diagnostics
            Logger for request diagnostics and degraded paths.
        retry_strategy
            Retry policy for `chat()`; a single attempt by default.

        """
        stored = stored_settings if stored_settings is not None else load_stored_settings()
        resolved = resolve_settings(settings, stored)
        if model:
            resolved = resolved.model_copy(update={'model': model})
        super().__init__(resolved, retry_strategy=retry_strategy)

        self._owns_http = http_client is None
        self._http: httpx.Client = http_client if http_client is not None else httpx.Client()
        self._cache: ModelCache = cache if cache is not None else NullCache()
        self._diagnostics: logging.Logger = diagnostics or logger
        self._catalog = ModelCatalog(
            self._settings,
            self._http,
            cache=self._cache,
            provider_name=self.provider_name,
            diagnostics=self._diagnostics,
        )

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    def _endpoint(self) -> str:
        return self._settings.endpoint + CHAT_PATH

    def _headers(self) -> dict[str, str]:
        return {
            'Authorization': f'Bearer {self._settings.api_key_value}',
            'Content-Type': 'application/json',
        }

    def _timeout(self) -> int:
        return self._settings.timeout_seconds or DEFAULT_CHAT_TIMEOUT

    def _require_api_key(self) -> None:
        if not self._settings.api_key_value.strip():
            raise AuthenticationError('Invalid API key: no DeepSeek API key configured')

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def _invoke(self, request: ChatRequest) -> ChatResponse:
        self._require_api_key()
        payload = build_request(request, self._settings, diagnostics=self._diagnostics)
        try:
            response = self._http.post(self._endpoint(), headers=self._headers(), json=payload, timeout=self._timeout())
        except httpx.HTTPError as exc:
            raise network_error(exc) from exc

        if response.status_code != HTTPStatus.OK:
            raise classify_http_error(response.status_code, response.content)

        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError('DeepSeek returned a non-JSON body', status_code=response.status_code) from exc
        return parse_response(body, default_model=self._settings.model, cost_estimator=self._price)

    def stream_chat(self, request: ChatRequest, on_fragment: Callable[[str], None]) -> ChatResponse:
        self._require_api_key()
        payload = build_request(request.with_option('stream', True), self._settings, diagnostics=self._diagnostics)
        try:
            with self._http.stream(
                'POST',
                self._endpoint(),
                headers=self._headers(),
                json=payload,
                timeout=self._timeout(),
            ) as response:
                if response.status_code != HTTPStatus.OK:
                    raise classify_http_error(response.status_code, response.read())
                result = decode_stream(response.iter_bytes(STREAM_CHUNK_SIZE), on_fragment)
        except httpx.HTTPError as exc:
            raise StreamingError(f'Streaming error: {exc}') from exc

        result.model = payload['model']
        return result

    # ------------------------------------------------------------------
    # Estimation
    # ------------------------------------------------------------------

    def _price(self, prompt_tokens: int, completion_tokens: int, model: str) -> float:
        return pricing.estimate_cost(prompt_tokens, completion_tokens, model)

    def estimate_cost(self, prompt_tokens: int, completion_tokens: int, model: str | None = None) -> float:
        """Price a call with *model*, the configured model by default."""
        return self._price(prompt_tokens, completion_tokens, model or self._settings.model)

    def count_tokens(self, text: str) -> int:
        return pricing.count_tokens(text, self._settings.model)

    # ------------------------------------------------------------------
    # Discovery / validation
    # ------------------------------------------------------------------

    def get_models(self) -> list[ModelDescriptor]:
        return self._catalog.get_models()

    def get_supported_languages(self) -> list[str]:
        """Code languages understood by DeepSeek Coder."""
        return list(SUPPORTED_LANGUAGES)

    def validate_credentials(self) -> bool:
        """Check the API key against the vendor.

        Returns ``False`` when the provider is not configured or the vendor
        rejects the key. Errors that say nothing about the key (rate limits,
        outages, ...) are re-raised.
        """
        if not self.is_configured():
            return False

        try:
            if self._catalog.fetch(strict=True):
                return True
            # Empty model list: fall back to a one-token liveness probe
            probe = ChatRequest(max_tokens=1).add_user_message('Hello')
            self._invoke(probe)
        except DeepSeekBridgeError as exc:
            message = str(exc).lower()
            if any(marker in message for marker in AUTH_FAILURE_MARKERS):
                return False
            raise
        return True

    @classmethod
    def get_model_options(
        cls,
        *,
        settings: Settings | Mapping[str, Any] | None = None,
        http_client: httpx.Client | None = None,
        cache: ModelCache | None = None,
    ) -> dict[str, str]:
        """Return ``{model id: label}`` for configuration forms.

        Never raises: any failure yields the static default options.
        """
        if cls._model_options_memo is not None:
            return dict(cls._model_options_memo)

        cache = cache if cache is not None else NullCache()
        cache_key = OPTIONS_CACHE_KEY_TEMPLATE.format(provider=cls.provider_name)
        try:
            if cached := cache.get(cache_key):
                cls._model_options_memo = dict(cached)
                return dict(cached)

            resolved = resolve_settings(settings, load_stored_settings() if settings is None else None)
            if not resolved.is_usable:
                options = default_model_options()
                cls._model_options_memo = options
                return dict(options)

            provider = cls(settings=resolved, stored_settings={}, http_client=http_client, cache=cache)
            try:
                options = model_options(provider.get_models()) or default_model_options()
            finally:
                provider.close()
            cache.put(cache_key, options, DEFAULT_TTL_SECONDS)
            cls._model_options_memo = options
            return dict(options)
        except Exception:
            logger.exception('Falling back to default DeepSeek model options')
            return default_model_options()

    @classmethod
    def reset_model_options(cls) -> None:
        """Forget the process-wide options memo (tests, config changes)."""
        cls._model_options_memo = None

    def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_http:
            self._http.close()


# ---------------------------------------------------------------------------
# Automatic registration
# ---------------------------------------------------------------------------

provider_registry.register(PROVIDER_NAME, DeepSeekProvider)
