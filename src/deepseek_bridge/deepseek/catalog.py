"""deepseek.catalog

Model catalog discovery: ``GET {endpoint}/models`` with an in-process slot,
an external TTL cache and static defaults.

Lookup order for `ModelCatalog.get_models()`:

1. models already held by this instance;
2. static defaults when the settings are unusable (no network access);
3. a fresh cache entry;
4. a lenient network fetch, written through to the cache.

A failed or empty fetch yields ``[]``; callers treat that as "use defaults".
`ModelCatalog.fetch(strict=True)` raises the classified error instead, which
is what credential validation needs.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from deepseek_bridge.core.cache import DEFAULT_TTL_SECONDS, ModelCache, NullCache
from deepseek_bridge.core.diagnostics import safe_error
from deepseek_bridge.core.exceptions import MalformedResponseError
from deepseek_bridge.core.types import ModelDescriptor
from deepseek_bridge.deepseek.constants import (
    DEFAULT_CONTEXT_WINDOW,
    DEFAULT_MODELS_TIMEOUT,
    MODELS_CACHE_KEY_TEMPLATE,
    MODELS_PATH,
    PROVIDER_NAME,
)
from deepseek_bridge.deepseek.http_errors import classify_http_error, network_error

if TYPE_CHECKING:
    from collections.abc import Iterable

    from deepseek_bridge.core.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        id='deepseek-chat',
        name='DeepSeek Chat',
        context_window=32_768,
        description='General purpose conversational model',
    ),
    ModelDescriptor(
        id='deepseek-reasoner',
        name='DeepSeek Reasoner',
        context_window=16_384,
        description='Reasoning focused model',
    ),
    ModelDescriptor(
        id='deepseek-coder',
        name='DeepSeek Coder',
        context_window=32_768,
        description='Code generation and refactoring model',
    ),
)


def default_model_options() -> dict[str, str]:
    """Options shown when no live catalog is available."""
    return {model.id: model.name for model in DEFAULT_MODELS}


def humanize_model_id(model_id: str) -> str:
    """``deepseek-chat`` -> ``Deepseek Chat``."""
    return ' '.join(word[:1].upper() + word[1:] for word in model_id.replace('-', ' ').split(' '))


def parse_model_list(data: Any) -> list[ModelDescriptor]:  # noqa: ANN401
    """Parse the ``data`` array of a model-list body, sorted by display name."""
    entries = data.get('data') if isinstance(data, dict) else None
    models: list[ModelDescriptor] = []
    for entry in entries if isinstance(entries, list) else []:
        if not isinstance(entry, dict) or not entry.get('id'):
            continue
        model_id = str(entry['id'])
        context_window = entry.get('context_window') or entry.get('input_token_limit') or DEFAULT_CONTEXT_WINDOW
        try:
            models.append(
                ModelDescriptor(
                    id=model_id,
                    name=entry.get('name') or humanize_model_id(model_id),
                    context_window=context_window,
                    description=entry.get('description') or '',
                ),
            )
        except ValidationError:
            logger.debug('Skipping unparsable model entry %r', model_id)
    models.sort(key=lambda model: model.name)
    return models


def model_options(models: Iterable[ModelDescriptor]) -> dict[str, str]:
    """Project *models* to ``{id: label}`` for configuration UIs."""
    return {model.id: model.label for model in models}


class ModelCatalog:
    """Fetches and caches the model list for one provider instance.

    Parameters
    ----------
    settings
        Resolved provider settings (endpoint, key, timeout).
    http_client
        Transport used for ``GET /models``.
    cache
        External cache; `NullCache` when the host provides none.
    provider_name
        Namespaces the cache key.
    diagnostics
        Logger for lenient-mode failures.

    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.Client,
        *,
        cache: ModelCache | None = None,
        provider_name: str = PROVIDER_NAME,
        diagnostics: logging.Logger | None = logger,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._cache: ModelCache = cache if cache is not None else NullCache()
        self._cache_key = MODELS_CACHE_KEY_TEMPLATE.format(provider=provider_name)
        self._diagnostics = diagnostics
        self._models: list[ModelDescriptor] = []

    @property
    def cache_key(self) -> str:
        return self._cache_key

    def get_models(self) -> list[ModelDescriptor]:
        if self._models:
            return list(self._models)

        if not self._settings.is_usable:
            self._models = list(DEFAULT_MODELS)
            return list(self._models)

        if (cached := self._load_cached()) is not None:
            self._models = cached
            return list(self._models)

        if models := self.fetch(strict=False):
            self._models = models
            self._store_cached(models)
            return list(self._models)

        self._models = []
        return []

    def fetch(self, *, strict: bool = False) -> list[ModelDescriptor]:
        """Query the models endpoint.

        Parameters
        ----------
        strict
            Raise classified errors instead of logging them and returning
            ``[]``.

        Raises
        ------
        ProviderAPIError
            Only in strict mode: `AuthenticationError`,
            `RateLimitExceededError`, `ServerError` (including network
            failures), `MalformedResponseError` or a generic
            `ProviderAPIError`.

        """
        try:
            response = self._http.get(
                self._settings.endpoint + MODELS_PATH,
                headers={
                    'Authorization': f'Bearer {self._settings.api_key_value}',
                    'Accept': 'application/json',
                },
                timeout=self._settings.timeout_seconds or DEFAULT_MODELS_TIMEOUT,
            )
        except httpx.HTTPError as exc:
            error = network_error(exc)
            if strict:
                raise error from exc
            safe_error(self._diagnostics, 'DeepSeek model fetch error', status=error.status_code, message=str(error))
            return []

        if response.status_code == HTTPStatus.OK:
            try:
                data = response.json()
            except ValueError:
                data = None
            if not isinstance(data, dict):
                if strict:
                    raise MalformedResponseError(
                        'Invalid response from DeepSeek models endpoint',
                        status_code=response.status_code,
                    )
                return []
            return parse_model_list(data)

        error = classify_http_error(response.status_code, response.content)
        if strict:
            raise error
        safe_error(self._diagnostics, 'DeepSeek model fetch error', status=error.status_code, message=str(error))
        return []

    def _load_cached(self) -> list[ModelDescriptor] | None:
        try:
            cached = self._cache.get(self._cache_key)
        except Exception as exc:
            # A broken cache backend counts as a miss
            safe_error(self._diagnostics, 'DeepSeek model cache read failed', key=self._cache_key, error=repr(exc))
            return None
        if not cached:
            return None
        try:
            return [ModelDescriptor.model_validate(entry) for entry in cached]
        except (ValidationError, TypeError):
            logger.warning('Ignoring malformed cache entry %s', self._cache_key)
            return None

    def _store_cached(self, models: list[ModelDescriptor]) -> None:
        try:
            self._cache.put(self._cache_key, [model.model_dump() for model in models], DEFAULT_TTL_SECONDS)
        except Exception as exc:
            safe_error(self._diagnostics, 'DeepSeek model cache write failed', key=self._cache_key, error=repr(exc))
