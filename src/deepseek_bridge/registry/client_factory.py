"""registry.client_factory

Factory converting a ModelId (or raw "provider:model" string) into a fully
initialised provider (subclass of AbstractChatProvider).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from deepseek_bridge.core.model_id import ModelId, parse_model_id
from deepseek_bridge.registry.provider_registry import provider_registry

if TYPE_CHECKING:
    from deepseek_bridge.core.abc import AbstractChatProvider


class ProviderFactory:
    """Factory for creating registered chat providers.

    Stateless; all information resides in provider_registry.
    """

    @staticmethod
    def initialize_client(model_id: str | ModelId, **adapter_kwargs: Any) -> AbstractChatProvider:  # noqa: ANN401
        """Return a concrete provider for model_id.

        Parameters
        ----------
        model_id
            Either a raw string ("deepseek:deepseek-coder") or a pre-parsed
            ModelId instance. The model part becomes the provider's default
            model.
        **adapter_kwargs
            Forwarded to the adapter constructor (settings, http_client,
            cache, retry_strategy, ...).

        """
        model_identifier = parse_model_id(model_id) if isinstance(model_id, str) else model_id
        adapter_class = provider_registry.get_adapter_cls(model_identifier.provider)
        return adapter_class(model=model_identifier.model, **adapter_kwargs)
