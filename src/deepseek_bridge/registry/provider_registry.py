"""registry.provider_registry

Global registry that maps provider slugs (e.g. "deepseek") to their
concrete adapter classes (subclasses of AbstractChatProvider).

The registry is a pure domain helper with no HTTP imports, so adapter
modules can import it at module level without circular-import trouble.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Generic, TypeVar

from deepseek_bridge.core.exceptions import ProviderNotFoundError

if TYPE_CHECKING:
    from collections.abc import MutableMapping

    from deepseek_bridge.core.abc import AbstractChatProvider

ProviderT = TypeVar('ProviderT', bound='AbstractChatProvider')


class _ThreadSafeSingleton(type):
    """Metaclass ensuring a single registry instance across threads."""

    _instance: ProviderRegistry | None = None
    _lock = threading.Lock()

    def __call__(cls, *args: object, **kwargs: object) -> ProviderRegistry:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class ProviderRegistry(Generic[ProviderT], metaclass=_ThreadSafeSingleton):
    """Centralised look-up and registration for provider → adapter mappings.

    Usage (typically inside adapter modules):

    ```python
    from deepseek_bridge.registry.provider_registry import provider_registry

    class DeepSeekProvider(AbstractChatProvider):
        ...

    provider_registry.register("deepseek", DeepSeekProvider)
    ```
    """

    _registry: MutableMapping[str, type[ProviderT]]

    def __init__(self) -> None:  # pragma: no cover - called once via singleton
        self._registry = {}

    def register(self, provider_key: str, adapter_cls: type[ProviderT]) -> None:
        """Register adapter_cls under provider_key.

        Parameters
        ----------
        provider_key
            Slug such as "deepseek". Normalised to lower-case.
        adapter_cls
            Concrete subclass implementing AbstractChatProvider.

        """
        key = provider_key.lower()
        from deepseek_bridge.core.abc import AbstractChatProvider  # local import avoids cycles

        if not isinstance(adapter_cls, type) or not issubclass(adapter_cls, AbstractChatProvider):
            raise TypeError('adapter_cls must subclass AbstractChatProvider')
        self._registry[key] = adapter_cls

    def get_adapter_cls(self, provider_key: str) -> type[ProviderT]:
        """Return the adapter class registered for provider_key.

        Raises
        ------
        ProviderNotFoundError
            If provider_key hasn't been registered.

        """
        key = provider_key.lower()
        try:
            return self._registry[key]
        except KeyError as exc:
            raise ProviderNotFoundError(f'Unsupported provider: {provider_key}') from exc


provider_registry: ProviderRegistry = ProviderRegistry()
