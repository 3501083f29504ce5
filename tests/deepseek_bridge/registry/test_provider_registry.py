from __future__ import annotations

from typing import Any

import pytest

from deepseek_bridge.core.abc import AbstractChatProvider
from deepseek_bridge.core.exceptions import ProviderNotFoundError
from deepseek_bridge.core.settings import Settings
from deepseek_bridge.core.types import ChatRequest, ChatResponse, ModelDescriptor
from deepseek_bridge.registry.provider_registry import ProviderRegistry


class DummyProvider(AbstractChatProvider):
    provider_name = 'dummy'

    def __init__(self, model: str | None = None, **_: Any) -> None:  # noqa: ANN401
        super().__init__(Settings(model=model or 'dummy-model'))

    def _invoke(self, request: ChatRequest) -> ChatResponse:  # noqa: ARG002
        return ChatResponse(content='dummy')

    def stream_chat(self, request: ChatRequest, on_fragment: Any) -> ChatResponse:  # noqa: ANN401, ARG002
        return ChatResponse(content='dummy', is_streaming=True)

    def estimate_cost(self, prompt_tokens: int, completion_tokens: int, model: str | None = None) -> float:  # noqa: ARG002
        return 0.0

    def count_tokens(self, text: str) -> int:
        return len(text)

    def validate_credentials(self) -> bool:
        return True

    def get_models(self) -> list[ModelDescriptor]:
        return []

    def get_supported_languages(self) -> list[str]:
        return []

    @classmethod
    def get_model_options(cls) -> dict[str, str]:
        return {}


def test_register_and_fetch() -> None:
    reg = ProviderRegistry()
    reg.register('Dummy', DummyProvider)
    assert reg.get_adapter_cls('DUMMY') is DummyProvider


def test_registry_is_singleton() -> None:
    assert ProviderRegistry() is ProviderRegistry()


def test_register_type_validation() -> None:
    reg = ProviderRegistry()
    with pytest.raises(TypeError):
        reg.register('bad', object)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        reg.register('bad', 'not a class')  # type: ignore[arg-type]


def test_unknown_provider() -> None:
    reg = ProviderRegistry()
    with pytest.raises(ProviderNotFoundError):
        reg.get_adapter_cls('no-such')
