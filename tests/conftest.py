from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from deepseek_bridge.core.settings import Settings

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> Settings:
    return Settings(enabled=True, api_key='sk-test', endpoint='https://api.test/v1/', model='deepseek-chat')


@pytest.fixture
def recorded() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_client(recorded: list[httpx.Request]) -> Callable[[Handler], httpx.Client]:
    """Build an ``httpx.Client`` whose requests are answered by *handler*."""

    def _make(handler: Handler) -> httpx.Client:
        def _record(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return handler(request)

        return httpx.Client(transport=httpx.MockTransport(_record))

    return _make

