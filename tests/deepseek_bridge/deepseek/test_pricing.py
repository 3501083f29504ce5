from __future__ import annotations

import math

import pytest

from deepseek_bridge.deepseek.pricing import PRICING, ModelPrice, count_tokens, estimate_cost


def test_million_tokens_each() -> None:
    assert estimate_cost(1_000_000, 1_000_000, 'deepseek-chat') == 0.42  # noqa: PLR2004


@pytest.mark.parametrize(('prompt', 'completion'), [(0, 0), (1, 1), (123_456, 789), (10**9, 10**9)])
def test_unknown_model_is_free(prompt: int, completion: int) -> None:
    assert estimate_cost(prompt, completion, 'gpt-4o') == 0.0


def test_rounded_to_six_places() -> None:
    # 1/1e6 * 0.14 + 1/1e6 * 0.28 = 4.2e-7 -> 0.0
    assert estimate_cost(1, 1, 'deepseek-coder') == 0.0
    assert estimate_cost(10, 10, 'deepseek-coder') == 0.000004  # noqa: PLR2004


def test_custom_pricing_table() -> None:
    table = {'m': ModelPrice(1.0, 2.0)}
    assert estimate_cost(500_000, 250_000, 'm', pricing=table) == 1.0


def test_pricing_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        PRICING['free'] = ModelPrice(0.0, 0.0)  # type: ignore[index]


def test_count_tokens_chat_model() -> None:
    text = 'Hello world, this is a test.'
    # 28 bytes / 4 = 7; 6 words * 1.3 = 7.8 -> ceil(7.4) = 8
    assert count_tokens(text, 'deepseek-chat') == 8  # noqa: PLR2004


def test_count_tokens_coder_model_is_denser() -> None:
    text = 'def add(a, b):\n    return a + b\n'
    char_estimate = len(text) / 3.5
    words = ['def', 'add', 'a', 'b', 'return', 'a', 'b']
    word_estimate = len(words) * 1.5
    assert count_tokens(text, 'deepseek-coder') == math.ceil((char_estimate + word_estimate) / 2)
    assert count_tokens(text, 'deepseek-coder') >= count_tokens(text, 'deepseek-chat')


def test_count_tokens_empty() -> None:
    assert count_tokens('', 'deepseek-chat') == 0


def test_count_tokens_counts_utf8_bytes() -> None:
    # 6 bytes / 4 = 1.5; no ASCII letters, so 0 words; ceil(0.75) = 1
    assert count_tokens('ééé', 'deepseek-chat') == 1
