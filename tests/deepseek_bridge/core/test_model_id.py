from __future__ import annotations

import pytest

from deepseek_bridge.core.model_id import ModelId, parse_model_id


def test_valid_parse_and_str() -> None:
    mid: ModelId = ModelId.parse('DeepSeek:DeepSeek-Coder')
    assert mid.provider == 'deepseek'
    assert mid.model == 'deepseek-coder'
    assert mid.raw == 'DeepSeek:DeepSeek-Coder'
    assert str(mid) == 'deepseek:deepseek-coder'


@pytest.mark.parametrize('bad_id', ['deepseek', 'deepseek-chat', ':', 'deepseek:', 'deep seek:chat'])
def test_invalid_parse(bad_id: str) -> None:
    with pytest.raises(ValueError):  # noqa: PT011
        ModelId.parse(bad_id)


def test_function_alias() -> None:
    assert isinstance(parse_model_id('deepseek:deepseek-reasoner'), ModelId)
