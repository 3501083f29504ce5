from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest

from deepseek_bridge.core.exceptions import StreamingError
from deepseek_bridge.deepseek.stream_decoder import decode_stream, extract_delta

HI_STREAM = b'data: {"choices":[{"delta":{"content":"Hi"}}]}\n\ndata: [DONE]\n\n'


def _split(data: bytes, size: int) -> list[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


@pytest.mark.parametrize('size', [1, 2, 3, 7, 16, 47, 48, 49, 1024])
def test_any_chunking_yields_single_fragment(size: int) -> None:
    fragments: list[str] = []
    response = decode_stream(_split(HI_STREAM, size), fragments.append)
    assert fragments == ['Hi']
    assert response.content == 'Hi'
    assert response.is_streaming is True


def test_delimiter_split_mid_way() -> None:
    first_frame_end = HI_STREAM.index(b'\n\n') + 1
    chunks = [HI_STREAM[:first_frame_end], HI_STREAM[first_frame_end:]]
    fragments: list[str] = []
    assert decode_stream(chunks, fragments.append).content == 'Hi'
    assert fragments == ['Hi']


def test_fragments_are_deltas_not_cumulative() -> None:
    body = (
        b'data: {"choices":[{"delta":{"role":"assistant"}}]}\n\n'
        b'data: {"choices":[{"delta":{"content":"Hel"}}]}\n\n'
        b'data: {"choices":[{"delta":{"content":"lo"}}]}\n\n'
        b'data: {"choices":[{"delta":{},"finish_reason":"stop"}]}\n\n'
        b'data: [DONE]\n\n'
    )
    fragments: list[str] = []
    response = decode_stream([body], fragments.append)
    assert fragments == ['Hel', 'lo']
    assert response.content == 'Hello'


def test_ignores_non_data_and_broken_frames() -> None:
    body = (
        b': keep-alive\n\n'
        b'event: ping\n\n'
        b'data: {not json\n\n'
        b'data: {"choices":[]}\n\n'
        b'data: {"choices":[{"delta":{"content":null}}]}\n\n'
        b'data: [1, 2]\n\n'
        b'data: {"choices":[{"delta":{"content":"ok"}}]}\n\n'
    )
    fragments: list[str] = []
    response = decode_stream([body], fragments.append)
    assert fragments == ['ok']
    assert response.content == 'ok'


def test_done_stops_reading() -> None:
    def chunks() -> Iterator[bytes]:
        yield b'data: {"choices":[{"delta":{"content":"a"}}]}\n\ndata: [DONE]\n\n'
        yield b'data: {"choices":[{"delta":{"content":"b"}}]}\n\n'
        msg = 'read past [DONE]'
        raise AssertionError(msg)

    fragments: list[str] = []
    response = decode_stream(chunks(), fragments.append)
    assert response.content == 'a'
    assert fragments == ['a']


def test_stream_without_done_returns_accumulated() -> None:
    body = b'data: {"choices":[{"delta":{"content":"x"}}]}\n\ndata: {"choi'
    assert decode_stream([body], lambda _: None).content == 'x'


def test_multibyte_character_split_across_chunks() -> None:
    body = 'data: {"choices":[{"delta":{"content":"héllo ✓"}}]}\n\ndata: [DONE]\n\n'.encode()
    fragments: list[str] = []
    decode_stream(_split(body, 1), fragments.append)
    assert fragments == ['héllo ✓']


def test_transport_failure_becomes_streaming_error() -> None:
    def chunks() -> Iterator[bytes]:
        yield b'data: {"choices":[{"delta":{"content":"partial"}}]}\n\n'
        msg = 'connection reset'
        raise httpx.ReadError(msg)

    fragments: list[str] = []
    with pytest.raises(StreamingError) as excinfo:
        decode_stream(chunks(), fragments.append)
    assert isinstance(excinfo.value.__cause__, httpx.ReadError)
    assert 'connection reset' in str(excinfo.value)
    assert fragments == ['partial']


@pytest.mark.parametrize(
    ('payload', 'expected'),
    [
        (b'{"choices":[{"delta":{"content":"z"}}]}', 'z'),
        (b'{"choices":[{"delta":{"content":""}}]}', ''),
        (b'{"choices":[{"delta":{}}]}', None),
        (b'{"choices":{}}', None),
        (b'"text"', None),
        (b'\xff', None),
    ],
)
def test_extract_delta(payload: bytes, expected: str | None) -> None:
    assert extract_delta(payload) == expected
