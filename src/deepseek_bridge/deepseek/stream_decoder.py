"""deepseek.stream_decoder

Incremental decoder for the server-sent-event body of a streamed chat
completion.

Frames are separated by a blank line; only frames starting with ``data: ``
matter. ``data: [DONE]`` ends the stream. Every other frame is expected to
hold a JSON chunk whose ``choices[0].delta.content`` carries the next text
fragment; frames without one (role announcements, finish reasons, keep-alive
noise, broken JSON) are skipped.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from deepseek_bridge.core.exceptions import StreamingError
from deepseek_bridge.core.types import ChatResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

FRAME_DELIMITER = b'\n\n'
DATA_PREFIX = b'data: '
DONE_SENTINEL = b'[DONE]'


def extract_delta(payload: bytes) -> str | None:
    """Return ``choices[0].delta.content`` of a JSON chunk, or ``None``."""
    try:
        chunk: Any = json.loads(payload)
    except ValueError:
        return None
    try:
        content = chunk['choices'][0]['delta']['content']
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None


def decode_stream(chunks: Iterable[bytes], on_fragment: Callable[[str], None]) -> ChatResponse:
    """Consume *chunks* until the stream ends or ``[DONE]`` arrives.

    Parameters
    ----------
    chunks
        Raw body bytes in arbitrary slices; frame delimiters may be split
        across slices.
    on_fragment
        Called once per content delta with exactly that delta.

    Returns
    -------
    ChatResponse
        Streaming response holding the concatenated deltas.

    Raises
    ------
    StreamingError
        The transport failed while reading. Nothing read so far is returned.

    """
    response = ChatResponse(is_streaming=True)
    buffer = b''
    try:
        for chunk in chunks:
            buffer += chunk
            while (pos := buffer.find(FRAME_DELIMITER)) != -1:
                frame, buffer = buffer[:pos], buffer[pos + len(FRAME_DELIMITER) :]
                if not frame.startswith(DATA_PREFIX):
                    continue
                payload = frame[len(DATA_PREFIX) :]
                if payload == DONE_SENTINEL:
                    return response
                if (content := extract_delta(payload)) is None:
                    continue
                response.append_content(content)
                on_fragment(content)
    except (httpx.HTTPError, httpx.StreamError, OSError) as exc:
        raise StreamingError(f'Streaming error: {exc}') from exc

    if buffer.strip():
        logger.debug('Stream ended with %d bytes of incomplete frame data', len(buffer))
    return response
