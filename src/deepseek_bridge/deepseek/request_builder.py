"""deepseek.request_builder

Maps a `ChatRequest` plus resolved `Settings` onto the JSON body of
``POST /chat/completions``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from deepseek_bridge.core.diagnostics import safe_debug
from deepseek_bridge.core.settings import DEFAULT_MAX_TOKENS, DEFAULT_MODEL
from deepseek_bridge.deepseek.constants import CODER_MODEL

if TYPE_CHECKING:
    from deepseek_bridge.core.settings import Settings
    from deepseek_bridge.core.types import ChatRequest

logger = logging.getLogger(__name__)

#: Options forwarded verbatim when the caller set them.
PASSTHROUGH_OPTIONS: tuple[str, ...] = ('top_p', 'frequency_penalty', 'presence_penalty', 'stop')


def build_request(
    request: ChatRequest,
    settings: Settings,
    *,
    diagnostics: logging.Logger | None = logger,
) -> dict[str, Any]:
    """Return the vendor payload for *request*.

    Parameters
    ----------
    request
        Caller-owned request; it is not modified.
    settings
        Resolved provider settings supplying the defaults.
    diagnostics
        Logger receiving a debug record of the request envelope (no message
        content). Logging failures are ignored.

    """
    model = request.model or settings.model or DEFAULT_MODEL
    temperature = request.temperature if request.temperature is not None else settings.temperature
    max_tokens = request.max_tokens or settings.max_tokens or DEFAULT_MAX_TOKENS

    payload: dict[str, Any] = {
        'model': model,
        'messages': [message.to_wire() for message in request.messages],
        'max_tokens': max_tokens,
    }
    # Absent temperature means "vendor default"
    if temperature is not None:
        payload['temperature'] = temperature

    for name in PASSTHROUGH_OPTIONS:
        if (value := request.get_option(name)) is not None:
            payload[name] = value

    stream = request.get_option('stream') is True
    if stream:
        payload['stream'] = True

    if model == CODER_MODEL and (language := request.get_option('code_language')):
        _prefix_first_user_message(payload['messages'], f'Language: {language}\n\n')

    safe_debug(
        diagnostics,
        'Prepared DeepSeek request',
        model=model,
        temperature=temperature,
        max_tokens=max_tokens,
        stream=stream,
        message_roles=[message.get('role', 'unknown') for message in payload['messages']],
    )
    return payload


def _prefix_first_user_message(messages: list[dict[str, Any]], prefix: str) -> None:
    for message in messages:
        if message.get('role') == 'user' and isinstance(message.get('content'), str):
            message['content'] = prefix + message['content']
            return
