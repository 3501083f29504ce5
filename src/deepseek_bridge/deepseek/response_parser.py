"""deepseek.response_parser

Maps an OpenAI-compatible chat completion body onto `ChatResponse`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from deepseek_bridge.core.exceptions import MalformedResponseError
from deepseek_bridge.core.types import ChatResponse, Usage

if TYPE_CHECKING:
    from collections.abc import Callable


def parse_response(
    payload: Any,  # noqa: ANN401
    *,
    default_model: str,
    cost_estimator: Callable[[int, int, str], float],
) -> ChatResponse:
    """Build a `ChatResponse` from the decoded JSON *payload*.

    Cost is priced with the model named in the payload, falling back to
    *default_model*. Without a ``usage`` block the response has no usage at
    all rather than a zero cost.

    Raises
    ------
    MalformedResponseError
        ``choices[0].message.content`` is missing or the ``usage`` counts
        are not numeric.

    """
    try:
        choice = payload['choices'][0]
        content = choice['message']['content']
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedResponseError('DeepSeek response has no choices[0].message.content', status_code=200) from exc

    model = payload.get('model') or default_model
    response = ChatResponse(
        content=content or '',
        model=model,
        finish_reason=choice.get('finish_reason'),
    )

    usage = payload.get('usage')
    if isinstance(usage, dict) and usage:
        try:
            prompt_tokens = int(usage.get('prompt_tokens') or 0)
            completion_tokens = int(usage.get('completion_tokens') or 0)
            response.usage = Usage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=usage.get('total_tokens'),
                cost=cost_estimator(prompt_tokens, completion_tokens, model),
            )
        except (TypeError, ValueError, ValidationError) as exc:
            raise MalformedResponseError('DeepSeek response has an unreadable usage block', status_code=200) from exc
    return response
