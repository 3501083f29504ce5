"""deepseek.pricing

Static price list and a tokenizer-free token estimate.

Prices are USD per one million tokens.
"""

from __future__ import annotations

import math
import re
from types import MappingProxyType
from typing import TYPE_CHECKING, NamedTuple

from deepseek_bridge.deepseek.constants import CODER_MODEL

if TYPE_CHECKING:
    from collections.abc import Mapping

TOKENS_PER_UNIT = 1_000_000
COST_PRECISION = 6

_WORD_RE = re.compile(r"[A-Za-z'-]+")


class ModelPrice(NamedTuple):
    input_per_million: float
    output_per_million: float


PRICING: Mapping[str, ModelPrice] = MappingProxyType(
    {
        'deepseek-chat': ModelPrice(0.14, 0.28),
        'deepseek-reasoner': ModelPrice(0.14, 0.28),
        'deepseek-coder': ModelPrice(0.14, 0.28),
    },
)


def estimate_cost(
    prompt_tokens: int,
    completion_tokens: int,
    model: str,
    pricing: Mapping[str, ModelPrice] = PRICING,
) -> float:
    """Price a call; unknown models cost ``0.0``."""
    price = pricing.get(model)
    if price is None:
        return 0.0
    prompt_cost = prompt_tokens / TOKENS_PER_UNIT * price.input_per_million
    completion_cost = completion_tokens / TOKENS_PER_UNIT * price.output_per_million
    return round(prompt_cost + completion_cost, COST_PRECISION)


def count_tokens(text: str, model: str) -> int:
    """Approximate the number of tokens in *text*.

    Averages a byte-length estimate and a word-count estimate. Source code
    tokenizes more densely, so the coder model uses tighter factors.
    """
    char_count = len(text.encode('utf-8'))
    word_count = len(_WORD_RE.findall(text))

    if model == CODER_MODEL:
        char_estimate = char_count / 3.5
        word_estimate = word_count * 1.5
    else:
        char_estimate = char_count / 4
        word_estimate = word_count * 1.3

    return int(math.ceil((char_estimate + word_estimate) / 2))
