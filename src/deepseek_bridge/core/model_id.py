"""core.model_id

Utility for validating and parsing model identifiers of the canonical form

    "<provider>:<model_name>"

e.g. ``deepseek:deepseek-coder``. Used by the client factory to pick the
registered provider and the model it should default to.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Regular-expression helpers
# ---------------------------------------------------------------------------

_MODEL_ID_REGEX: re.Pattern[str] = re.compile(
    r'^(?P<provider>[a-z0-9_-]+):(?P<model>[a-z0-9_.-]+)$',
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class ModelId(BaseModel):
    """Value-object representing a model identifier.

    * `provider` … registry slug (e.g. ``deepseek``)
    * `model` … vendor model id (e.g. ``deepseek-chat``)

    The *raw* string is preserved for logging/debugging purposes.
    """

    provider: str = Field(..., pattern=r'^[a-z0-9_-]+$', description='provider slug')
    model: str = Field(..., pattern=r'^[a-z0-9_.-]+$', description='model name')
    raw: str = Field(..., description='original, unmodified identifier')

    model_config = {
        'frozen': True,
        'str_strip_whitespace': True,
    }

    @field_validator('provider', 'model', mode='before')
    @classmethod
    def _to_lower(cls, v: str) -> str:
        """Vendor model ids are lower-case; match case-insensitively."""
        return v.lower()

    @classmethod
    def parse(cls, raw: str) -> ModelId:
        """Parse and validate a *raw* identifier string.

        >>> ModelId.parse("deepseek:deepseek-coder")
        ModelId(provider='deepseek', model='deepseek-coder', raw='deepseek:deepseek-coder')
        """
        if (m := _MODEL_ID_REGEX.match(raw.strip())) is None:
            raise ValueError(f"Invalid ModelId format. Expected '<provider>:<model>', got: {raw}")
        return cls(provider=m.group('provider'), model=m.group('model'), raw=raw)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f'{self.provider}:{self.model}'


parse_model_id = ModelId.parse
