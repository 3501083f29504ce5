"""core.settings

Provider settings and the resolver that merges caller-supplied values with
the stored configuration.

Stored configuration is read from the process environment after loading an
optional ``.env`` file (python-dotenv). Resolution *fails closed*: anything
that cannot be validated yields a disabled `Settings` instead of an
exception, so an unusable provider simply reports itself as not configured.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = 'https://api.deepseek.com/v1'
DEFAULT_MODEL = 'deepseek-chat'
DEFAULT_MAX_TOKENS = 4096

# Environment variable -> Settings field
_ENV_VARS: dict[str, tuple[str, ...]] = {
    'enabled': ('DEEPSEEK_ENABLED',),
    'api_key': ('DEEPSEEK_API_KEY',),
    'endpoint': ('DEEPSEEK_ENDPOINT', 'DEEPSEEK_BASE_URL'),
    'model': ('DEEPSEEK_MODEL',),
    'temperature': ('DEEPSEEK_TEMPERATURE',),
    'max_tokens': ('DEEPSEEK_MAX_TOKENS',),
    'timeout_seconds': ('DEEPSEEK_TIMEOUT',),
}


class Settings(BaseModel):
    """Resolved provider configuration."""

    enabled: bool = False
    api_key: SecretStr | None = Field(None, validation_alias=AliasChoices('api_key', 'apiKey'))
    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    max_tokens: int = Field(DEFAULT_MAX_TOKENS, ge=1, validation_alias=AliasChoices('max_tokens', 'maxTokens'))
    timeout_seconds: int | None = Field(
        None,
        gt=0,
        validation_alias=AliasChoices('timeout_seconds', 'timeoutSeconds', 'timeout'),
    )

    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    @field_validator('endpoint')
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip('/') or DEFAULT_ENDPOINT

    @field_validator('temperature', 'timeout_seconds', mode='before')
    @classmethod
    def _blank_is_unset(cls, v: Any) -> Any:  # noqa: ANN401
        # Form/env sources hand over '' for "not set"
        return None if v == '' else v

    @property
    def api_key_value(self) -> str:
        return self.api_key.get_secret_value() if self.api_key is not None else ''

    @property
    def is_usable(self) -> bool:
        """`enabled` and a non-empty API key."""
        return self.enabled and bool(self.api_key_value.strip())


def _as_field_dict(source: Settings | Mapping[str, Any]) -> dict[str, Any]:
    """Normalise *source* to a dict keyed by field name, holding only set keys."""
    settings = source if isinstance(source, Settings) else Settings.model_validate(dict(source))
    return settings.model_dump(exclude_unset=True)


def resolve_settings(
    explicit: Settings | Mapping[str, Any] | None,
    stored: Settings | Mapping[str, Any] | None,
) -> Settings:
    """Merge *explicit* over *stored*, field by field.

    Parameters
    ----------
    explicit
        Caller-supplied settings. When ``None`` the stored configuration is
        used verbatim.
    stored
        The persisted plugin configuration.

    Returns
    -------
    Settings
        The merged settings, or a disabled `Settings` when either input is
        invalid. Never raises.

    """
    try:
        merged = _as_field_dict(stored) if stored is not None else {}
        if explicit is not None:
            merged.update(_as_field_dict(explicit))
        return Settings.model_validate(merged)
    except (ValidationError, TypeError, ValueError) as exc:
        logger.warning('Invalid provider configuration, treating provider as not configured: %s', exc)
        return Settings(enabled=False)


def load_stored_settings(env_file: str | os.PathLike[str] | None = None) -> dict[str, Any]:
    """Read the stored configuration from ``.env`` and the environment.

    Only variables that are actually present are returned, so the result can
    be merged under explicit settings without clobbering anything.
    """
    load_dotenv(env_file)
    stored: dict[str, Any] = {}
    for field_name, names in _ENV_VARS.items():
        for name in names:
            if (value := os.getenv(name)) is not None:
                stored[field_name] = value
                break
    return stored
