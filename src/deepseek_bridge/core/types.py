"""core.types

Shared DTOs and enums used throughout *deepseek_bridge*.

These models live in the **core** layer so that the vendor modules, the
*adapters*, the *registry* and host applications can depend on them without
causing circular imports.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Chat roles (OpenAI-style for broad compatibility)
# ---------------------------------------------------------------------------


class Role(StrEnum):
    system = 'system'
    user = 'user'
    assistant = 'assistant'


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class Message(BaseModel):
    """Single chat message."""

    role: Role
    content: str

    # Immutable value-object; content is sent byte-for-byte as given
    model_config = ConfigDict(frozen=True)

    def to_wire(self) -> dict[str, str]:
        return {'role': self.role.value, 'content': self.content}


# ---------------------------------------------------------------------------
# Chat request (provider-agnostic)
#   • `options` carries named knobs: top_p, frequency_penalty,
#     presence_penalty, stop, stream, code_language
# ---------------------------------------------------------------------------


class ChatRequest(BaseModel):
    """Ordered role-tagged messages plus optional per-call overrides."""

    messages: list[Message] = Field(default_factory=list)
    model: str | None = None
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(None, ge=1, description='Maximum tokens in completion')
    options: dict[str, Any] = Field(default_factory=dict)

    def get_option(self, name: str, default: Any = None) -> Any:  # noqa: ANN401
        return self.options.get(name, default)

    def with_option(self, name: str, value: Any) -> ChatRequest:  # noqa: ANN401
        """Return a copy of this request with *name* set in `options`."""
        return self.model_copy(update={'options': {**self.options, name: value}})

    def add_message(self, role: Role, content: str) -> ChatRequest:
        self.messages.append(Message(role=role, content=content))
        return self

    def add_user_message(self, content: str) -> ChatRequest:
        return self.add_message(Role.user, content)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class Usage(BaseModel):
    """Token usage as reported by the vendor.

    `cost` is only set when it was actually computed; a missing usage block
    never turns into a zero cost.
    """

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int | None = None
    cost: float | None = None


class ChatResponse(BaseModel):
    """Accumulated completion text plus usage.

    Streaming calls mutate one instance (content is appended) until the
    stream ends.
    """

    content: str = ''
    model: str | None = None
    finish_reason: str | None = None
    is_streaming: bool = False
    usage: Usage | None = None

    def append_content(self, fragment: str) -> None:
        self.content += fragment


# ---------------------------------------------------------------------------
# Model catalog entries
# ---------------------------------------------------------------------------


class ModelDescriptor(BaseModel):
    """One entry of the vendor model catalog."""

    id: str
    name: str
    context_window: int
    description: str = ''

    model_config = ConfigDict(frozen=True)

    @property
    def label(self) -> str:
        """Human label for configuration UIs."""
        return f'{self.name} - {self.description}' if self.description else self.name
