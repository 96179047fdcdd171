"""Shared dataclasses for prompt rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

Role = Literal["system", "user", "assistant"]


@dataclass(slots=True)
class ChatMessage:
    """Single chat message exchanged with a model."""

    role: Role
    content: str


@dataclass(slots=True)
class PromptTaskSpec:
    """Which prompt to render and the values that fill it."""

    kind: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class RenderedPrompt:
    """Result of rendering a prompt via a PromptRenderer."""

    message: ChatMessage
    template: Optional[str] = None
