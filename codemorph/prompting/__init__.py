"""Prompt templates and rendering."""

from codemorph.prompting.builder import (
    build_prompt,
    build_simple_prompt,
    build_system_prompt,
)
from codemorph.prompting.manager import PromptManager
from codemorph.prompting.renderer import JinjaPromptRenderer, PromptRenderer
from codemorph.prompting.types import (
    ChatMessage,
    PromptTaskSpec,
    RenderedPrompt,
)

__all__ = [
    "ChatMessage",
    "JinjaPromptRenderer",
    "PromptManager",
    "PromptRenderer",
    "PromptTaskSpec",
    "RenderedPrompt",
    "build_prompt",
    "build_simple_prompt",
    "build_system_prompt",
]
