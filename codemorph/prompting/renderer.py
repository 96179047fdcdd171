"""Render prompt specs into chat messages via the Jinja PromptManager."""

from __future__ import annotations

from typing import Mapping, MutableMapping, Optional, Protocol

from codemorph.prompting.manager import PromptManager
from codemorph.prompting.types import (
    ChatMessage,
    PromptTaskSpec,
    RenderedPrompt,
    Role,
)

DEFAULT_TEMPLATE_MAP: Mapping[str, str] = {
    "transform": "transform.j2",
    "simple_transform": "simple_transform.j2",
    "system": "system.j2",
}


class PromptRenderer(Protocol):
    """Render a prompt for a given task specification."""

    def render(self, spec: PromptTaskSpec) -> RenderedPrompt:
        ...


class JinjaPromptRenderer:
    """Maps prompt task kinds to template names and renders them."""

    def __init__(
        self,
        prompt_manager: Optional[PromptManager] = None,
        template_map: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._prompt_manager = prompt_manager or PromptManager()
        self._template_map: MutableMapping[str, str] = dict(
            DEFAULT_TEMPLATE_MAP
        )
        if template_map:
            self._template_map.update(template_map)

    @property
    def prompt_manager(self) -> PromptManager:
        return self._prompt_manager

    def render(self, spec: PromptTaskSpec) -> RenderedPrompt:
        try:
            template_name = self._template_map[spec.kind]
        except KeyError as exc:
            raise ValueError(f"No template mapped for '{spec.kind}'") from exc
        text = self._prompt_manager.render(template_name, **spec.metadata)
        role: Role = "system" if spec.kind == "system" else "user"
        return RenderedPrompt(
            message=ChatMessage(role=role, content=text.strip()),
            template=template_name,
        )
