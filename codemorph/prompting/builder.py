"""Build the prompts sent to the model collaborator."""

from __future__ import annotations

from typing import Optional

from codemorph.prompting.renderer import JinjaPromptRenderer, PromptRenderer
from codemorph.prompting.types import PromptTaskSpec
from codemorph.types import SimpleTransformRequest, TransformRequest

_DEFAULT_RENDERER: Optional[JinjaPromptRenderer] = None


def _renderer(renderer: Optional[PromptRenderer]) -> PromptRenderer:
    global _DEFAULT_RENDERER
    if renderer is not None:
        return renderer
    if _DEFAULT_RENDERER is None:
        _DEFAULT_RENDERER = JinjaPromptRenderer()
    return _DEFAULT_RENDERER


def build_prompt(
    request: TransformRequest,
    source_language: str,
    *,
    renderer: Optional[PromptRenderer] = None,
) -> str:
    """Render the full-form transformation prompt."""

    spec = PromptTaskSpec(
        kind="transform",
        metadata={
            "mode": request.mode,
            "source_language": source_language,
            "target_language": request.target_language,
            "instructions": request.instructions or "",
            "file_name": request.file_name or "",
            "code": request.code,
        },
    )
    return _renderer(renderer).render(spec).message.content


def build_simple_prompt(
    request: SimpleTransformRequest,
    source_language: str,
    *,
    renderer: Optional[PromptRenderer] = None,
) -> str:
    spec = PromptTaskSpec(
        kind="simple_transform",
        metadata={
            "source_language": source_language,
            "target_language": request.target_language,
            "instructions": request.instructions or "",
            "code": request.code,
        },
    )
    return _renderer(renderer).render(spec).message.content


def build_system_prompt(
    *, renderer: Optional[PromptRenderer] = None
) -> str:
    rendered = _renderer(renderer).render(PromptTaskSpec(kind="system"))
    return rendered.message.content
