from __future__ import annotations

from pathlib import Path

import pytest

from codemorph.prompting import (
    JinjaPromptRenderer,
    PromptManager,
    PromptTaskSpec,
    build_prompt,
    build_simple_prompt,
    build_system_prompt,
)
from codemorph.types import SimpleTransformRequest, TransformRequest


def test_full_prompt_carries_request_fields(prompt_manager: PromptManager):
    renderer = JinjaPromptRenderer(prompt_manager)
    request = TransformRequest(
        code="print(1)",
        target_language="Go",
        mode="modernize",
        instructions="Keep names",
        file_name="job.py",
    )
    prompt = build_prompt(request, "Python", renderer=renderer)
    assert prompt.startswith("TASK: MODERNIZE CODE TRANSFORMATION")
    assert "SOURCE LANGUAGE: Python" in prompt
    assert "TARGET LANGUAGE: Go" in prompt
    assert "SPECIAL INSTRUCTIONS: Keep names" in prompt
    assert "ORIGINAL FILE: job.py" in prompt
    assert "```python\nprint(1)\n```" in prompt
    assert "```go\n[transformed code here]\n```" in prompt
    assert prompt.rstrip().endswith("[explanation of changes made]")


def test_full_prompt_omits_optional_sections():
    request = TransformRequest(code="x = 1", target_language="Ruby")
    prompt = build_prompt(request, "Python")
    assert prompt.startswith("TASK: TRANSLATE CODE TRANSFORMATION")
    assert "SPECIAL INSTRUCTIONS" not in prompt
    assert "ORIGINAL FILE" not in prompt


def test_prompt_does_not_escape_markup():
    request = TransformRequest(code="<div>a & b</div>", target_language="Go")
    assert "<div>a & b</div>" in build_prompt(request, "HTML")


def test_simple_prompt():
    request = SimpleTransformRequest(
        code="console.log('x')",
        target_language="Python",
        instructions="Use f-strings",
    )
    prompt = build_simple_prompt(request, "JavaScript")
    assert prompt.startswith(
        "Please transform the following code to Python."
    )
    assert "```javascript\nconsole.log('x')\n```" in prompt
    assert "SPECIAL INSTRUCTIONS: Use f-strings" in prompt


def test_system_prompt():
    prompt = build_system_prompt()
    assert prompt.startswith("You are an expert code transformation")
    assert "fenced code block" in prompt


def test_renderer_roles(prompt_manager: PromptManager):
    renderer = JinjaPromptRenderer(prompt_manager)
    system = renderer.render(PromptTaskSpec(kind="system"))
    assert system.message.role == "system"
    assert system.template == "system.j2"
    user = renderer.render(
        PromptTaskSpec(
            kind="simple_transform",
            metadata={
                "source_language": "Python",
                "target_language": "Go",
                "code": "x",
            },
        )
    )
    assert user.message.role == "user"


def test_renderer_unknown_kind(prompt_manager: PromptManager):
    renderer = JinjaPromptRenderer(prompt_manager)
    with pytest.raises(ValueError):
        renderer.render(PromptTaskSpec(kind="summarize"))


def test_override_directory_shadows_packaged_template(tmp_path: Path):
    (tmp_path / "transform.j2").write_text(
        "custom {{ mode }} to {{ target_language }}\n"
    )
    manager = PromptManager(extra_dirs=[tmp_path])
    assert manager.search_paths[0] == tmp_path
    renderer = JinjaPromptRenderer(manager)
    request = TransformRequest(code="x", target_language="Go")
    assert build_prompt(request, "Python", renderer=renderer) == (
        "custom translate to Go"
    )
    # Templates that are not overridden still come from the package.
    assert build_system_prompt(renderer=renderer).startswith("You are")


def test_missing_template_and_override_dir(
    tmp_path: Path, prompt_manager: PromptManager
):
    with pytest.raises(FileNotFoundError):
        prompt_manager.render("nope.j2")
    with pytest.raises(FileNotFoundError):
        PromptManager(extra_dirs=[tmp_path / "missing"])

