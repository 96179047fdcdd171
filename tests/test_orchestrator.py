from __future__ import annotations

import threading

from typing import List

import pytest

from codemorph import transform
from codemorph.exceptions import (
    InvalidRequestError,
    MissingCollaboratorError,
    TransformCancelledError,
)
from codemorph.llm.providers import EchoProvider
from codemorph.orchestrator import TransformOrchestrator, suggest_file_name
from codemorph.types import (
    EXTRACTION_FAILURE,
    SimpleTransformRequest,
    TransformRequest,
)

GOOD_REPLY = (
    "**Transformed Code:**\n```javascript\n",
    "function greet(name) { return name; }\n",
    "```\n\n**Explanation:**\nConverted to JS.",
)


def _orchestrator(model, **kwargs) -> TransformOrchestrator:
    return TransformOrchestrator(config={}, model_call=model, **kwargs)


def test_full_transformation(scripted_model):
    model = scripted_model(*GOOD_REPLY)
    result = _orchestrator(model).transform(
        TransformRequest(
            code="def greet(name): return name",
            target_language="JavaScript",
            file_name="script.py",
        )
    )
    assert result.transformed_code == "function greet(name) { return name; }"
    assert result.explanation == "Converted to JS."
    assert result.source_language == "Python"
    assert result.target_language == "JavaScript"
    assert result.suggested_file_name == "script.js"
    assert len(model.prompts) == 1
    assert "SOURCE LANGUAGE: Python" in model.prompts[0]
    assert "ORIGINAL FILE: script.py" in model.prompts[0]


def test_supplied_source_language_skips_detection(scripted_model):
    model = scripted_model(*GOOD_REPLY)
    result = _orchestrator(model).transform(
        TransformRequest(
            code="def greet(name): return name",
            target_language="JavaScript",
            source_language="Ruby",
        )
    )
    assert result.source_language == "Ruby"
    assert "```ruby\n" in model.prompts[0]
    assert result.suggested_file_name == "transformed_code.js"


@pytest.mark.parametrize(
    "request_kwargs",
    [
        {"code": "", "target_language": "Go"},
        {"code": "   \n", "target_language": "Go"},
        {"code": "x = 1", "target_language": ""},
        {"code": "x = 1", "target_language": "Go", "mode": "rewrite"},
    ],
)
def test_invalid_requests_fail_before_model_call(
    scripted_model, request_kwargs
):
    model = scripted_model(*GOOD_REPLY)
    with pytest.raises(InvalidRequestError):
        _orchestrator(model).transform(TransformRequest(**request_kwargs))
    assert model.prompts == []


def test_invalid_request_checked_before_collaborator():
    orchestrator = TransformOrchestrator(config={})
    with pytest.raises(InvalidRequestError):
        orchestrator.transform(TransformRequest(code="", target_language="Go"))


def test_missing_collaborator():
    orchestrator = TransformOrchestrator(config={})
    assert orchestrator.model_call is None
    with pytest.raises(MissingCollaboratorError):
        orchestrator.transform(
            TransformRequest(code="x = 1", target_language="Go")
        )
    with pytest.raises(MissingCollaboratorError):
        orchestrator.transform_simple(
            SimpleTransformRequest(code="x = 1", target_language="Go")
        )


def test_collaborator_without_stream_is_rejected():
    with pytest.raises(MissingCollaboratorError):
        _orchestrator(object()).transform(
            TransformRequest(code="x = 1", target_language="Go")
        )


def test_plain_callable_collaborator():
    result = _orchestrator(lambda prompt: iter(["```\nx\n```"])).transform(
        TransformRequest(code="x = 1", target_language="Go")
    )
    assert result.transformed_code == "x"


def test_fragments_forwarded_in_order(scripted_model):
    received: List[str] = []
    model = scripted_model("```go\n", "", "a := 1\n", "```")
    result = _orchestrator(model, on_fragment=received.append).transform(
        TransformRequest(code="a = 1", target_language="Go")
    )
    assert received == ["```go\n", "a := 1\n", "```"]
    assert result.transformed_code == "a := 1"
    assert model.streams[0].closed


def test_extraction_failure_is_a_value(scripted_model):
    model = scripted_model("Sorry, ", "I cannot.")
    result = _orchestrator(model).transform(
        TransformRequest(code="x = 1", target_language="Go")
    )
    assert result.transformed_code == EXTRACTION_FAILURE
    assert result.extraction_failed
    assert result.explanation == "Sorry, I cannot."


def test_collaborator_errors_propagate(scripted_model):
    model = scripted_model("```go\n", error=ConnectionError("reset"))
    with pytest.raises(ConnectionError, match="reset"):
        _orchestrator(model).transform(
            TransformRequest(code="x = 1", target_language="Go")
        )
    assert model.streams[0].closed


def test_cancel_before_streaming(scripted_model):
    model = scripted_model(*GOOD_REPLY)
    event = threading.Event()
    event.set()
    with pytest.raises(TransformCancelledError):
        _orchestrator(model).transform(
            TransformRequest(code="x = 1", target_language="Go"),
            cancel_event=event,
        )
    assert model.prompts == []


def test_cancel_while_streaming(scripted_model):
    event = threading.Event()
    received: List[str] = []

    def on_fragment(fragment: str) -> None:
        received.append(fragment)
        event.set()

    model = scripted_model(*GOOD_REPLY)
    with pytest.raises(TransformCancelledError):
        _orchestrator(model, on_fragment=on_fragment).transform(
            TransformRequest(code="x = 1", target_language="Go"),
            cancel_event=event,
        )
    assert received == [GOOD_REPLY[0]]
    assert model.streams[0].closed


def test_content_cleanup_toggle(scripted_model):
    code = "Page 1\n```python\nprint('x')\n```\n"
    model = scripted_model(*GOOD_REPLY)
    orchestrator = _orchestrator(model)
    orchestrator.transform(TransformRequest(code=code, target_language="Go"))
    assert "Page 1" not in model.prompts[0]
    assert "```python\nprint('x')\n```" in model.prompts[0]

    orchestrator.transform(
        TransformRequest(code=code, target_language="Go"), clean=False
    )
    assert "Page 1" in model.prompts[1]


def test_cleanup_disabled_in_config(scripted_model):
    model = scripted_model(*GOOD_REPLY)
    orchestrator = TransformOrchestrator(
        config={"transformation": {"transform": {"clean_content": False}}},
        model_call=model,
    )
    orchestrator.transform(
        TransformRequest(code="Page 1\nprint('x')", target_language="Go")
    )
    assert "Page 1" in model.prompts[0]


def test_simple_transformation(scripted_model):
    model = scripted_model(*GOOD_REPLY)
    result = _orchestrator(model).transform_simple(
        SimpleTransformRequest(
            code="console.log('x')", target_language="Python"
        )
    )
    assert result.filename == "transformed_code.py"
    assert result.transformed_code == "function greet(name) { return name; }"
    assert "```javascript\nconsole.log('x')\n```" in model.prompts[0]
    assert result.to_dict()["filename"] == "transformed_code.py"


def test_simple_transformation_uses_configured_base_name(scripted_model):
    orchestrator = TransformOrchestrator(
        config={
            "transformation": {"transform": {"default_base_name": "output"}}
        },
        model_call=scripted_model(*GOOD_REPLY),
    )
    result = orchestrator.transform_simple(
        SimpleTransformRequest(code="x = 1", target_language="Go")
    )
    assert result.filename == "output.go"


def test_echo_collaborator_round_trip():
    result = transform(
        TransformRequest(
            code="def greet(name): return name",
            target_language="JavaScript",
            file_name="script.py",
        ),
        EchoProvider(),
    )
    assert result.transformed_code == "def greet(name): return name"
    assert result.suggested_file_name == "script.js"
    assert result.explanation == "[explanation of changes made]"


def test_result_payload_keys(scripted_model):
    result = _orchestrator(scripted_model(*GOOD_REPLY)).transform(
        TransformRequest.from_dict(
            {
                "content": "def greet(name): return name",
                "targetLanguage": "JavaScript",
                "fileName": "script.py",
            }
        )
    )
    assert result.to_dict() == {
        "transformedCode": "function greet(name) { return name; }",
        "sourceLanguage": "Python",
        "targetLanguage": "JavaScript",
        "explanation": "Converted to JS.",
        "suggestedFileName": "script.js",
    }


@pytest.mark.parametrize(
    "target, file_name, expected",
    [
        ("JavaScript", "script.py", "script.js"),
        ("Go", None, "transformed_code.go"),
        ("Go", "archive.tar.gz", "archive.tar.go"),
        ("Go", "src/main.py", "src/main.go"),
        ("Go", "Makefile", "Makefile.go"),
        ("Go", "v1.2/readme", "v1.2/readme.go"),
        ("Klingon", "a.py", "a.txt"),
    ],
)
def test_suggest_file_name(target, file_name, expected):
    assert suggest_file_name(target, file_name) == expected
