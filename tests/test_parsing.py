from __future__ import annotations

from codemorph.parsing import (
    extract_code,
    extract_explanation,
    fenced_blocks,
    parse_response,
)
from codemorph.types import EXTRACTION_FAILURE


def test_parse_formatted_reply():
    raw = (
        "**Transformed Code:**\n"
        "```javascript\n"
        "function greet(name) { return name; }\n"
        "```\n\n"
        "**Explanation:**\n"
        "Converted to JS."
    )
    parsed = parse_response(raw)
    assert parsed.code == "function greet(name) { return name; }"
    assert parsed.explanation == "Converted to JS."
    assert not parsed.extraction_failed


def test_missing_code_block_yields_sentinel():
    parsed = parse_response("Sorry, I cannot help with that.")
    assert parsed.code == EXTRACTION_FAILURE
    assert parsed.extraction_failed
    assert parsed.explanation == "Sorry, I cannot help with that."


def test_first_block_wins():
    raw = "```js\nfirst()\n```\ntext\n```js\nsecond()\n```"
    assert extract_code(raw) == "first()"
    assert fenced_blocks(raw) == ["first()", "second()"]


def test_block_body_is_trimmed_and_untagged_fence_accepted():
    raw = "   \n```\n\n  x = 1\n\n```   "
    assert extract_code(raw) == "x = 1"


def test_symbol_tags_accepted():
    assert extract_code("```c++\nint x;\n```") == "int x;"
    assert extract_code("```c#\nvar x = 1;\n```") == "var x = 1;"


def test_crlf_line_endings():
    parsed = parse_response(
        "```python\r\nprint(1)\r\n```\r\n**Explanation:**\r\nSame."
    )
    assert parsed.code == "print(1)"
    assert parsed.explanation == "Same."


def test_explanation_stops_at_next_heading():
    raw = "```go\nx\n```\n## Explanation\nUses goroutines.\n## Notes\nNone."
    assert extract_explanation(raw) == "Uses goroutines."


def test_explanation_falls_back_to_text_after_last_fence():
    raw = "```py\nx = 1\n```\nRenamed the variable."
    assert extract_explanation(raw) == "Renamed the variable."


def test_explanation_falls_back_to_whole_reply():
    raw = "Intro\n```js\na\n```"
    assert extract_explanation(raw) == raw


def test_empty_explanation_under_heading():
    raw = "```py\nx\n```\n**Explanation:**\n"
    assert extract_explanation(raw) == ""


def test_empty_reply():
    parsed = parse_response("")
    assert parsed.code == EXTRACTION_FAILURE
    assert parsed.explanation == ""


def test_heading_inside_code_block_is_ignored():
    raw = (
        "```python\n"
        "def slow():\n"
        "    # Explanation: cached for speed\n"
        "    return 1\n"
        "```\n\n"
        "**Explanation:**\n"
        "Added caching."
    )
    parsed = parse_response(raw)
    assert parsed.code.startswith("def slow():")
    assert parsed.explanation == "Added caching."


def test_hash_lines_do_not_end_explanation():
    raw = (
        "```c\nint x;\n```\n"
        "**Explanation:**\n"
        "Replaced the header with\n"
        "#include <stdint.h>\n"
        "so sizes are fixed."
    )
    assert extract_explanation(raw) == (
        "Replaced the header with\n#include <stdint.h>\nso sizes are fixed."
    )


def test_fenced_snippet_inside_explanation_is_kept():
    raw = (
        "```go\nx\n```\n"
        "**Explanation:**\n"
        "Run it with:\n"
        "```sh\n# build first\ngo build\n```\n"
        "Done.\n"
        "**Notes:**\nNone."
    )
    assert extract_explanation(raw) == (
        "Run it with:\n```sh\n# build first\ngo build\n```\nDone."
    )
