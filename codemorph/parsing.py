"""Extract transformed code and explanation from a raw model reply."""

from __future__ import annotations

import re

from typing import List

from codemorph.types import EXTRACTION_FAILURE, ParsedResponse

FENCE_MARKER = "```"

# Opening fence, optional tag up to end of line (``c++`` and ``c#`` included),
# then the body up to the next closing fence.
FENCED_BLOCK = re.compile(r"```[^\n`]*\n(.*?)```", re.DOTALL)

_EXPLANATION_HEADING = re.compile(
    r"^[ \t]*(?:\*\*Explanation:?\*\*:?|#{1,6}[ \t]*Explanation:?"
    r"|Explanation:)",
    re.MULTILINE | re.IGNORECASE,
)
_NEXT_HEADING = re.compile(r"\n[ \t]*(?:\*\*|#{1,6}[ \t]+\S)")


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def fenced_blocks(text: str) -> List[str]:
    """Return the trimmed bodies of every fenced block, in order."""

    return [body.strip() for body in FENCED_BLOCK.findall(text)]


def extract_code(text: str) -> str:
    match = FENCED_BLOCK.search(text)
    if match is None:
        return EXTRACTION_FAILURE
    return match.group(1).strip()


def extract_explanation(text: str) -> str:
    """Text under the Explanation heading, with fallbacks.

    Headings inside fenced blocks are ignored. Without a heading, use
    whatever trails the last fence marker; when that is empty too, the whole
    reply.
    """

    fences = [match.span() for match in FENCED_BLOCK.finditer(text)]

    def outside_fences(pos: int) -> bool:
        return not any(start <= pos < end for start, end in fences)

    heading = next(
        (
            match
            for match in _EXPLANATION_HEADING.finditer(text)
            if outside_fences(match.start())
        ),
        None,
    )
    if heading is not None:
        end = len(text)
        for stop in _NEXT_HEADING.finditer(text, heading.end()):
            # the match starts on the newline before the heading line
            if outside_fences(stop.start() + 1):
                end = stop.start()
                break
        return text[heading.end():end].strip()
    trailing = text.split(FENCE_MARKER)[-1].strip()
    return trailing or text.strip()


def parse_response(raw: str) -> ParsedResponse:
    """Split a model reply into code (first fenced block) and explanation."""

    text = normalize_newlines(raw or "")
    return ParsedResponse(
        code=extract_code(text),
        explanation=extract_explanation(text),
    )


__all__ = [
    "FENCED_BLOCK",
    "extract_code",
    "extract_explanation",
    "fenced_blocks",
    "normalize_newlines",
    "parse_response",
]
