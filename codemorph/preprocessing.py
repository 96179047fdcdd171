"""Cleanup for code pasted from documents or uploaded as text files."""

from __future__ import annotations

import re

from codemorph.parsing import fenced_blocks, normalize_newlines

_PAGE_MARKER = re.compile(r"^[ \t]*Page \d+.*$", re.MULTILINE)
_BARE_NUMBER = re.compile(r"^[ \t]*\d+[ \t]*$", re.MULTILINE)
_BLANK_RUN = re.compile(r"\n{3,}")


def strip_document_artifacts(text: str) -> str:
    """Drop page markers, bare line numbers and form feeds."""

    cleaned = normalize_newlines(text)
    cleaned = _PAGE_MARKER.sub("", cleaned)
    cleaned = _BARE_NUMBER.sub("", cleaned)
    cleaned = cleaned.replace("\f", "")
    return _BLANK_RUN.sub("\n\n", cleaned)


def clean_content(text: str) -> str:
    """Return the code portion of ``text``.

    When the text carries markdown fences only their bodies are kept.
    """

    cleaned = strip_document_artifacts(text or "")
    blocks = fenced_blocks(cleaned)
    if blocks:
        return "\n".join(blocks).strip()
    return cleaned.strip()


__all__ = ["clean_content", "strip_document_artifacts"]
