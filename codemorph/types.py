"""Core dataclasses used throughout codemorph."""

from __future__ import annotations

import re

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional, Pattern

TransformMode = Literal["translate", "modernize"]
TRANSFORM_MODES: tuple[str, ...] = ("translate", "modernize")

EXTRACTION_FAILURE = "Error: Could not extract transformed code"
UNKNOWN_LANGUAGE = "Unknown"
DEFAULT_BASE_NAME = "transformed_code"


def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


@dataclass
class TransformRequest:
    """Full-form request: code plus target, with optional hints."""

    code: str
    target_language: str
    source_language: Optional[str] = None
    mode: TransformMode = "translate"
    instructions: Optional[str] = None
    file_name: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "TransformRequest":
        """Build a request from an invocation payload.

        Accepts both the chat surface keys (``content``, ``targetLanguage``)
        and their snake_case equivalents.
        """

        return cls(
            code=_pick(payload, "content", "code") or "",
            target_language=_pick(
                payload, "targetLanguage", "target_language"
            )
            or "",
            source_language=_pick(
                payload, "sourceLanguage", "source_language"
            ),
            mode=_pick(payload, "mode") or "translate",
            instructions=_pick(payload, "instructions"),
            file_name=_pick(payload, "fileName", "file_name"),
        )


@dataclass
class SimpleTransformRequest:
    """Simplified request: source language is always auto-detected."""

    code: str
    target_language: str
    instructions: Optional[str] = None

    @classmethod
    def from_dict(
        cls, payload: Mapping[str, Any]
    ) -> "SimpleTransformRequest":
        return cls(
            code=_pick(payload, "code", "content") or "",
            target_language=_pick(
                payload, "targetLanguage", "target_language"
            )
            or "",
            instructions=_pick(payload, "instructions"),
        )


@dataclass(frozen=True)
class DetectionRule:
    """Content pattern paired with the language it indicates."""

    pattern: Pattern[str]
    language: str

    @classmethod
    def compile(
        cls, pattern: str, language: str, flags: int = 0
    ) -> "DetectionRule":
        return cls(pattern=re.compile(pattern, flags), language=language)

    def matches(self, content: str) -> bool:
        return self.pattern.search(content) is not None


@dataclass(frozen=True)
class ParsedResponse:
    """Code and explanation pulled out of a raw model reply."""

    code: str
    explanation: str

    @property
    def extraction_failed(self) -> bool:
        return self.code == EXTRACTION_FAILURE


@dataclass(frozen=True)
class TransformResult:
    """Outcome of a full-form transformation."""

    transformed_code: str
    source_language: str
    target_language: str
    explanation: str
    suggested_file_name: str

    @property
    def extraction_failed(self) -> bool:
        return self.transformed_code == EXTRACTION_FAILURE

    def to_dict(self) -> Dict[str, str]:
        return {
            "transformedCode": self.transformed_code,
            "sourceLanguage": self.source_language,
            "targetLanguage": self.target_language,
            "explanation": self.explanation,
            "suggestedFileName": self.suggested_file_name,
        }


@dataclass(frozen=True)
class SimpleTransformResult:
    """Outcome of a simplified transformation."""

    transformed_code: str
    explanation: str
    filename: str

    @property
    def extraction_failed(self) -> bool:
        return self.transformed_code == EXTRACTION_FAILURE

    def to_dict(self) -> Dict[str, str]:
        return {
            "transformedCode": self.transformed_code,
            "explanation": self.explanation,
            "filename": self.filename,
        }


@dataclass(frozen=True)
class ArchiveEntry:
    """A file pulled out of an archive; ``code`` is None for binary data."""

    path: Path
    rel_path: str
    ext: str
    code: Optional[str] = None


@dataclass
class ExtractedArchive:
    """Directory an archive was unpacked into, plus its files."""

    out_dir: Path
    files: List[ArchiveEntry] = field(default_factory=list)

    def text_files(self) -> List[ArchiveEntry]:
        return [entry for entry in self.files if entry.code is not None]
