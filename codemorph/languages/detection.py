"""First-match heuristics for guessing a programming language."""

from __future__ import annotations

import re

from pathlib import PurePath
from typing import Dict, Optional, Sequence, Tuple

from codemorph.types import UNKNOWN_LANGUAGE, DetectionRule

FILENAME_LANGUAGES: Dict[str, str] = {
    "py": "Python",
    "js": "JavaScript",
    "ts": "TypeScript",
    "java": "Java",
    "cpp": "C++",
    "c": "C",
    "cs": "C#",
    "go": "Go",
    "rs": "Rust",
    "php": "PHP",
    "rb": "Ruby",
    "swift": "Swift",
    "kt": "Kotlin",
    "scala": "Scala",
    "pl": "Perl",
    "sh": "Shell",
    "ps1": "PowerShell",
    "sql": "SQL",
    "r": "R",
    "m": "MATLAB",
    "html": "HTML",
    "css": "CSS",
}

# Order matters: the Python ``def ...():`` rule shadows the looser Ruby
# ``def`` rule, so Ruby only wins for defs without a trailing colon.
DETECTION_RULES: Tuple[DetectionRule, ...] = (
    DetectionRule.compile(r"def\s+\w+\s*\(.*\)\s*:", "Python"),
    DetectionRule.compile(r"function\s+\w+\s*\(.*\)\s*{", "JavaScript"),
    DetectionRule.compile(r"public\s+class\s+\w+", "Java"),
    DetectionRule.compile(r"#include\s*<.*>", "C++"),
    DetectionRule.compile(r"using\s+System;", "C#"),
    DetectionRule.compile(r"func\s+\w+\s*\(.*\)", "Go"),
    DetectionRule.compile(r"fn\s+\w+\s*\(.*\)", "Rust"),
    DetectionRule.compile(r"<\?php", "PHP"),
    DetectionRule.compile(r"def\s+\w+", "Ruby"),
    DetectionRule.compile(r"sub\s+\w+\s*{", "Perl"),
    DetectionRule.compile(r"console\.log", "JavaScript"),
    DetectionRule.compile(r"print\s*\(", "Python"),
    DetectionRule.compile(r"System\.out\.println", "Java"),
    DetectionRule.compile(r"cout\s*<<", "C++"),
    DetectionRule.compile(r"SELECT\s+.*\s+FROM", "SQL", re.IGNORECASE),
    DetectionRule.compile(r"<html|<div|<span", "HTML", re.IGNORECASE),
    DetectionRule.compile(r"\{[^}]*color\s*:", "CSS"),
)


def language_from_file_name(file_name: Optional[str]) -> Optional[str]:
    """Return the language implied by ``file_name``'s extension, if known."""

    if not file_name:
        return None
    base = PurePath(file_name).name
    if "." not in base:
        return None
    ext = base.rsplit(".", 1)[1].lower()
    return FILENAME_LANGUAGES.get(ext)


def detect_language(
    content: str,
    file_name: Optional[str] = None,
    *,
    rules: Sequence[DetectionRule] = DETECTION_RULES,
) -> str:
    """Guess the language of ``content``.

    Filename evidence wins outright. Otherwise the first rule whose pattern
    matches anywhere in the content decides; ``Unknown`` when none does.
    """

    by_name = language_from_file_name(file_name)
    if by_name is not None:
        return by_name
    for rule in rules:
        if rule.matches(content or ""):
            return rule.language
    return UNKNOWN_LANGUAGE


__all__ = [
    "DETECTION_RULES",
    "FILENAME_LANGUAGES",
    "detect_language",
    "language_from_file_name",
]
