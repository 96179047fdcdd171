"""Canonical file extensions for target languages."""

from __future__ import annotations

from typing import Dict

DEFAULT_EXTENSION = ".txt"

LANGUAGE_EXTENSIONS: Dict[str, str] = {
    "JavaScript": ".js",
    "TypeScript": ".ts",
    "Python": ".py",
    "Java": ".java",
    "C++": ".cpp",
    "C": ".c",
    "C#": ".cs",
    "Go": ".go",
    "Rust": ".rs",
    "PHP": ".php",
    "Ruby": ".rb",
    "Swift": ".swift",
    "Kotlin": ".kt",
    "Scala": ".scala",
    "Perl": ".pl",
    "Shell": ".sh",
    "PowerShell": ".ps1",
    "SQL": ".sql",
    "R": ".r",
    "MATLAB": ".m",
    "HTML": ".html",
    "CSS": ".css",
}


def extension_for(language: str) -> str:
    """Case-sensitive lookup; unmapped labels fall back to ``.txt``."""

    return LANGUAGE_EXTENSIONS.get(language, DEFAULT_EXTENSION)


__all__ = ["DEFAULT_EXTENSION", "LANGUAGE_EXTENSIONS", "extension_for"]
