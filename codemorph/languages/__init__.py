"""Language detection and extension lookup."""

from .detection import (
    DETECTION_RULES,
    FILENAME_LANGUAGES,
    detect_language,
    language_from_file_name,
)
from .extensions import DEFAULT_EXTENSION, LANGUAGE_EXTENSIONS, extension_for

__all__ = [
    "DEFAULT_EXTENSION",
    "DETECTION_RULES",
    "FILENAME_LANGUAGES",
    "LANGUAGE_EXTENSIONS",
    "detect_language",
    "extension_for",
    "language_from_file_name",
]
