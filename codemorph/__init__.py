"""codemorph package entry point."""

from .exceptions import (
    InvalidRequestError,
    MissingCollaboratorError,
    TransformCancelledError,
    TransformError,
)
from .languages import detect_language, extension_for
from .orchestrator import TransformOrchestrator, transform
from .parsing import parse_response
from .prompting import build_prompt
from .types import (
    EXTRACTION_FAILURE,
    SimpleTransformRequest,
    SimpleTransformResult,
    TransformRequest,
    TransformResult,
)

__all__ = [
    "EXTRACTION_FAILURE",
    "InvalidRequestError",
    "MissingCollaboratorError",
    "SimpleTransformRequest",
    "SimpleTransformResult",
    "TransformCancelledError",
    "TransformError",
    "TransformOrchestrator",
    "TransformRequest",
    "TransformResult",
    "build_prompt",
    "detect_language",
    "extension_for",
    "parse_response",
    "transform",
]
