"""Custom exceptions for the code transformation pipeline."""


class TransformError(RuntimeError):
    """Base exception for transformation failures."""


class InvalidRequestError(TransformError, ValueError):
    """Raised when a request is missing required fields."""


class MissingCollaboratorError(TransformError):
    """Raised when no model-call collaborator is configured."""


class TransformCancelledError(TransformError):
    """Raised when the caller cancels while the model is still streaming."""


class PathSafetyError(Exception):
    """Raised when an archive path would escape its output directory."""
