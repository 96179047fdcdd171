"""Logging utilities."""

from .utils import StreamDispatcher, redact, setup_file_logger

__all__ = ["StreamDispatcher", "redact", "setup_file_logger"]
