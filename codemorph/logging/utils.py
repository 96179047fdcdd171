# Copyright (c) Meta Platforms, Inc. and affiliates.
# Modifications copyright (c) 2025 Logan Martel.
# Adapted from https://github.com/meta-pytorch/KernelAgent (Apache-2.0).

"""Logging helpers (redaction, rotating logs, stream dispatch)."""

from __future__ import annotations

import logging
import sys
import threading

from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TextIO

STREAM_MODES = ("stdout", "file", "both", "none")

_REDACT_KEYS = {
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
}


def redact(text: str) -> str:
    """Scrub API key variable names from streamed text."""

    if not text:
        return ""
    cleaned = text
    for key in _REDACT_KEYS:
        if key in cleaned:
            cleaned = cleaned.replace(key, "<REDACTED_KEY>")
    return cleaned


def setup_file_logger(
    log_file: Path, name: str = "codemorph", level: int = logging.INFO
) -> logging.Logger:
    """Configure a rotating file logger (idempotent per file)."""

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    marker = str(log_file)
    if not any(
        isinstance(handler, RotatingFileHandler)
        and getattr(handler, "_tap_tag", None) == marker
        for handler in logger.handlers
    ):
        handler = RotatingFileHandler(
            log_file, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s %(name)s: %(message)s"
            )
        )
        handler._tap_tag = marker  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


class StreamDispatcher:
    """Mirrors streamed model fragments to a log file and/or stdout."""

    def __init__(
        self,
        log_path: Optional[Path] = None,
        *,
        mode: str = "stdout",
        stream: Optional[TextIO] = None,
    ) -> None:
        if mode not in STREAM_MODES:
            raise ValueError(
                f"Unknown stream mode '{mode}'; expected one of {STREAM_MODES}"
            )
        self.log_path = log_path
        self.mode = mode
        self._stream = stream
        self._lock = threading.Lock()

    def __call__(self, chunk: Optional[str]) -> None:
        self.emit(chunk)

    def emit(self, chunk: Optional[str]) -> None:
        """Handle a streamed chunk."""

        if not chunk or self.mode == "none":
            return
        text = redact(chunk)
        if self.mode in {"file", "both"} and self.log_path is not None:
            with self._lock:
                self.log_path.parent.mkdir(parents=True, exist_ok=True)
                with self.log_path.open("a", encoding="utf-8") as handle:
                    handle.write(text)
        if self.mode in {"stdout", "both"}:
            out = self._stream or sys.stdout
            out.write(text)
            out.flush()
