"""Shared fixtures: a scripted model collaborator and a prompt manager."""

from __future__ import annotations

import sys

from pathlib import Path
from typing import Iterable, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from codemorph.prompting import PromptManager  # noqa: E402


class ScriptedStream:
    """Iterator over canned fragments that remembers whether it was closed."""

    def __init__(
        self, fragments: Iterable[str], error: Optional[Exception] = None
    ) -> None:
        self._fragments = iter(list(fragments))
        self._error = error
        self.closed = False

    def __iter__(self) -> "ScriptedStream":
        return self

    def __next__(self) -> str:
        try:
            return next(self._fragments)
        except StopIteration:
            if self._error is not None:
                raise self._error
            raise

    def close(self) -> None:
        self.closed = True


class ScriptedModel:
    """Fake collaborator: records prompts and streams scripted fragments."""

    def __init__(
        self,
        fragments: Iterable[str] = (),
        *,
        error: Optional[Exception] = None,
    ) -> None:
        self.fragments = list(fragments)
        self.error = error
        self.prompts: List[str] = []
        self.streams: List[ScriptedStream] = []

    def stream(self, prompt: str) -> ScriptedStream:
        self.prompts.append(prompt)
        stream = ScriptedStream(self.fragments, self.error)
        self.streams.append(stream)
        return stream


@pytest.fixture()
def scripted_model():
    """Factory for ``ScriptedModel`` instances."""

    def _make(
        *fragments: str, error: Optional[Exception] = None
    ) -> ScriptedModel:
        return ScriptedModel(fragments, error=error)

    return _make


@pytest.fixture()
def prompt_manager() -> PromptManager:
    return PromptManager()
