"""Transformation orchestrator: detect, prompt, stream, parse."""

from __future__ import annotations

import logging
import re
import threading

from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional

from dotenv import load_dotenv

from codemorph.configuration import (
    DEFAULT_CONFIG_PATH,
    build_settings,
    load_config,
)
from codemorph.exceptions import (
    InvalidRequestError,
    MissingCollaboratorError,
    TransformCancelledError,
)
from codemorph.languages import detect_language, extension_for
from codemorph.llm.providers import ModelCall, load_provider
from codemorph.logging import StreamDispatcher
from codemorph.parsing import parse_response
from codemorph.preprocessing import clean_content
from codemorph.prompting import (
    JinjaPromptRenderer,
    PromptManager,
    build_prompt,
    build_simple_prompt,
    build_system_prompt,
)
from codemorph.types import (
    DEFAULT_BASE_NAME,
    TRANSFORM_MODES,
    SimpleTransformRequest,
    SimpleTransformResult,
    TransformRequest,
    TransformResult,
)

FragmentHandler = Callable[[str], None]

_DOTENV_LOADED = False
_FINAL_EXTENSION = re.compile(r"\.[^./\\]*$")
LOGGER = logging.getLogger(__name__)


def suggest_file_name(
    target_language: str,
    file_name: Optional[str] = None,
    *,
    default_base: str = DEFAULT_BASE_NAME,
) -> str:
    """Original filename minus its extension, plus the target extension."""

    base = _FINAL_EXTENSION.sub("", file_name) if file_name else ""
    return f"{base or default_base}{extension_for(target_language)}"


def _require_text(value: Optional[str], field_name: str) -> None:
    if not value or not value.strip():
        raise InvalidRequestError(f"'{field_name}' must not be empty")


def _open_stream(model_call: Any, prompt: str) -> Iterator[str]:
    stream = getattr(model_call, "stream", None)
    if callable(stream):
        return iter(stream(prompt))
    if callable(model_call):
        return iter(model_call(prompt))
    raise MissingCollaboratorError(
        f"Model collaborator {model_call!r} has no stream() method"
    )


class TransformOrchestrator:
    """High level controller for a single code transformation."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
        model_call: Optional[ModelCall | Callable[[str], Any]] = None,
        prompt_manager: Optional[PromptManager] = None,
        on_fragment: Optional[FragmentHandler] = None,
    ) -> None:
        self.config_path = config_path
        self._config_root = (
            Path(config_path).resolve().parent
            if config_path is not None
            else Path.cwd()
        )
        self._ensure_dotenv()
        if config is None:
            config = self._load_default_config(config_path)
        self.config = config
        self.settings = build_settings(
            self.config, config_root=self._config_root
        )
        self.prompt_manager = prompt_manager or PromptManager(
            extra_dirs=self.settings.prompts.overrides
        )
        self._renderer = JinjaPromptRenderer(self.prompt_manager)
        self.model_call = (
            model_call if model_call is not None else self._load_model_call()
        )
        self._on_fragment = on_fragment or self._build_dispatcher()

    @staticmethod
    def _ensure_dotenv() -> None:
        global _DOTENV_LOADED
        if _DOTENV_LOADED:
            return
        load_dotenv()
        _DOTENV_LOADED = True

    @staticmethod
    def _load_default_config(config_path: Optional[Path]) -> Dict[str, Any]:
        if config_path is not None:
            return load_config(Path(config_path))
        if DEFAULT_CONFIG_PATH.exists():
            return load_config(DEFAULT_CONFIG_PATH)
        return {}

    def _load_model_call(self) -> Optional[ModelCall]:
        llm = self.settings.llm
        if not llm.configured:
            LOGGER.debug("No LLM configured; a model_call must be supplied")
            return None
        return load_provider(
            llm.provider_config(),
            system_prompt=build_system_prompt(renderer=self._renderer),
        )

    def _build_dispatcher(self) -> Optional[FragmentHandler]:
        streaming = self.settings.llm.streaming
        if streaming.mode == "none":
            return None
        return StreamDispatcher(streaming.log_path, mode=streaming.mode)

    def transform(
        self,
        request: TransformRequest,
        *,
        cancel_event: Optional[threading.Event] = None,
        clean: Optional[bool] = None,
    ) -> TransformResult:
        """Translate or modernize ``request.code`` via the model.

        ``clean`` overrides the configured document-artifact cleanup.
        """

        _require_text(request.code, "code")
        _require_text(request.target_language, "target_language")
        if request.mode not in TRANSFORM_MODES:
            raise InvalidRequestError(
                f"Unknown mode '{request.mode}'; expected one of "
                f"{TRANSFORM_MODES}"
            )
        model_call = self._require_model_call()

        code = request.code.strip()
        if clean is None:
            clean = self.settings.transform.clean_content
        if clean:
            code = clean_content(code)
            _require_text(code, "code")
        source_language = request.source_language or detect_language(
            code, request.file_name
        )
        LOGGER.info(
            "%s %s -> %s%s",
            request.mode,
            source_language,
            request.target_language,
            f" ({request.file_name})" if request.file_name else "",
        )

        prompt = build_prompt(
            replace(request, code=code),
            source_language,
            renderer=self._renderer,
        )
        raw = self._collect(model_call, prompt, cancel_event)
        parsed = parse_response(raw)
        if parsed.extraction_failed:
            LOGGER.warning(
                "No fenced code block in model response (%d chars)", len(raw)
            )
        return TransformResult(
            transformed_code=parsed.code,
            source_language=source_language,
            target_language=request.target_language,
            explanation=parsed.explanation,
            suggested_file_name=suggest_file_name(
                request.target_language,
                request.file_name,
                default_base=self.settings.transform.default_base_name,
            ),
        )

    def transform_simple(
        self,
        request: SimpleTransformRequest,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> SimpleTransformResult:
        """Simplified form: language detected from content only."""

        _require_text(request.code, "code")
        _require_text(request.target_language, "target_language")
        model_call = self._require_model_call()

        source_language = detect_language(request.code)
        LOGGER.info(
            "simple transform %s -> %s",
            source_language,
            request.target_language,
        )
        prompt = build_simple_prompt(
            request, source_language, renderer=self._renderer
        )
        parsed = parse_response(
            self._collect(model_call, prompt, cancel_event)
        )
        return SimpleTransformResult(
            transformed_code=parsed.code,
            explanation=parsed.explanation,
            filename=suggest_file_name(
                request.target_language,
                default_base=self.settings.transform.default_base_name,
            ),
        )

    def _require_model_call(self) -> Any:
        if self.model_call is None:
            raise MissingCollaboratorError(
                "No model collaborator configured; set "
                "`transformation.llm.provider` or pass model_call"
            )
        return self.model_call

    def _collect(
        self,
        model_call: Any,
        prompt: str,
        cancel_event: Optional[threading.Event],
    ) -> str:
        """Concatenate streamed fragments in the order they arrive."""

        if cancel_event is not None and cancel_event.is_set():
            raise TransformCancelledError("Transformation cancelled")
        LOGGER.debug("Prompt is %d chars", len(prompt))
        stream = _open_stream(model_call, prompt)
        parts: list[str] = []
        try:
            for fragment in stream:
                if cancel_event is not None and cancel_event.is_set():
                    raise TransformCancelledError(
                        "Transformation cancelled while streaming"
                    )
                if not fragment:
                    continue
                parts.append(fragment)
                if self._on_fragment is not None:
                    self._on_fragment(fragment)
        finally:
            close = getattr(stream, "close", None)
            if callable(close):
                close()
        return "".join(parts)


def transform(
    request: TransformRequest,
    model_call: Optional[ModelCall | Callable[[str], Any]],
    *,
    cancel_event: Optional[threading.Event] = None,
    on_fragment: Optional[FragmentHandler] = None,
) -> TransformResult:
    """One-shot transformation without a config file."""

    orchestrator = TransformOrchestrator(
        config={}, model_call=model_call, on_fragment=on_fragment
    )
    return orchestrator.transform(request, cancel_event=cancel_event)


__all__ = [
    "TransformOrchestrator",
    "suggest_file_name",
    "transform",
]
