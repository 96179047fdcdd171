# Copyright (c) Meta Platforms, Inc. and affiliates.
# Modifications copyright (c) 2025 Logan Martel.
# Adapted from https://github.com/meta-pytorch/KernelAgent (Apache-2.0).

"""LLM provider registry and the streaming model-call adapter."""

from __future__ import annotations

import logging

from typing import Any, Dict, Iterable, Iterator, Optional, Protocol

from codemorph.exceptions import MissingCollaboratorError
from codemorph.llm.providers.base import BaseProvider
from codemorph.llm.providers.models import (
    PROVIDER_ALIASES,
    get_alias_provider,
    get_model_provider,
)

_LOGGER = logging.getLogger(__name__)


class ModelCall(Protocol):
    """Streaming model collaborator: one prompt in, text fragments out."""

    def stream(self, prompt: str) -> Iterable[str]: ...


class EchoProvider:
    """Deterministic provider for testing and dry runs.

    Streams the prompt back line by line, so the parser recovers the source
    code block as the "transformed" code.
    """

    def stream(self, prompt: str, **kwargs: Any) -> Iterator[str]:
        yield from prompt.splitlines(keepends=True)


class ProviderAdapter:
    """Binds a provider to a model name and exposes ``stream(prompt)``."""

    def __init__(
        self,
        provider: BaseProvider,
        model_name: str,
        *,
        system_prompt: Optional[str] = None,
        default_kwargs: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._provider = provider
        self._model_name = model_name
        self._system_prompt = system_prompt
        self._default_kwargs = default_kwargs or {}

    @property
    def model_name(self) -> str:
        return self._model_name

    def _messages(self, prompt: str) -> list[Dict[str, str]]:
        messages = []
        if self._system_prompt:
            messages.append({"role": "system", "content": self._system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def stream(self, prompt: str, **kwargs: Any) -> Iterator[str]:
        merged_kwargs = {**self._default_kwargs, **kwargs}
        return self._provider.stream_response(
            self._model_name, self._messages(prompt), **merged_kwargs
        )


def load_provider(
    config: Dict[str, Any], *, system_prompt: Optional[str] = None
) -> EchoProvider | ProviderAdapter:
    """Load a model collaborator from the ``llm`` config section.

    Expected keys:
      - provider: optional explicit provider name ("openai", "anthropic", "echo")
      - model: model name, mapped via the models registry when no provider
    """

    provider_name = config.get("provider")
    model_name: Optional[str] = config.get("model")

    if not provider_name and not model_name:
        raise MissingCollaboratorError(
            "llm config must specify either 'provider' or 'model'"
        )
    if provider_name == "echo":
        _LOGGER.warning(
            "LLM provider is set to 'echo'; responses will mirror prompts. "
            "Set `transformation.llm.provider` / `model` to use a real LLM."
        )
        return EchoProvider()

    default_kwargs: Dict[str, Any] = {}
    for key in ("max_tokens", "temperature"):
        if config.get(key) is not None:
            default_kwargs[key] = config[key]

    provider_kwargs: Dict[str, Any] = {}
    if config.get("base_url"):
        provider_kwargs["base_url"] = config["base_url"]
    if config.get("api_key_env"):
        provider_kwargs["api_key_env"] = config["api_key_env"]

    if not model_name:
        raise ValueError(f"Provider '{provider_name}' requires a model name")
    if provider_name:
        provider = get_alias_provider(provider_name, **provider_kwargs)
        _LOGGER.info(
            "Using LLM provider '%s' with model '%s'",
            provider_name,
            model_name,
        )
    else:
        provider = get_model_provider(model_name, **provider_kwargs)
        _LOGGER.info("Using model '%s' via registry provider", model_name)
    return ProviderAdapter(
        provider,
        model_name,
        system_prompt=system_prompt,
        default_kwargs=default_kwargs,
    )


__all__ = [
    "BaseProvider",
    "EchoProvider",
    "ModelCall",
    "PROVIDER_ALIASES",
    "ProviderAdapter",
    "load_provider",
]
