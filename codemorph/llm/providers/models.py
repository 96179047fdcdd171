# Copyright (c) Meta Platforms, Inc. and affiliates.
# Modifications copyright (c) 2025 Logan Martel.
# Adapted from https://github.com/meta-pytorch/KernelAgent (Apache-2.0).

"""Provider aliases and the model-name registry.

Both lookups share one instance cache, so repeated transformations with the
same provider options reuse a single SDK client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Type

from codemorph.llm.providers.anthropic_provider import AnthropicProvider
from codemorph.llm.providers.base import BaseProvider
from codemorph.llm.providers.openai_provider import OpenAIProvider

PROVIDER_ALIASES: Dict[str, Type[BaseProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


@dataclass(frozen=True)
class ModelConfig:
    name: str
    provider_class: Type[BaseProvider]
    description: str = ""


MODEL_NAME_TO_CONFIG: Dict[str, ModelConfig] = {
    cfg.name: cfg
    for cfg in (
        ModelConfig(
            "claude-3-5-sonnet-20240620",
            AnthropicProvider,
            "Claude 3.5 Sonnet",
        ),
        ModelConfig(
            "claude-sonnet-4-20250514", AnthropicProvider, "Claude 4 Sonnet"
        ),
        ModelConfig("gpt-4o", OpenAIProvider, "GPT-4o"),
        ModelConfig("gpt-4o-mini", OpenAIProvider, "GPT-4o mini"),
        ModelConfig("o4-mini", OpenAIProvider, "OpenAI o-series"),
    )
}

_CacheKey = Tuple[Type[BaseProvider], Tuple[Tuple[str, Any], ...]]
_PROVIDER_CACHE: Dict[_CacheKey, BaseProvider] = {}


def _instance(
    provider_cls: Type[BaseProvider], provider_kwargs: Dict[str, Any]
) -> BaseProvider:
    key = (provider_cls, tuple(sorted(provider_kwargs.items())))
    provider = _PROVIDER_CACHE.get(key)
    if provider is None:
        provider = provider_cls(**provider_kwargs)
        _PROVIDER_CACHE[key] = provider
    return provider


def get_alias_provider(alias: str, **provider_kwargs: Any) -> BaseProvider:
    """Instantiate the provider registered under ``alias``."""

    provider_cls = PROVIDER_ALIASES.get(alias)
    if provider_cls is None:
        raise ValueError(
            f"Unknown LLM provider '{alias}'. "
            f"Available: {sorted(PROVIDER_ALIASES)}"
        )
    provider = _instance(provider_cls, provider_kwargs)
    if not provider.is_available():
        raise ValueError(
            f"Provider '{alias}' is not available (missing SDK or API key)"
        )
    return provider


def get_model_provider(
    model_name: str, **provider_kwargs: Any
) -> BaseProvider:
    """Instantiate whichever provider serves ``model_name``."""

    config = MODEL_NAME_TO_CONFIG.get(model_name)
    if config is None:
        raise ValueError(
            f"Unknown model '{model_name}'. "
            f"Available: {sorted(MODEL_NAME_TO_CONFIG)}"
        )
    provider = _instance(config.provider_class, provider_kwargs)
    if not provider.is_available():
        raise ValueError(
            f"Provider '{provider.name}' for model '{model_name}' is not "
            "available."
        )
    return provider


__all__ = [
    "MODEL_NAME_TO_CONFIG",
    "ModelConfig",
    "PROVIDER_ALIASES",
    "get_alias_provider",
    "get_model_provider",
]
