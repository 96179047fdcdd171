# Copyright (c) Meta Platforms, Inc. and affiliates.
# Modifications copyright (c) 2025 Logan Martel.
# Adapted from https://github.com/meta-pytorch/KernelAgent (Apache-2.0).
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""OpenAI (and OpenAI-compatible endpoint) provider."""

from __future__ import annotations

import logging

from typing import Any, Dict, Iterator, List, Optional

from codemorph.llm.providers.base import BaseProvider

try:  # pragma: no cover - optional dependency
    from openai import OpenAI  # type: ignore

    OPENAI_AVAILABLE = True
except ImportError:  # pragma: no cover
    OPENAI_AVAILABLE = False
    OpenAI = None  # type: ignore

_LOGGER = logging.getLogger(__name__)


class OpenAIProvider(BaseProvider):
    """Streams chat completions from OpenAI or a compatible base URL."""

    def __init__(
        self,
        *,
        api_key_env: str = "OPENAI_API_KEY",
        base_url: Optional[str] = None,
    ) -> None:
        self.api_key_env = api_key_env
        self.base_url = base_url
        super().__init__()

    def _initialize_client(
        self,
    ) -> None:  # pragma: no cover - exercised when SDK available
        if not OPENAI_AVAILABLE or OpenAI is None:
            return
        api_key = self._get_api_key(self.api_key_env)
        if not api_key:
            return
        if self.base_url:
            self.client = OpenAI(api_key=api_key, base_url=self.base_url)
        else:
            self.client = OpenAI(api_key=api_key)

    @property
    def name(self) -> str:
        return "openai"

    def is_available(self) -> bool:
        return OPENAI_AVAILABLE and self.client is not None

    def get_max_tokens_limit(self, model_name: str) -> int:
        if model_name.startswith(("gpt-5", "gpt-4", "o3", "o4", "o1")):
            return 32000
        if model_name.startswith("gpt-3.5"):
            return 16000
        return 8192

    def stream_response(
        self,
        model_name: str,
        messages: List[Dict[str, str]],
        **kwargs: Any,
    ) -> Iterator[str]:
        client = self.client
        if client is None:
            raise RuntimeError(f"{self.name} client not available")
        params = self._build_api_params(model_name, messages, **kwargs)
        stream = client.chat.completions.create(**params)  # type: ignore[attr-defined]
        for chunk in stream:
            choices = getattr(chunk, "choices", None)
            if not choices:
                continue
            delta = getattr(choices[0].delta, "content", None)
            if delta:
                yield delta
        _LOGGER.debug("OpenAI stream for %s finished", model_name)

    def _build_api_params(
        self,
        model_name: str,
        messages: List[Dict[str, str]],
        **kwargs: Any,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "model": model_name,
            "messages": messages,
            "stream": True,
        }
        reasoning_model = model_name.startswith(("gpt-5", "o"))
        if not reasoning_model:
            params["temperature"] = kwargs.get("temperature", 0.7)
        max_tokens_value = min(
            kwargs.get("max_tokens", 8192),
            self.get_max_tokens_limit(model_name),
        )
        if reasoning_model:
            params["max_completion_tokens"] = max_tokens_value
        else:
            params["max_tokens"] = max_tokens_value
        return params
