# Copyright (c) Meta Platforms, Inc. and affiliates.
# Modifications copyright (c) 2025 Logan Martel.
# Adapted from https://github.com/meta-pytorch/KernelAgent (Apache-2.0).

"""Prompt manager backed by Jinja2 templates."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    Template,
    TemplateNotFound,
)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


class PromptManager:
    """Loads and renders named templates, checking overrides first."""

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        *,
        extra_dirs: Optional[Sequence[Path]] = None,
    ) -> None:
        base_dir = Path(templates_dir or DEFAULT_TEMPLATES_DIR)
        if not base_dir.exists():
            raise FileNotFoundError(
                f"Templates directory not found: {base_dir}"
            )

        paths = []
        for override in extra_dirs or ():
            override_path = Path(override)
            if not override_path.exists():
                raise FileNotFoundError(
                    f"Prompt override directory not found: {override_path}"
                )
            paths.append(override_path)
        paths.append(base_dir)

        self._base_dir = base_dir
        self._search_paths = tuple(paths)
        loaders = [FileSystemLoader(str(path)) for path in self._search_paths]
        self._env = Environment(
            loader=ChoiceLoader(loaders),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, **context) -> str:
        template = self._get_template(template_name)
        return template.render(**context)

    @property
    def templates_dir(self) -> Path:
        return self._base_dir

    @property
    def search_paths(self) -> tuple[Path, ...]:
        return self._search_paths

    def _get_template(self, template_name: str) -> Template:
        try:
            return self._env.get_template(template_name)
        except TemplateNotFound as exc:
            raise FileNotFoundError(
                f"Template '{template_name}' not found in {self.templates_dir}"
            ) from exc
