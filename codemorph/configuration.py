"""Typed helpers for parsing codemorph configuration dictionaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from codemorph.types import DEFAULT_BASE_NAME

DEFAULT_CONFIG_PATH = Path("configs/default_config.yaml")
CONFIG_SECTION = "transformation"


def _ensure_path(value: str | Path, *, config_root: Path) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (config_root / path).resolve()
    return path


def _optional_path(
    value: Optional[str | Path], *, config_root: Path
) -> Optional[Path]:
    if value is None or value == "":
        return None
    return _ensure_path(value, config_root=config_root)


@dataclass(frozen=True)
class StreamingSettings:
    mode: str = "none"
    log_path: Optional[Path] = None


@dataclass(frozen=True)
class LLMSettings:
    provider: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key_env: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    streaming: StreamingSettings = field(default_factory=StreamingSettings)

    @property
    def configured(self) -> bool:
        return bool(self.provider or self.model)

    def provider_config(self) -> Dict[str, Any]:
        """Return the dict shape ``load_provider`` expects."""

        data = {
            "provider": self.provider,
            "model": self.model,
            "base_url": self.base_url,
            "api_key_env": self.api_key_env,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class PromptSettings:
    overrides: Tuple[Path, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TransformSettings:
    clean_content: bool = True
    default_base_name: str = DEFAULT_BASE_NAME


@dataclass(frozen=True)
class ArchiveSettings:
    output_root: Path = field(
        default_factory=lambda: Path(".codemorph/output").resolve()
    )


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    file: Optional[Path] = None


@dataclass(frozen=True)
class CodemorphSettings:
    llm: LLMSettings = field(default_factory=LLMSettings)
    prompts: PromptSettings = field(default_factory=PromptSettings)
    transform: TransformSettings = field(default_factory=TransformSettings)
    archive: ArchiveSettings = field(default_factory=ArchiveSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


def load_config(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(f"Config file '{config_path}' not found.")
    return yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}


def build_settings(
    config: Dict[str, Any], *, config_root: Path
) -> CodemorphSettings:
    section = config.get(CONFIG_SECTION) or {}

    llm_cfg = dict(section.get("llm") or {})
    streaming_cfg = dict(llm_cfg.get("streaming") or {})
    streaming = StreamingSettings(
        mode=str(streaming_cfg.get("mode", "none")),
        log_path=_optional_path(
            streaming_cfg.get("log_path"), config_root=config_root
        ),
    )
    temperature = llm_cfg.get("temperature")
    max_tokens = llm_cfg.get("max_tokens")
    llm_settings = LLMSettings(
        provider=llm_cfg.get("provider"),
        model=llm_cfg.get("model"),
        base_url=llm_cfg.get("base_url"),
        api_key_env=llm_cfg.get("api_key_env"),
        temperature=float(temperature) if temperature is not None else None,
        max_tokens=int(max_tokens) if max_tokens is not None else None,
        streaming=streaming,
    )

    prompts_cfg = section.get("prompts") or {}
    template_dir = prompts_cfg.get("template_dir")
    overrides: Tuple[Path, ...] = tuple()
    if template_dir:
        dirs = (
            list(template_dir)
            if isinstance(template_dir, (list, tuple))
            else [template_dir]
        )
        overrides = tuple(
            _ensure_path(item, config_root=config_root) for item in dirs
        )

    transform_cfg = section.get("transform") or {}
    transform_settings = TransformSettings(
        clean_content=bool(transform_cfg.get("clean_content", True)),
        default_base_name=str(
            transform_cfg.get("default_base_name") or DEFAULT_BASE_NAME
        ),
    )

    archive_cfg = section.get("archive") or {}
    archive_settings = ArchiveSettings(
        output_root=_ensure_path(
            archive_cfg.get("output_root") or ".codemorph/output",
            config_root=config_root,
        )
    )

    logging_cfg = section.get("logging") or {}
    logging_settings = LoggingSettings(
        level=str(logging_cfg.get("level", "INFO")).upper(),
        file=_optional_path(logging_cfg.get("file"), config_root=config_root),
    )

    return CodemorphSettings(
        llm=llm_settings,
        prompts=PromptSettings(overrides=overrides),
        transform=transform_settings,
        archive=archive_settings,
        logging=logging_settings,
    )


__all__ = [
    "ArchiveSettings",
    "CONFIG_SECTION",
    "CodemorphSettings",
    "DEFAULT_CONFIG_PATH",
    "LLMSettings",
    "LoggingSettings",
    "PromptSettings",
    "StreamingSettings",
    "TransformSettings",
    "build_settings",
    "load_config",
]
