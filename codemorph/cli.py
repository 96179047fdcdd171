"""CLI entrypoint for codemorph."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import zipfile

from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from codemorph.batch import transform_archive
from codemorph.configuration import (
    CONFIG_SECTION,
    DEFAULT_CONFIG_PATH,
    LoggingSettings,
    build_settings,
    load_config,
)
from codemorph.exceptions import (
    InvalidRequestError,
    MissingCollaboratorError,
    TransformCancelledError,
)
from codemorph.logging import setup_file_logger
from codemorph.logging.utils import STREAM_MODES
from codemorph.orchestrator import TransformOrchestrator
from codemorph.types import (
    TRANSFORM_MODES,
    SimpleTransformRequest,
    TransformRequest,
)

EXIT_OK = 0
EXIT_INVALID = 2
EXIT_COLLABORATOR = 3
EXIT_EXTRACTION = 4


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codemorph",
        description="Translate or modernize source code with an LLM.",
    )
    parser.add_argument(
        "source",
        type=str,
        help="Source file to transform, '-' for stdin, or a .zip with "
        "--archive.",
    )
    parser.add_argument(
        "--to",
        dest="target_language",
        required=True,
        help="Target language (e.g. Python, JavaScript, Go).",
    )
    parser.add_argument(
        "--from",
        dest="source_language",
        help="Source language (auto-detected when omitted).",
    )
    parser.add_argument(
        "--mode",
        choices=TRANSFORM_MODES,
        default="translate",
        help="translate = convert languages, modernize = update in place.",
    )
    parser.add_argument(
        "--instructions",
        help="Additional instructions for the transformation.",
    )
    parser.add_argument(
        "--simple",
        action="store_true",
        help="Use the simplified form (content-only detection).",
    )
    parser.add_argument(
        "--archive",
        action="store_true",
        help="Treat SOURCE as a zip and transform every text file in it.",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Write the transformed code to this path.",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        help="Write the transformed code under its suggested filename here.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON.",
    )
    parser.add_argument(
        "--config",
        type=str,
        help=(
            "Path to a YAML config. If omitted, uses "
            "configs/default_config.yaml when present."
        ),
    )
    parser.add_argument(
        "--llm-provider",
        type=str,
        help="Override the LLM provider (openai, anthropic, echo).",
    )
    parser.add_argument(
        "--model",
        type=str,
        help="Override the LLM model name.",
    )
    parser.add_argument(
        "--api-base",
        type=str,
        help="Override the provider base URL.",
    )
    parser.add_argument(
        "--api-key-env",
        type=str,
        help="Override the API key environment variable name.",
    )
    parser.add_argument(
        "--stream-mode",
        choices=STREAM_MODES,
        help="Where streamed model output is mirrored.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (DEBUG, INFO, WARNING...).",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this rotating file.",
    )
    return parser


def _apply_cli_overrides(
    args: argparse.Namespace, config: Dict[str, Any]
) -> Dict[str, Any]:
    section = config.setdefault(CONFIG_SECTION, {})
    llm_cfg = section.setdefault("llm", {})
    if args.llm_provider:
        llm_cfg["provider"] = args.llm_provider
    if args.model:
        llm_cfg["model"] = args.model
    if args.api_base:
        llm_cfg["base_url"] = args.api_base
    if args.api_key_env:
        llm_cfg["api_key_env"] = args.api_key_env
    streaming_cfg = llm_cfg.setdefault("streaming", {})
    if args.stream_mode:
        streaming_cfg["mode"] = args.stream_mode
    elif args.json:
        streaming_cfg["mode"] = "none"

    logging_cfg = section.setdefault("logging", {})
    if args.log_level:
        logging_cfg["level"] = args.log_level
    if args.log_file:
        logging_cfg["file"] = str(Path(args.log_file).resolve())
    return config


def _resolve_config(
    args: argparse.Namespace,
) -> tuple[Optional[Path], Dict[str, Any]]:
    if args.config:
        path = Path(args.config)
        return path, load_config(path)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH, load_config(DEFAULT_CONFIG_PATH)
    return None, {}


def _configure_logging(settings: LoggingSettings) -> None:
    level = getattr(logging, settings.level, logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level, format="%(levelname)s %(name)s: %(message)s"
        )
    logging.getLogger("codemorph").setLevel(level)
    if settings.file is not None:
        setup_file_logger(settings.file, level=level)


def _read_source(
    source: str, parser: argparse.ArgumentParser
) -> tuple[str, Optional[str]]:
    if source == "-":
        return sys.stdin.read(), None
    path = Path(source).expanduser()
    if not path.is_file():
        parser.error(f"Source file '{path}' not found or not a file.")
    try:
        return path.read_text(encoding="utf-8"), path.name
    except UnicodeDecodeError:
        parser.error(f"Source file '{path}' is not UTF-8 text.")
    except OSError as exc:
        parser.error(f"Cannot read source file '{path}': {exc}")


def _write_output(
    code: str,
    suggested: str,
    args: argparse.Namespace,
) -> Optional[Path]:
    if args.output:
        target = Path(args.output).expanduser()
    elif args.output_dir:
        target = Path(args.output_dir).expanduser() / suggested
    else:
        return None
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(code.rstrip("\n") + "\n", encoding="utf-8")
    return target


def _print_result(payload: Dict[str, str], args: argparse.Namespace) -> None:
    if args.json:
        print(json.dumps(payload, indent=2))
        return
    print()
    print(payload["transformedCode"])
    print()
    print(payload["explanation"])


def _run_archive(
    orchestrator: TransformOrchestrator, args: argparse.Namespace
) -> int:
    report = transform_archive(
        orchestrator,
        args.source,
        args.target_language,
        mode=args.mode,
        instructions=args.instructions,
        output_root=Path(args.output_dir) if args.output_dir else None,
    )
    if args.json:
        print(
            json.dumps(
                {
                    "zipPath": str(report.zip_path),
                    "files": [
                        {
                            "path": outcome.rel_path,
                            "output": outcome.output_path,
                            "sourceLanguage": outcome.source_language,
                            "status": outcome.status,
                        }
                        for outcome in report.outcomes
                    ],
                },
                indent=2,
            )
        )
    else:
        for outcome in report.outcomes:
            print(f"{outcome.status:<18} {outcome.rel_path}")
        print(f"Archive written to {report.zip_path}")
    return EXIT_EXTRACTION if report.failed else EXIT_OK


def _run_single(
    orchestrator: TransformOrchestrator,
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int:
    code, file_name = _read_source(args.source, parser)
    if args.simple:
        simple = orchestrator.transform_simple(
            SimpleTransformRequest(
                code=code,
                target_language=args.target_language,
                instructions=args.instructions,
            )
        )
        failed, payload = simple.extraction_failed, simple.to_dict()
        suggested = simple.filename
    else:
        result = orchestrator.transform(
            TransformRequest(
                code=code,
                target_language=args.target_language,
                source_language=args.source_language,
                mode=args.mode,
                instructions=args.instructions,
                file_name=file_name,
            )
        )
        failed, payload = result.extraction_failed, result.to_dict()
        suggested = result.suggested_file_name

    _print_result(payload, args)
    if failed:
        print("Model response held no code block.", file=sys.stderr)
        return EXIT_EXTRACTION
    written = _write_output(payload["transformedCode"], suggested, args)
    if written is not None:
        print(f"Wrote {written}", file=sys.stderr)
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.archive and args.simple:
        parser.error("--archive and --simple cannot be combined")
    if args.archive and not zipfile.is_zipfile(args.source):
        parser.error(f"'{args.source}' is not a zip archive")

    load_dotenv()
    config_path, config_data = _resolve_config(args)
    config_data = _apply_cli_overrides(args, config_data)
    config_root = (
        config_path.resolve().parent if config_path is not None else Path.cwd()
    )
    _configure_logging(
        build_settings(config_data, config_root=config_root).logging
    )
    try:
        orchestrator = TransformOrchestrator(config_path, config=config_data)
    except (MissingCollaboratorError, ValueError) as exc:
        print(f"Model provider unavailable: {exc}", file=sys.stderr)
        return EXIT_COLLABORATOR

    try:
        if args.archive:
            return _run_archive(orchestrator, args)
        return _run_single(orchestrator, args, parser)
    except InvalidRequestError as exc:
        print(f"Invalid request: {exc}", file=sys.stderr)
        return EXIT_INVALID
    except MissingCollaboratorError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_COLLABORATOR
    except TransformCancelledError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_COLLABORATOR
    except Exception as exc:  # pragma: no cover - provider/transport failure
        logging.getLogger(__name__).debug("Transform failed", exc_info=True)
        print(f"Transformation failed: {exc}", file=sys.stderr)
        return EXIT_COLLABORATOR


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
