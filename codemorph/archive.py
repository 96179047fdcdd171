"""Zip archive helpers used at the batch boundary."""

from __future__ import annotations

import logging
import shutil
import time
import zipfile

from pathlib import Path
from typing import Iterable, Optional, Tuple

from codemorph.exceptions import PathSafetyError
from codemorph.types import ArchiveEntry, ExtractedArchive

LOGGER = logging.getLogger(__name__)


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def ensure_within(base: Path, relative: str | Path) -> Path:
    """Resolve ``relative`` under ``base``, refusing escapes."""

    root = base.resolve()
    target = (root / relative).resolve()
    if target != root and root not in target.parents:
        raise PathSafetyError(f"path escapes {root}: {relative}")
    return target


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return None


def extract_archive(
    zip_path: str | Path, *, output_root: Path
) -> ExtractedArchive:
    """Unpack ``zip_path`` into ``output_root/run_<ms>`` and list its files.

    Files that are not valid UTF-8 come back with ``code=None``.
    """

    archive = Path(zip_path).expanduser().resolve()
    out_dir = (output_root / f"run_{_timestamp_ms()}").resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive) as handle:
        for member in handle.namelist():
            ensure_within(out_dir, member)
        handle.extractall(out_dir)

    files = []
    for path in sorted(p for p in out_dir.rglob("*") if p.is_file()):
        files.append(
            ArchiveEntry(
                path=path,
                rel_path=path.relative_to(out_dir).as_posix(),
                ext=path.suffix.lower(),
                code=_read_text(path),
            )
        )
    LOGGER.info(
        "Extracted %d files from %s to %s", len(files), archive, out_dir
    )
    return ExtractedArchive(out_dir=out_dir, files=files)


def write_files(
    out_dir: str | Path, files: Iterable[Tuple[str, str]]
) -> Path:
    """Write ``(rel_path, code)`` pairs below ``out_dir``."""

    root = Path(out_dir)
    root.mkdir(parents=True, exist_ok=True)
    for rel_path, code in files:
        dest = ensure_within(root, rel_path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(code, encoding="utf-8")
    return root


def compress_directory(
    directory: str | Path,
    *,
    output_root: Path,
    zip_name: Optional[str] = None,
) -> Path:
    """Zip the contents of ``directory`` (not the directory itself)."""

    name = zip_name or f"transformed_{_timestamp_ms()}.zip"
    if not name.endswith(".zip"):
        name = f"{name}.zip"
    output_root.mkdir(parents=True, exist_ok=True)
    base = output_root.resolve() / name[: -len(".zip")]
    archive = shutil.make_archive(str(base), "zip", root_dir=str(directory))
    return Path(archive)


__all__ = [
    "compress_directory",
    "ensure_within",
    "extract_archive",
    "write_files",
]
