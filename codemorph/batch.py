"""Transform every text file in a zip archive."""

from __future__ import annotations

import logging
import threading

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from codemorph.archive import compress_directory, extract_archive, write_files
from codemorph.orchestrator import TransformOrchestrator, suggest_file_name
from codemorph.types import TransformMode, TransformRequest

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileOutcome:
    rel_path: str
    output_path: Optional[str]
    source_language: Optional[str] = None
    status: str = "transformed"


@dataclass
class ArchiveTransformReport:
    zip_path: Path
    out_dir: Path
    outcomes: List[FileOutcome] = field(default_factory=list)

    @property
    def transformed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status == "transformed"]

    @property
    def failed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status == "extraction_failed"]

    @property
    def collisions(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status == "collision"]


def transform_archive(
    orchestrator: TransformOrchestrator,
    zip_path: str | Path,
    target_language: str,
    *,
    mode: TransformMode = "translate",
    instructions: Optional[str] = None,
    output_root: Optional[Path] = None,
    zip_name: Optional[str] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ArchiveTransformReport:
    """Extract, transform text entries one by one, then zip the results.

    Binary and blank entries are skipped; entries whose reply had no code
    block are reported and not written. An entry whose output name was
    already claimed by an earlier entry is reported as a collision and not
    written.
    """

    root = output_root or orchestrator.settings.archive.output_root
    extracted = extract_archive(zip_path, output_root=root)
    out_dir = extracted.out_dir.with_name(f"{extracted.out_dir.name}_out")

    outcomes: List[FileOutcome] = []
    written: Dict[str, str] = {}
    for entry in extracted.files:
        if entry.code is None or not entry.code.strip():
            outcomes.append(
                FileOutcome(entry.rel_path, None, status="skipped")
            )
            continue
        output_name = suggest_file_name(
            target_language,
            entry.rel_path,
            default_base=orchestrator.settings.transform.default_base_name,
        )
        if output_name in written:
            LOGGER.warning(
                "%s would overwrite %s; not written",
                entry.rel_path,
                output_name,
            )
            outcomes.append(
                FileOutcome(entry.rel_path, None, status="collision")
            )
            continue
        result = orchestrator.transform(
            TransformRequest(
                code=entry.code,
                target_language=target_language,
                mode=mode,
                instructions=instructions,
                file_name=entry.rel_path,
            ),
            cancel_event=cancel_event,
            clean=False,
        )
        if result.extraction_failed:
            LOGGER.warning("No code extracted for %s", entry.rel_path)
            outcomes.append(
                FileOutcome(
                    entry.rel_path,
                    None,
                    result.source_language,
                    status="extraction_failed",
                )
            )
            continue
        written[output_name] = result.transformed_code
        outcomes.append(
            FileOutcome(
                entry.rel_path,
                result.suggested_file_name,
                result.source_language,
            )
        )

    write_files(out_dir, written.items())
    archive = compress_directory(out_dir, output_root=root, zip_name=zip_name)
    LOGGER.info(
        "Transformed %d of %d files into %s",
        len(written),
        len(extracted.files),
        archive,
    )
    return ArchiveTransformReport(
        zip_path=archive, out_dir=out_dir, outcomes=outcomes
    )


__all__ = ["ArchiveTransformReport", "FileOutcome", "transform_archive"]
