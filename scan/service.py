"""Scan service entrypoints for reuse across CLI commands."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path

from config import SCAN_RESULT_FILENAME
from detection import DetectionConfig, TextRecognizer, EasyOCRRecognizer
from logging_utils import DebugTopic
from preprocessing import PreprocessConfig
from sources import scan_local_images

from .pipeline import process_images

logger = logging.getLogger(__name__)


@dataclass
class ScanStats:
    """Outcome of a scan.

    Attributes:
        photos_found: Images listed for the source.
        photos_scanned: Images processed successfully.
        bibs_detected: Number of (image, bib) detections.
        results: Numbers per image file name.
        output_path: CSV written for a directory scan, if any.
    """

    photos_found: int = 0
    photos_scanned: int = 0
    bibs_detected: int = 0
    results: dict[str, list[int]] = field(default_factory=dict)
    output_path: Path | None = None

    @property
    def photos_failed(self) -> int:
        return self.photos_found - self.photos_scanned


def group_by_bib(results: dict[str, list[int]]) -> dict[int, list[str]]:
    """Invert per-image numbers into files per bib, both sorted."""
    grouped: dict[int, list[str]] = {}
    for filename in sorted(results):
        for bib in results[filename]:
            grouped.setdefault(bib, []).append(filename)
    return {bib: grouped[bib] for bib in sorted(grouped)}


def write_results_csv(path: Path, grouped: dict[int, list[str]]) -> None:
    """Write one row per bib: the bib followed by every file it was read in."""
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        for bib, filenames in grouped.items():
            writer.writerow([bib, *filenames])


def run_scan(
    source: str | Path,
    recognizer: TextRecognizer | None = None,
    detection_config: DetectionConfig | None = None,
    preprocess_config: PreprocessConfig | None = None,
    debug: DebugTopic = DebugTopic.NONE,
    artifact_root: str | Path | None = None,
    output: str | Path | None = None,
    workers: int = 1,
) -> ScanStats:
    """Scan an image file or a directory of images for bib numbers.

    For a directory, the grouped results are written to ``out.csv`` inside it
    unless another output path is given. A single file is only written to a
    CSV when output is given.

    Raises:
        ValueError: If the source doesn't exist or isn't an image/directory.
    """
    source_path = Path(source)
    image_files = scan_local_images(source_path)
    logger.info("Found %s images in %s", len(image_files), source_path)

    stats = ScanStats(photos_found=len(image_files))
    if not image_files:
        logger.warning("No images found.")
        return stats

    if recognizer is None:
        recognizer = EasyOCRRecognizer()

    per_image = process_images(
        image_files,
        recognizer,
        detection_config=detection_config,
        preprocess_config=preprocess_config,
        debug=debug,
        artifact_root=Path(artifact_root) if artifact_root is not None else None,
        workers=workers,
    )

    stats.photos_scanned = len(per_image)
    stats.results = {path.name: numbers for path, numbers in per_image.items()}
    stats.bibs_detected = sum(len(numbers) for numbers in per_image.values())

    if output is not None:
        stats.output_path = Path(output)
    elif source_path.is_dir():
        stats.output_path = source_path / SCAN_RESULT_FILENAME

    if stats.output_path is not None:
        logger.info("Saving results to %s", stats.output_path)
        write_results_csv(stats.output_path, group_by_bib(stats.results))

    return stats
