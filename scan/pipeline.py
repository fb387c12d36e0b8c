"""Per-image detection helpers shared by the scan and evaluate commands."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable

from tqdm import tqdm

from detection import DetectionConfig, TextRecognizer, detect_text
from logging_utils import DebugTopic
from preprocessing import PreprocessConfig
from sources import load_image

logger = logging.getLogger(__name__)


def detect_image_numbers(
    path: Path,
    recognizer: TextRecognizer,
    detection_config: DetectionConfig | None = None,
    preprocess_config: PreprocessConfig | None = None,
    debug: DebugTopic = DebugTopic.NONE,
    artifact_root: Path | None = None,
) -> list[int]:
    """Read the numbers of one image file.

    Returns:
        Sorted, de-duplicated numbers found in the image.

    Raises:
        OSError: If the image can't be read.
        ValueError: If the decoded image is unusable.
    """
    logger.debug("Processing file %s", path)
    image = load_image(path)
    artifact_dir = artifact_root / path.name if artifact_root is not None else None
    result = detect_text(
        image,
        recognizer,
        detection_config=detection_config,
        preprocess_config=preprocess_config,
        debug=debug,
        artifact_dir=artifact_dir,
    )
    numbers = result.unique_numbers()
    logger.info("%s: read %s", path.name, numbers)
    return numbers


def process_images(
    paths: Iterable[Path],
    recognizer: TextRecognizer,
    detection_config: DetectionConfig | None = None,
    preprocess_config: PreprocessConfig | None = None,
    debug: DebugTopic = DebugTopic.NONE,
    artifact_root: Path | None = None,
    workers: int = 1,
    progress: bool = True,
) -> dict[Path, list[int]]:
    """Detect the numbers of many images.

    Images are independent, so with workers > 1 they run in a thread pool and
    only the shared result mapping is guarded by a lock. Images that can't be
    read are logged and left out of the result.

    Returns:
        Mapping of image path to its sorted unique numbers, in input order.
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    paths = list(paths)
    results: dict[Path, list[int]] = {}
    lock = threading.Lock()

    def run_one(path: Path) -> None:
        try:
            numbers = detect_image_numbers(
                path, recognizer, detection_config, preprocess_config, debug, artifact_root,
            )
        except (OSError, ValueError) as exc:
            logger.error("Failed to process %s: %s", path, exc)
            return
        with lock:
            results[path] = numbers

    with tqdm(total=len(paths), desc="Processing", disable=not progress) as bar:
        if workers == 1:
            for path in paths:
                run_one(path)
                bar.update(1)
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [executor.submit(run_one, path) for path in paths]
                for future in as_completed(futures):
                    future.result()
                    bar.update(1)

    return {path: results[path] for path in paths if path in results}
