"""Evaluation runner - scores detection accuracy against a ground truth CSV."""

from __future__ import annotations

import logging
from pathlib import Path

from detection import DetectionConfig, EasyOCRRecognizer, TextRecognizer
from logging_utils import DebugTopic
from preprocessing import PreprocessConfig
from scan import process_images

from .ground_truth import load_ground_truth
from .scoring import Scorecard, score_image

logger = logging.getLogger(__name__)


def run_evaluation(
    csv_path: str | Path,
    recognizer: TextRecognizer | None = None,
    detection_config: DetectionConfig | None = None,
    preprocess_config: PreprocessConfig | None = None,
    debug: DebugTopic = DebugTopic.NONE,
    workers: int = 1,
) -> Scorecard:
    """Run detection on every image of a ground truth file and score it.

    Image paths are resolved against the CSV's directory. An image that can't
    be read counts as an image with no detections.

    Raises:
        ValueError: If the CSV is missing or malformed.
    """
    csv_path = Path(csv_path)
    labels = load_ground_truth(csv_path)
    directory = csv_path.parent

    if recognizer is None:
        recognizer = EasyOCRRecognizer()

    paths = [label.path_in(directory) for label in labels]
    detected = process_images(
        list(dict.fromkeys(paths)),
        recognizer,
        detection_config=detection_config,
        preprocess_config=preprocess_config,
        debug=debug,
        workers=workers,
    )

    scorecard = Scorecard()
    for label, path in zip(labels, paths):
        image_score = score_image(label.filename, detected.get(path, []), label.bibs)
        for bib in image_score.matched:
            logger.info("%s: match %d", label.filename, bib)
        for bib in image_score.mismatched:
            logger.info("%s: mismatch %d", label.filename, bib)
        for bib in image_score.missed:
            logger.info("%s: missed %d", label.filename, bib)
        scorecard.add(image_score)

    return scorecard
