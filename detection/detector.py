"""
Main text detection orchestration.

This module ties together all detection stages: edge preparation, stroke width
transform, component grouping and filtering, chain building and recognition.
"""

import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from logging_utils import DebugTopic
from preprocessing import run_pipeline, PreprocessConfig

from .chains import make_chains
from .components import connected_components
from .config import DetectionConfig
from .filtering import filter_components
from .recognition import TextRecognizer
from .regions import recognize_region, validate_chain_region
from .render import save_artifacts
from .swt import median_filter, stroke_width_transform
from .types import ChainRegion, Component, TextDetectionResult

logger = logging.getLogger(__name__)


def _log_components(components: list[Component]) -> None:
    for index, c in enumerate(components):
        logger.debug(
            "Component (%d): dim=%dx%d median=%.2f bb=(%d,%d)->(%d,%d)",
            index, c.dimensions[0], c.dimensions[1], c.median_width, *c.bbox,
        )


def detect_text(
    image: np.ndarray,
    recognizer: TextRecognizer,
    detection_config: DetectionConfig | None = None,
    preprocess_config: PreprocessConfig | None = None,
    debug: DebugTopic = DebugTopic.NONE,
    artifact_dir: str | Path | None = None,
) -> TextDetectionResult:
    """Find and read the numbers in one image.

    Args:
        image: Input image (RGB, RGBA or grayscale, uint8).
        recognizer: Reads the text of a chain raster.
        detection_config: Detection parameters. Uses defaults if None.
        preprocess_config: Edge preparation parameters. Uses defaults if None.
        debug: Debug topics whose per-stage details are logged.
        artifact_dir: If set, debug images are written there.

    Returns:
        TextDetectionResult whose texts are the accepted numbers in chain order.

    Raises:
        TypeError: If image is not a numpy array.
        ValueError: If image or a configuration is invalid.
    """
    if detection_config is None:
        detection_config = DetectionConfig()
    detection_config.validate()

    prepared = run_pipeline(image, preprocess_config)
    gray = prepared.gray
    width = prepared.dimensions[0]

    swt, rays = stroke_width_transform(
        prepared.edges,
        prepared.gradient_x,
        prepared.gradient_y,
        detection_config.dark_on_light,
        detection_config.max_stroke_length,
        detection_config.ray_step,
    )
    median_filter(swt, rays)

    raw_components = connected_components(swt, detection_config.max_neighbor_ratio)
    components = filter_components(raw_components, swt, detection_config)
    if DebugTopic.COMPONENTS in debug:
        logger.debug("After filtering %d components", len(components))
        _log_components(components)

    chains = make_chains(components, detection_config, prepared.color, debug)

    regions: list[ChainRegion] = []
    texts: list[str] = []
    for chain in chains:
        region = validate_chain_region(chain, components, width, detection_config, debug)
        if region.rejection_reason is None:
            region = recognize_region(gray, region, components, recognizer, detection_config, debug)
        regions.append(region)
        if region.passed:
            texts.append(region.text)

    result = TextDetectionResult(
        texts=texts,
        regions=regions,
        chains=chains,
        components=components,
        raw_component_count=len(raw_components),
        ray_count=len(rays),
        dimensions=prepared.dimensions,
        swt=swt.to_array(),
    )

    if artifact_dir is not None:
        result.artifact_paths = save_artifacts(
            Path(artifact_dir), prepared.edges, result.swt, gray, components, regions,
        )

    logger.debug(
        "Detected %d texts from %d chains (%d valid of %d components)",
        len(texts), len(chains), len(components), len(raw_components),
    )
    return result


def decode_image(image_data: bytes) -> np.ndarray:
    """Decode raw image bytes into an RGB uint8 array."""
    image = Image.open(io.BytesIO(image_data))
    if image.mode != "RGB":
        image = image.convert("RGB")
    return np.array(image)


def detect_bib_numbers(
    recognizer: TextRecognizer,
    image_data: bytes,
    detection_config: DetectionConfig | None = None,
    preprocess_config: PreprocessConfig | None = None,
    debug: DebugTopic = DebugTopic.NONE,
    artifact_dir: str | Path | None = None,
) -> TextDetectionResult:
    """Detect numbers in encoded image bytes.

    Args:
        recognizer: Reads the text of a chain raster.
        image_data: Raw image bytes (any format Pillow can open).
        detection_config: Detection parameters.
        preprocess_config: Edge preparation parameters.
        debug: Debug topics to log.
        artifact_dir: If set, debug images are written there.

    Returns:
        TextDetectionResult for the decoded image.
    """
    return detect_text(
        decode_image(image_data),
        recognizer,
        detection_config=detection_config,
        preprocess_config=preprocess_config,
        debug=debug,
        artifact_dir=artifact_dir,
    )
