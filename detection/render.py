"""
Debug rendering of detection intermediates.

Everything here is optional: detect_text() only calls save_artifacts() when an
artifact directory is given.
"""

import logging
from pathlib import Path

import cv2
import numpy as np

from .types import ChainRegion, Component

logger = logging.getLogger(__name__)

PASSED_COLOR = (0, 255, 0)
REJECTED_COLOR = (0, 0, 255)


def normalize_swt(swt: np.ndarray) -> np.ndarray:
    """Scale set stroke widths to 0..254 and paint unset pixels white.

    Args:
        swt: Stroke width array, negative where unset.

    Returns:
        uint8 grayscale image.
    """
    out = np.full(swt.shape, 255, dtype=np.uint8)
    mask = swt > 0
    if not mask.any():
        return out
    values = swt[mask]
    low, high = float(values.min()), float(values.max())
    if high == low:
        out[mask] = 0
        return out
    out[mask] = np.round((values - low) / (high - low) * 254).astype(np.uint8)
    return out


def _palette(count: int) -> list[tuple[int, int, int]]:
    """Distinct BGR colors spread over the hue circle."""
    if count == 0:
        return []
    hues = np.linspace(0, 179, count, endpoint=False).astype(np.uint8)
    hsv = np.stack([hues, np.full(count, 255, np.uint8), np.full(count, 255, np.uint8)], axis=1)
    bgr = cv2.cvtColor(hsv.reshape(-1, 1, 3), cv2.COLOR_HSV2BGR).reshape(-1, 3)
    return [tuple(int(c) for c in color) for color in bgr]


def render_components(shape: tuple[int, int], components: list[Component]) -> np.ndarray:
    """Paint each component in its own color with its bounding box."""
    image = np.full((shape[0], shape[1], 3), 255, dtype=np.uint8)
    for component, color in zip(components, _palette(len(components))):
        image[component.pixels[:, 0], component.pixels[:, 1]] = color
        min_x, min_y, max_x, max_y = component.bbox
        cv2.rectangle(image, (min_x, min_y), (max_x, max_y), color, 1)
    return image


def render_regions(
    gray: np.ndarray,
    components: list[Component],
    regions: list[ChainRegion],
) -> np.ndarray:
    """Draw chain members and chain boxes on the grayscale image.

    Passed regions are green and labeled with their text; rejected ones are red.
    """
    image = cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)
    for region in regions:
        color = PASSED_COLOR if region.passed else REJECTED_COLOR
        for index in region.chain.members:
            component = components[index]
            image[component.pixels[:, 0], component.pixels[:, 1]] = color
        min_x, min_y, max_x, max_y = region.bbox
        cv2.rectangle(image, (min_x, min_y), (max_x, max_y), color, 2)

        if region.text:
            font = cv2.FONT_HERSHEY_SIMPLEX
            (_, text_height), _ = cv2.getTextSize(region.text, font, 0.6, 2)
            label_y = max(min_y - 5, text_height + 5)
            cv2.putText(image, region.text, (min_x, label_y), font, 0.6, color, 2)
    return image


def save_artifacts(
    artifact_dir: Path,
    edges: np.ndarray,
    swt: np.ndarray,
    gray: np.ndarray,
    components: list[Component],
    regions: list[ChainRegion],
) -> dict[str, str]:
    """Write the debug images of one detection run.

    Files: edges.png, swt.png, components.png, chains.png and one
    raster_<n>.png per region that reached the recognizer.

    Returns:
        Mapping of artifact name to written path. Images that fail to encode
        are logged and left out.
    """
    artifact_dir = Path(artifact_dir)
    artifact_dir.mkdir(parents=True, exist_ok=True)

    images = {
        "edges": edges,
        "swt": normalize_swt(swt),
        "components": render_components(gray.shape, components),
        "chains": render_regions(gray, components, regions),
    }
    for index, region in enumerate(regions):
        if region.raster is not None:
            images[f"raster_{index}"] = region.raster

    written: dict[str, str] = {}
    for name, image in images.items():
        path = artifact_dir / f"{name}.png"
        if cv2.imwrite(str(path), image):
            written[name] = str(path)
        else:
            logger.warning("Could not write debug image %s", path)

    logger.debug("Wrote %d debug images to %s", len(written), artifact_dir)
    return written
