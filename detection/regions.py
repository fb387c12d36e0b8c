"""
Chain region validation and recognition raster construction.

A chain becomes a region bounded by its members. Regions that are too narrow,
too short or too steep are rejected; the others are binarized, de-rotated,
cropped, upscaled and eroded into the raster handed to the recognizer.
"""

import logging
import math

import cv2
import numpy as np

from logging_utils import DebugTopic

from .config import DetectionConfig
from .recognition import TextRecognizer
from .types import Chain, ChainRegion, Component, Rect
from .validation import text_rejection_reason

logger = logging.getLogger(__name__)


def chain_bounding_box(chain: Chain, components: list[Component]) -> Rect:
    """Union of the member bounding boxes."""
    boxes = [components[i].bbox for i in chain.members]
    return (
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    )


def chain_angle(direction: tuple[float, float]) -> float:
    """Angle of a chain direction in degrees, folded into [-90, 90]."""
    d_x, d_y = direction
    if d_x < 0:
        d_x, d_y = -d_x, -d_y
    return math.degrees(math.atan2(d_y, d_x))


def validate_chain_region(
    chain: Chain,
    components: list[Component],
    image_width: int,
    config: DetectionConfig,
    debug: DebugTopic = DebugTopic.NONE,
) -> ChainRegion:
    """Apply the size and orientation checks to a chain.

    Returns:
        ChainRegion; rejected regions carry a rejection_reason. A region that
        passes these checks is not marked passed until its text is accepted.
    """
    bbox = chain_bounding_box(chain, components)
    min_x, min_y, max_x, max_y = bbox
    min_height = min(
        [max_y - min_y] + [components[i].bbox[3] - components[i].bbox[1] for i in chain.members]
    )
    region = ChainRegion(chain=chain, bbox=bbox, min_height=min_height)

    min_width = image_width / config.max_img_width_to_text_ratio
    if max_x - min_x < min_width:
        if DebugTopic.TXT_ORIENT in debug:
            logger.debug("Chain width %d < %.1f", max_x - min_x, min_width)
        return region.reject(f"width {max_x - min_x} below {min_width:.1f}")

    if min_height < config.min_character_height:
        if DebugTopic.CHAINS in debug:
            logger.debug("Chain rejected: min height %d < %d", min_height, config.min_character_height)
        return region.reject(f"member height {min_height} below {config.min_character_height}")

    region.angle = chain_angle(chain.direction)
    if abs(region.angle) > config.max_angle:
        if DebugTopic.TXT_ORIENT in debug:
            logger.debug("Chain angle %.1f exceeds max %.1f", region.angle, config.max_angle)
        return region.reject(f"angle {region.angle:.1f} exceeds {config.max_angle}")

    if DebugTopic.TXT_ORIENT in debug:
        logger.debug("Chain angle: %.1f degrees", region.angle)
    return region


def _binarized_members(
    gray: np.ndarray,
    chain: Chain,
    components: list[Component],
) -> tuple[np.ndarray, list[tuple[int, int]]]:
    """Inverted Otsu binarization of each member box on a blank image, plus
    the four corners of every member box."""
    composite = np.zeros_like(gray)
    corners: list[tuple[int, int]] = []
    for index in chain.members:
        min_x, min_y, max_x, max_y = components[index].bbox
        if max_x > min_x and max_y > min_y:
            patch = gray[min_y:max_y, min_x:max_x]
            _, binary = cv2.threshold(patch, 0, 255, cv2.THRESH_BINARY_INV | cv2.THRESH_OTSU)
            composite[min_y:max_y, min_x:max_x] = binary
        corners.extend([(min_x, min_y), (max_x, max_y), (min_x, max_y), (max_x, min_y)])
    return composite, corners


def clipped_bounding_rect(points: np.ndarray, width: int, height: int) -> tuple[int, int, int, int]:
    """(x, y, w, h) spanned by integer points, clipped to the image."""
    min_x = int(np.clip(points[:, 0].min(), 0, width - 1))
    min_y = int(np.clip(points[:, 1].min(), 0, height - 1))
    max_x = int(np.clip(points[:, 0].max(), 0, width - 1))
    max_y = int(np.clip(points[:, 1].max(), 0, height - 1))
    return min_x, min_y, max_x - min_x, max_y - min_y


def build_chain_raster(
    gray: np.ndarray,
    region: ChainRegion,
    components: list[Component],
    config: DetectionConfig,
    debug: DebugTopic = DebugTopic.NONE,
) -> np.ndarray | None:
    """Build the recognition raster for a validated region.

    Args:
        gray: Grayscale image the components were found in.
        region: Region that passed validate_chain_region().
        components: Valid components.
        config: Detection configuration.
        debug: Debug topics to log.

    Returns:
        uint8 raster with white strokes on black, or None when the de-rotated
        members fall outside the image.
    """
    height, width = gray.shape
    composite, corners = _binarized_members(gray, region.chain, components)

    min_x, min_y, max_x, max_y = region.bbox
    center = ((min_x + max_x) / 2.0, (min_y + max_y) / 2.0)
    matrix = cv2.getRotationMatrix2D(center, region.angle, 1.0)
    rotated = cv2.warpAffine(composite, matrix, (width, height))

    points = cv2.transform(np.array(corners, dtype=np.float32).reshape(-1, 1, 2), matrix)
    points = np.rint(points.reshape(-1, 2)).astype(np.int64)
    x, y, w, h = clipped_bounding_rect(points, width, height)
    if w <= 0 or h <= 0:
        return None
    if DebugTopic.TEXTREC in debug:
        logger.debug("ROI = (%d, %d, %d, %d)", x, y, w, h)

    border = config.raster_border
    raster = np.zeros((h + 2 * border, w + 2 * border), dtype=np.uint8)
    raster[border:border + h, border:border + w] = rotated[y:y + h, x:x + w]

    scale = config.raster_upscale
    raster = cv2.resize(raster, None, fx=scale, fy=scale, interpolation=cv2.INTER_LINEAR)

    radius = int(config.erosion_ratio * raster.shape[0])
    if radius > 0:
        element = cv2.getStructuringElement(
            cv2.MORPH_ELLIPSE, (2 * radius + 1, 2 * radius + 1), (radius, radius)
        )
        raster = cv2.erode(raster, element)
    return raster


def recognize_region(
    gray: np.ndarray,
    region: ChainRegion,
    components: list[Component],
    recognizer: TextRecognizer,
    config: DetectionConfig,
    debug: DebugTopic = DebugTopic.NONE,
) -> ChainRegion:
    """Build the raster of a validated region and read its number.

    Sets region.passed and region.text when the recognizer returns one digit
    per member; otherwise records the rejection reason.
    """
    raster = build_chain_raster(gray, region, components, config, debug)
    if raster is None:
        return region.reject("members rotated outside the image")
    region.raster = raster

    raw_text = recognizer.read_text(raster)
    region.raw_text = raw_text

    reason = text_rejection_reason(raw_text, len(region.chain.members))
    if reason is not None:
        if DebugTopic.TEXTREC in debug:
            logger.debug("Chain text rejected: %s", reason)
        return region.reject(reason)

    region.text = raw_text.strip()
    region.passed = True
    region.rejection_reason = None
    if DebugTopic.TEXTREC in debug:
        logger.debug("Chain text: %s", region.text)
    return region
