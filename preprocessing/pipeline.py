"""
Edge and gradient preparation pipeline.

The pipeline is the entry point of the preprocessing stage:
Validate → (Resize) → Grayscale → Canny edges → Scharr gradients.
"""

import logging

import numpy as np

from .config import PreprocessConfig, PreprocessResult
from .gradients import compute_gradients, detect_edges
from .normalization import resize_to_width, to_grayscale, to_rgb, validate_image

logger = logging.getLogger(__name__)


def run_pipeline(
    img: np.ndarray,
    config: PreprocessConfig | None = None,
) -> PreprocessResult:
    """Prepare the edge map and gradient fields for one image.

    Args:
        img: Input image (RGB, RGBA or grayscale, uint8).
        config: Preprocessing configuration. Uses defaults if None.

    Returns:
        PreprocessResult with the grayscale image, edge map and gradients.

    Raises:
        TypeError: If img is not a numpy array.
        ValueError: If img or config is invalid.
    """
    if config is None:
        config = PreprocessConfig()
    config.validate()
    validate_image(img)

    working = img
    scale_factor = 1.0
    if config.target_width is not None:
        working, scale_factor = resize_to_width(img, config.target_width)

    color = to_rgb(working)
    gray = to_grayscale(working)
    edges = detect_edges(gray, config.canny_low, config.canny_high, config.canny_aperture)
    gradient_x, gradient_y = compute_gradients(gray, config.gaussian_kernel, config.median_kernel)

    edge_count = int(np.count_nonzero(edges))
    logger.debug(
        "Prepared %dx%d image: %d edge pixels (scale_factor=%.3f)",
        gray.shape[1], gray.shape[0], edge_count, scale_factor,
    )

    return PreprocessResult(
        original=img,
        color=color,
        gray=gray,
        edges=edges,
        gradient_x=gradient_x,
        gradient_y=gradient_y,
        scale_factor=scale_factor,
        config=config,
        metadata={"edge_pixels": edge_count},
    )
