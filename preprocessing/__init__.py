"""
Image preprocessing module for stroke width text detection.

This module turns an input photo into the inputs of the stroke width
transform: a grayscale image, a binary Canny edge map and a pair of smoothed
gradient fields. All functions are pure and never mutate their inputs.

Key components:
- config: PreprocessConfig dataclass parameterizing every step
- normalization: validation, grayscale/RGB conversion and resizing
- gradients: Canny edges and Scharr gradients
- pipeline: run_pipeline() applying the steps in order
"""

from .config import PreprocessConfig, PreprocessResult
from .pipeline import run_pipeline
from .normalization import validate_image, to_grayscale, to_rgb, resize_to_width
from .gradients import detect_edges, compute_gradients

__all__ = [
    "PreprocessConfig",
    "PreprocessResult",
    "run_pipeline",
    "validate_image",
    "to_grayscale",
    "to_rgb",
    "resize_to_width",
    "detect_edges",
    "compute_gradients",
]
