"""
Edge map and gradient field computation.

Thin wrappers around the OpenCV primitives the stroke width transform reads:
a binary Canny edge map and a pair of smoothed derivative images.
"""

import cv2
import numpy as np


def detect_edges(
    gray: np.ndarray,
    low_threshold: float,
    high_threshold: float,
    aperture_size: int = 3,
) -> np.ndarray:
    """Run Canny on a grayscale image.

    Returns:
        uint8 edge map, 255 on edge pixels and 0 elsewhere.
    """
    if gray.ndim != 2:
        raise ValueError(f"detect_edges requires a 2D grayscale image, got shape {gray.shape}")
    return cv2.Canny(gray, low_threshold, high_threshold, apertureSize=aperture_size)


def compute_gradients(
    gray: np.ndarray,
    gaussian_kernel: int = 5,
    median_kernel: int = 3,
) -> tuple[np.ndarray, np.ndarray]:
    """Compute smoothed Scharr gradients of a grayscale image.

    The image is scaled to [0, 1], Gaussian smoothed, differentiated with the
    Scharr kernel in x and y, and each derivative is median filtered.

    Returns:
        Tuple of (gradient_x, gradient_y) as float32 arrays.
    """
    if gray.ndim != 2:
        raise ValueError(f"compute_gradients requires a 2D grayscale image, got shape {gray.shape}")

    smoothed = gray.astype(np.float32) / 255.0
    smoothed = cv2.GaussianBlur(smoothed, (gaussian_kernel, gaussian_kernel), 0)

    gradient_x = cv2.Scharr(smoothed, cv2.CV_32F, 1, 0)
    gradient_y = cv2.Scharr(smoothed, cv2.CV_32F, 0, 1)

    gradient_x = cv2.medianBlur(gradient_x, median_kernel)
    gradient_y = cv2.medianBlur(gradient_y, median_kernel)
    return gradient_x, gradient_y
