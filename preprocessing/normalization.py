"""
Image validation and normalization functions.

All functions are pure: they take an input and return a new output without
mutating the original array.
"""

import numpy as np
import cv2


def validate_image(img: np.ndarray) -> None:
    """Check that an array is an 8-bit grayscale, RGB or RGBA image.

    This is the only fatal precondition of the detector: anything else is
    rejected before processing starts.

    Raises:
        TypeError: If img is not a numpy array.
        ValueError: If img is empty, has the wrong dimensionality, an
                    unsupported channel count, or is not uint8.
    """
    if not isinstance(img, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")

    if img.ndim < 2 or img.ndim > 3:
        raise ValueError(
            f"Image must be 2D or 3D array, got {img.ndim}D array with shape {img.shape}"
        )

    if img.size == 0:
        raise ValueError("Image array is empty")

    if img.ndim == 3 and img.shape[2] not in (1, 3, 4):
        raise ValueError(
            f"Unsupported number of channels: {img.shape[2]}. "
            "Expected 1, 3 (RGB), or 4 (RGBA)."
        )

    if img.dtype != np.uint8:
        raise ValueError(f"Image must be 8-bit (uint8), got dtype {img.dtype}")


def to_grayscale(img: np.ndarray) -> np.ndarray:
    """Convert a validated image to a 2D uint8 grayscale array.

    Examples:
        >>> rgb = np.zeros((100, 200, 3), dtype=np.uint8)
        >>> to_grayscale(rgb).shape
        (100, 200)
    """
    validate_image(img)

    if img.ndim == 2:
        return img.copy()

    channels = img.shape[2]
    if channels == 1:
        return img[:, :, 0].copy()
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_RGB2GRAY)
    return cv2.cvtColor(img, cv2.COLOR_RGBA2GRAY)


def to_rgb(img: np.ndarray) -> np.ndarray:
    """Convert a validated image to a 3-channel RGB uint8 array."""
    validate_image(img)

    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGB)

    channels = img.shape[2]
    if channels == 1:
        return cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2RGB)
    if channels == 3:
        return img.copy()
    return cv2.cvtColor(img, cv2.COLOR_RGBA2RGB)


def resize_to_width(
    img: np.ndarray,
    target_width: int,
    interpolation: int = cv2.INTER_AREA,
) -> tuple[np.ndarray, float]:
    """Resize image to a target width, preserving aspect ratio.

    Args:
        img: Input image (2D grayscale or 3D color).
        target_width: Desired width in pixels.
        interpolation: OpenCV interpolation used for downscaling. Upscaling
                      always uses INTER_LINEAR.

    Returns:
        Tuple of the resized image and the scale factor
        (original_width / target_width) for coordinate mapping.

    Raises:
        ValueError: If target_width is not positive.
        TypeError: If target_width is not an int.
    """
    if not isinstance(target_width, int):
        raise TypeError(f"target_width must be int, got {type(target_width).__name__}")

    if target_width <= 0:
        raise ValueError(f"target_width must be positive, got {target_width}")

    original_height, original_width = img.shape[:2]
    if original_width == target_width:
        return img.copy(), 1.0

    scale_factor = original_width / target_width
    new_height = max(1, int(round(original_height / scale_factor)))

    if target_width > original_width:
        interpolation = cv2.INTER_LINEAR

    resized = cv2.resize(img, (target_width, new_height), interpolation=interpolation)
    return resized, scale_factor
