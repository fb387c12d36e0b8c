"""
Configuration for the edge and gradient preparation stage.

Every parameter of the stage is carried by PreprocessConfig so that a run is
reproducible and can be tuned without touching the code.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from config import (
    TARGET_WIDTH,
    MIN_TARGET_WIDTH,
    MAX_TARGET_WIDTH,
    CANNY_THRESHOLD_LOW,
    CANNY_THRESHOLD_HIGH,
    CANNY_APERTURE_SIZE,
    GRADIENT_GAUSSIAN_KERNEL,
    GRADIENT_MEDIAN_KERNEL,
)


@dataclass(frozen=True)
class PreprocessConfig:
    """Configuration for edge detection and gradient computation.

    Attributes:
        target_width: Optional width to resize the image to (aspect ratio kept).
                     None processes the image at its native size.
        canny_low: Lower hysteresis threshold of the Canny detector.
        canny_high: Upper hysteresis threshold of the Canny detector.
        canny_aperture: Sobel aperture used inside Canny (3, 5 or 7).
        gaussian_kernel: Odd kernel size of the Gaussian applied before the
                        Scharr derivative.
        median_kernel: Kernel size of the median filter applied to each
                      gradient field (3 or 5, float images only support these).
    """

    target_width: Optional[int] = TARGET_WIDTH
    canny_low: float = CANNY_THRESHOLD_LOW
    canny_high: float = CANNY_THRESHOLD_HIGH
    canny_aperture: int = CANNY_APERTURE_SIZE
    gaussian_kernel: int = GRADIENT_GAUSSIAN_KERNEL
    median_kernel: int = GRADIENT_MEDIAN_KERNEL

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.target_width is not None:
            if self.target_width <= 0:
                raise ValueError(f"target_width must be positive, got {self.target_width}")
            if not (MIN_TARGET_WIDTH <= self.target_width <= MAX_TARGET_WIDTH):
                raise ValueError(
                    f"target_width={self.target_width} outside the supported range "
                    f"[{MIN_TARGET_WIDTH}, {MAX_TARGET_WIDTH}]"
                )

        if self.canny_low < 0 or self.canny_high < 0:
            raise ValueError(
                f"Canny thresholds must be non-negative, got ({self.canny_low}, {self.canny_high})"
            )
        if self.canny_low > self.canny_high:
            raise ValueError(
                f"canny_low must not exceed canny_high, got ({self.canny_low}, {self.canny_high})"
            )

        if self.canny_aperture not in (3, 5, 7):
            raise ValueError(f"canny_aperture must be 3, 5 or 7, got {self.canny_aperture}")

        if self.gaussian_kernel <= 0 or self.gaussian_kernel % 2 == 0:
            raise ValueError(
                f"gaussian_kernel must be a positive odd integer, got {self.gaussian_kernel}"
            )

        if self.median_kernel not in (3, 5):
            raise ValueError(f"median_kernel must be 3 or 5, got {self.median_kernel}")


@dataclass
class PreprocessResult:
    """Everything the stroke width transform needs from one image.

    Attributes:
        original: Validated input image (RGB or grayscale, uint8).
        color: RGB version of the image at detection resolution.
        gray: Grayscale image at detection resolution (uint8).
        edges: Binary Canny edge map (uint8, 0 or 255).
        gradient_x: Smoothed horizontal gradient (float32).
        gradient_y: Smoothed vertical gradient (float32).
        scale_factor: original_width / processed_width.
        config: The configuration used.
        metadata: Free-form details for debugging (edge pixel count etc.).
    """

    original: np.ndarray
    color: np.ndarray
    gray: np.ndarray
    edges: np.ndarray
    gradient_x: np.ndarray
    gradient_y: np.ndarray
    scale_factor: float
    config: PreprocessConfig
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def dimensions(self) -> tuple[int, int]:
        """Get (width, height) of the processed image."""
        h, w = self.gray.shape[:2]
        return w, h
