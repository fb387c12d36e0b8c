"""
Configuration for the stroke width detection stages.

DetectionConfig carries every threshold used after edge preparation so a run
can be reproduced or tuned from one immutable object.
"""

from dataclasses import dataclass
from typing import Literal, Optional

from config import (
    DARK_ON_LIGHT,
    MAX_STROKE_LENGTH,
    RAY_STEP,
    MAX_NEIGHBOR_WIDTH_RATIO,
    MAX_FONT_HEIGHT,
    TOP_BORDER,
    BOTTOM_BORDER,
    MAX_ASPECT_RATIO,
    ROTATION_DIVISIONS,
    FILTER_VARIANCE,
    MAX_VARIANCE_RATIO,
    NESTING_FILTER,
    MAX_NESTED_COUNT,
    MAX_MEDIAN_RATIO,
    MAX_DIMENSION_RATIO,
    MAX_DISTANCE_RATIO,
    MAX_COLOR_DISTANCE,
    MERGE_ANGLE,
    MIN_CHAIN_LENGTH,
    MIN_CHARACTER_HEIGHT,
    MAX_ANGLE,
    MAX_IMG_WIDTH_TO_TEXT_RATIO,
    RASTER_BORDER,
    RASTER_UPSCALE,
    RASTER_EROSION_RATIO,
)

NestingFilter = Literal["contained", "container", "off"]

NESTING_FILTERS = ("contained", "container", "off")


@dataclass(frozen=True)
class DetectionConfig:
    """Parameters of the stroke width transform, filtering, chaining and recognition.

    Attributes:
        dark_on_light: Text is darker than its background.
        max_stroke_length: Longest accepted ray in pixels.
        ray_step: Sub-pixel marching step of a ray.
        max_neighbor_ratio: Larger/smaller stroke width allowed between
                           adjacent pixels of one component.
        max_font_height: Components taller than this are rejected.
        top_border: Components reaching above this row are rejected.
        bottom_border: Components reaching below height - bottom_border are rejected.
        max_aspect_ratio: Rotated bbox aspect ratio band (1/x .. x).
        rotation_divisions: Rotated bbox angles are tested in steps of pi / divisions.
        filter_variance: Enable the stroke width variance check.
        max_variance_ratio: variance > ratio * mean rejects when enabled.
        nesting_filter: "contained", "container" or "off".
        max_nested_count: Containment count at which a component is dropped.
        max_median_ratio: Stroke width median ratio band for pairing.
        max_dimension_ratio: Width and height ratio band for pairing.
        max_distance_ratio: Limit of squared distance / squared max(min dimension).
        max_color_distance: Squared RGB distance limit for pairing (None disables).
        merge_angle: Maximum direction difference (radians) for merging chains.
        min_chain_length: Chains with fewer distinct components are dropped.
        min_character_height: Chains with a lower member are rejected.
        max_angle: Maximum chain angle in degrees.
        max_img_width_to_text_ratio: Chains narrower than image_width / ratio are rejected.
        raster_border: Blank border around the recognition raster.
        raster_upscale: Upscale factor of the recognition raster.
        erosion_ratio: Erosion radius as a fraction of the upscaled height.
    """

    dark_on_light: bool = DARK_ON_LIGHT
    max_stroke_length: float = MAX_STROKE_LENGTH
    ray_step: float = RAY_STEP
    max_neighbor_ratio: float = MAX_NEIGHBOR_WIDTH_RATIO

    max_font_height: int = MAX_FONT_HEIGHT
    top_border: int = TOP_BORDER
    bottom_border: int = BOTTOM_BORDER
    max_aspect_ratio: float = MAX_ASPECT_RATIO
    rotation_divisions: int = ROTATION_DIVISIONS
    filter_variance: bool = FILTER_VARIANCE
    max_variance_ratio: float = MAX_VARIANCE_RATIO
    nesting_filter: NestingFilter = NESTING_FILTER
    max_nested_count: int = MAX_NESTED_COUNT

    max_median_ratio: float = MAX_MEDIAN_RATIO
    max_dimension_ratio: float = MAX_DIMENSION_RATIO
    max_distance_ratio: float = MAX_DISTANCE_RATIO
    max_color_distance: Optional[float] = MAX_COLOR_DISTANCE
    merge_angle: float = MERGE_ANGLE
    min_chain_length: int = MIN_CHAIN_LENGTH

    min_character_height: int = MIN_CHARACTER_HEIGHT
    max_angle: float = MAX_ANGLE
    max_img_width_to_text_ratio: float = MAX_IMG_WIDTH_TO_TEXT_RATIO
    raster_border: int = RASTER_BORDER
    raster_upscale: float = RASTER_UPSCALE
    erosion_ratio: float = RASTER_EROSION_RATIO

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.max_stroke_length <= 0:
            raise ValueError(f"max_stroke_length must be positive, got {self.max_stroke_length}")

        if not (0 < self.ray_step <= 0.5):
            raise ValueError(f"ray_step must be in (0, 0.5], got {self.ray_step}")

        for name in ("max_neighbor_ratio", "max_aspect_ratio", "max_median_ratio", "max_dimension_ratio"):
            value = getattr(self, name)
            if value <= 1.0:
                raise ValueError(f"{name} must be greater than 1, got {value}")

        if self.max_distance_ratio <= 0:
            raise ValueError(f"max_distance_ratio must be positive, got {self.max_distance_ratio}")

        if self.max_font_height <= 0:
            raise ValueError(f"max_font_height must be positive, got {self.max_font_height}")

        if self.top_border < 0 or self.bottom_border < 0:
            raise ValueError(
                f"borders must be non-negative, got top={self.top_border} bottom={self.bottom_border}"
            )

        if self.rotation_divisions < 2:
            raise ValueError(f"rotation_divisions must be at least 2, got {self.rotation_divisions}")

        if self.nesting_filter not in NESTING_FILTERS:
            raise ValueError(
                f"nesting_filter must be one of {NESTING_FILTERS}, got {self.nesting_filter!r}"
            )

        if self.max_nested_count < 1:
            raise ValueError(f"max_nested_count must be at least 1, got {self.max_nested_count}")

        if self.max_color_distance is not None and self.max_color_distance <= 0:
            raise ValueError(f"max_color_distance must be positive, got {self.max_color_distance}")

        if not (0 < self.merge_angle < 3.141592653589793):
            raise ValueError(f"merge_angle must be in (0, pi), got {self.merge_angle}")

        if self.min_chain_length < 2:
            raise ValueError(f"min_chain_length must be at least 2, got {self.min_chain_length}")

        if self.min_character_height < 0:
            raise ValueError(
                f"min_character_height must be non-negative, got {self.min_character_height}"
            )

        if not (0 <= self.max_angle <= 90):
            raise ValueError(f"max_angle must be within [0, 90] degrees, got {self.max_angle}")

        if self.max_img_width_to_text_ratio <= 0:
            raise ValueError(
                "max_img_width_to_text_ratio must be positive, "
                f"got {self.max_img_width_to_text_ratio}"
            )

        if self.raster_border < 0:
            raise ValueError(f"raster_border must be non-negative, got {self.raster_border}")

        if self.raster_upscale < 1.0:
            raise ValueError(f"raster_upscale must be at least 1, got {self.raster_upscale}")

        if not (0 <= self.erosion_ratio < 0.5):
            raise ValueError(f"erosion_ratio must be in [0, 0.5), got {self.erosion_ratio}")
