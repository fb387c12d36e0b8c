"""
Component filtering.

Turns raw connected components into candidate characters: computes their
stroke width statistics and geometry, rejects shapes that cannot be
characters, and removes components nested among other components.
"""

import logging
import math

import numpy as np

from .config import DetectionConfig
from .swt import StrokeWidthMap
from .types import Component, Rect

logger = logging.getLogger(__name__)


def ratio_within(ratio: float, max_ratio: float) -> bool:
    """Whether ratio lies strictly between 1 / max_ratio and max_ratio."""
    return 1.0 / max_ratio < ratio < max_ratio


def component_stats(values: np.ndarray) -> tuple[float, float, float]:
    """Mean, population variance and upper median of stroke widths.

    Args:
        values: Stroke widths of the component pixels (non-empty).

    Returns:
        Tuple of (mean, variance, median).
    """
    if len(values) == 0:
        raise ValueError("component_stats requires at least one value")
    widths = values.astype(np.float64)
    mean = float(widths.mean())
    variance = float(((widths - mean) ** 2).mean())
    median = float(np.sort(widths)[len(widths) // 2])
    return mean, variance, median


def bounding_box(pixels: np.ndarray) -> Rect:
    """Inclusive (min_x, min_y, max_x, max_y) of (row, col) pixels."""
    rows, cols = pixels[:, 0], pixels[:, 1]
    return int(cols.min()), int(rows.min()), int(cols.max()), int(rows.max())


def rotated_bounding_box(pixels: np.ndarray, divisions: int = 36) -> tuple[float, float]:
    """Extents of the smallest-area box over a fixed set of orientations.

    Starts from the axis-aligned box and tries every angle k * pi / divisions
    below pi / 2. Extents are measured as (max - min + 1) along each rotated axis.

    Returns:
        Tuple of (length, width): the extents along the rotated x and y axes
        of the minimal box.
    """
    xs = pixels[:, 1].astype(np.float64)
    ys = pixels[:, 0].astype(np.float64)

    length = float(xs.max() - xs.min() + 1)
    width = float(ys.max() - ys.min() + 1)
    area = length * width

    increment = math.pi / divisions
    k = 1
    while k * increment < math.pi / 2.0:
        theta = k * increment
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        rotated_x = xs * cos_t - ys * sin_t
        rotated_y = xs * sin_t + ys * cos_t
        candidate_length = float(rotated_x.max() - rotated_x.min() + 1)
        candidate_width = float(rotated_y.max() - rotated_y.min() + 1)
        if candidate_length * candidate_width < area:
            area = candidate_length * candidate_width
            length = candidate_length
            width = candidate_width
        k += 1

    return length, width


def build_component(pixels: np.ndarray, swt: StrokeWidthMap, divisions: int = 36) -> Component:
    """Compute the statistics and geometry of one raw component."""
    mean, variance, median = component_stats(swt.values_at(pixels))
    length, width = rotated_bounding_box(pixels, divisions)
    return Component(
        pixels=pixels,
        bbox=bounding_box(pixels),
        mean_width=mean,
        variance=variance,
        median_width=median,
        rotated_length=length,
        rotated_width=width,
    )


def rejection_reason(component: Component, image_height: int, config: DetectionConfig) -> str | None:
    """Return why a component cannot be a character, or None if it can."""
    if config.filter_variance and component.variance > config.max_variance_ratio * component.mean_width:
        return f"stroke width variance {component.variance:.2f} too high for mean {component.mean_width:.2f}"

    _, min_y, _, max_y = component.bbox
    height = max_y - min_y + 1
    if height > config.max_font_height:
        return f"height {height} exceeds {config.max_font_height}"

    if min_y < config.top_border or max_y > image_height - config.bottom_border:
        return f"rows {min_y}..{max_y} cross the image borders"

    if component.rotated_width <= 0 or component.rotated_length <= 0:
        return "degenerate rotated bounding box"

    if not ratio_within(component.rotated_aspect_ratio, config.max_aspect_ratio):
        return f"rotated aspect ratio {component.rotated_aspect_ratio:.2f} out of range"

    return None


def _containment_counts(components: list[Component]) -> tuple[list[int], list[int]]:
    """For each component, how many other centers it contains and how many
    other boxes contain its center."""
    contains = [0] * len(components)
    contained_in = [0] * len(components)
    centers = [c.center for c in components]
    for i, outer in enumerate(components):
        for j, (x, y) in enumerate(centers):
            if i != j and outer.contains_point(x, y):
                contains[i] += 1
                contained_in[j] += 1
    return contains, contained_in


def filter_nested(
    components: list[Component],
    mode: str = "contained",
    max_count: int = 2,
) -> list[Component]:
    """Drop components entangled with several others.

    Args:
        components: First-pass survivors.
        mode: "contained" drops a component whose center lies inside the boxes
              of at least max_count others; "container" drops a component
              whose box holds the centers of at least max_count others;
              "off" keeps everything.
        max_count: Count at which a component is dropped.

    Returns:
        The remaining components, in their original order.
    """
    if mode == "off":
        return list(components)
    if mode not in ("contained", "container"):
        raise ValueError(f"unknown nesting filter mode {mode!r}")

    contains, contained_in = _containment_counts(components)
    counts = contained_in if mode == "contained" else contains
    kept = [c for c, count in zip(components, counts) if count < max_count]
    if len(kept) != len(components):
        logger.debug("Nesting filter (%s) removed %d components", mode, len(components) - len(kept))
    return kept


def filter_components(
    raw_components: list[np.ndarray],
    swt: StrokeWidthMap,
    config: DetectionConfig,
) -> list[Component]:
    """Keep the components that look like characters.

    Args:
        raw_components: Pixel arrays from connected_components().
        swt: The stroke width map the components were built from.
        config: Detection configuration.

    Returns:
        Valid components in input order. A component's index in this list is
        its identifier for chain building.
    """
    survivors: list[Component] = []
    for index, pixels in enumerate(raw_components):
        component = build_component(pixels, swt, config.rotation_divisions)
        reason = rejection_reason(component, swt.height, config)
        if reason is not None:
            logger.debug("Component %d rejected: %s", index, reason)
            continue
        survivors.append(component)

    valid = filter_nested(survivors, config.nesting_filter, config.max_nested_count)
    logger.debug("%d of %d components are valid", len(valid), len(raw_components))
    return valid
