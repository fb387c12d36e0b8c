"""
Type definitions for the detection module.

This module defines the core data structures passed between the stages of the
stroke width text detection pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

# Inclusive axis-aligned box as (min_x, min_y, max_x, max_y)
Rect = tuple[int, int, int, int]


@dataclass(eq=False)
class Ray:
    """An accepted stroke width ray.

    Attributes:
        start: (row, col) of the edge pixel the ray was cast from.
        end: (row, col) of the opposing edge pixel it terminated on.
        pixels: (M, 2) int array of every (row, col) the ray visited, in order,
                including start and end.
        width: Euclidean distance between start and end.
    """

    start: tuple[int, int]
    end: tuple[int, int]
    pixels: np.ndarray
    width: float


@dataclass(eq=False)
class Component:
    """A connected region of consistent stroke width (a candidate character).

    Attributes:
        pixels: (N, 2) int array of (row, col) coordinates.
        bbox: Inclusive (min_x, min_y, max_x, max_y).
        mean_width: Mean stroke width over the pixels.
        variance: Population variance of the stroke width.
        median_width: Upper median of the stroke width.
        rotated_length: Long-axis extent of the minimal rotated bounding box.
        rotated_width: Short-axis extent of the minimal rotated bounding box.
        color: Mean (R, G, B) of the pixels, once computed by the chain builder.
    """

    pixels: np.ndarray
    bbox: Rect
    mean_width: float
    variance: float
    median_width: float
    rotated_length: float = 0.0
    rotated_width: float = 0.0
    color: tuple[float, float, float] | None = field(default=None, repr=False)

    @property
    def center(self) -> tuple[float, float]:
        """(x, y) midpoint of the bounding box."""
        min_x, min_y, max_x, max_y = self.bbox
        return ((max_x + min_x) / 2.0, (max_y + min_y) / 2.0)

    @property
    def dimensions(self) -> tuple[int, int]:
        """Integer (width, height) of the bounding box."""
        min_x, min_y, max_x, max_y = self.bbox
        return (max_x - min_x + 1, max_y - min_y + 1)

    @property
    def rotated_aspect_ratio(self) -> float:
        if self.rotated_width <= 0:
            return 0.0
        return self.rotated_length / self.rotated_width

    def contains_point(self, x: float, y: float) -> bool:
        """Whether (x, y) lies inside the bounding box (edges included)."""
        min_x, min_y, max_x, max_y = self.bbox
        return min_x <= x <= max_x and min_y <= y <= max_y


@dataclass
class Chain:
    """A run of collinear components.

    ``p`` and ``q`` index the two endpoint components; ``members`` lists every
    component absorbed so far (it may hold duplicates until the chain is
    finalized).

    Attributes:
        p: Index of the first endpoint component.
        q: Index of the second endpoint component.
        members: Component indices in the chain.
        dist: Squared distance between the endpoint centers.
        direction: Unit vector center[p] - center[q].
    """

    p: int
    q: int
    members: list[int]
    dist: float
    direction: tuple[float, float]

    def shares_end(self, other: Chain) -> bool:
        return (
            self.p == other.p
            or self.p == other.q
            or self.q == other.p
            or self.q == other.q
        )


@dataclass(eq=False)
class ChainRegion:
    """A chain considered for recognition.

    Mirrors the pass/reject bookkeeping of a candidate so that rejected chains
    stay visible for debugging.

    Attributes:
        chain: The chain the region was built from.
        bbox: Inclusive (min_x, min_y, max_x, max_y) over all members.
        min_height: Smallest member height (max_y - min_y).
        angle: Chain angle against the horizontal in degrees.
        passed: Whether the region produced an accepted text.
        rejection_reason: Why the region was rejected (None if passed).
        raster: Image submitted to the recognizer, if one was built.
        text: Accepted numeric text (None unless passed).
        raw_text: Text returned by the recognizer before validation.
    """

    chain: Chain
    bbox: Rect
    min_height: int
    angle: float = 0.0
    passed: bool = False
    rejection_reason: str | None = None
    raster: np.ndarray | None = field(default=None, repr=False)
    text: str | None = None
    raw_text: str | None = None

    @property
    def width(self) -> int:
        return self.bbox[2] - self.bbox[0]

    @property
    def height(self) -> int:
        return self.bbox[3] - self.bbox[1]

    def reject(self, reason: str) -> ChainRegion:
        self.passed = False
        self.rejection_reason = reason
        return self


@dataclass(eq=False)
class TextDetectionResult:
    """Complete result of one detection run.

    Bundles the recognized numbers with every intermediate so a detection can
    be traced back to its chain and components.

    Attributes:
        texts: Recognized numeric strings, in chain order (duplicates allowed).
        regions: One ChainRegion per surviving chain, passed or rejected.
        chains: Chains after merging and the length filter.
        components: Valid components after geometric filtering.
        raw_component_count: Number of connected components before filtering.
        ray_count: Number of accepted stroke width rays.
        dimensions: (width, height) of the processed image.
        swt: Refined stroke width map as a float32 array (-1 where unset).
        artifact_paths: Debug images written for this run, by name.
    """

    texts: list[str]
    regions: list[ChainRegion]
    chains: list[Chain]
    components: list[Component]
    raw_component_count: int
    ray_count: int
    dimensions: tuple[int, int]
    swt: np.ndarray | None = field(default=None, repr=False)
    artifact_paths: dict[str, str] = field(default_factory=dict)

    @property
    def passed_regions(self) -> list[ChainRegion]:
        return [r for r in self.regions if r.passed]

    @property
    def rejected_regions(self) -> list[ChainRegion]:
        return [r for r in self.regions if not r.passed]

    def unique_numbers(self) -> list[int]:
        """Detected numbers as sorted unique integers."""
        return sorted({int(text) for text in self.texts})
