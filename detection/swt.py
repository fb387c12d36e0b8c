"""
Stroke width transform.

Rays are cast from every edge pixel along its (optionally inverted) gradient
until they reach an opposing edge. Every pixel a ray crosses is assigned the
ray length, keeping the minimum when several rays cross the same pixel. A
second pass replaces each ray's values by the ray median so that corners do
not inflate the estimate.
"""

import logging
import math

import numpy as np

from .types import Ray

logger = logging.getLogger(__name__)

UNSET = -1.0


class StrokeWidthMap:
    """Owned per-pixel stroke width buffer.

    Pixels start unset (-1.0). The only write is a min-merge: an unset pixel
    takes the value, a set pixel keeps the smaller of both. Accessors take
    (row, col) and raise IndexError outside the image.
    """

    def __init__(self, height: int, width: int):
        if height <= 0 or width <= 0:
            raise ValueError(f"StrokeWidthMap needs a positive size, got {width}x{height}")
        self._data = np.full((height, width), UNSET, dtype=np.float32)

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self._data.shape

    def _check(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(
                f"pixel ({row}, {col}) outside stroke width map of size {self.width}x{self.height}"
            )

    def _check_many(self, pixels: np.ndarray) -> None:
        if len(pixels) == 0:
            return
        rows, cols = pixels[:, 0], pixels[:, 1]
        if rows.min() < 0 or cols.min() < 0 or rows.max() >= self.height or cols.max() >= self.width:
            raise IndexError(f"ray leaves stroke width map of size {self.width}x{self.height}")

    def get(self, row: int, col: int) -> float:
        self._check(row, col)
        return float(self._data[row, col])

    def is_set(self, row: int, col: int) -> bool:
        return self.get(row, col) > 0

    def update_min(self, row: int, col: int, value: float) -> None:
        """Store value at (row, col) unless a smaller width is already there."""
        if value <= 0:
            raise ValueError(f"stroke width must be positive, got {value}")
        self._check(row, col)
        current = self._data[row, col]
        if current < 0 or value < current:
            self._data[row, col] = value

    def values_at(self, pixels: np.ndarray) -> np.ndarray:
        """Values at an (N, 2) array of (row, col) pixels."""
        self._check_many(pixels)
        return self._data[pixels[:, 0], pixels[:, 1]]

    def update_min_many(self, pixels: np.ndarray, value: float) -> None:
        """Min-merge one value into every pixel of an (N, 2) array of distinct pixels."""
        if value <= 0:
            raise ValueError(f"stroke width must be positive, got {value}")
        self._check_many(pixels)
        rows, cols = pixels[:, 0], pixels[:, 1]
        current = self._data[rows, cols]
        self._data[rows, cols] = np.where((current < 0) | (value < current), value, current)

    def set_mask(self) -> np.ndarray:
        """Boolean mask of pixels that carry a stroke width."""
        return self._data > 0

    def to_array(self) -> np.ndarray:
        """Copy of the buffer as float32, -1 where unset."""
        return self._data.copy()


def _unit_gradient(
    gradient_x: np.ndarray,
    gradient_y: np.ndarray,
    row: int,
    col: int,
    dark_on_light: bool,
) -> tuple[float, float] | None:
    gx = float(gradient_x[row, col])
    gy = float(gradient_y[row, col])
    magnitude = math.hypot(gx, gy)
    if magnitude == 0:
        return None
    gx /= magnitude
    gy /= magnitude
    if dark_on_light:
        return -gx, -gy
    return gx, gy


def _march(
    row: int,
    col: int,
    gx: float,
    gy: float,
    offsets: np.ndarray,
    height: int,
    width: int,
) -> np.ndarray:
    """Pixels entered by a ray from the center of (row, col), in order.

    The start pixel is excluded and the path is cut at the first position
    outside the image.
    """
    xs = np.floor(col + 0.5 + gx * offsets).astype(np.int64)
    ys = np.floor(row + 0.5 + gy * offsets).astype(np.int64)

    # A straight line crosses each pixel in one contiguous run of steps
    entered = np.empty(len(xs), dtype=bool)
    entered[0] = xs[0] != col or ys[0] != row
    entered[1:] = (xs[1:] != xs[:-1]) | (ys[1:] != ys[:-1])
    path = np.column_stack((ys[entered], xs[entered]))

    outside = (path[:, 0] < 0) | (path[:, 0] >= height) | (path[:, 1] < 0) | (path[:, 1] >= width)
    if outside.any():
        path = path[: int(np.argmax(outside))]
    return path


def stroke_width_transform(
    edges: np.ndarray,
    gradient_x: np.ndarray,
    gradient_y: np.ndarray,
    dark_on_light: bool,
    max_stroke_length: float,
    step: float = 0.05,
) -> tuple[StrokeWidthMap, list[Ray]]:
    """Estimate the stroke width of every pixel lying between opposing edges.

    Args:
        edges: Binary edge map (non-zero on edges).
        gradient_x: Horizontal gradient, same shape as edges.
        gradient_y: Vertical gradient, same shape as edges.
        dark_on_light: Strokes are darker than the background, so rays follow
                       the inverted gradient.
        max_stroke_length: Rays longer than this are discarded.
        step: Sub-pixel marching step.

    Returns:
        Tuple of (stroke width map, accepted rays in edge scan order).
    """
    if edges.shape != gradient_x.shape or edges.shape != gradient_y.shape:
        raise ValueError(
            f"edge map and gradients must share a shape, got {edges.shape}, "
            f"{gradient_x.shape} and {gradient_y.shape}"
        )

    height, width = edges.shape
    swt = StrokeWidthMap(height, width)
    rays: list[Ray] = []

    edge_mask = edges > 0
    limit = max_stroke_length + math.sqrt(2.0)
    offsets = np.arange(1, int(limit / step) + 1, dtype=np.float64) * step
    half_pi = math.pi / 2.0

    skipped = 0
    edge_rows, edge_cols = np.nonzero(edge_mask)
    for row, col in zip(edge_rows.tolist(), edge_cols.tolist()):
        direction = _unit_gradient(gradient_x, gradient_y, row, col, dark_on_light)
        if direction is None:
            skipped += 1
            continue
        gx, gy = direction

        path = _march(row, col, gx, gy, offsets, height, width)
        if len(path) == 0:
            continue
        hits = np.flatnonzero(edge_mask[path[:, 0], path[:, 1]])
        if len(hits) == 0:
            continue

        end = int(hits[0])
        end_row, end_col = int(path[end, 0]), int(path[end, 1])
        opposite = _unit_gradient(gradient_x, gradient_y, end_row, end_col, dark_on_light)
        if opposite is None:
            continue

        dot = -(gx * opposite[0] + gy * opposite[1])
        if math.acos(max(-1.0, min(1.0, dot))) >= half_pi:
            continue

        length = math.hypot(end_col - col, end_row - row)
        if length > max_stroke_length:
            continue

        pixels = np.vstack(([[row, col]], path[: end + 1]))
        swt.update_min_many(pixels, length)
        rays.append(Ray(start=(row, col), end=(end_row, end_col), pixels=pixels, width=length))

    logger.debug(
        "Stroke width transform: %d edge pixels, %d rays accepted, %d zero gradients",
        len(edge_rows), len(rays), skipped,
    )
    return swt, rays


def median_filter(swt: StrokeWidthMap, rays: list[Ray]) -> None:
    """Cap every ray pixel at the median width along that ray.

    The median is the upper median (index len // 2 of the sorted values).
    Values never increase.
    """
    for ray in rays:
        values = np.sort(swt.values_at(ray.pixels))
        median = float(values[len(values) // 2])
        swt.update_min_many(ray.pixels, median)
