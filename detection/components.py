"""
Connected components of consistent stroke width.

Set pixels of the stroke width map are graph vertices, numbered row-major in a
dense id array. Neighbouring pixels are joined when their widths differ by at
most a fixed ratio, and the connected components of that graph are the
candidate characters.
"""

import logging

import numpy as np

from .swt import StrokeWidthMap

logger = logging.getLogger(__name__)

# (row, col) offsets of the forward neighbours: right, lower right, down, lower left
_NEIGHBOUR_OFFSETS = ((0, 1), (1, 1), (1, 0), (1, -1))


class _UnionFind:
    def __init__(self, size: int) -> None:
        self._parent = list(range(size))
        self._rank = [0] * size

    def find(self, idx: int) -> int:
        parent = self._parent
        root = idx
        while parent[root] != root:
            root = parent[root]
        while parent[idx] != root:
            parent[idx], idx = root, parent[idx]
        return root

    def union(self, a: int, b: int) -> None:
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return
        rank_a = self._rank[root_a]
        rank_b = self._rank[root_b]
        if rank_a < rank_b:
            self._parent[root_a] = root_b
        elif rank_a > rank_b:
            self._parent[root_b] = root_a
        else:
            self._parent[root_b] = root_a
            self._rank[root_a] += 1


def _vertex_ids(mask: np.ndarray) -> np.ndarray:
    ids = np.full(mask.shape, -1, dtype=np.int64)
    ids[mask] = np.arange(int(np.count_nonzero(mask)))
    return ids


def _neighbour_edges(
    values: np.ndarray,
    ids: np.ndarray,
    max_ratio: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Vertex id pairs of adjacent set pixels with compatible widths."""
    height, width = values.shape
    sources: list[np.ndarray] = []
    targets: list[np.ndarray] = []

    for d_row, d_col in _NEIGHBOUR_OFFSETS:
        col_start = max(0, -d_col)
        col_stop = width - max(0, d_col)
        row_stop = height - d_row
        if row_stop <= 0 or col_stop <= col_start:
            continue

        a = values[:row_stop, col_start:col_stop]
        b = values[d_row:, col_start + d_col:col_stop + d_col]
        both = (a > 0) & (b > 0)
        larger = np.maximum(a, b)
        smaller = np.where(both, np.minimum(a, b), 1.0)
        joined = both & (larger / smaller <= max_ratio)

        sources.append(ids[:row_stop, col_start:col_stop][joined])
        targets.append(ids[d_row:, col_start + d_col:col_stop + d_col][joined])

    if not sources:
        empty = np.empty(0, dtype=np.int64)
        return empty, empty
    return np.concatenate(sources), np.concatenate(targets)


def connected_components(
    swt: StrokeWidthMap,
    max_ratio: float = 3.0,
) -> list[np.ndarray]:
    """Group set pixels into components of consistent stroke width.

    Args:
        swt: Refined stroke width map.
        max_ratio: Largest allowed larger/smaller width between neighbours.

    Returns:
        One (N, 2) int array of (row, col) per component. Components are
        ordered by their first pixel in row-major order and list their pixels
        in row-major order. Every set pixel belongs to exactly one component.
    """
    values = swt.to_array()
    mask = values > 0
    ids = _vertex_ids(mask)
    rows, cols = np.nonzero(mask)
    vertex_count = len(rows)

    sources, targets = _neighbour_edges(values, ids, max_ratio)
    components = _UnionFind(vertex_count)
    for a, b in zip(sources.tolist(), targets.tolist()):
        components.union(a, b)

    label_of_root: dict[int, int] = {}
    members: list[list[int]] = []
    for vertex in range(vertex_count):
        root = components.find(vertex)
        label = label_of_root.get(root)
        if label is None:
            label = len(members)
            label_of_root[root] = label
            members.append([])
        members[label].append(vertex)

    pixels = np.column_stack((rows, cols))
    result = [pixels[np.asarray(vertices, dtype=np.int64)] for vertices in members]

    logger.debug(
        "Found %d components over %d pixels (%d edges)",
        len(result), vertex_count, len(sources),
    )
    return result
