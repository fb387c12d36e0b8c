"""
Chain building.

Pairs of similar, nearby components become two-member chains. Chains sharing
an endpoint and pointing the same way are merged repeatedly until no merge is
possible; chains with enough distinct members are candidate text lines.
"""

import logging
import math

import numpy as np

from logging_utils import DebugTopic

from .config import DetectionConfig
from .filtering import ratio_within
from .types import Chain, Component

logger = logging.getLogger(__name__)


def compute_component_colors(components: list[Component], color_image: np.ndarray) -> None:
    """Store the mean (R, G, B) of each component's pixels on the component."""
    for component in components:
        rows, cols = component.pixels[:, 0], component.pixels[:, 1]
        mean = color_image[rows, cols].astype(np.float64).mean(axis=0)
        component.color = (float(mean[0]), float(mean[1]), float(mean[2]))


def color_distance(a: Component, b: Component) -> float:
    """Squared distance between the mean colors of two components."""
    if a.color is None or b.color is None:
        raise ValueError("component colors have not been computed")
    return sum((x - y) ** 2 for x, y in zip(a.color, b.color))


def _direction(
    centers: list[tuple[float, float]],
    p: int,
    q: int,
) -> tuple[float, tuple[float, float]]:
    """Squared distance and unit vector from center[q] to center[p]."""
    d_x = centers[p][0] - centers[q][0]
    d_y = centers[p][1] - centers[q][1]
    dist = d_x * d_x + d_y * d_y
    magnitude = math.sqrt(dist)
    if magnitude == 0:
        return dist, (0.0, 0.0)
    return dist, (d_x / magnitude, d_y / magnitude)


def _angle_between(a: tuple[float, float], b: tuple[float, float], opposite: bool) -> float:
    dot = a[0] * b[0] + a[1] * b[1]
    if opposite:
        dot = -dot
    return math.acos(max(-1.0, min(1.0, dot)))


def find_component_pairs(
    components: list[Component],
    config: DetectionConfig,
    debug: DebugTopic = DebugTopic.NONE,
) -> list[Chain]:
    """Form a two-member chain for every compatible pair of components.

    A pair (i, j) with i < j is compatible when its stroke width medians,
    widths and heights are within their ratio bands, the squared center
    distance is below max_distance_ratio times the squared larger of the two
    smaller dimensions, and (when configured) the mean colors are close.
    """
    centers = [c.center for c in components]
    pairs: list[Chain] = []

    for i, first in enumerate(components):
        for j in range(i + 1, len(components)):
            second = components[j]
            median_ratio = first.median_width / second.median_width
            dim_ratio_x = first.dimensions[0] / second.dimensions[0]
            dim_ratio_y = first.dimensions[1] / second.dimensions[1]
            dist, direction = _direction(centers, i, j)
            max_dim = float(max(min(first.dimensions), min(second.dimensions)) ** 2)

            if DebugTopic.CHAINS in debug:
                logger.debug(
                    "Pair (%d:%d): dist=%.1f max_dim=%.1f median_ratio=%.2f "
                    "dim_ratio_x=%.2f dim_ratio_y=%.2f",
                    i, j, dist, max_dim, median_ratio, dim_ratio_x, dim_ratio_y,
                )

            if not (
                ratio_within(median_ratio, config.max_median_ratio)
                and ratio_within(dim_ratio_y, config.max_dimension_ratio)
                and ratio_within(dim_ratio_x, config.max_dimension_ratio)
            ):
                continue
            if dist / max_dim >= config.max_distance_ratio:
                continue
            if (
                config.max_color_distance is not None
                and color_distance(first, second) >= config.max_color_distance
            ):
                continue

            pairs.append(Chain(p=i, q=j, members=[i, j], dist=dist, direction=direction))

    logger.debug("%d eligible pairs among %d components", len(pairs), len(components))
    return pairs


def _try_merge(
    a: Chain,
    b: Chain,
    centers: list[tuple[float, float]],
    strictness: float,
) -> bool:
    """Absorb b into a when they continue each other at a shared endpoint.

    Only the first shared endpoint (in p/p, p/q, q/p, q/q order) is tested.
    """
    if a.p == b.p:
        if _angle_between(a.direction, b.direction, opposite=True) >= strictness:
            return False
        a.p = b.q
    elif a.p == b.q:
        if _angle_between(a.direction, b.direction, opposite=False) >= strictness:
            return False
        a.p = b.p
    elif a.q == b.p:
        if _angle_between(a.direction, b.direction, opposite=False) >= strictness:
            return False
        a.q = b.q
    elif a.q == b.q:
        if _angle_between(a.direction, b.direction, opposite=True) >= strictness:
            return False
        a.q = b.p
    else:
        return False

    a.members.extend(b.members)
    a.dist, a.direction = _direction(centers, a.p, a.q)
    return True


def merge_chains(
    chains: list[Chain],
    centers: list[tuple[float, float]],
    strictness: float = math.pi / 6.0,
) -> tuple[list[Chain], int]:
    """Merge chains until a full pass performs no merge.

    Chains are visited in ascending distance order at first and in descending
    member count order after every pass. Each pass that merges removes at
    least one chain, so the loop runs at most len(chains) passes.

    Args:
        chains: Initial chains; they are updated in place.
        centers: (x, y) center of every component.
        strictness: Largest direction difference (radians) allowed for a merge.

    Returns:
        Tuple of (surviving chains, number of passes run).
    """
    ordered = sorted(chains, key=lambda c: c.dist)
    worklist = list(range(len(ordered)))
    passes = 0

    while worklist:
        passes += 1
        absorbed: set[int] = set()
        for a_id in worklist:
            if a_id in absorbed:
                continue
            for b_id in worklist:
                if b_id == a_id or b_id in absorbed:
                    continue
                a, b = ordered[a_id], ordered[b_id]
                if a.shares_end(b) and _try_merge(a, b, centers, strictness):
                    absorbed.add(b_id)

        if not absorbed:
            break
        worklist = [chain_id for chain_id in worklist if chain_id not in absorbed]
        worklist.sort(key=lambda chain_id: len(ordered[chain_id].members), reverse=True)

    return [ordered[chain_id] for chain_id in worklist], passes


def finalize_chains(chains: list[Chain], min_length: int = 3) -> list[Chain]:
    """De-duplicate and sort chain members, keeping chains long enough to be text."""
    result = []
    for chain in chains:
        chain.members = sorted(set(chain.members))
        if len(chain.members) >= min_length:
            result.append(chain)
    return result


def make_chains(
    components: list[Component],
    config: DetectionConfig,
    color_image: np.ndarray | None = None,
    debug: DebugTopic = DebugTopic.NONE,
) -> list[Chain]:
    """Build the candidate text chains of a set of valid components.

    Args:
        components: Valid components; list positions are their identifiers.
        config: Detection configuration.
        color_image: RGB image used for the component mean colors.
        debug: Debug topics to log.

    Returns:
        Chains with sorted, distinct members and at least
        config.min_chain_length of them.
    """
    if color_image is not None:
        compute_component_colors(components, color_image)
    elif config.max_color_distance is not None:
        raise ValueError("max_color_distance requires a color image")

    pairs = find_component_pairs(components, config, debug)
    centers = [c.center for c in components]
    merged, passes = merge_chains(pairs, centers, config.merge_angle)
    chains = finalize_chains(merged, config.min_chain_length)

    if DebugTopic.CHAINS in debug:
        for index, chain in enumerate(chains):
            logger.debug(
                "Chain %d: members=%s p=%d q=%d direction=(%.3f, %.3f)",
                index, chain.members, chain.p, chain.q, *chain.direction,
            )
    logger.debug(
        "%d chains after %d merge passes (%d before the length filter)",
        len(chains), passes, len(merged),
    )
    return chains
