"""Tests for pairing components and merging them into chains."""

import math

import numpy as np
import pytest

from detection import DetectionConfig
from detection.chains import (
    finalize_chains,
    find_component_pairs,
    make_chains,
    merge_chains,
)
from detection.types import Chain, Component


def _component(x: int, y: int, w: int = 20, h: int = 20, median: float = 4.0) -> Component:
    """Component whose bbox starts at (x, y) with integer dimensions (w, h)."""
    return Component(
        pixels=np.array([[y, x], [y + h - 1, x + w - 1]]),
        bbox=(x, y, x + w - 1, y + h - 1),
        mean_width=median,
        variance=0.0,
        median_width=median,
    )


def _row(count: int, spacing: int = 24, y: int = 40) -> list[Component]:
    return [_component(10 + i * spacing, y) for i in range(count)]


def _angle(a, b, opposite):
    dot = a[0] * b[0] + a[1] * b[1]
    return math.acos(max(-1.0, min(1.0, -dot if opposite else dot)))


def _mergeable(a: Chain, b: Chain, strictness: float) -> bool:
    if a.p == b.p:
        return _angle(a.direction, b.direction, True) < strictness
    if a.p == b.q:
        return _angle(a.direction, b.direction, False) < strictness
    if a.q == b.p:
        return _angle(a.direction, b.direction, False) < strictness
    if a.q == b.q:
        return _angle(a.direction, b.direction, True) < strictness
    return False


class TestFindComponentPairs:
    """Tests for the pairwise eligibility rules."""

    def test_neighbours_pair_but_distant_components_do_not(self):
        pairs = find_component_pairs(_row(3), DetectionConfig())
        assert [(c.p, c.q) for c in pairs] == [(0, 1), (1, 2)]

    def test_pair_geometry(self):
        (pair,) = find_component_pairs(_row(2), DetectionConfig())
        assert pair.members == [0, 1]
        assert pair.dist == pytest.approx(24.0 ** 2)
        assert pair.direction == pytest.approx((-1.0, 0.0))

    def test_median_ratio_five_never_pairs(self):
        components = [_component(10, 40, median=1.0), _component(34, 40, median=5.0)]
        assert find_component_pairs(components, DetectionConfig()) == []

    def test_median_ratio_at_limit_does_not_pair(self):
        components = [_component(10, 40, median=1.0), _component(34, 40, median=3.0)]
        assert find_component_pairs(components, DetectionConfig()) == []

    def test_median_ratio_below_limit_pairs(self):
        components = [_component(10, 40, median=1.0), _component(34, 40, median=2.9)]
        assert len(find_component_pairs(components, DetectionConfig())) == 1

    def test_height_ratio_at_limit_does_not_pair(self):
        components = [_component(10, 40, h=20), _component(34, 40, h=40)]
        assert find_component_pairs(components, DetectionConfig()) == []

    def test_width_ratio_at_limit_does_not_pair(self):
        components = [_component(10, 40, w=10), _component(24, 40, w=20)]
        assert find_component_pairs(components, DetectionConfig()) == []

    def test_distance_ratio_uses_larger_of_smaller_dimensions(self):
        # Centers 25 apart, max(min dims) = 20: 625 / 400 = 1.5625 < 1.6
        close = [_component(10, 40), _component(35, 40)]
        assert len(find_component_pairs(close, DetectionConfig())) == 1
        # Centers 26 apart: 676 / 400 = 1.69
        far = [_component(10, 40), _component(36, 40)]
        assert find_component_pairs(far, DetectionConfig()) == []

    def test_color_distance_when_configured(self):
        components = _row(2)
        components[0].color = (0.0, 0.0, 0.0)
        components[1].color = (200.0, 0.0, 0.0)

        assert len(find_component_pairs(components, DetectionConfig())) == 1
        assert find_component_pairs(components, DetectionConfig(max_color_distance=1000.0)) == []


class TestMergeChains:
    """Tests for the merge loop."""

    def test_collinear_pairs_merge_into_one_chain(self):
        components = _row(3)
        pairs = find_component_pairs(components, DetectionConfig())

        chains, passes = merge_chains(pairs, [c.center for c in components])

        assert len(chains) == 1
        assert sorted(set(chains[0].members)) == [0, 1, 2]
        assert {chains[0].p, chains[0].q} == {0, 2}
        assert chains[0].dist == pytest.approx(48.0 ** 2)
        assert passes == 2

    def test_no_chains_runs_no_pass(self):
        assert merge_chains([], []) == ([], 0)

    def test_perpendicular_pairs_do_not_merge(self):
        components = _row(3) + [_component(58, 64)]
        pairs = find_component_pairs(components, DetectionConfig())
        assert [(c.p, c.q) for c in pairs] == [(0, 1), (1, 2), (2, 3)]

        chains, _ = merge_chains(pairs, [c.center for c in components])

        member_sets = sorted(sorted(set(c.members)) for c in chains)
        assert member_sets == [[0, 1, 2], [2, 3]]

    @pytest.mark.parametrize("count", [4, 6, 9])
    def test_terminates_and_leaves_nothing_mergeable(self, count):
        components = _row(count)
        pairs = find_component_pairs(components, DetectionConfig())
        initial = len(pairs)

        chains, passes = merge_chains(pairs, [c.center for c in components])

        assert passes <= initial
        assert len(chains) == 1
        assert sorted(set(chains[0].members)) == list(range(count))
        for a in chains:
            for b in chains:
                if a is not b:
                    assert not _mergeable(a, b, math.pi / 6.0)

    def test_zigzag_terminates_without_mergeable_pairs(self):
        components = [_component(10 + i * 24, 40 + (i % 2) * 6) for i in range(6)]
        pairs = find_component_pairs(components, DetectionConfig())

        chains, passes = merge_chains(pairs, [c.center for c in components])

        assert pairs
        assert passes <= len(pairs)
        for a in chains:
            for b in chains:
                if a is not b:
                    assert not _mergeable(a, b, math.pi / 6.0)


class TestFinalizeChains:
    def test_two_member_chain_discarded(self):
        chain = Chain(p=0, q=1, members=[0, 1], dist=576.0, direction=(-1.0, 0.0))
        assert finalize_chains([chain], min_length=3) == []

    def test_duplicates_removed_before_length_check(self):
        chain = Chain(p=0, q=1, members=[1, 0, 1, 0], dist=576.0, direction=(-1.0, 0.0))
        assert finalize_chains([chain], min_length=3) == []

    def test_members_sorted_and_unique(self):
        chain = Chain(p=0, q=2, members=[0, 1, 1, 2], dist=2304.0, direction=(-1.0, 0.0))
        (result,) = finalize_chains([chain], min_length=3)
        assert result.members == [0, 1, 2]


class TestMakeChains:
    def test_three_in_a_row(self):
        chains = make_chains(_row(3), DetectionConfig())
        assert len(chains) == 1
        assert chains[0].members == [0, 1, 2]

    def test_two_components_produce_no_chain(self):
        assert make_chains(_row(2), DetectionConfig()) == []

    def test_colors_computed_from_color_image(self):
        components = _row(3)
        color = np.zeros((100, 100, 3), dtype=np.uint8)
        color[..., 0] = 200

        make_chains(components, DetectionConfig(), color_image=color)

        assert components[0].color == pytest.approx((200.0, 0.0, 0.0))

    def test_color_distance_requires_color_image(self):
        with pytest.raises(ValueError):
            make_chains(_row(3), DetectionConfig(max_color_distance=100.0))
