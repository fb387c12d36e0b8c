"""Tests for benchmarking.scoring: per-image matching and scorecards."""

from __future__ import annotations

import pytest

from benchmarking.scoring import (
    ImageScore,
    Scorecard,
    format_scorecard,
    score_image,
)


# =============================================================================
# score_image
# =============================================================================


class TestScoreImage:
    def test_exact_match(self):
        score = score_image("a.png", [123], [123])
        assert score.matched == [123]
        assert score.mismatched == []
        assert score.missed == []
        assert score.relevant == 1

    def test_mismatch_and_miss(self):
        score = score_image("a.png", [12, 123], [123, 45])
        assert score.matched == [123]
        assert score.mismatched == [12]
        assert score.missed == [45]
        assert score.relevant == 2

    def test_duplicates_count_once(self):
        score = score_image("a.png", [7, 7, 8, 8], [7])
        assert score.matched == [7]
        assert score.mismatched == [8]

    def test_no_detections(self):
        score = score_image("b.png", [], [1, 2])
        assert score.matched == []
        assert score.missed == [1, 2]

    def test_image_without_bibs(self):
        score = score_image("c.png", [5], [])
        assert score.mismatched == [5]
        assert score.relevant == 0


# =============================================================================
# Scorecard
# =============================================================================


class TestScorecard:
    def test_empty_scorecard_is_zero(self):
        card = Scorecard()
        assert card.precision == 0.0
        assert card.recall == 0.0
        assert card.f_score == 0.0

    def test_aggregates_images(self):
        card = Scorecard()
        card.add(score_image("a.png", [123], [123]))
        card.add(score_image("b.png", [9], [45]))

        assert card.true_positives == 1
        assert card.false_positives == 1
        assert card.relevant == 2
        assert [image.filename for image in card.images] == ["a.png", "b.png"]

    def test_precision_recall_f_score(self):
        card = Scorecard(true_positives=3, false_positives=1, relevant=6)
        assert card.precision == pytest.approx(0.75)
        assert card.recall == pytest.approx(0.5)
        assert card.f_score == pytest.approx(0.6)

    def test_perfect_score(self):
        card = Scorecard()
        card.add(score_image("a.png", [1, 2], [1, 2]))
        assert card.f_score == pytest.approx(1.0)

    def test_to_dict(self):
        data = Scorecard(true_positives=1, false_positives=0, relevant=2).to_dict()
        assert data["precision"] == pytest.approx(1.0)
        assert data["recall"] == pytest.approx(0.5)
        assert data["relevant"] == 2


class TestImageScore:
    def test_relevant_is_matched_plus_missed(self):
        score = ImageScore(filename="x", matched=[1], mismatched=[2, 3], missed=[4, 5])
        assert score.relevant == 3


# =============================================================================
# format_scorecard
# =============================================================================


class TestFormatScorecard:
    def test_lines(self):
        card = Scorecard(true_positives=1, false_positives=0, relevant=2)
        lines = format_scorecard(card).splitlines()
        assert lines == [
            "precision=1/1=1.00",
            "recall=1/2=0.50",
            "F-score=0.67",
        ]

    def test_empty(self):
        assert "precision=0/0=0.00" in format_scorecard(Scorecard())
