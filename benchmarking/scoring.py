"""Bib number scoring against ground truth.

Provides:
- ``ImageScore``: per-image matches, mismatches and misses.
- ``score_image``: compare detected numbers to the expected ones.
- ``Scorecard``: aggregate precision / recall / F-score.
- ``format_scorecard``: human-readable summary text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


def _safe_div(num: float, den: float) -> float:
    return num / den if den else 0.0


@dataclass
class ImageScore:
    """Outcome of one image.

    Attributes:
        filename: Image the numbers were read from.
        matched: Detected numbers present in the ground truth.
        mismatched: Detected numbers absent from the ground truth.
        missed: Expected numbers that were not detected.
    """

    filename: str
    matched: list[int] = field(default_factory=list)
    mismatched: list[int] = field(default_factory=list)
    missed: list[int] = field(default_factory=list)

    @property
    def relevant(self) -> int:
        return len(self.matched) + len(self.missed)


def score_image(filename: str, detected: Iterable[int], expected: Iterable[int]) -> ImageScore:
    """Compare the detected numbers of one image to its ground truth.

    Both sides are de-duplicated first.
    """
    detected_set = sorted(set(detected))
    expected_set = set(expected)
    return ImageScore(
        filename=filename,
        matched=[bib for bib in detected_set if bib in expected_set],
        mismatched=[bib for bib in detected_set if bib not in expected_set],
        missed=sorted(expected_set.difference(detected_set)),
    )


@dataclass
class Scorecard:
    """Bib number scorecard over a set of images.

    Attributes:
        true_positives: Detected numbers found in the ground truth.
        false_positives: Detected numbers not in the ground truth.
        relevant: Total expected numbers.
        images: Per-image scores, in evaluation order.
    """

    true_positives: int = 0
    false_positives: int = 0
    relevant: int = 0
    images: list[ImageScore] = field(default_factory=list)

    def add(self, image: ImageScore) -> None:
        self.true_positives += len(image.matched)
        self.false_positives += len(image.mismatched)
        self.relevant += image.relevant
        self.images.append(image)

    @property
    def precision(self) -> float:
        return _safe_div(self.true_positives, self.true_positives + self.false_positives)

    @property
    def recall(self) -> float:
        return _safe_div(self.true_positives, self.relevant)

    @property
    def f_score(self) -> float:
        p, r = self.precision, self.recall
        return _safe_div(2 * p * r, p + r)

    def to_dict(self) -> dict:
        return {
            "true_positives": self.true_positives,
            "false_positives": self.false_positives,
            "relevant": self.relevant,
            "precision": self.precision,
            "recall": self.recall,
            "f_score": self.f_score,
        }


def format_scorecard(scorecard: Scorecard) -> str:
    """Format a scorecard as text for terminal output."""
    detected = scorecard.true_positives + scorecard.false_positives
    return "\n".join([
        f"precision={scorecard.true_positives}/{detected}={scorecard.precision:.2f}",
        f"recall={scorecard.true_positives}/{scorecard.relevant}={scorecard.recall:.2f}",
        f"F-score={scorecard.f_score:.2f}",
    ])
