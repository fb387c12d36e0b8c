"""Benchmarking module for bib number detection evaluation."""

from .ground_truth import ImageLabel, load_ground_truth, parse_ground_truth_row
from .scoring import ImageScore, Scorecard, format_scorecard, score_image
from .runner import run_evaluation

__all__ = [
    # Ground truth
    "ImageLabel",
    "load_ground_truth",
    "parse_ground_truth_row",
    # Scoring
    "ImageScore",
    "Scorecard",
    "format_scorecard",
    "score_image",
    # Runner
    "run_evaluation",
]
