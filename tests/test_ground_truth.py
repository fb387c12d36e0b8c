"""Tests for the ground truth schema: validation and CSV loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from benchmarking.ground_truth import (
    ImageLabel,
    load_ground_truth,
    parse_ground_truth_row,
)


# =============================================================================
# ImageLabel
# =============================================================================


class TestImageLabel:
    def test_bibs_parsed_from_strings(self):
        label = ImageLabel(filename="a.png", bibs=["123", " 45 "])
        assert label.bibs == [123, 45]

    def test_empty_cells_dropped(self):
        label = ImageLabel(filename="a.png", bibs=["12", "", "  "])
        assert label.bibs == [12]

    def test_duplicates_removed_in_order(self):
        label = ImageLabel(filename="a.png", bibs=[7, 3, 7])
        assert label.bibs == [7, 3]

    def test_negative_bib_raises(self):
        with pytest.raises(ValueError, match="Invalid bib number"):
            ImageLabel(filename="a.png", bibs=[-1])

    def test_non_numeric_bib_raises(self):
        with pytest.raises(ValueError):
            ImageLabel(filename="a.png", bibs=["12a"])

    def test_blank_filename_raises(self):
        with pytest.raises(ValueError):
            ImageLabel(filename="  ", bibs=[])

    def test_frozen(self):
        label = ImageLabel(filename="a.png", bibs=[1])
        with pytest.raises(ValueError):
            label.filename = "b.png"

    def test_path_in(self):
        label = ImageLabel(filename="sub/a.png")
        assert label.path_in(Path("/data")) == Path("/data/sub/a.png")


# =============================================================================
# parse_ground_truth_row
# =============================================================================


class TestParseRow:
    def test_blank_rows_skipped(self):
        assert parse_ground_truth_row([]) is None
        assert parse_ground_truth_row(["", " "]) is None

    def test_image_without_bibs(self):
        label = parse_ground_truth_row(["empty.jpg"])
        assert label.filename == "empty.jpg"
        assert label.bibs == []

    def test_invalid_row_raises_value_error(self):
        with pytest.raises(ValueError, match="Invalid ground truth row"):
            parse_ground_truth_row(["a.png", "x1"])


# =============================================================================
# load_ground_truth
# =============================================================================


class TestLoadGroundTruth:
    def test_loads_semicolon_csv(self, tmp_path):
        csv_path = tmp_path / "truth.csv"
        csv_path.write_text("a.png;123\nb.png;45;46\n\nc.png\n", encoding="utf-8")

        labels = load_ground_truth(csv_path)

        assert [(l.filename, l.bibs) for l in labels] == [
            ("a.png", [123]),
            ("b.png", [45, 46]),
            ("c.png", []),
        ]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ValueError, match="Not found"):
            load_ground_truth(tmp_path / "missing.csv")

    def test_bad_row_reports_line_number(self, tmp_path):
        csv_path = tmp_path / "truth.csv"
        csv_path.write_text("a.png;1\nb.png;oops\n", encoding="utf-8")
        with pytest.raises(ValueError, match=":2:"):
            load_ground_truth(csv_path)

    def test_custom_delimiter(self, tmp_path):
        csv_path = tmp_path / "truth.csv"
        csv_path.write_text("a.png,1,2\n", encoding="utf-8")
        (label,) = load_ground_truth(csv_path, delimiter=",")
        assert label.bibs == [1, 2]
