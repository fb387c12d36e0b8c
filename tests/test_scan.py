"""Tests for local image discovery and the scan service."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from conftest import StubRecognizer, make_ring_image
from scan import group_by_bib, process_images, run_scan, write_results_csv
from sources import is_image_file, load_image, scan_local_images


@pytest.fixture
def photo_dir(tmp_path) -> Path:
    """Directory with one readable number, one blank photo and two non-photos."""
    Image.fromarray(make_ring_image()).save(tmp_path / "a.png")
    Image.fromarray(np.full((100, 200, 3), 255, dtype=np.uint8)).save(tmp_path / "b.png")
    (tmp_path / "broken.png").write_bytes(b"not an image")
    (tmp_path / "notes.txt").write_text("hello", encoding="utf-8")
    (tmp_path / "nested").mkdir()
    Image.fromarray(make_ring_image()).save(tmp_path / "nested" / "c.png")
    return tmp_path


# =============================================================================
# sources.local
# =============================================================================


class TestLocalSources:
    @pytest.mark.parametrize("name,expected", [
        ("a.jpg", True),
        ("a.JPEG", True),
        ("a.png", True),
        ("a.txt", False),
        ("png", False),
    ])
    def test_is_image_file(self, name, expected):
        assert is_image_file(name) is expected

    def test_directory_listing_is_sorted_and_flat(self, photo_dir):
        names = [p.name for p in scan_local_images(photo_dir)]
        assert names == ["a.png", "b.png", "broken.png"]

    def test_single_file(self, photo_dir):
        assert scan_local_images(photo_dir / "a.png") == [photo_dir / "a.png"]

    def test_non_image_file_raises(self, photo_dir):
        with pytest.raises(ValueError, match="not a supported image file"):
            scan_local_images(photo_dir / "notes.txt")

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(ValueError, match="Not found"):
            scan_local_images(tmp_path / "missing")

    def test_load_image_is_rgb(self, photo_dir):
        image = load_image(photo_dir / "a.png")
        assert image.shape == (100, 200, 3)
        assert image.dtype == np.uint8

    def test_load_broken_image_raises_os_error(self, photo_dir):
        with pytest.raises(OSError):
            load_image(photo_dir / "broken.png")


# =============================================================================
# scan.service
# =============================================================================


class TestGroupByBib:
    def test_files_grouped_under_sorted_bibs(self):
        grouped = group_by_bib({"b.png": [45, 123], "a.png": [123], "c.png": []})
        assert grouped == {45: ["b.png"], 123: ["a.png", "b.png"]}

    def test_write_results_csv(self, tmp_path):
        out = tmp_path / "out.csv"
        write_results_csv(out, {7: ["a.png", "b.png"], 12: ["c.png"]})
        assert out.read_text(encoding="utf-8").splitlines() == ["7,a.png,b.png", "12,c.png"]


class TestProcessImages:
    def test_unreadable_images_left_out(self, photo_dir):
        paths = scan_local_images(photo_dir)

        results = process_images(paths, StubRecognizer("123"), progress=False)

        assert results == {photo_dir / "a.png": [123], photo_dir / "b.png": []}

    def test_workers_must_be_positive(self, photo_dir):
        with pytest.raises(ValueError):
            process_images([], StubRecognizer(), workers=0)

    def test_artifacts_per_image(self, photo_dir, tmp_path_factory):
        artifacts = tmp_path_factory.mktemp("artifacts")

        process_images(
            [photo_dir / "a.png"], StubRecognizer("123"), artifact_root=artifacts, progress=False,
        )

        assert (artifacts / "a.png" / "chains.png").exists()

    def test_same_stem_photos_get_separate_artifacts(self, tmp_path_factory):
        photos = tmp_path_factory.mktemp("photos")
        Image.fromarray(make_ring_image()).save(photos / "a.png")
        Image.fromarray(np.full((100, 200, 3), 255, dtype=np.uint8)).save(photos / "a.jpg")
        artifacts = tmp_path_factory.mktemp("artifacts")

        results = process_images(
            [photos / "a.jpg", photos / "a.png"],
            StubRecognizer("123"),
            artifact_root=artifacts,
            workers=2,
            progress=False,
        )

        assert results == {photos / "a.jpg": [], photos / "a.png": [123]}
        assert sorted(p.name for p in artifacts.iterdir()) == ["a.jpg", "a.png"]
        assert (artifacts / "a.png" / "raster_0.png").exists()
        assert not list((artifacts / "a.jpg").glob("raster_*.png"))


class TestRunScan:
    """Tests for scanning a directory or a single image."""

    def test_directory_scan_writes_out_csv(self, photo_dir):
        stats = run_scan(photo_dir, recognizer=StubRecognizer("123"))

        assert stats.photos_found == 3
        assert stats.photos_scanned == 2
        assert stats.photos_failed == 1
        assert stats.bibs_detected == 1
        assert stats.results == {"a.png": [123], "b.png": []}
        assert stats.output_path == photo_dir / "out.csv"
        assert (photo_dir / "out.csv").read_text(encoding="utf-8").splitlines() == ["123,a.png"]

    def test_parallel_scan_matches_serial(self, photo_dir):
        serial = run_scan(photo_dir, recognizer=StubRecognizer("123"))
        parallel = run_scan(photo_dir, recognizer=StubRecognizer("123"), workers=2)
        assert parallel.results == serial.results

    def test_explicit_output(self, photo_dir, tmp_path_factory):
        out = tmp_path_factory.mktemp("results") / "bibs.csv"
        stats = run_scan(photo_dir, recognizer=StubRecognizer("123"), output=out)
        assert stats.output_path == out
        assert out.exists()
        assert not (photo_dir / "out.csv").exists()

    def test_single_file_writes_no_csv(self, photo_dir):
        stats = run_scan(photo_dir / "a.png", recognizer=StubRecognizer("123"))
        assert stats.results == {"a.png": [123]}
        assert stats.output_path is None
        assert not (photo_dir / "out.csv").exists()

    def test_empty_directory(self, tmp_path):
        stats = run_scan(tmp_path)
        assert stats.photos_found == 0
        assert stats.output_path is None

    def test_missing_source_raises(self, tmp_path):
        with pytest.raises(ValueError):
            run_scan(tmp_path / "missing", recognizer=StubRecognizer())
