"""Scan local images for bib numbers."""

from .pipeline import detect_image_numbers, process_images
from .service import ScanStats, group_by_bib, run_scan, write_results_csv

__all__ = [
    "detect_image_numbers",
    "process_images",
    "ScanStats",
    "group_by_bib",
    "run_scan",
    "write_results_csv",
]
