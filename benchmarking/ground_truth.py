"""Ground truth for evaluating bib number detection.

The ground truth file is a semicolon separated CSV with one line per image:

    filename;bib;bib;...

Filenames are relative to the directory holding the CSV. Lines without any
bib list an image that should produce no detection.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from config import GROUND_TRUTH_DELIMITER

logger = logging.getLogger(__name__)


class ImageLabel(BaseModel):
    """Expected bib numbers for one image.

    Attributes:
        filename: Image path as written in the CSV.
        bibs: Expected bib numbers (duplicates removed, order kept).
    """

    filename: str
    bibs: list[int] = []

    model_config = ConfigDict(frozen=True)

    @field_validator("filename")
    @classmethod
    def _validate_filename(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("filename must not be empty")
        return v

    @field_validator("bibs", mode="before")
    @classmethod
    def _parse_bibs(cls, v: object) -> object:
        if isinstance(v, (list, tuple)):
            cleaned = [b.strip() if isinstance(b, str) else b for b in v]
            return [b for b in cleaned if b != ""]
        return v

    @field_validator("bibs")
    @classmethod
    def _validate_bibs(cls, v: list[int]) -> list[int]:
        for bib in v:
            if bib < 0:
                raise ValueError(f"Invalid bib number: {bib}")
        return list(dict.fromkeys(v))

    def path_in(self, directory: Path) -> Path:
        return directory / self.filename


def parse_ground_truth_row(row: list[str]) -> ImageLabel | None:
    """Parse one CSV row, returning None for blank rows.

    Raises:
        ValueError: If the row has no filename or a bib is not a number.
    """
    if not row or all(not cell.strip() for cell in row):
        return None
    try:
        return ImageLabel(filename=row[0], bibs=row[1:])
    except ValidationError as exc:
        raise ValueError(f"Invalid ground truth row {row!r}: {exc}") from exc


def load_ground_truth(
    path: str | Path,
    delimiter: str = GROUND_TRUTH_DELIMITER,
) -> list[ImageLabel]:
    """Load a ground truth CSV.

    Raises:
        ValueError: If the file is missing or a row is malformed.
    """
    csv_path = Path(path)
    if not csv_path.is_file():
        raise ValueError(f"Not found: {path}")

    labels: list[ImageLabel] = []
    with csv_path.open(newline="", encoding="utf-8") as handle:
        for line_number, row in enumerate(csv.reader(handle, delimiter=delimiter), start=1):
            try:
                label = parse_ground_truth_row(row)
            except ValueError as exc:
                raise ValueError(f"{csv_path}:{line_number}: {exc}") from exc
            if label is not None:
                labels.append(label)

    logger.debug("Loaded %d ground truth images from %s", len(labels), csv_path)
    return labels
