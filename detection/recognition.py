"""
Text recognition adapters.

The detector only needs ``read_text(raster) -> str``. EasyOCRRecognizer is the
production implementation; tests pass any object with that method.
"""

from __future__ import annotations

import logging
import warnings
from typing import TYPE_CHECKING, Protocol, Sequence

import numpy as np

from config import OCR_ALLOWLIST, OCR_LANGUAGES

if TYPE_CHECKING:
    import easyocr

logger = logging.getLogger(__name__)


class TextRecognizer(Protocol):
    """Anything that reads a single line of text from a binary raster."""

    def read_text(self, raster: np.ndarray) -> str:
        ...


def _suppress_torch_warnings() -> None:
    warnings.filterwarnings(
        "ignore",
        message=r".*pin_memory.*MPS.*",
        category=UserWarning,
        module=r"torch\.utils\.data\.dataloader",
    )


def create_reader(languages: Sequence[str] = OCR_LANGUAGES, gpu: bool = False) -> easyocr.Reader:
    """Load an EasyOCR reader (downloads the models on first use)."""
    logger.info("Initializing EasyOCR...")
    _suppress_torch_warnings()
    import easyocr as _easyocr

    return _easyocr.Reader(list(languages), gpu=gpu)


class EasyOCRRecognizer:
    """Reads chain rasters with EasyOCR.

    Chain rasters hold white strokes on black. EasyOCR is trained on dark text
    on a light background, so the raster is inverted first unless
    ``invert=False``.

    Args:
        reader: EasyOCR reader. Created with create_reader() if None.
        allowlist: Characters the recognizer may return (None allows all).
        invert: Invert the raster before recognition.
    """

    def __init__(
        self,
        reader: easyocr.Reader | None = None,
        allowlist: str | None = OCR_ALLOWLIST,
        invert: bool = True,
    ):
        self.reader = reader if reader is not None else create_reader()
        self.allowlist = allowlist
        self.invert = invert

    def read_text(self, raster: np.ndarray) -> str:
        image = 255 - raster if self.invert else raster
        # The raster is already cropped to one text line
        results = self.reader.recognize(
            image,
            detail=1,
            paragraph=False,
            allowlist=self.allowlist,
        )
        return "".join(text for _, text, _ in results)
