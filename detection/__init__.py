"""
Stroke width text detection module.

This module finds runs of digit-like strokes in images and reads them as
numbers, using the stroke width transform to locate characters and an OCR
engine to read each chain of characters.

Key components:
- detector: Main detection functions (detect_text, detect_bib_numbers)
- swt: Stroke width transform and median refinement
- components: Connected components of consistent stroke width
- filtering: Geometric filtering of components
- chains: Pairing and merging components into chains
- regions: Chain validation and recognition rasters
- recognition: TextRecognizer protocol and the EasyOCR adapter
- validation: Numeric text validation
- types: Data classes (Component, Chain, ChainRegion, TextDetectionResult)
"""

from .config import DetectionConfig
from .detector import detect_text, detect_bib_numbers, decode_image
from .recognition import TextRecognizer, EasyOCRRecognizer, create_reader
from .swt import StrokeWidthMap, stroke_width_transform, median_filter
from .components import connected_components
from .filtering import filter_components, ratio_within
from .chains import make_chains, merge_chains
from .types import Ray, Component, Chain, ChainRegion, TextDetectionResult
from .validation import is_number

__all__ = [
    "DetectionConfig",
    "detect_text",
    "detect_bib_numbers",
    "decode_image",
    "TextRecognizer",
    "EasyOCRRecognizer",
    "create_reader",
    "StrokeWidthMap",
    "stroke_width_transform",
    "median_filter",
    "connected_components",
    "filter_components",
    "ratio_within",
    "make_chains",
    "merge_chains",
    "Ray",
    "Component",
    "Chain",
    "ChainRegion",
    "TextDetectionResult",
    "is_number",
]
