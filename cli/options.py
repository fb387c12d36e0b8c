"""Detection options shared by the scan and evaluate commands."""

from __future__ import annotations

import argparse

from detection import DetectionConfig
from detection.config import NESTING_FILTERS
from preprocessing import PreprocessConfig


def add_detection_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("detection")
    group.add_argument(
        "--light-on-dark",
        action="store_true",
        help="Text is lighter than its background (default: dark on light)",
    )
    group.add_argument(
        "--max-stroke-length",
        type=float,
        default=None,
        metavar="PX",
        help="Longest stroke width in pixels",
    )
    group.add_argument(
        "--top-border",
        type=int,
        default=None,
        metavar="PX",
        help="Ignore components reaching above this row",
    )
    group.add_argument(
        "--bottom-border",
        type=int,
        default=None,
        metavar="PX",
        help="Ignore components reaching into this many bottom rows",
    )
    group.add_argument(
        "--min-char-height",
        type=int,
        default=None,
        metavar="PX",
        help="Reject chains with a shorter character",
    )
    group.add_argument(
        "--max-angle",
        type=float,
        default=None,
        metavar="DEG",
        help="Reject chains steeper than this",
    )
    group.add_argument(
        "--width-ratio",
        type=float,
        default=None,
        metavar="N",
        help="Reject chains narrower than image width / N",
    )
    group.add_argument(
        "--nesting-filter",
        choices=NESTING_FILTERS,
        default=None,
        help="How components nested among others are removed",
    )
    group.add_argument(
        "--target-width",
        type=int,
        default=None,
        metavar="PX",
        help="Resize images to this width before detection",
    )
    group.add_argument(
        "--workers", "-j",
        type=int,
        default=1,
        help="Number of images processed in parallel (default: 1)",
    )


def detection_config_from_args(args: argparse.Namespace) -> DetectionConfig:
    overrides = {
        "max_stroke_length": args.max_stroke_length,
        "top_border": args.top_border,
        "bottom_border": args.bottom_border,
        "min_character_height": args.min_char_height,
        "max_angle": args.max_angle,
        "max_img_width_to_text_ratio": args.width_ratio,
        "nesting_filter": args.nesting_filter,
    }
    kwargs = {name: value for name, value in overrides.items() if value is not None}
    if args.light_on_dark:
        kwargs["dark_on_light"] = False
    config = DetectionConfig(**kwargs)
    config.validate()
    return config


def preprocess_config_from_args(args: argparse.Namespace) -> PreprocessConfig:
    config = PreprocessConfig(target_width=args.target_width)
    config.validate()
    return config
