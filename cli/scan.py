"""Scan command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging

from logging_utils import parse_debug_topics
from scan import run_scan

from cli.options import add_detection_args, detection_config_from_args, preprocess_config_from_args

logger = logging.getLogger(__name__)


def add_scan_subparser(subparsers: argparse._SubParsersAction) -> None:
    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan a local directory or image file for bib numbers",
    )
    scan_parser.add_argument(
        "source",
        help="Local directory or image file path",
    )
    scan_parser.add_argument(
        "-o", "--output",
        default=None,
        help="CSV file for the results (default: out.csv inside a scanned directory)",
    )
    scan_parser.add_argument(
        "--artifact-dir",
        default=None,
        help="Write debug images for every photo below this directory, one folder per file name",
    )
    add_detection_args(scan_parser)
    scan_parser.set_defaults(_cmd=cmd_scan)


def cmd_scan(args: argparse.Namespace) -> int:
    try:
        stats = run_scan(
            args.source,
            detection_config=detection_config_from_args(args),
            preprocess_config=preprocess_config_from_args(args),
            debug=parse_debug_topics(args.debug_topics),
            artifact_root=args.artifact_dir,
            output=args.output,
            workers=args.workers,
        )
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    for filename, numbers in stats.results.items():
        logger.info("%s: %s", filename, " ".join(str(n) for n in numbers) or "-")

    logger.info("%s", "=" * 50)
    logger.info("Scan Complete!")
    logger.info("%s", "=" * 50)
    logger.info("Photos found:   %s", stats.photos_found)
    logger.info("Photos scanned: %s", stats.photos_scanned)
    logger.info("Photos failed:  %s", stats.photos_failed)
    logger.info("Bibs detected:  %s", stats.bibs_detected)
    if stats.output_path is not None:
        logger.info("Results saved to %s", stats.output_path)
    return 0
