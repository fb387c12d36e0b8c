#!/usr/bin/env python3
"""
Unified CLI for the Bib Number Recognizer.

Usage:
    bnr scan <path>              # Read bib numbers from an image or a directory (writes out.csv)
    bnr scan <dir> -j 4          # Process four images at a time
    bnr evaluate <truth.csv>     # Precision / recall / F-score against ground truth
    bnr -v --debug-topics chains,textrec scan <image>   # Trace chain building and recognition
"""

import argparse
import logging
import sys

from logging_utils import configure_logging, add_logging_args
from cli.scan import add_scan_subparser
from cli.evaluate import add_evaluate_subparser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bnr",
        description="Bib Number Recognizer - read race bib numbers with the stroke width transform",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_scan_subparser(subparsers)
    add_evaluate_subparser(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    cmd = getattr(args, "_cmd", None)
    if args.command is None or cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())
