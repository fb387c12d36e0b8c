"""Evaluate command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging

from benchmarking import format_scorecard, run_evaluation
from logging_utils import parse_debug_topics

from cli.options import add_detection_args, detection_config_from_args, preprocess_config_from_args

logger = logging.getLogger(__name__)


def add_evaluate_subparser(subparsers: argparse._SubParsersAction) -> None:
    evaluate_parser = subparsers.add_parser(
        "evaluate",
        help="Score detection against a ground truth CSV (filename;bib;bib;...)",
    )
    evaluate_parser.add_argument(
        "ground_truth",
        help="Semicolon separated CSV, image paths relative to its directory",
    )
    add_detection_args(evaluate_parser)
    evaluate_parser.set_defaults(_cmd=cmd_evaluate)


def cmd_evaluate(args: argparse.Namespace) -> int:
    try:
        scorecard = run_evaluation(
            args.ground_truth,
            detection_config=detection_config_from_args(args),
            preprocess_config=preprocess_config_from_args(args),
            debug=parse_debug_topics(args.debug_topics),
            workers=args.workers,
        )
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    print(format_scorecard(scorecard))
    return 0
