"""Tests for the shared logging helpers."""

import argparse
import logging

import pytest

from logging_utils import (
    DebugTopic,
    add_logging_args,
    parse_debug_topics,
    resolve_log_level,
)


class TestParseDebugTopics:
    @pytest.mark.parametrize("value", [None, "", "none"])
    def test_nothing_enabled(self, value):
        assert parse_debug_topics(value) == DebugTopic.NONE

    def test_single_topic(self):
        assert parse_debug_topics("chains") == DebugTopic.CHAINS

    def test_combined_topics_are_case_insensitive(self):
        topics = parse_debug_topics("Chains, TEXTREC")
        assert DebugTopic.CHAINS in topics
        assert DebugTopic.TEXTREC in topics
        assert DebugTopic.COMPONENTS not in topics

    def test_all(self):
        topics = parse_debug_topics("all")
        for topic in (DebugTopic.COMPONENTS, DebugTopic.CHAINS, DebugTopic.TXT_ORIENT, DebugTopic.TEXTREC):
            assert topic in topics

    def test_unknown_topic_raises(self):
        with pytest.raises(ValueError, match="Unknown debug topic 'bogus'"):
            parse_debug_topics("chains,bogus")


class TestResolveLogLevel:
    def test_default_is_info(self):
        assert resolve_log_level() == logging.INFO

    def test_explicit_level_wins(self):
        assert resolve_log_level("error", verbose=2) == logging.ERROR

    @pytest.mark.parametrize("verbose,quiet,expected", [
        (1, 0, logging.DEBUG),
        (2, 0, logging.DEBUG),
        (0, 1, logging.WARNING),
        (0, 2, logging.ERROR),
        (1, 1, logging.INFO),
    ])
    def test_verbosity_modifiers(self, verbose, quiet, expected):
        assert resolve_log_level(verbose=verbose, quiet=quiet) == expected


def test_logging_args_parse():
    parser = argparse.ArgumentParser()
    add_logging_args(parser)
    args = parser.parse_args(["-vv", "--debug-topics", "chains"])
    assert args.verbose == 2
    assert args.quiet == 0
    assert args.debug_topics == "chains"
