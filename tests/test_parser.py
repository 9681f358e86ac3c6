"""Tests for the free-form duration parser.

Covers: unit words and abbreviations, unit priority, bare numbers as
minutes, add/subtract adjustments, clamping, and failure values.
"""

import sys

import pytest

from countdown.timer.parser import (
    Absolute,
    ParseError,
    Relative,
    Sign,
    interpret,
    parse,
    parse_time_components,
)


# ═══════════════════════════════════════════════════════════════════════════
#  ABSOLUTE DURATIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestAbsoluteDurations:

    @pytest.mark.parametrize("text, expected", [
        ("1 hour 30 minutes", 5400),
        ("2d", 172800),
        ("90", 5400),
        ("45s", 45),
        ("2d 4h", 187200),
        ("1 day", 86400),
        ("3 days", 259200),
        ("1h 30m", 5400),
        ("30m 1h", 5400),
        ("10 min", 600),
        ("10 mins", 600),
        ("20 sec", 20),
        ("1 second", 1),
        ("1h 1m 1s", 3661),
        ("1.5h", 5400),
        ("0.5", 30),
        ("2 hours and 15 minutes", 8100),
    ])
    def test_supported_forms(self, text, expected):
        outcome = parse(text)
        assert outcome.ok
        assert outcome.seconds == pytest.approx(expected)

    def test_case_insensitive(self):
        assert parse("1 HOUR 30 Minutes").seconds == 5400
        assert parse("45S").seconds == 45

    def test_surrounding_whitespace_ignored(self):
        assert parse("  25  ").seconds == 1500

    def test_full_word_wins_over_abbreviation(self):
        # "minute" matches 5; the bare "m" pattern is never consulted
        assert parse_time_components("5 minutes") == 300

    def test_first_match_per_unit_class(self):
        # Only the first hour figure counts
        assert parse("1h 2h").seconds == 3600

    def test_absolute_ignores_current_remaining(self):
        assert parse("5m", current_remaining=1000).seconds == 300

    def test_outcome_carries_command(self):
        outcome = parse("5m")
        assert outcome.command == Absolute(300)


# ═══════════════════════════════════════════════════════════════════════════
#  RELATIVE ADJUSTMENTS
# ═══════════════════════════════════════════════════════════════════════════


class TestRelativeAdjustments:

    def test_add_to_remaining(self):
        outcome = parse("add 5m", current_remaining=600)
        assert outcome.ok
        assert outcome.seconds == 900

    def test_subtract_clamps_to_zero(self):
        outcome = parse("subtract 2m", current_remaining=60)
        assert outcome.ok
        assert outcome.seconds == 0

    def test_subtract(self):
        assert parse("subtract 1m", current_remaining=600).seconds == 540

    def test_sub_short_form(self):
        assert parse("sub 30s", current_remaining=100).seconds == 70

    def test_add_on_empty_timer(self):
        assert parse("add 90").seconds == 5400

    def test_add_with_failed_remainder(self):
        outcome = parse("add lots", current_remaining=600)
        assert not outcome.ok
        assert outcome.error is ParseError.UNRECOGNIZED_FORMAT

    def test_subtract_with_zero_remainder_fails(self):
        outcome = parse("subtract 0m", current_remaining=600)
        assert outcome.error is ParseError.UNRECOGNIZED_FORMAT

    def test_keywords_case_insensitive(self):
        assert parse("ADD 1m", current_remaining=60).seconds == 120

    def test_interpret_reports_relative_command(self):
        assert interpret("add 5m") == Relative(Sign.ADD, 300)
        assert interpret("subtract 2 min") == Relative(Sign.SUBTRACT, 120)

    def test_relative_resolve(self):
        assert Relative(Sign.ADD, 10).resolve(5) == 15
        assert Relative(Sign.SUBTRACT, 10).resolve(5) == 0


# ═══════════════════════════════════════════════════════════════════════════
#  FAILURES
# ═══════════════════════════════════════════════════════════════════════════


class TestFailures:

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_input(self, text):
        outcome = parse(text)
        assert not outcome.ok
        assert outcome.error is ParseError.EMPTY_INPUT
        assert outcome.seconds is None

    @pytest.mark.parametrize("text", ["xyz", "0m", "0", "0 hours", "-5", "one hour"])
    def test_unrecognized(self, text):
        outcome = parse(text)
        assert not outcome.ok
        assert outcome.error is ParseError.UNRECOGNIZED_FORMAT

    def test_failure_does_not_raise_on_odd_input(self):
        outcome = parse("inf")
        assert outcome.error is ParseError.UNRECOGNIZED_FORMAT

    def test_number_too_large_for_a_float(self):
        outcome = parse("9" * 400 + "m")
        assert not outcome.ok
        assert outcome.error is ParseError.UNRECOGNIZED_FORMAT
        assert parse_time_components("9" * 400) is None

    def test_overflowing_addition(self):
        outcome = parse("add " + "9" * 300 + "s", current_remaining=sys.float_info.max)
        assert outcome.error is ParseError.UNRECOGNIZED_FORMAT

    def test_error_messages(self):
        assert "1 hour 30 minutes" in ParseError.UNRECOGNIZED_FORMAT.message
        assert ParseError.EMPTY_INPUT.message

    def test_interpret_returns_error_value(self):
        assert interpret("") is ParseError.EMPTY_INPUT
        assert interpret("nope") is ParseError.UNRECOGNIZED_FORMAT
