"""Free-form duration parser for CountDown.

Grammar
-------
Plain durations       ``"90"`` (bare number = minutes), ``"45s"``,
                      ``"1 hour 30 minutes"``, ``"2d 4h"``, ``"1.5h"``
Relative adjustments  ``"add 5m"``, ``"subtract 2 min"``, ``"sub 30s"``

Each unit class (days, hours, minutes, seconds) contributes at most one
number: the first match of its full word, else of its abbreviations in
a fixed priority order.  Classes are independent, so the order of the
parts in the text does not matter.

Parsing never raises.  :func:`parse` returns a :class:`ParseOutcome`
that carries either the resolved duration or a :class:`ParseError`.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum


# ── constants ─────────────────────────────────────────────────────────────

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60

# (unit tokens in priority order, seconds per unit)
_UNIT_CLASSES: tuple[tuple[tuple[str, ...], int], ...] = (
    (("day", "d"), SECONDS_PER_DAY),
    (("hour", "h"), SECONDS_PER_HOUR),
    (("minute", "min", "m"), SECONDS_PER_MINUTE),
    (("second", "sec", "s"), 1),
)

_NUMBER = r"([0-9]+(?:\.[0-9]+)?)"

_UNIT_PATTERNS: dict[str, re.Pattern[str]] = {
    token: re.compile(_NUMBER + r"\s*" + token + r"s?", re.IGNORECASE)
    for tokens, _ in _UNIT_CLASSES
    for token in tokens
}

_BARE_NUMBER = re.compile(_NUMBER)

ADD_KEYWORD = "add"
SUBTRACT_KEYWORDS = ("subtract", "sub")


# ── result types ──────────────────────────────────────────────────────────


class ParseError(Enum):
    EMPTY_INPUT = "empty_input"
    UNRECOGNIZED_FORMAT = "unrecognized_format"

    @property
    def message(self) -> str:
        """Status-bar text for this failure."""
        if self is ParseError.EMPTY_INPUT:
            return "Type a duration to start the countdown."
        return (
            "Could not understand input. "
            "Try something like '1 hour 30 minutes'"
        )


class Sign(Enum):
    ADD = 1
    SUBTRACT = -1


@dataclass(frozen=True)
class Absolute:
    """Replace the target with ``seconds``."""

    seconds: float

    def resolve(self, current_remaining: float) -> float:
        return self.seconds


@dataclass(frozen=True)
class Relative:
    """Add to / subtract from the current remaining time."""

    sign: Sign
    seconds: float

    def resolve(self, current_remaining: float) -> float:
        if self.sign is Sign.ADD:
            return current_remaining + self.seconds
        return max(0.0, current_remaining - self.seconds)


Command = Absolute | Relative


@dataclass(frozen=True)
class ParseOutcome:
    """Tagged result of :func:`parse`: exactly one of ``seconds``/``error``."""

    seconds: float | None = None
    error: ParseError | None = None
    command: Command | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, command: Command, seconds: float) -> ParseOutcome:
        return cls(seconds=seconds, command=command)

    @classmethod
    def failure(cls, error: ParseError) -> ParseOutcome:
        return cls(error=error)


# ── time components ───────────────────────────────────────────────────────


def _extract(token: str, text: str) -> float | None:
    match = _UNIT_PATTERNS[token].search(text)
    if match is None:
        return None
    return float(match.group(1))


def parse_time_components(text: str) -> float | None:
    """Sum the unit parts of *text* in seconds.

    Returns ``None`` unless the total is positive and finite.  A number
    with too many digits overflows to infinity and is rejected here.
    """
    text = text.lower()
    total = 0.0

    for tokens, unit_seconds in _UNIT_CLASSES:
        for token in tokens:
            value = _extract(token, text)
            if value is not None:
                total += value * unit_seconds
                break

    # No unit matched: a bare number counts as minutes
    if total == 0:
        stripped = text.strip()
        if _BARE_NUMBER.fullmatch(stripped):
            total = float(stripped) * SECONDS_PER_MINUTE

    if not math.isfinite(total) or total <= 0:
        return None
    return total


# ── public API ────────────────────────────────────────────────────────────


def interpret(raw: str) -> Command | ParseError:
    """Understand *raw* without applying it to any running countdown."""
    text = raw.strip()
    if not text:
        return ParseError.EMPTY_INPUT

    lowered = text.lower()

    if ADD_KEYWORD in lowered:
        sign = Sign.ADD
        remainder = lowered.split(ADD_KEYWORD + " ")[-1]
    elif any(keyword in lowered for keyword in SUBTRACT_KEYWORDS):
        sign = Sign.SUBTRACT
        keyword = next(k for k in SUBTRACT_KEYWORDS if k in lowered)
        remainder = lowered.split(keyword + " ")[-1]
    else:
        seconds = parse_time_components(lowered)
        if seconds is None:
            return ParseError.UNRECOGNIZED_FORMAT
        return Absolute(seconds)

    seconds = parse_time_components(remainder)
    if seconds is None:
        return ParseError.UNRECOGNIZED_FORMAT
    return Relative(sign, seconds)


def parse(raw: str, current_remaining: float = 0.0) -> ParseOutcome:
    """Parse *raw* into the new absolute duration.

    Relative adjustments are applied against *current_remaining*; a
    subtraction never goes below zero, and an addition that overflows
    is rejected.
    """
    result = interpret(raw)
    if isinstance(result, ParseError):
        return ParseOutcome.failure(result)
    seconds = result.resolve(current_remaining)
    if not math.isfinite(seconds):
        return ParseOutcome.failure(ParseError.UNRECOGNIZED_FORMAT)
    return ParseOutcome.success(result, seconds)
