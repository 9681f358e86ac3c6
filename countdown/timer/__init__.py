"""Timer package: input parser, history and countdown state machine."""

from .engine import (
    CountdownEngine,
    TimerState,
    Notifier,
    SoundPlayer,
    TICK_INTERVAL_MS,
    DEFAULT_ALERT_SOUND,
)
from .formatting import format_clock, format_duration, format_menu_bar
from .history import InputHistory, MAX_HISTORY
from .parser import (
    Absolute,
    Relative,
    Sign,
    ParseError,
    ParseOutcome,
    interpret,
    parse,
)

__all__ = [
    "CountdownEngine",
    "TimerState",
    "Notifier",
    "SoundPlayer",
    "TICK_INTERVAL_MS",
    "DEFAULT_ALERT_SOUND",
    "format_clock",
    "format_duration",
    "format_menu_bar",
    "InputHistory",
    "MAX_HISTORY",
    "Absolute",
    "Relative",
    "Sign",
    "ParseError",
    "ParseOutcome",
    "interpret",
    "parse",
]
