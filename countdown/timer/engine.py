"""Countdown state machine for CountDown.

States
------
IDLE        Not counting: either empty or paused at some value.
RUNNING     Counting down on every ``tick``.
COMPLETED   Just reached zero from RUNNING.

Transitions
-----------
IDLE → RUNNING                (start / toggle / accepted input)
RUNNING → IDLE                (pause / toggle / reset)
RUNNING → COMPLETED           (tick reaches 0)
COMPLETED → IDLE              (start on an empty timer resets / reset)
any → RUNNING                 (accepted input with a positive duration)

The engine owns no timer.  The host calls ``tick(delta_seconds)`` at
its own cadence (the app uses 100 ms), so every transition is a plain
synchronous method call.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from PyQt6.QtCore import QObject, pyqtSignal

from .formatting import format_duration
from .history import InputHistory, MAX_HISTORY
from .parser import ParseOutcome, parse


logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 100
DEFAULT_ALERT_SOUND = "Bell"
COMPLETION_MESSAGE = "Countdown completed!"
NOTIFICATION_TITLE = "Countdown Timer"
NOTIFICATION_BODY = "Your countdown has finished!"


# ── collaborators ─────────────────────────────────────────────────────────


class Notifier(Protocol):
    def notify(self, title: str, body: str) -> None: ...


class SoundPlayer(Protocol):
    def play(self, name: str) -> None: ...


# ── engine ────────────────────────────────────────────────────────────────


class CountdownEngine(QObject):
    """Single countdown driven by free-form text input.

    Signals
    -------
    tick_updated(remaining_seconds: float)
        Emitted whenever the remaining time changes.
    state_changed(new_state: TimerState)
        Emitted on every state transition.
    completed()
        Emitted once each time the countdown reaches zero.
    status_changed(message: str)
        Status-line text (accepted duration or parse error).
    input_text_changed(text: str)
        The input buffer was rewritten by the engine (history recall,
        cleared after submit).
    """

    tick_updated = pyqtSignal(float)
    state_changed = pyqtSignal(object)
    completed = pyqtSignal()
    status_changed = pyqtSignal(str)
    input_text_changed = pyqtSignal(str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        notifier: Notifier | None = None,
        sound_player: SoundPlayer | None = None,
        alert_sound: str = DEFAULT_ALERT_SOUND,
        history_limit: int = MAX_HISTORY,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._notifier = notifier
        self._sound_player = sound_player
        self._alert_sound = alert_sound

        # ── countdown state ───────────────────────────────────────────
        self._state: TimerState = TimerState.IDLE
        self._remaining: float = 0.0
        self._target: float = 0.0
        self._running: bool = False

        # ── text state ────────────────────────────────────────────────
        self._history = InputHistory(history_limit)
        self._input_text: str = ""
        self._status_message: str = ""
        self._completion_message: str = ""

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def remaining(self) -> float:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def target(self) -> float:
        """Duration the countdown was last set to; restored by reset."""
        return self._target

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress toward zero."""
        if self._target <= 0:
            return 0.0
        elapsed = self._target - self._remaining
        return max(0.0, min(1.0, elapsed / self._target))

    @property
    def history(self) -> InputHistory:
        return self._history

    @property
    def input_text(self) -> str:
        return self._input_text

    @input_text.setter
    def input_text(self, value: str) -> None:
        self._input_text = value

    @property
    def status_message(self) -> str:
        return self._status_message

    @property
    def completion_message(self) -> str:
        return self._completion_message

    @property
    def alert_sound(self) -> str:
        return self._alert_sound

    @alert_sound.setter
    def alert_sound(self, name: str) -> None:
        self._alert_sound = name

    # ══════════════════════════════════════════════════════════════════
    #  INPUT
    # ══════════════════════════════════════════════════════════════════

    def set_from_input(self, raw: str) -> ParseOutcome:
        """Parse *raw* and, if understood, set and start the countdown.

        A rejected input leaves the countdown and history untouched.
        """
        outcome = parse(raw, self._remaining)
        if not outcome.ok:
            logger.info("Rejected input %r: %s", raw, outcome.error.value)
            self._set_status(outcome.error.message)
            return outcome

        self._target = outcome.seconds
        self._remaining = outcome.seconds
        self._history.record(raw.strip())
        self._completion_message = ""
        self._set_input_text("")
        self._set_status(f"Timer set for {format_duration(outcome.seconds)}")
        logger.debug("Timer set to %.1fs from %r", outcome.seconds, raw)

        self.tick_updated.emit(self._remaining)
        self.start()
        return outcome

    def submit(self) -> ParseOutcome:
        """Submit the current input buffer."""
        return self.set_from_input(self._input_text)

    def history_previous(self) -> None:
        """Load the next-older accepted input into the buffer."""
        text = self._history.previous()
        if text is not None:
            self._set_input_text(text)

    def history_next(self) -> None:
        """Load the next-newer accepted input, or clear past the newest."""
        text = self._history.next()
        if text is not None:
            self._set_input_text(text)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start counting.  On an empty timer this resets to the target."""
        if self._remaining <= 0:
            self.reset()
            return
        self._running = True
        if self._state != TimerState.RUNNING:
            self._set_state(TimerState.RUNNING)

    def pause(self) -> None:
        """Stop counting; the remaining time is kept exactly."""
        self._running = False
        if self._state == TimerState.RUNNING:
            self._set_state(TimerState.IDLE)

    def reset(self) -> None:
        """Pause and restore the remaining time to the target."""
        self.pause()
        self._remaining = self._target
        self._completion_message = ""
        if self._state != TimerState.IDLE:
            self._set_state(TimerState.IDLE)
        self.tick_updated.emit(self._remaining)

    def toggle(self) -> None:
        if self._running:
            self.pause()
        else:
            self.start()

    def tick(self, delta_seconds: float) -> None:
        """Advance the countdown by *delta_seconds* of host time."""
        if not self._running:
            return
        if self._remaining > delta_seconds:
            self._remaining -= delta_seconds
            self.tick_updated.emit(self._remaining)
        else:
            self._finish()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _finish(self) -> None:
        self._remaining = 0.0
        self._running = False
        self._completion_message = COMPLETION_MESSAGE
        self.tick_updated.emit(self._remaining)
        self._set_state(TimerState.COMPLETED)

        self._play_alert()
        self._send_notification()
        self.completed.emit()

    def _play_alert(self) -> None:
        if self._sound_player is None:
            return
        try:
            self._sound_player.play(self._alert_sound)
        except Exception:
            logger.exception("Sound player failed on %r", self._alert_sound)

    def _send_notification(self) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(NOTIFICATION_TITLE, NOTIFICATION_BODY)
        except Exception:
            logger.exception("Notifier failed")

    def _set_state(self, new_state: TimerState) -> None:
        logger.debug("State %s → %s", self._state.value, new_state.value)
        self._state = new_state
        self.state_changed.emit(new_state)

    def _set_status(self, message: str) -> None:
        self._status_message = message
        self.status_changed.emit(message)

    def _set_input_text(self, text: str) -> None:
        self._input_text = text
        self.input_text_changed.emit(text)
