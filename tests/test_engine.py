"""Comprehensive tests for the CountDown engine.

Covers: state transitions, text input, ticking and completion,
collaborator side effects, history recall, and signals.
"""

import pytest

from countdown.timer.engine import (
    CountdownEngine, TimerState,
    COMPLETION_MESSAGE, NOTIFICATION_TITLE, NOTIFICATION_BODY,
    DEFAULT_ALERT_SOUND,
)
from countdown.timer.parser import ParseError

from helpers import BrokenCollaborator, SignalCollector, run_for


# ═══════════════════════════════════════════════════════════════════════════
#  STATE TRANSITIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestStateTransitions:

    def test_initial_state(self, engine):
        assert engine.state == TimerState.IDLE
        assert engine.remaining == 0
        assert engine.target == 0
        assert engine.is_running is False

    def test_input_auto_starts(self, engine):
        engine.set_from_input("5m")
        assert engine.state == TimerState.RUNNING
        assert engine.is_running
        assert engine.remaining == 300
        assert engine.target == 300

    def test_pause_keeps_remaining(self, engine):
        engine.set_from_input("5m")
        engine.tick(1.5)
        engine.pause()
        assert engine.state == TimerState.IDLE
        assert engine.remaining == pytest.approx(298.5)

    def test_pause_twice_is_idempotent(self, engine):
        engine.set_from_input("5m")
        engine.tick(10)
        engine.pause()
        remaining = engine.remaining
        engine.pause()
        assert engine.is_running is False
        assert engine.remaining == remaining

    def test_start_resumes_from_pause(self, engine):
        engine.set_from_input("5m")
        engine.pause()
        engine.start()
        assert engine.state == TimerState.RUNNING

    def test_start_on_empty_timer_resets(self, engine):
        engine.start()
        assert engine.state == TimerState.IDLE
        assert engine.is_running is False
        assert engine.remaining == 0

    def test_reset_restores_target(self, engine):
        engine.set_from_input("1m")
        run_for(engine, 20)
        engine.reset()
        assert engine.state == TimerState.IDLE
        assert engine.is_running is False
        assert engine.remaining == 60

    def test_toggle(self, engine):
        engine.set_from_input("1m")
        engine.toggle()
        assert engine.is_running is False
        engine.toggle()
        assert engine.is_running is True

    def test_state_changed_signal_fires_on_transitions(self, engine):
        c = SignalCollector()
        engine.state_changed.connect(c)

        engine.set_from_input("1m")
        assert c.last == TimerState.RUNNING

        engine.pause()
        assert c.last == TimerState.IDLE

        engine.start()
        assert c.last == TimerState.RUNNING

    def test_start_while_running_does_not_reemit(self, engine):
        engine.set_from_input("1m")
        c = SignalCollector()
        engine.state_changed.connect(c)
        engine.start()
        assert len(c) == 0


# ═══════════════════════════════════════════════════════════════════════════
#  TEXT INPUT
# ═══════════════════════════════════════════════════════════════════════════


class TestInput:

    def test_relative_adjustment_uses_remaining(self, engine):
        engine.set_from_input("10m")
        engine.set_from_input("add 5m")
        assert engine.remaining == 900
        assert engine.target == 900

    def test_adjustment_after_partial_countdown(self, engine):
        engine.set_from_input("10m")
        run_for(engine, 60)
        engine.set_from_input("subtract 2m")
        assert engine.remaining == pytest.approx(420)

    def test_subtract_to_zero_leaves_timer_idle(self, engine):
        engine.set_from_input("1m")
        engine.set_from_input("subtract 2m")
        assert engine.remaining == 0
        assert engine.target == 0
        assert engine.state == TimerState.IDLE

    def test_rejected_input_leaves_state_alone(self, engine):
        engine.set_from_input("5m")
        engine.tick(3)
        outcome = engine.set_from_input("banana")
        assert outcome.error is ParseError.UNRECOGNIZED_FORMAT
        assert engine.remaining == 297
        assert engine.target == 300
        assert engine.is_running
        assert engine.history.entries == ("5m",)

    def test_oversized_number_is_rejected_cleanly(self, engine):
        engine.set_from_input("5m")
        outcome = engine.set_from_input("9" * 400 + "m")
        assert outcome.error is ParseError.UNRECOGNIZED_FORMAT
        assert engine.remaining == 300
        assert engine.target == 300
        assert engine.history.entries == ("5m",)
        assert "Try something like" in engine.status_message

    def test_empty_input_reports_status(self, engine):
        c = SignalCollector()
        engine.status_changed.connect(c)
        outcome = engine.set_from_input("   ")
        assert outcome.error is ParseError.EMPTY_INPUT
        assert c.last == ParseError.EMPTY_INPUT.message
        assert engine.history.entries == ()

    def test_unrecognized_input_status_has_guidance(self, engine):
        engine.set_from_input("xyz")
        assert "Try something like" in engine.status_message

    def test_accepted_input_status(self, engine):
        engine.set_from_input("1 hour 30 minutes")
        assert engine.status_message == "Timer set for 1h 30m"

    def test_submit_uses_input_buffer_and_clears_it(self, engine):
        c = SignalCollector()
        engine.input_text_changed.connect(c)
        engine.input_text = "2m"
        engine.submit()
        assert engine.remaining == 120
        assert engine.input_text == ""
        assert c.last == ""

    def test_rejected_submit_keeps_buffer(self, engine):
        engine.input_text = "later"
        engine.submit()
        assert engine.input_text == "later"

    def test_new_input_clears_completion(self, engine):
        engine.set_from_input("1s")
        engine.tick(1)
        assert engine.completion_message == COMPLETION_MESSAGE
        engine.set_from_input("1m")
        assert engine.completion_message == ""
        assert engine.state == TimerState.RUNNING


# ═══════════════════════════════════════════════════════════════════════════
#  TICK / COUNTDOWN
# ═══════════════════════════════════════════════════════════════════════════


class TestCountdown:

    def test_tick_decrements_remaining(self, engine):
        engine.set_from_input("10s")
        engine.tick(0.1)
        assert engine.remaining == pytest.approx(9.9)

    def test_tick_ignored_when_not_running(self, engine):
        engine.set_from_input("10s")
        engine.pause()
        engine.tick(5)
        assert engine.remaining == 10

    def test_tick_signal_emits_remaining(self, engine):
        engine.set_from_input("10s")
        c = SignalCollector()
        engine.tick_updated.connect(c)
        engine.tick(1)
        assert len(c) == 1
        assert c.last == pytest.approx(9)

    def test_overshoot_snaps_to_zero(self, engine):
        engine.set_from_input("1s")
        engine.tick(5)
        assert engine.remaining == 0
        assert engine.state == TimerState.COMPLETED
        assert engine.is_running is False

    def test_exact_hit_completes(self, engine):
        engine.set_from_input("1s")
        engine.tick(1)
        assert engine.state == TimerState.COMPLETED

    def test_hundred_ms_cadence(self, engine):
        engine.set_from_input("1s")
        for _ in range(9):
            engine.tick(0.1)
        assert engine.state == TimerState.RUNNING
        for _ in range(2):
            engine.tick(0.1)
        assert engine.state == TimerState.COMPLETED
        assert engine.remaining == 0

    def test_percent_complete(self, engine):
        engine.set_from_input("100s")
        run_for(engine, 50)
        assert engine.percent_complete == pytest.approx(0.5)

    def test_percent_complete_empty_timer(self, engine):
        assert engine.percent_complete == 0.0


# ═══════════════════════════════════════════════════════════════════════════
#  COMPLETION
# ═══════════════════════════════════════════════════════════════════════════


class TestCompletion:

    def test_side_effects_fire_once(self, engine, notifier, sound_player):
        c = SignalCollector()
        engine.completed.connect(c)

        engine.set_from_input("2s")
        run_for(engine, 10)

        assert len(c) == 1
        assert sound_player.played == [DEFAULT_ALERT_SOUND]
        assert notifier.sent == [(NOTIFICATION_TITLE, NOTIFICATION_BODY)]

    def test_ticks_after_completion_are_noops(self, engine):
        engine.set_from_input("1s")
        engine.tick(1)
        engine.tick(1)
        assert engine.remaining == 0
        assert engine.state == TimerState.COMPLETED

    def test_start_after_completion_resets_to_target(self, engine):
        engine.set_from_input("1m")
        run_for(engine, 60)
        engine.start()
        assert engine.state == TimerState.IDLE
        assert engine.remaining == 60
        assert engine.completion_message == ""

    def test_second_run_completes_again(self, engine, sound_player):
        engine.set_from_input("1s")
        engine.tick(1)
        engine.reset()
        engine.start()
        engine.tick(1)
        assert sound_player.played == ["Bell", "Bell"]

    def test_custom_alert_sound(self, engine, sound_player):
        engine.alert_sound = "Gentle"
        engine.set_from_input("1s")
        engine.tick(1)
        assert sound_player.played == ["Gentle"]

    def test_works_without_collaborators(self, bare_engine):
        bare_engine.set_from_input("1s")
        bare_engine.tick(1)
        assert bare_engine.state == TimerState.COMPLETED

    def test_failing_collaborators_do_not_break_engine(self, qapp):
        broken = BrokenCollaborator()
        eng = CountdownEngine(notifier=broken, sound_player=broken)
        c = SignalCollector()
        eng.completed.connect(c)
        eng.set_from_input("1s")
        eng.tick(1)
        assert eng.state == TimerState.COMPLETED
        assert len(c) == 1


# ═══════════════════════════════════════════════════════════════════════════
#  HISTORY RECALL
# ═══════════════════════════════════════════════════════════════════════════


class TestHistoryRecall:

    def test_duplicates_recorded_once(self, engine):
        for text in ("1h", "2h", "2h"):
            engine.set_from_input(text)
        assert engine.history.entries == ("1h", "2h")

    def test_twenty_one_submissions_keep_twenty(self, engine):
        for n in range(1, 22):
            engine.set_from_input(f"{n}s")
        assert len(engine.history) == 20
        assert engine.history.entries[0] == "2s"

    def test_previous_loads_buffer_without_touching_timer(self, engine):
        engine.set_from_input("1h")
        engine.set_from_input("2h")
        remaining, target = engine.remaining, engine.target

        engine.history_previous()
        assert engine.input_text == "2h"
        engine.history_previous()
        assert engine.input_text == "1h"
        engine.history_previous()
        assert engine.input_text == "1h"

        assert engine.remaining == remaining
        assert engine.target == target

    def test_next_past_newest_clears_buffer(self, engine):
        engine.set_from_input("1h")
        engine.set_from_input("2h")
        engine.history_previous()
        engine.history_previous()
        engine.history_next()
        assert engine.input_text == "2h"
        engine.history_next()
        assert engine.input_text == ""
        assert engine.history.at_fresh_input

    def test_recall_emits_input_text(self, engine):
        engine.set_from_input("1h")
        c = SignalCollector()
        engine.input_text_changed.connect(c)
        engine.history_previous()
        assert c.last == "1h"

    def test_navigation_on_empty_history_is_noop(self, engine):
        engine.input_text = "draft"
        engine.history_previous()
        engine.history_next()
        assert engine.input_text == "draft"

    def test_recalled_entry_can_be_resubmitted(self, engine):
        engine.set_from_input("3m")
        engine.set_from_input("1m")
        engine.history_previous()
        engine.history_previous()
        engine.submit()
        assert engine.remaining == 180
        assert engine.history.entries == ("3m", "1m", "3m")
