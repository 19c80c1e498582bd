"""Tests for the HangTimer session engine.

Covers: initial state, prepare countdown, the phase transition table,
zero-length rests, full end-to-end runs, countdown / phase / finish
cues, pause/resume safety, the abort protocol, and teardown.
"""

import pytest

from hangtimer.protocols.catalog import BUILTIN_PROTOCOLS
from hangtimer.protocols.model import Protocol
from hangtimer.timer.engine import (
    TimerEngine, Phase, Cue, SessionResult,
    PREPARE_SECONDS, COUNTDOWN_CUE_SECONDS,
)

from helpers import SignalCollector, tick_n, tick_until, run_to_end


def _protocol(**overrides) -> Protocol:
    fields = dict(
        id="test", name="Test", hang_time=2, rest_time=1,
        reps_per_set=3, rest_between_sets=4, number_of_sets=2,
    )
    fields.update(overrides)
    return Protocol(**fields)


# ═══════════════════════════════════════════════════════════════════════════
#  CONSTRUCTION / INITIAL STATE
# ═══════════════════════════════════════════════════════════════════════════


class TestInitialState:

    def test_starts_in_prepare(self, engine):
        assert engine.phase is Phase.PREPARE
        assert engine.time_remaining == PREPARE_SECONDS == 5
        assert engine.current_set == 1
        assert engine.current_rep == 0
        assert engine.total_elapsed == 0
        assert engine.is_running is False
        assert engine.is_paused is False
        assert engine.is_ticking is False

    def test_custom_prepare_seconds(self, qapp, repeaters):
        eng = TimerEngine(repeaters, prepare_seconds=10)
        assert eng.time_remaining == 10
        assert eng.planned_seconds == 10 + 531

    def test_rejects_non_protocol(self, qapp):
        with pytest.raises(TypeError):
            TimerEngine({"hang_time": 7})

    def test_rejects_zero_prepare(self, qapp, repeaters):
        with pytest.raises(ValueError):
            TimerEngine(repeaters, prepare_seconds=0)

    def test_tick_before_start_is_ignored(self, engine):
        assert engine.tick() is False
        assert engine.total_elapsed == 0
        assert engine.time_remaining == PREPARE_SECONDS

    def test_protocol_name_captured(self, engine, repeaters):
        assert engine.protocol_name == "Repeaters"
        assert engine.snapshot().protocol_name == repeaters.name


# ═══════════════════════════════════════════════════════════════════════════
#  START
# ═══════════════════════════════════════════════════════════════════════════


class TestStart:

    def test_start_runs_and_ticks(self, engine):
        engine.start()
        assert engine.is_running
        assert engine.is_started
        assert engine.is_ticking

    def test_start_emits_start_cue(self, engine):
        cues = SignalCollector()
        engine.cue.connect(cues)
        engine.start()
        assert cues.items == [Cue.START]

    def test_start_twice_is_noop(self, engine):
        changes = SignalCollector()
        engine.state_changed.connect(changes)
        engine.start()
        engine.tick()
        engine.start()
        assert len(changes) == 1
        assert engine.total_elapsed == 1


# ═══════════════════════════════════════════════════════════════════════════
#  PREPARE COUNTDOWN
# ═══════════════════════════════════════════════════════════════════════════


class TestPrepare:

    def test_five_ticks_reach_first_hang(self, engine, repeaters):
        engine.start()
        for _ in range(4):
            assert engine.tick() is False
            assert engine.phase is Phase.PREPARE
        assert engine.tick() is True
        assert engine.phase is Phase.HANG
        assert engine.current_rep == 1
        assert engine.current_set == 1
        assert engine.time_remaining == repeaters.hang_time
        assert engine.total_elapsed == 5

    def test_countdown_cues_at_three_two_one(self, engine):
        cues = SignalCollector()
        engine.start()
        engine.cue.connect(cues)
        remaining_at_cue = []
        engine.cue.connect(
            lambda c: remaining_at_cue.append(engine.time_remaining)
            if c is Cue.COUNTDOWN else None
        )
        tick_n(engine, 5)
        assert cues.count(Cue.COUNTDOWN) == COUNTDOWN_CUE_SECONDS
        assert remaining_at_cue == [3, 2, 1]
        # Entering the first hang is the start cue, not a countdown beep
        assert cues.last is Cue.START

    def test_no_countdown_cue_at_zero(self, qapp):
        eng = TimerEngine(_protocol(hang_time=1, reps_per_set=1, number_of_sets=1))
        eng.start()
        tick_n(eng, 5)
        assert eng.phase is Phase.HANG
        cues = SignalCollector()
        eng.cue.connect(cues)
        eng.tick()  # 1 → 0
        assert Cue.COUNTDOWN not in cues.items
        assert eng.phase is Phase.FINISHED


# ═══════════════════════════════════════════════════════════════════════════
#  TRANSITION TABLE
# ═══════════════════════════════════════════════════════════════════════════


class TestTransitions:

    def test_hang_to_rest_when_reps_remain(self, qapp):
        p = _protocol()
        eng = TimerEngine(p)
        eng.start()
        tick_until(eng, Phase.HANG)
        tick_n(eng, p.hang_time)
        assert eng.phase is Phase.REST
        assert eng.time_remaining == p.rest_time
        assert eng.current_rep == 1

    def test_rest_to_hang_increments_rep(self, qapp):
        p = _protocol()
        eng = TimerEngine(p)
        eng.start()
        tick_until(eng, Phase.REST)
        tick_n(eng, p.rest_time)
        assert eng.phase is Phase.HANG
        assert eng.current_rep == 2
        assert eng.time_remaining == p.hang_time

    def test_last_rep_goes_to_set_rest(self, qapp):
        p = _protocol()
        eng = TimerEngine(p)
        eng.start()
        tick_until(eng, Phase.SET_REST)
        assert eng.current_rep == p.reps_per_set
        assert eng.current_set == 1
        assert eng.time_remaining == p.rest_between_sets

    def test_set_rest_to_hang_starts_next_set(self, qapp):
        p = _protocol()
        eng = TimerEngine(p)
        eng.start()
        tick_until(eng, Phase.SET_REST)
        tick_n(eng, p.rest_between_sets)
        assert eng.phase is Phase.HANG
        assert eng.current_set == 2
        assert eng.current_rep == 1
        assert eng.time_remaining == p.hang_time

    def test_last_rep_of_last_set_finishes(self, qapp):
        eng = TimerEngine(_protocol(number_of_sets=1))
        finished = SignalCollector()
        eng.finished.connect(finished)
        run_to_end(eng)
        assert eng.phase is Phase.FINISHED
        assert eng.is_running is False
        assert eng.is_ticking is False
        assert len(finished) == 1
        assert finished.last.completed is True

    def test_one_transition_per_tick(self, qapp):
        """Zero-length phases still cost a tick each; no skipping."""
        eng = TimerEngine(_protocol(rest_time=0, rest_between_sets=0))
        eng.start()
        seen = []
        eng.phase_changed.connect(seen.append)
        for _ in range(200):
            before = len(seen)
            eng.tick()
            assert len(seen) - before <= 1
            if eng.phase is Phase.FINISHED:
                break

    def test_phase_changed_sequence(self, qapp):
        phases = run_to_end(TimerEngine(_protocol()))
        assert phases == [
            Phase.HANG, Phase.REST, Phase.HANG, Phase.REST, Phase.HANG,
            Phase.SET_REST,
            Phase.HANG, Phase.REST, Phase.HANG, Phase.REST, Phase.HANG,
            Phase.FINISHED,
        ]

    def test_phase_and_finish_cues(self, qapp):
        eng = TimerEngine(_protocol(number_of_sets=1, reps_per_set=2))
        cues = SignalCollector()
        eng.cue.connect(cues)
        run_to_end(eng)
        transitions = [c for c in cues.items if c is not Cue.COUNTDOWN]
        # start button, first hang, rest, second hang, finish
        assert transitions == [Cue.START, Cue.START, Cue.PHASE, Cue.PHASE, Cue.FINISH]
        assert cues.count(Cue.FINISH) == 1


# ═══════════════════════════════════════════════════════════════════════════
#  ZERO-LENGTH REST
# ═══════════════════════════════════════════════════════════════════════════


class TestZeroRest:

    def test_rest_entered_with_zero_remaining(self, qapp):
        eng = TimerEngine(_protocol(rest_time=0))
        eng.start()
        tick_until(eng, Phase.HANG)
        tick_n(eng, 2)
        assert eng.phase is Phase.REST
        assert eng.time_remaining == 0
        assert eng.current_rep == 1

    def test_next_tick_returns_to_hang(self, qapp):
        eng = TimerEngine(_protocol(rest_time=0))
        eng.start()
        tick_until(eng, Phase.REST)
        elapsed = eng.total_elapsed
        assert eng.tick() is True
        assert eng.phase is Phase.HANG
        assert eng.current_rep == 2
        assert eng.total_elapsed == elapsed + 1

    def test_zero_rests_each_cost_one_tick(self, qapp):
        p = _protocol(rest_time=0, reps_per_set=3, number_of_sets=1, hang_time=2)
        eng = TimerEngine(p)
        phases = run_to_end(eng)
        assert phases.count(Phase.REST) == 2
        assert eng.total_elapsed == PREPARE_SECONDS + p.total_duration + 2


# ═══════════════════════════════════════════════════════════════════════════
#  END-TO-END
# ═══════════════════════════════════════════════════════════════════════════


class TestFullRuns:

    def test_max_hangs(self, max_hangs_engine):
        phases = run_to_end(max_hangs_engine)
        assert phases.count(Phase.HANG) == 5
        assert phases.count(Phase.SET_REST) == 4
        assert phases.count(Phase.REST) == 0
        assert phases[-1] is Phase.FINISHED
        assert max_hangs_engine.total_elapsed == 5 + 5 * 10 + 4 * 180 == 775

    def test_repeaters_elapsed_matches_estimate(self, engine):
        run_to_end(engine)
        assert engine.total_elapsed == PREPARE_SECONDS + 531

    @pytest.mark.parametrize("protocol", BUILTIN_PROTOCOLS, ids=lambda p: p.id)
    def test_counters_stay_in_range(self, qapp, protocol):
        eng = TimerEngine(protocol)
        eng.start()
        while eng.phase is not Phase.FINISHED:
            eng.tick()
            assert 1 <= eng.current_set <= protocol.number_of_sets
            assert 0 <= eng.current_rep <= protocol.reps_per_set
            if eng.phase is not Phase.PREPARE:
                assert eng.current_rep >= 1

    @pytest.mark.parametrize("protocol", BUILTIN_PROTOCOLS, ids=lambda p: p.id)
    def test_elapsed_never_decreases(self, qapp, protocol):
        eng = TimerEngine(protocol)
        eng.start()
        last = 0
        while eng.phase is not Phase.FINISHED:
            eng.tick()
            assert eng.total_elapsed == last + 1
            last = eng.total_elapsed

    def test_finished_is_terminal(self, max_hangs_engine):
        run_to_end(max_hangs_engine)
        elapsed = max_hangs_engine.total_elapsed
        assert max_hangs_engine.tick() is False
        max_hangs_engine.resume()
        max_hangs_engine.start()
        assert max_hangs_engine.tick() is False
        assert max_hangs_engine.phase is Phase.FINISHED
        assert max_hangs_engine.total_elapsed == elapsed

    def test_percent_complete(self, max_hangs_engine):
        assert max_hangs_engine.percent_complete == 0.0
        max_hangs_engine.start()
        tick_n(max_hangs_engine, 5)
        assert max_hangs_engine.percent_complete == pytest.approx(5 / 775)
        run_to_end(max_hangs_engine)
        assert max_hangs_engine.percent_complete == 1.0


# ═══════════════════════════════════════════════════════════════════════════
#  PAUSE / RESUME
# ═══════════════════════════════════════════════════════════════════════════


class TestPauseResume:

    def test_pause_freezes_state(self, engine):
        engine.start()
        tick_n(engine, 7)
        before = engine.snapshot()
        engine.pause()
        assert engine.is_paused
        assert not engine.is_ticking
        assert engine.tick() is False
        after = engine.snapshot()
        assert after.phase is before.phase
        assert after.time_remaining == before.time_remaining
        assert after.total_elapsed == before.total_elapsed
        assert after.current_rep == before.current_rep

    def test_pause_twice_same_as_once(self, engine):
        changes = SignalCollector()
        engine.start()
        engine.state_changed.connect(changes)
        engine.pause()
        snap = engine.snapshot()
        engine.pause()
        assert len(changes) == 1
        assert engine.snapshot() == snap
        engine.resume()
        assert not engine.is_paused

    def test_pause_before_start_is_noop(self, engine):
        engine.pause()
        assert engine.is_paused is False

    def test_resume_when_not_paused_is_noop(self, engine):
        changes = SignalCollector()
        engine.start()
        engine.state_changed.connect(changes)
        engine.resume()
        assert len(changes) == 0

    def test_resume_restarts_ticking(self, engine):
        engine.start()
        engine.pause()
        engine.resume()
        assert engine.is_ticking
        tick_n(engine, 5)
        assert engine.phase is Phase.HANG

    def test_pause_resume_matches_uninterrupted_run(self, qapp, repeaters):
        plain = TimerEngine(repeaters)
        plain_phases = run_to_end(plain)

        paused = TimerEngine(repeaters)
        paused_phases: list[Phase] = []
        paused.phase_changed.connect(paused_phases.append)
        paused.start()
        ticks = 0
        while paused.phase is not Phase.FINISHED:
            if ticks % 13 == 0:
                paused.pause()
                paused.tick()  # dropped while paused
                paused.pause()
                paused.resume()
            paused.tick()
            ticks += 1

        assert paused_phases == plain_phases
        assert paused.total_elapsed == plain.total_elapsed
        assert ticks == plain.total_elapsed


# ═══════════════════════════════════════════════════════════════════════════
#  ABORT PROTOCOL
# ═══════════════════════════════════════════════════════════════════════════


class TestAbort:

    def test_request_abort_pauses(self, engine):
        requested = SignalCollector()
        engine.abort_requested.connect(requested)
        engine.start()
        tick_n(engine, 3)
        assert engine.request_abort() is True
        assert engine.abort_pending
        assert engine.is_paused
        assert not engine.is_ticking
        assert len(requested) == 1
        assert engine.tick() is False
        assert engine.total_elapsed == 3

    def test_resume_blocked_while_abort_pending(self, engine):
        engine.start()
        engine.request_abort()
        engine.resume()
        assert engine.is_paused

    def test_confirm_during_set_rest(self, max_hangs_engine):
        eng = max_hangs_engine
        eng.start()
        tick_until(eng, Phase.SET_REST)
        tick_n(eng, 30)
        eng.request_abort()
        result = eng.confirm_abort()
        assert isinstance(result, SessionResult)
        assert result.phase is Phase.SET_REST
        assert result.completed is False
        assert result.total_elapsed == eng.total_elapsed == 5 + 10 + 30
        assert eng.is_closed
        assert not eng.is_ticking

    def test_confirm_after_finish_is_completed(self, max_hangs_engine):
        run_to_end(max_hangs_engine)
        assert max_hangs_engine.request_abort() is True
        result = max_hangs_engine.confirm_abort()
        assert result.completed is True
        assert result.total_elapsed == 775

    def test_confirm_runs_no_transition(self, qapp):
        eng = TimerEngine(_protocol())
        eng.start()
        tick_n(eng, 4)  # one second left in prepare
        phases = SignalCollector()
        eng.phase_changed.connect(phases)
        eng.request_abort()
        result = eng.confirm_abort()
        assert result.phase is Phase.PREPARE
        assert len(phases) == 0

    def test_confirm_without_request_returns_none(self, engine):
        engine.start()
        assert engine.confirm_abort() is None
        assert not engine.is_closed

    def test_cancel_resumes_running_session(self, engine):
        engine.start()
        tick_n(engine, 2)
        engine.request_abort()
        engine.cancel_abort()
        assert not engine.abort_pending
        assert not engine.is_paused
        assert engine.is_ticking
        engine.tick()
        assert engine.total_elapsed == 3

    def test_cancel_keeps_user_pause(self, engine):
        engine.start()
        engine.pause()
        engine.request_abort()
        engine.cancel_abort()
        assert engine.is_paused
        assert not engine.is_ticking

    def test_request_abort_before_start(self, engine):
        assert engine.request_abort() is True
        engine.cancel_abort()
        assert not engine.is_running
        result = engine.stop()
        assert result.total_elapsed == 0
        assert result.completed is False

    def test_request_abort_after_close(self, engine):
        engine.start()
        engine.stop()
        assert engine.request_abort() is False


# ═══════════════════════════════════════════════════════════════════════════
#  TEARDOWN
# ═══════════════════════════════════════════════════════════════════════════


class TestStop:

    def test_stop_returns_result_and_stops_ticking(self, engine):
        engine.start()
        tick_n(engine, 6)
        result = engine.stop()
        assert result.total_elapsed == 6
        assert result.phase is Phase.HANG
        assert not engine.is_ticking
        assert engine.is_closed
        assert engine.tick() is False

    def test_stop_is_idempotent(self, engine):
        ended = SignalCollector()
        engine.session_ended.connect(ended)
        engine.start()
        first = engine.stop()
        second = engine.stop()
        assert first is second
        assert len(ended) == 1

    def test_stop_after_finish(self, max_hangs_engine):
        ended = SignalCollector()
        max_hangs_engine.session_ended.connect(ended)
        run_to_end(max_hangs_engine)
        assert len(ended) == 0
        result = max_hangs_engine.stop()
        assert result.completed is True
        assert len(ended) == 1

    def test_closed_engine_cannot_restart(self, engine):
        engine.stop()
        engine.start()
        assert not engine.is_running
        assert not engine.is_ticking


# ═══════════════════════════════════════════════════════════════════════════
#  SNAPSHOTS
# ═══════════════════════════════════════════════════════════════════════════


class TestSnapshot:

    def test_ticked_emits_post_transition_snapshot(self, engine, repeaters):
        snaps = SignalCollector()
        engine.ticked.connect(snaps)
        engine.start()
        tick_n(engine, 5)
        assert len(snaps) == 5
        last = snaps.last
        assert last.phase is Phase.HANG
        assert last.time_remaining == repeaters.hang_time
        assert last.current_rep == 1
        assert last.reps_per_set == repeaters.reps_per_set
        assert last.number_of_sets == repeaters.number_of_sets
        assert last.total_elapsed == 5
        assert last.running is True

    def test_snapshot_is_frozen(self, engine):
        snap = engine.snapshot()
        with pytest.raises(AttributeError):
            snap.phase = Phase.HANG
