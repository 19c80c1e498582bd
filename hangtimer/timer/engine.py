"""Phase state machine for a hang-board session.

Phases
------
PREPARE    "Get ready" countdown before the first hang.
HANG       Hanging one rep.
REST       Rest between reps of the same set.
SET_REST   Rest between two sets.
FINISHED   Terminal; the last hang of the last set is done.

Transitions
-----------
PREPARE  → HANG                                   (always; rep = 1)
HANG     → REST        rep < reps_per_set
HANG     → SET_REST    last rep, set < number_of_sets
HANG     → FINISHED    last rep of the last set
REST     → HANG                                   (rep += 1)
SET_REST → HANG                                   (set += 1, rep = 1)

A rest of 0 seconds is still entered: it shows for exactly one tick
and the following tick moves on to the next hang.

``tick()`` does all the work and can be called directly (tests do);
while the session runs the engine's own ``QTimer`` calls it once per
second.  Pausing only stops that timer, so phase, counters and the
remaining time are untouched.

Abort is two-step: ``request_abort()`` pauses and waits,
``confirm_abort()`` ends the session and returns its ``SessionResult``,
``cancel_abort()`` picks up where it left off.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..protocols.model import Protocol


# ── enums ─────────────────────────────────────────────────────────────────


class Phase(Enum):
    PREPARE = "prepare"
    HANG = "hang"
    REST = "rest"
    SET_REST = "set_rest"
    FINISHED = "finished"


class Cue(Enum):
    """What the audio collaborator should play, and when."""

    START = "start"          # session start, first hang
    COUNTDOWN = "countdown"  # 3, 2, 1 seconds left in a phase
    PHASE = "phase"          # entered hang / rest / set rest
    FINISH = "finish"        # last hang done


# ── constants ─────────────────────────────────────────────────────────────

PREPARE_SECONDS = 5
COUNTDOWN_CUE_SECONDS = 3
TICK_INTERVAL_MS = 1000


# ── value types ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimerSnapshot:
    """Read-only view of the session handed to the presentation layer."""

    protocol_name: str
    phase: Phase
    time_remaining: int
    current_set: int
    current_rep: int
    number_of_sets: int
    reps_per_set: int
    total_elapsed: int
    running: bool
    paused: bool
    percent_complete: float


@dataclass(frozen=True)
class SessionResult:
    """Final state of a session, used to write the history record."""

    protocol_name: str
    phase: Phase
    total_elapsed: int

    @property
    def completed(self) -> bool:
        return self.phase is Phase.FINISHED


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """One hang-board session bound to a single protocol.

    Build a new engine for every session; a stopped engine cannot be
    restarted.

    Signals
    -------
    ticked(snapshot: TimerSnapshot)
        Emitted once per applied tick, after any phase transition.
    phase_changed(phase: Phase)
        Emitted on every phase transition.
    cue(cue: Cue)
        Emitted whenever an audio cue should play.
    state_changed(snapshot: TimerSnapshot)
        Emitted when the running / paused flags change.
    finished(result: SessionResult)
        Emitted once when the session reaches FINISHED.
    abort_requested()
        Emitted by ``request_abort()`` after ticking has been paused.
    session_ended(result: SessionResult)
        Emitted once when the session is torn down (stop / abort).
    """

    ticked = pyqtSignal(object)
    phase_changed = pyqtSignal(object)
    cue = pyqtSignal(object)
    state_changed = pyqtSignal(object)
    finished = pyqtSignal(object)
    abort_requested = pyqtSignal()
    session_ended = pyqtSignal(object)

    def __init__(
        self,
        protocol: Protocol,
        parent: QObject | None = None,
        *,
        prepare_seconds: int = PREPARE_SECONDS,
    ) -> None:
        super().__init__(parent)
        if not isinstance(protocol, Protocol):
            raise TypeError(f"expected a Protocol, got {type(protocol).__name__}")
        if prepare_seconds < 1:
            raise ValueError("prepare_seconds must be at least 1")

        # ── configuration ─────────────────────────────────────────────
        self._protocol = protocol
        self._protocol_name = protocol.name  # captured now, not looked up later
        self._prepare_seconds = prepare_seconds

        # ── phase / counters ──────────────────────────────────────────
        self._phase: Phase = Phase.PREPARE
        self._remaining: int = prepare_seconds
        self._current_set: int = 1
        self._current_rep: int = 0
        self._total_elapsed: int = 0

        # ── flags ─────────────────────────────────────────────────────
        self._running: bool = False
        self._paused: bool = False
        self._started: bool = False
        self._closed: bool = False
        self._abort_pending: bool = False
        self._resume_after_abort: bool = False
        self._result: SessionResult | None = None

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self.tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def protocol(self) -> Protocol:
        return self._protocol

    @property
    def protocol_name(self) -> str:
        return self._protocol_name

    @property
    def prepare_seconds(self) -> int:
        return self._prepare_seconds

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def time_remaining(self) -> int:
        """Seconds left in the current phase (0 or less right before a transition)."""
        return self._remaining

    @property
    def current_set(self) -> int:
        return self._current_set

    @property
    def current_rep(self) -> int:
        return self._current_rep

    @property
    def total_elapsed(self) -> int:
        return self._total_elapsed

    @property
    def is_running(self) -> bool:
        """True from ``start()`` until the session finishes or is closed."""
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_ticking(self) -> bool:
        """True while the tick source is live."""
        return self._qt_timer.isActive()

    @property
    def abort_pending(self) -> bool:
        return self._abort_pending

    @property
    def has_progress(self) -> bool:
        """Whether closing the session should ask for confirmation."""
        return self._running or self._total_elapsed > 0

    @property
    def planned_seconds(self) -> int:
        """Prepare countdown plus the protocol's total duration."""
        return self._prepare_seconds + self._protocol.total_duration

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the whole session."""
        if self._phase is Phase.FINISHED:
            return 1.0
        planned = self.planned_seconds
        if planned <= 0:
            return 0.0
        return max(0.0, min(1.0, self._total_elapsed / planned))

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            protocol_name=self._protocol_name,
            phase=self._phase,
            time_remaining=self._remaining,
            current_set=self._current_set,
            current_rep=self._current_rep,
            number_of_sets=self._protocol.number_of_sets,
            reps_per_set=self._protocol.reps_per_set,
            total_elapsed=self._total_elapsed,
            running=self._running,
            paused=self._paused,
            percent_complete=self.percent_complete,
        )

    def result(self) -> SessionResult:
        """Snapshot of the session as it would be recorded right now."""
        return SessionResult(
            protocol_name=self._protocol_name,
            phase=self._phase,
            total_elapsed=self._total_elapsed,
        )

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Begin the prepare countdown.  Only valid once, before any tick."""
        if self._started or self._closed:
            return
        self._started = True
        self._running = True
        self._paused = False
        self.cue.emit(Cue.START)
        self.state_changed.emit(self.snapshot())
        self._qt_timer.start()

    def pause(self) -> None:
        """Stop tick delivery.  Pausing twice is the same as pausing once."""
        if not self._running or self._paused or self._closed:
            return
        self._paused = True
        self._qt_timer.stop()
        self.state_changed.emit(self.snapshot())

    def resume(self) -> None:
        """Restart tick delivery from exactly where it stopped."""
        if not self._paused or self._closed or self._abort_pending:
            return
        self._paused = False
        self.state_changed.emit(self.snapshot())
        self._qt_timer.start()

    def stop(self) -> SessionResult:
        """Tear the session down and return its final result.

        Safe to call repeatedly; the tick source is only stopped once.
        """
        self._abort_pending = False
        return self._close()

    # ── abort protocol ────────────────────────────────────────────────

    def request_abort(self) -> bool:
        """Pause and wait for ``confirm_abort()`` or ``cancel_abort()``.

        Returns ``False`` if the session is already closed.
        """
        if self._closed:
            return False
        if self._abort_pending:
            return True
        self._resume_after_abort = self._running and not self._paused
        self.pause()
        self._abort_pending = True
        self.abort_requested.emit()
        return True

    def confirm_abort(self) -> SessionResult | None:
        """End the session without further transitions.

        Returns ``None`` when no abort was requested.
        """
        if not self._abort_pending:
            return None
        self._abort_pending = False
        return self._close()

    def cancel_abort(self) -> None:
        """Drop the abort request; resume if ticks were flowing before it."""
        if not self._abort_pending:
            return
        self._abort_pending = False
        if self._resume_after_abort:
            self._resume_after_abort = False
            self.resume()

    # ══════════════════════════════════════════════════════════════════
    #  TICK
    # ══════════════════════════════════════════════════════════════════

    def tick(self) -> bool:
        """Advance the session by one second.

        Returns True if the phase changed on this tick.  Ignored unless
        the session is running and not paused.
        """
        if not self._running or self._paused or self._closed:
            return False

        self._total_elapsed += 1
        self._remaining -= 1

        if 0 < self._remaining <= COUNTDOWN_CUE_SECONDS:
            self.cue.emit(Cue.COUNTDOWN)

        changed = False
        if self._remaining <= 0:
            self._transition()
            changed = True

        self.ticked.emit(self.snapshot())
        return changed

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _transition(self) -> None:
        """Exactly one step through the transition table."""
        p = self._protocol

        if self._phase is Phase.PREPARE:
            self._current_rep = 1
            self._enter(Phase.HANG, p.hang_time, Cue.START)

        elif self._phase is Phase.HANG:
            if self._current_rep < p.reps_per_set:
                self._enter(Phase.REST, p.rest_time, Cue.PHASE)
            elif self._current_set < p.number_of_sets:
                self._enter(Phase.SET_REST, p.rest_between_sets, Cue.PHASE)
            else:
                self._finish()

        elif self._phase is Phase.REST:
            self._current_rep += 1
            self._enter(Phase.HANG, p.hang_time, Cue.PHASE)

        elif self._phase is Phase.SET_REST:
            self._current_set += 1
            self._current_rep = 1
            self._enter(Phase.HANG, p.hang_time, Cue.PHASE)

        # FINISHED is terminal: tick() never gets here once running is off

    def _enter(self, phase: Phase, duration: int, cue: Cue) -> None:
        self._phase = phase
        self._remaining = duration
        self.cue.emit(cue)
        self.phase_changed.emit(phase)

    def _finish(self) -> None:
        self._phase = Phase.FINISHED
        self._running = False
        self._qt_timer.stop()
        self.cue.emit(Cue.FINISH)
        self.phase_changed.emit(Phase.FINISHED)
        self.state_changed.emit(self.snapshot())
        self.finished.emit(self.result())

    def _close(self) -> SessionResult:
        if self._closed and self._result is not None:
            return self._result
        self._closed = True
        self._running = False
        if self._qt_timer.isActive():
            self._qt_timer.stop()
        self._result = self.result()
        self.session_ended.emit(self._result)
        return self._result
