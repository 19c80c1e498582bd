"""Shared test helpers for HangTimer."""

from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from hangtimer.timer.engine import TimerEngine, Phase


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def count(self, value) -> int:
        return sum(1 for item in self.items if item == value)

    def clear(self):
        self.items.clear()


def tick_n(engine: TimerEngine, n: int) -> None:
    for _ in range(n):
        engine.tick()


def tick_until(engine: TimerEngine, phase: Phase, limit: int = 10_000) -> int:
    """Tick until *phase* is entered; returns the number of ticks used."""
    for used in range(1, limit + 1):
        engine.tick()
        if engine.phase is phase:
            return used
    raise AssertionError(f"never reached {phase} in {limit} ticks")


def run_to_end(engine: TimerEngine, limit: int = 100_000) -> list[Phase]:
    """Start (if needed) and tick until FINISHED; returns the phases entered."""
    phases: list[Phase] = []

    def on_phase(phase: Phase) -> None:
        phases.append(phase)

    engine.phase_changed.connect(on_phase)
    if not engine.is_started:
        engine.start()
    for _ in range(limit):
        if engine.phase is Phase.FINISHED:
            break
        engine.tick()
    else:
        raise AssertionError("session never finished")
    engine.phase_changed.disconnect(on_phase)
    return phases


@contextmanager
def failing_session():
    """Stand-in for ``get_session`` when the database is unusable."""
    raise SQLAlchemyError("database is locked")
    yield  # pragma: no cover
