"""Built-in protocols shipped with the app.  Read-only."""

from __future__ import annotations

from .model import Protocol


BUILTIN_PROTOCOLS: tuple[Protocol, ...] = (
    Protocol(
        id="repeaters",
        name="Repeaters",
        hang_time=7,
        rest_time=3,
        reps_per_set=6,
        rest_between_sets=180,
        number_of_sets=3,
    ),
    Protocol(
        id="max-hangs",
        name="Max Hangs",
        hang_time=10,
        rest_time=0,
        reps_per_set=1,
        rest_between_sets=180,
        number_of_sets=5,
    ),
    Protocol(
        id="intermediate",
        name="Intermediate Repeaters",
        hang_time=10,
        rest_time=5,
        reps_per_set=5,
        rest_between_sets=120,
        number_of_sets=3,
    ),
    Protocol(
        id="endurance",
        name="Endurance",
        hang_time=15,
        rest_time=15,
        reps_per_set=8,
        rest_between_sets=180,
        number_of_sets=2,
    ),
)

BUILTIN_IDS: frozenset[str] = frozenset(p.id for p in BUILTIN_PROTOCOLS)


def get_builtin(protocol_id: str) -> Protocol | None:
    for protocol in BUILTIN_PROTOCOLS:
        if protocol.id == protocol_id:
            return protocol
    return None


def is_builtin(protocol_id: str) -> bool:
    return protocol_id in BUILTIN_IDS
