"""Protocol value type and duration math.

A protocol describes one hang-board workout::

    PREPARE → (HANG → REST) × reps … HANG → SET REST → … → FINISHED

There is no trailing rest after the last rep of a set, and no set rest
after the last set.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


class InvalidProtocolError(ValueError):
    """Raised when a protocol's numbers cannot describe a workout."""


# field name → minimum allowed value
_MINIMUMS: dict[str, int] = {
    "hang_time": 1,
    "rest_time": 0,
    "reps_per_set": 1,
    "rest_between_sets": 0,
    "number_of_sets": 1,
}


@dataclass(frozen=True)
class Protocol:
    """Immutable description of a hang-board workout.

    All times are whole seconds.  ``reps_per_set`` is the number of
    hangs in one set; ``number_of_sets`` is how many sets make up the
    session.
    """

    id: str
    name: str
    hang_time: int
    rest_time: int
    reps_per_set: int
    rest_between_sets: int
    number_of_sets: int

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidProtocolError("protocol id must not be empty")
        for field_name, minimum in _MINIMUMS.items():
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidProtocolError(
                    f"{field_name} must be an integer, got {value!r}"
                )
            if value < minimum:
                raise InvalidProtocolError(
                    f"{field_name} must be >= {minimum}, got {value}"
                )

    @property
    def total_duration(self) -> int:
        """Seconds from the first hang to the end of the last one."""
        return total_duration(self)

    def with_changes(self, **changes: object) -> Protocol:
        """Return a validated copy with *changes* applied."""
        return replace(self, **changes)

    def describe(self) -> str:
        parts = [
            f"{self.reps_per_set} reps × {self.number_of_sets} sets",
            f"{self.hang_time}s hang",
        ]
        if self.rest_time > 0:
            parts.append(f"{self.rest_time}s rest")
        return " · ".join(parts)


def total_duration(protocol: Protocol) -> int:
    """Total seconds of hanging and resting, excluding the prepare countdown."""
    per_set = (
        (protocol.hang_time + protocol.rest_time) * protocol.reps_per_set
        - protocol.rest_time
    )
    set_rests = protocol.rest_between_sets * (protocol.number_of_sets - 1)
    return per_set * protocol.number_of_sets + set_rests


def _as_count(value: object) -> int:
    try:
        return max(0, int(value))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0


def estimate_duration(
    hang_time: object,
    rest_time: object,
    reps_per_set: object,
    number_of_sets: object,
    rest_between_sets: object,
) -> int:
    """Duration estimate for half-filled form values.

    Anything missing or unparsable counts as 0, so the estimate can be
    shown live while the user is still typing.
    """
    hang = _as_count(hang_time)
    rest = _as_count(rest_time)
    reps = _as_count(reps_per_set)
    sets = _as_count(number_of_sets)
    set_rest = _as_count(rest_between_sets)

    per_set = (hang + rest) * reps - rest
    total = per_set * sets + set_rest * (sets - 1)
    return max(0, total)


def format_time(seconds: int) -> str:
    """Format *seconds* as ``MM:SS`` (minutes are not wrapped into hours)."""
    m, s = divmod(max(0, int(seconds)), 60)
    return f"{m:02d}:{s:02d}"
