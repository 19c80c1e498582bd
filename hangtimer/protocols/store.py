"""Custom protocol collection backed by the SQLite database.

Built-in protocols are looked up first by ``find_protocol`` so a custom
row can never shadow one.
"""

from __future__ import annotations

import uuid

from ..database.db import get_session
from ..database.models import CustomProtocol
from .catalog import BUILTIN_PROTOCOLS, get_builtin, is_builtin
from .model import Protocol


def _new_id() -> str:
    return f"custom-{uuid.uuid4().hex[:12]}"


def _to_protocol(row: CustomProtocol) -> Protocol:
    return Protocol(
        id=row.protocol_id,
        name=row.name,
        hang_time=row.hang_time,
        rest_time=row.rest_time,
        reps_per_set=row.reps_per_set,
        rest_between_sets=row.rest_between_sets,
        number_of_sets=row.number_of_sets,
    )


def _copy_fields(row: CustomProtocol, protocol: Protocol) -> None:
    row.name = protocol.name
    row.hang_time = protocol.hang_time
    row.rest_time = protocol.rest_time
    row.reps_per_set = protocol.reps_per_set
    row.rest_between_sets = protocol.rest_between_sets
    row.number_of_sets = protocol.number_of_sets


def list_custom() -> list[Protocol]:
    """All custom protocols, oldest first."""
    with get_session() as db:
        rows = db.query(CustomProtocol).order_by(CustomProtocol.pk).all()
        return [_to_protocol(r) for r in rows]


def get_custom(protocol_id: str) -> Protocol | None:
    with get_session() as db:
        row = (
            db.query(CustomProtocol)
            .filter(CustomProtocol.protocol_id == protocol_id)
            .first()
        )
        return _to_protocol(row) if row else None


def create_custom(
    *,
    name: str,
    hang_time: int,
    rest_time: int,
    reps_per_set: int,
    rest_between_sets: int,
    number_of_sets: int,
) -> Protocol:
    """Validate and store a new custom protocol under a fresh id."""
    protocol = Protocol(
        id=_new_id(),
        name=name,
        hang_time=hang_time,
        rest_time=rest_time,
        reps_per_set=reps_per_set,
        rest_between_sets=rest_between_sets,
        number_of_sets=number_of_sets,
    )
    with get_session() as db:
        row = CustomProtocol(protocol_id=protocol.id)
        _copy_fields(row, protocol)
        db.add(row)
    return protocol


def update_custom(protocol: Protocol) -> bool:
    """Replace the stored protocol with the same id.

    Returns ``False`` when no custom protocol has that id (built-ins
    are never updated).
    """
    if is_builtin(protocol.id):
        return False
    with get_session() as db:
        row = (
            db.query(CustomProtocol)
            .filter(CustomProtocol.protocol_id == protocol.id)
            .first()
        )
        if row is None:
            return False
        _copy_fields(row, protocol)
    return True


def delete_custom(protocol_id: str) -> bool:
    with get_session() as db:
        deleted = (
            db.query(CustomProtocol)
            .filter(CustomProtocol.protocol_id == protocol_id)
            .delete()
        )
    return deleted > 0


def find_protocol(protocol_id: str) -> Protocol | None:
    """Look up a protocol by id: built-ins first, then custom."""
    return get_builtin(protocol_id) or get_custom(protocol_id)


def all_protocols() -> list[Protocol]:
    return list(BUILTIN_PROTOCOLS) + list_custom()
