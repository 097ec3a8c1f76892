# clash_solver/services/snapshot_store.py
"""
Durable storage for saved timetables.

The schedule store only ever hands over the complete collection, newest
first, so both backends replace everything they hold on ``save_all``.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Protocol, Sequence

from sqlalchemy.orm import Session as DbSession

from clash_solver.models.saved_timetable import SavedTimetable
from clash_solver.schemas.timetable import Entry, Snapshot

logger = logging.getLogger("clash_solver.snapshots")


def _as_utc(value: datetime) -> datetime:
    # sqlite drops the offset, everything is written in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SnapshotStore(Protocol):
    def save_all(self, snapshots: Sequence[Snapshot]) -> None: ...

    def load_all(self) -> List[Snapshot]: ...


class InMemorySnapshotStore:
    def __init__(self, snapshots: Sequence[Snapshot] = ()):
        self._snapshots = list(snapshots)

    def save_all(self, snapshots: Sequence[Snapshot]) -> None:
        self._snapshots = list(snapshots)

    def load_all(self) -> List[Snapshot]:
        return list(self._snapshots)


class SqlSnapshotStore:
    def __init__(self, session_factory: Callable[[], DbSession]):
        self._session_factory = session_factory

    def save_all(self, snapshots: Sequence[Snapshot]) -> None:
        db = self._session_factory()
        try:
            db.query(SavedTimetable).delete(synchronize_session=False)
            db.add_all(
                SavedTimetable(
                    id=s.id,
                    position=i,
                    created_at=_as_utc(s.created_at),
                    entries=[e.model_dump(mode="json") for e in s.entries],
                )
                for i, s in enumerate(snapshots)
            )
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Failed to write %d saved timetables", len(snapshots))
            raise
        finally:
            db.close()

    def load_all(self) -> List[Snapshot]:
        db = self._session_factory()
        try:
            rows = db.query(SavedTimetable).order_by(SavedTimetable.position.asc()).all()
            return [
                Snapshot(
                    id=r.id,
                    created_at=_as_utc(r.created_at),
                    entries=tuple(Entry.model_validate(e) for e in r.entries or []),
                )
                for r in rows
            ]
        finally:
            db.close()
