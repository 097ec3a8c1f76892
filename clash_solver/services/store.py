# clash_solver/services/store.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional, Union

from clash_solver.config import settings
from clash_solver.errors import DuplicateEntry, EntryNotFound, SnapshotNotFound
from clash_solver.schemas.course import RawCourseRecord
from clash_solver.schemas.timetable import (
    Conflict, Entry, Placement, SessionKind, Slot, Snapshot, Weekday,
)
from clash_solver.services.snapshot_store import SnapshotStore
from clash_solver.utils import conflict as conflict_detector
from clash_solver.utils import layout, timegrid
from clash_solver.utils.normalize import normalize

logger = logging.getLogger("clash_solver.store")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScheduleStore:
    """
    The working timetable: active entries, minimized entries and saved
    snapshots. Every mutation recomputes the conflicts before returning, and
    a mutation that raises leaves all three collections as they were.
    """

    def __init__(
        self,
        snapshot_store: SnapshotStore,
        clock: Callable[[], datetime] = _utcnow,
        day_start: str = settings.DAY_START,
        day_end: str = settings.DAY_END,
        slot_minutes: int = settings.SLOT_MINUTES,
    ):
        self._snapshot_store = snapshot_store
        self._clock = clock
        self.day_start = day_start
        self.day_end = day_end
        self.slot_minutes = slot_minutes

        self._active: List[Entry] = []
        self._minimized: List[Entry] = []
        self._conflicts: List[Conflict] = []
        self._saved: List[Snapshot] = list(snapshot_store.load_all())

    # ----- read accessors -----

    @property
    def active(self) -> List[Entry]:
        return list(self._active)

    @property
    def minimized(self) -> List[Entry]:
        return list(self._minimized)

    @property
    def saved(self) -> List[Snapshot]:
        return list(self._saved)

    def list_conflicts(self) -> List[Conflict]:
        return list(self._conflicts)

    def _recompute(self):
        self._conflicts = conflict_detector.detect(self._active)
        if self._conflicts:
            logger.info("%d clashes across %d active courses", len(self._conflicts), len(self._active))

    @staticmethod
    def _index_of(entries: List[Entry], entry_id: str) -> Optional[int]:
        for i, e in enumerate(entries):
            if e.id == entry_id:
                return i
        return None

    # ----- entries -----

    def add_entry(self, entry: Entry) -> Entry:
        if self._index_of(self._active, entry.id) is not None:
            raise DuplicateEntry(f"{entry.id} is already in the timetable", entry_id=entry.id)
        if self._index_of(self._minimized, entry.id) is not None:
            raise DuplicateEntry(f"{entry.id} is in the minimized list", entry_id=entry.id)

        self._active.append(entry)
        self._recompute()
        return entry

    def add_record(self, raw: Union[RawCourseRecord, dict]) -> Entry:
        return self.add_entry(normalize(raw))

    def _pop_active(self, entry_id: str) -> Entry:
        i = self._index_of(self._active, entry_id)
        if i is None:
            raise EntryNotFound(f"{entry_id} is not in the timetable", entry_id=entry_id)
        return self._active.pop(i)

    def remove_entry(self, entry_id: str) -> Entry:
        entry = self._pop_active(entry_id)
        self._recompute()
        return entry

    def minimize_entry(self, entry_id: str) -> Entry:
        entry = self._pop_active(entry_id)
        self._minimized.append(entry)
        self._recompute()
        return entry

    def restore_entry(self, entry_id: str) -> Entry:
        i = self._index_of(self._minimized, entry_id)
        if i is None:
            raise EntryNotFound(f"{entry_id} is not minimized", entry_id=entry_id)
        entry = self._minimized.pop(i)
        self._active.append(entry)
        self._recompute()
        return entry

    # ----- snapshots -----

    def save_snapshot(self) -> Optional[Snapshot]:
        if not self._active:
            return None

        snapshot = Snapshot(id=uuid.uuid4().hex, created_at=self._clock(), entries=tuple(self._active))
        updated = [snapshot] + self._saved
        self._snapshot_store.save_all(updated)
        self._saved = updated
        logger.info("Saved timetable %s (%d courses)", snapshot.id, len(snapshot.entries))
        return snapshot

    def get_snapshot(self, snapshot_id: str) -> Snapshot:
        for s in self._saved:
            if s.id == snapshot_id:
                return s
        raise SnapshotNotFound(f"Saved timetable {snapshot_id} not found", snapshot_id=snapshot_id)

    def load_snapshot(self, snapshot_id: str) -> List[Entry]:
        snapshot = self.get_snapshot(snapshot_id)

        minimized_ids = {e.id for e in self._minimized}
        loaded, seen = [], set()
        for e in snapshot.entries:
            if e.id in minimized_ids or e.id in seen:
                logger.warning("Saved timetable %s: skipping %s, minimized or listed twice", snapshot_id, e.id)
                continue
            seen.add(e.id)
            loaded.append(e)

        self._active = loaded
        self._recompute()
        return self.active

    def delete_snapshot(self, snapshot_id: str) -> bool:
        updated = [s for s in self._saved if s.id != snapshot_id]
        if len(updated) == len(self._saved):
            return False
        self._snapshot_store.save_all(updated)
        self._saved = updated
        return True

    # ----- rendering -----

    def grid(self) -> List[Slot]:
        return timegrid.generate(self.day_start, self.day_end, self.slot_minutes)

    def place(self, entry_id: str, kind: SessionKind) -> Placement:
        return layout.place(
            entry_id, kind, self._active, self._conflicts,
            slot_minutes=self.slot_minutes, grid_start=self.day_start, grid_end=self.day_end,
        )

    def layout_day(self, day: Weekday) -> List[Placement]:
        return layout.layout_day(
            day, self._active, self._conflicts,
            slot_minutes=self.slot_minutes, grid_start=self.day_start, grid_end=self.day_end,
        )
