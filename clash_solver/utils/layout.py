# clash_solver/utils/layout.py
"""
Where a session block goes on the weekly grid.

Width is the session length in slots. When several entries have sessions
colliding with the block on the same day, the block is drawn in one of two
half-height rows: the entry whose id sorts first takes the top row and every
other entry the bottom one. Three or more colliding entries still share just
those two rows.

Nothing here is cached; call it again after every change to the active set.
"""
import logging
from typing import List, Optional, Sequence

from clash_solver.errors import EntryNotFound, InvalidSession
from clash_solver.schemas.timetable import (
    Conflict, Entry, Placement, Session, SessionKind, SplitPosition, Weekday,
)
from clash_solver.utils.conflict import clashing_entry_ids, sessions_overlap
from clash_solver.utils.timegrid import slot_offset, span_in_slots

logger = logging.getLogger("clash_solver.layout")


def _find_session(entry_id: str, kind: SessionKind, active_entries: Sequence[Entry]) -> Session:
    entry = next((e for e in active_entries if e.id == entry_id), None)
    if entry is None:
        raise EntryNotFound(f"{entry_id} is not in the active timetable", entry_id=entry_id)
    session = entry.session(kind)
    if session is None:
        raise InvalidSession(f"{entry_id} has no {kind.label} session", entry_id=entry_id, session_kind=kind.value)
    return session


def split_position(
    target_entry_id: str,
    target: Session,
    active_entries: Sequence[Entry],
) -> SplitPosition:
    owners = set()
    for e in active_entries:
        for s in e.sessions:
            if sessions_overlap(s, target):
                owners.add(e.id)
                break
    owners.add(target_entry_id)

    if len(owners) <= 1:
        return "none"
    rank = sorted(owners).index(target_entry_id)
    return "top" if rank == 0 else "bottom"


def place(
    target_entry_id: str,
    target_session_kind: SessionKind,
    active_entries: Sequence[Entry],
    conflicts: Sequence[Conflict],
    slot_minutes: int = 30,
    grid_start=None,
    grid_end=None,
) -> Placement:
    session = _find_session(target_entry_id, target_session_kind, active_entries)
    width = span_in_slots(session.start, session.end, slot_minutes)

    offset = None
    if grid_start is not None:
        # off-grid blocks keep offset None and are simply not drawn
        offset = slot_offset(session.start, session.end, grid_start, grid_end, slot_minutes)

    # entries without a reported clash always render full height
    if target_entry_id in clashing_entry_ids(conflicts):
        position = split_position(target_entry_id, session, active_entries)
    else:
        position = "none"

    return Placement(
        entry_id=target_entry_id,
        session_kind=target_session_kind,
        day=session.day,
        width_in_slots=width,
        offset_in_slots=offset,
        split_position=position,
    )


def layout_day(
    day: Weekday,
    active_entries: Sequence[Entry],
    conflicts: Sequence[Conflict],
    slot_minutes: int = 30,
    grid_start: Optional[str] = None,
    grid_end: Optional[str] = None,
) -> List[Placement]:
    """
    Placements for every block on one day row, left to right. A block whose
    length is not a whole number of slots is left out and logged, the rest of
    the row still renders.
    """
    blocks = []
    for e in active_entries:
        for s in e.sessions:
            if s.day == day:
                blocks.append((s.start, e.id, s.kind))
    blocks.sort(key=lambda b: (b[0], b[1], b[2].order))

    placements = []
    for _start, entry_id, kind in blocks:
        try:
            placements.append(
                place(
                    entry_id, kind, active_entries, conflicts,
                    slot_minutes=slot_minutes, grid_start=grid_start, grid_end=grid_end,
                )
            )
        except InvalidSession as e:
            logger.warning("%s: not drawing %s %s, %s", day.value, entry_id, kind.label, e.message)
    return placements
