# clash_solver/utils/conflict.py
from itertools import combinations
from typing import Iterable, List, Sequence, Set

from clash_solver.schemas.timetable import Conflict, Entry, Session
from clash_solver.utils.timegrid import from_minutes, to_minutes


def sessions_overlap(a: Session, b: Session) -> bool:
    """
    Same weekday and [start, end) ranges intersect.
    A class ending at 10:00 and one starting at 10:00 do not clash.
    """
    if a.day != b.day:
        return False
    return a.start < b.end and b.start < a.end


def _pair_conflicts(a: Entry, b: Entry) -> List[Conflict]:
    # keep the smaller id on the "a" side so the result does not depend on insertion order
    if b.id < a.id:
        a, b = b, a
    out = []
    for sa in a.sessions:
        for sb in b.sessions:
            if not sessions_overlap(sa, sb):
                continue
            out.append(
                Conflict(
                    entry_id_a=a.id,
                    entry_id_b=b.id,
                    session_kind_a=sa.kind,
                    session_kind_b=sb.kind,
                    day=sa.day,
                    overlap_start=from_minutes(max(to_minutes(sa.start), to_minutes(sb.start))),
                    overlap_end=from_minutes(min(to_minutes(sa.end), to_minutes(sb.end))),
                )
            )
    return out


def detect(active_entries: Sequence[Entry]) -> List[Conflict]:
    """
    Every overlapping session pair between two different entries.

    Always a full rescan: n^2 over entries times sessions, fine for a
    working set of a few dozen courses.
    """
    if len(active_entries) < 2:
        return []

    conflicts = []
    for a, b in combinations(active_entries, 2):
        if a.id == b.id:
            continue
        conflicts.extend(_pair_conflicts(a, b))

    conflicts.sort(key=lambda c: (c.entry_id_a, c.entry_id_b, c.session_kind_a.order, c.session_kind_b.order))
    return conflicts


def clashing_entry_ids(conflicts: Iterable[Conflict]) -> Set[str]:
    ids = set()
    for c in conflicts:
        ids.add(c.entry_id_a)
        ids.add(c.entry_id_b)
    return ids


def conflicts_for(entry_id: str, conflicts: Iterable[Conflict]) -> List[Conflict]:
    return [c for c in conflicts if entry_id in (c.entry_id_a, c.entry_id_b)]
