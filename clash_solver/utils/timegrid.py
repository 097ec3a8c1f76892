# clash_solver/utils/timegrid.py
from datetime import time
from typing import List, Optional

from clash_solver.errors import InvalidGridConfig, InvalidSession
from clash_solver.schemas.timetable import Slot


def to_minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def from_minutes(m: int) -> time:
    return time(m // 60, m % 60)


def format_hhmm(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def parse_time_of_day(value) -> time:
    """
    "08:30" / "08:30:00" / time(8, 30) -> time(8, 30)
    Seconds are dropped, the grid works in whole minutes.
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    s = (value or "").strip() if isinstance(value, str) else ""
    parts = s.split(":")
    if len(parts) not in (2, 3):
        raise InvalidSession(f"Invalid time of day: {value!r}")
    try:
        h, m = int(parts[0]), int(parts[1])
        sec = int(parts[2]) if len(parts) == 3 else 0
    except ValueError:
        raise InvalidSession(f"Invalid time of day: {value!r}")
    if not (0 <= h <= 23 and 0 <= m <= 59 and 0 <= sec <= 59):
        raise InvalidSession(f"Invalid time of day: {value!r}")
    return time(h, m)


def generate(day_start, day_end, slot_minutes: int) -> List[Slot]:
    """
    (08:30, 20:30, 30) -> [Slot(1, "08:30", "09:00"), ..., Slot(24, "20:00", "20:30")]
    Slots cover [day_start, day_end) back to back.
    """
    try:
        start = to_minutes(parse_time_of_day(day_start))
        end = to_minutes(parse_time_of_day(day_end))
    except InvalidSession as e:
        raise InvalidGridConfig(e.message) from e

    if slot_minutes <= 0:
        raise InvalidGridConfig(f"slot_minutes must be positive, got {slot_minutes}")
    if end <= start:
        raise InvalidGridConfig(f"day end {day_end} must be after day start {day_start}")
    if (end - start) % slot_minutes:
        raise InvalidGridConfig(
            f"{end - start} minutes is not a multiple of {slot_minutes}",
            span_minutes=end - start,
            slot_minutes=slot_minutes,
        )

    slots = []
    for i, m in enumerate(range(start, end, slot_minutes), start=1):
        slots.append(
            Slot(
                index=i,
                start_label=format_hhmm(from_minutes(m)),
                end_label=format_hhmm(from_minutes(m + slot_minutes)),
            )
        )
    return slots


def span_in_slots(start: time, end: time, slot_minutes: int) -> int:
    duration = to_minutes(end) - to_minutes(start)
    if duration <= 0:
        raise InvalidSession(f"end {end} must be after start {start}")
    if duration % slot_minutes:
        raise InvalidSession(
            f"duration of {duration} minutes is not a multiple of the {slot_minutes}-minute slot",
            duration_minutes=duration,
            slot_minutes=slot_minutes,
        )
    return duration // slot_minutes


def slot_offset(start: time, end: time, grid_start, grid_end, slot_minutes: int) -> Optional[int]:
    """
    How many slots after the grid's first column a block starts.
    None when the block is not drawn: it starts before the grid, runs past
    its end, or does not start on a slot boundary.
    """
    first = to_minutes(parse_time_of_day(grid_start))
    delta = to_minutes(start) - first
    if delta < 0 or delta % slot_minutes:
        return None
    if grid_end is not None and to_minutes(end) > to_minutes(parse_time_of_day(grid_end)):
        return None
    return delta // slot_minutes
