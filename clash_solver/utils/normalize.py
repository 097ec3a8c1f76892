# clash_solver/utils/normalize.py
import logging
from typing import Union

from pydantic import ValidationError

from clash_solver.errors import InvalidSession
from clash_solver.schemas.course import RawCourseRecord, SessionDescriptor
from clash_solver.schemas.timetable import Entry, Session, Weekday
from clash_solver.utils.timegrid import parse_time_of_day

logger = logging.getLogger("clash_solver.normalize")

_DAY_BY_PREFIX = {d.short: d for d in Weekday}


def make_entry_id(section_name: str, course_name: str) -> str:
    return f"{section_name.strip()}/{course_name.strip()}"


def parse_weekday(value: str) -> Weekday:
    """ "MONDAY" / "monday" / "Mon" -> Weekday.MONDAY """
    key = (value or "").strip().upper()
    day = _DAY_BY_PREFIX.get(key[:3])
    if day is None or not day.value.startswith(key):
        raise InvalidSession(f"Unknown weekday: {value!r}")
    return day


def normalize_session(desc: SessionDescriptor) -> Session | None:
    """Incomplete descriptors are dropped (None); complete ones must be well-formed."""
    if not desc.is_complete:
        return None

    day = parse_weekday(desc.day)
    start = parse_time_of_day(desc.start)
    end = parse_time_of_day(desc.end)
    if end <= start:
        raise InvalidSession(
            f"{desc.kind.label}: end {desc.end} must be after start {desc.start}",
            session_kind=desc.kind.value,
        )
    return Session(day=day, start=start, end=end, kind=desc.kind, room=desc.room or None)


def normalize(raw: Union[RawCourseRecord, dict]) -> Entry:
    """
    Shape a catalog (or hand-typed) record into an Entry.

    Sessions with a missing day/start/end are skipped. A lab is only read when
    the record says it has one. An Entry may end up with no sessions at all,
    it simply never clashes and never renders.
    """
    if isinstance(raw, dict):
        try:
            raw = RawCourseRecord.model_validate(raw)
        except ValidationError as e:
            raise InvalidSession("Malformed course record", errors=e.errors(include_url=False, include_context=False))

    course_name = (raw.course_name or "").strip()
    section_name = (raw.section_name or "").strip()
    if not course_name or not section_name:
        raise InvalidSession("Course record needs both a course name and a section name")

    sessions = []
    for desc in raw.session_descriptors():
        s = normalize_session(desc)
        if s is None:
            logger.debug("%s/%s: dropping incomplete %s", section_name, course_name, desc.kind.value)
            continue
        sessions.append(s)

    return Entry(
        id=make_entry_id(section_name, course_name),
        course_name=course_name,
        section_name=section_name,
        teacher=raw.teacher_name,
        lab_teacher=raw.lab_teacher_name if raw.has_lab else None,
        credit_hours=raw.credit_hours,
        has_lab=raw.has_lab,
        sessions=tuple(sessions),
    )
