import os
import tempfile
from datetime import datetime, time, timezone

# must be set before clash_solver.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="clash-solver-logs-"))

import pytest
from sqlalchemy.orm import sessionmaker

from clash_solver.database import Base, make_engine
from clash_solver.models import course, course_session, saved_timetable  # noqa: F401
from clash_solver.schemas.timetable import KIND_ORDER, Entry, Session, SessionKind
from clash_solver.services.catalog import SqlCourseCatalog
from clash_solver.services.snapshot_store import InMemorySnapshotStore
from clash_solver.services.store import ScheduleStore


@pytest.fixture
def make_entry():
    """
    make_entry("CS101", ("MONDAY", "09:00", "10:30"), ("WEDNESDAY", "09:00", "10:30"))
    Sessions are Lec 1, Lec 2, Lab in order unless a fourth item names the kind.
    """
    def _make(entry_id, *sessions, section="A"):
        out = []
        for kind, s in zip(KIND_ORDER, sessions):
            day, start, end = s[:3]
            if len(s) > 3:
                kind = SessionKind(s[3])
            out.append(Session(day=day, start=start, end=end, kind=kind))
        return Entry(
            id=entry_id,
            course_name=entry_id,
            section_name=section,
            has_lab=any(x.kind == SessionKind.LAB for x in out),
            sessions=tuple(out),
        )
    return _make


class FixedClock:
    def __init__(self):
        self.now = datetime(2024, 9, 2, 8, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def snapshot_backend():
    return InMemorySnapshotStore()


@pytest.fixture
def store(snapshot_backend, clock):
    return ScheduleStore(snapshot_backend, clock=clock)


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    engine.dispose()


@pytest.fixture
def catalog(session_factory):
    db = session_factory()
    db.add_all([
        course.Course(
            course_name="Data Structures", section_name="sp23-bse-a", teacher_name="Dr. Khan", credit_hours=4,
            lab_teacher_name="Ms. Ali", lab_section_name="sp23-bse-a-lab",
            sessions=[
                course_session.CourseSession(kind="LECTURE_1", day_of_week="MONDAY",
                                             start_time=time(9), end_time=time(10, 30), room="C-101"),
                course_session.CourseSession(kind="LECTURE_2", day_of_week="THURSDAY",
                                             start_time=time(11), end_time=time(12, 30), room="C-101"),
                course_session.CourseSession(kind="LAB", day_of_week="FRIDAY",
                                             start_time=time(14), end_time=time(17), room="Lab-2"),
            ],
        ),
        course.Course(
            course_name="Database Systems", section_name="sp23-bse-a", teacher_name="Dr. Raza", credit_hours=3,
            sessions=[
                course_session.CourseSession(kind="LECTURE_1", day_of_week="MONDAY",
                                             start_time=time(10), end_time=time(11)),
            ],
        ),
        course.Course(course_name="Discrete Math", section_name="sp23-bse-b", teacher_name="Dr. Noor", credit_hours=3),
        course.Course(course_name="Modern Databases", section_name="sp23-bse-b", teacher_name="Dr. Noor", credit_hours=3),
    ])
    db.commit()
    db.close()
    return SqlCourseCatalog(session_factory)
