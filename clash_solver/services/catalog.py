# clash_solver/services/catalog.py
import asyncio
import logging
from typing import Awaitable, Callable, List, Protocol, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DbSession, selectinload

from clash_solver.config import settings
from clash_solver.errors import CatalogUnavailable, NotFound, StaleLookup
from clash_solver.models.course import Course
from clash_solver.schemas.course import RawCourseRecord
from clash_solver.schemas.timetable import SessionKind

logger = logging.getLogger("clash_solver.catalog")

T = TypeVar("T")


class CourseCatalog(Protocol):
    def lookup(self, section_name: str, course_name: str) -> RawCourseRecord: ...

    def suggest(self, partial_name: str, limit: int = ...) -> List[str]: ...


def _fmt_time(t) -> str | None:
    return t.strftime("%H:%M:%S") if t else None


def course_to_record(c: Course) -> RawCourseRecord:
    """Flatten a catalog row and its sessions into the catalog record shape."""
    data = {
        "teacherName": c.teacher_name,
        "courseName": c.course_name,
        "theorySectionName": c.section_name,
        "creditHours": c.credit_hours,
        "hasLab": False,
    }
    suffix = {SessionKind.LECTURE_1.value: "1", SessionKind.LECTURE_2.value: "2"}
    for s in c.sessions:
        if s.kind == SessionKind.LAB.value:
            data.update(
                hasLab=True,
                labTeacherName=c.lab_teacher_name,
                labSectionName=c.lab_section_name,
                labNumber=s.room,
                labDayOfWeek=s.day_of_week,
                labStartTime=_fmt_time(s.start_time),
                labEndTime=_fmt_time(s.end_time),
            )
        elif s.kind in suffix:
            n = suffix[s.kind]
            data.update({
                f"roomNumber{n}": s.room,
                f"dayOfWeek{n}": s.day_of_week,
                f"startTime{n}": _fmt_time(s.start_time),
                f"endTime{n}": _fmt_time(s.end_time),
            })
    return RawCourseRecord.model_validate(data)


class SqlCourseCatalog:
    def __init__(self, session_factory: Callable[[], DbSession]):
        self._session_factory = session_factory

    def lookup(self, section_name: str, course_name: str) -> RawCourseRecord:
        section_name = (section_name or "").strip()
        course_name = (course_name or "").strip()
        if not section_name or not course_name:
            raise NotFound("Section name and course name are both required")

        db = self._session_factory()
        try:
            c = (
                db.query(Course)
                .options(selectinload(Course.sessions))
                .filter(
                    func.lower(Course.section_name) == section_name.lower(),
                    func.lower(Course.course_name) == course_name.lower(),
                )
                .first()
            )
            if not c:
                raise NotFound(
                    "Course not found", section_name=section_name, course_name=course_name,
                )
            return course_to_record(c)
        except SQLAlchemyError as e:
            logger.exception("Catalog lookup failed for %s/%s", section_name, course_name)
            raise CatalogUnavailable("Course catalog is unavailable") from e
        finally:
            db.close()

    def suggest(self, partial_name: str, limit: int = settings.SUGGEST_LIMIT) -> List[str]:
        k = (partial_name or "").strip()
        if not k:
            return []

        db = self._session_factory()
        try:
            rows = (
                db.query(Course.course_name)
                .filter(Course.course_name.ilike(f"%{k}%"))
                .distinct()
                .order_by(Course.course_name.asc())
                .limit(limit)
                .all()
            )
            # names that start with the typed text first
            names = [r[0] for r in rows]
            return sorted(names, key=lambda n: (not n.lower().startswith(k.lower()), n))
        except SQLAlchemyError as e:
            logger.exception("Catalog suggest failed for %r", k)
            raise CatalogUnavailable("Course catalog is unavailable") from e
        finally:
            db.close()


class AsyncCatalog:
    """Runs a blocking catalog off the event loop."""

    def __init__(self, catalog: CourseCatalog):
        self._catalog = catalog

    async def lookup(self, section_name: str, course_name: str) -> RawCourseRecord:
        return await asyncio.to_thread(self._catalog.lookup, section_name, course_name)

    async def suggest(self, partial_name: str, limit: int = settings.SUGGEST_LIMIT) -> List[str]:
        return await asyncio.to_thread(self._catalog.suggest, partial_name, limit)


class LookupSequencer:
    """
    Hands out increasing tokens to lookups. When a lookup resolves after a
    newer one was started, its result is refused with StaleLookup so an old
    answer can never replace a newer one. A superseded lookup that fails is
    refused the same way, its error no longer matters to the caller.

    Keep one sequencer per caller (one search box, one client): lookups from
    different callers must not supersede each other.
    """

    def __init__(self):
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def next_token(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest

    async def run(self, fn: Callable[..., Awaitable[T]], *args) -> T:
        token = self.next_token()
        try:
            result = await fn(*args)
        except Exception as e:
            if not self.is_current(token):
                raise self._stale(token) from e
            raise
        if not self.is_current(token):
            raise self._stale(token)
        return result

    def _stale(self, token: int) -> StaleLookup:
        logger.info("Discarding lookup #%d, #%d was issued after it", token, self._latest)
        return StaleLookup("A newer lookup superseded this one", token=token, latest=self._latest)
