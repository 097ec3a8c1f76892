from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from clash_solver.schemas.timetable import Conflict, Entry, Snapshot


class AddCourseIn(BaseModel):
    section_name: str = Field(..., min_length=1, description="e.g. sp23-bse-a")
    course_name: str = Field(..., min_length=1)


class TimetableStateOut(BaseModel):
    active: List[Entry]
    minimized: List[Entry]
    conflicts: List[Conflict]
    clash_count: int


class SnapshotSummary(BaseModel):
    id: str
    created_at: datetime
    course_names: List[str]
    entries: List[Entry]

    @classmethod
    def of(cls, s: Snapshot) -> "SnapshotSummary":
        return cls(id=s.id, created_at=s.created_at, course_names=s.course_names, entries=list(s.entries))


class CourseSuggestOut(BaseModel):
    query: str
    names: List[str]
