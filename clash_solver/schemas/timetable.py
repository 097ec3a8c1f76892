from datetime import datetime, time
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class Weekday(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @property
    def short(self) -> str:
        return self.value[:3]


class SessionKind(str, Enum):
    LECTURE_1 = "LECTURE_1"
    LECTURE_2 = "LECTURE_2"
    LAB = "LAB"

    @property
    def label(self) -> str:
        return KIND_LABELS[self]

    @property
    def order(self) -> int:
        return KIND_ORDER.index(self)


KIND_ORDER = (SessionKind.LECTURE_1, SessionKind.LECTURE_2, SessionKind.LAB)
KIND_LABELS = {
    SessionKind.LECTURE_1: "Lec 1",
    SessionKind.LECTURE_2: "Lec 2",
    SessionKind.LAB: "Lab",
}

SplitPosition = Literal["none", "top", "bottom"]


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: Weekday
    start: time
    end: time
    kind: SessionKind
    room: Optional[str] = None

    @model_validator(mode="after")
    def check_end_after_start(self):
        if self.end <= self.start:
            raise ValueError(f"{self.kind.value}: end {self.end} must be after start {self.start}")
        return self


class Entry(BaseModel):
    """One course's weekly schedule: up to one session per kind."""
    model_config = ConfigDict(frozen=True)

    id: str                          # "<section>/<course>"
    course_name: str
    section_name: str
    teacher: Optional[str] = None
    lab_teacher: Optional[str] = None
    credit_hours: Optional[int] = None
    has_lab: bool = False
    sessions: tuple[Session, ...] = ()

    @model_validator(mode="after")
    def check_one_session_per_kind(self):
        kinds = [s.kind for s in self.sessions]
        if len(kinds) != len(set(kinds)):
            raise ValueError(f"{self.id}: more than one session of the same kind")
        return self

    def session(self, kind: SessionKind) -> Optional[Session]:
        for s in self.sessions:
            if s.kind == kind:
                return s
        return None


class Conflict(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry_id_a: str
    entry_id_b: str
    session_kind_a: SessionKind
    session_kind_b: SessionKind
    day: Weekday
    overlap_start: time
    overlap_end: time


class Slot(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int          # 1-based, as printed on the grid header
    start_label: str
    end_label: str


class Placement(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry_id: str
    session_kind: SessionKind
    day: Weekday
    width_in_slots: int
    offset_in_slots: Optional[int] = None
    split_position: SplitPosition = "none"


class Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime
    entries: tuple[Entry, ...] = ()

    @property
    def course_names(self) -> list[str]:
        return [e.course_name for e in self.entries]
