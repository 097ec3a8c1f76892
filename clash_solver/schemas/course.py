from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from clash_solver.schemas.timetable import SessionKind


class SessionDescriptor(BaseModel):
    """One raw, not yet validated, session of a catalog record."""
    kind: SessionKind
    day: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    room: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.day and self.start and self.end)


class RawCourseRecord(BaseModel):
    """
    Course record as the catalog returns it. Lab fields are only present when
    the section has a lab, so the lab is tagged by ``has_lab``.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    teacher_name: Optional[str] = Field(None, alias="teacherName")
    course_name: Optional[str] = Field(None, alias="courseName")
    section_name: Optional[str] = Field(None, alias="theorySectionName")
    credit_hours: Optional[int] = Field(None, alias="creditHours")

    # Lecture 1
    room_number_1: Optional[str] = Field(None, alias="roomNumber1")
    day_of_week_1: Optional[str] = Field(None, alias="dayOfWeek1")
    start_time_1: Optional[str] = Field(None, alias="startTime1")
    end_time_1: Optional[str] = Field(None, alias="endTime1")

    # Lecture 2
    room_number_2: Optional[str] = Field(None, alias="roomNumber2")
    day_of_week_2: Optional[str] = Field(None, alias="dayOfWeek2")
    start_time_2: Optional[str] = Field(None, alias="startTime2")
    end_time_2: Optional[str] = Field(None, alias="endTime2")

    # Optional lab
    lab_flag: Optional[bool] = Field(None, alias="hasLab")
    lab_teacher_name: Optional[str] = Field(None, alias="labTeacherName")
    lab_section_name: Optional[str] = Field(None, alias="labSectionName")
    lab_number: Optional[str] = Field(None, alias="labNumber")
    lab_day_of_week: Optional[str] = Field(None, alias="labDayOfWeek")
    lab_start_time: Optional[str] = Field(None, alias="labStartTime")
    lab_end_time: Optional[str] = Field(None, alias="labEndTime")

    @property
    def has_lab(self) -> bool:
        if self.lab_flag is not None:
            return self.lab_flag
        return bool(self.lab_teacher_name)

    def session_descriptors(self) -> list[SessionDescriptor]:
        out = [
            SessionDescriptor(
                kind=SessionKind.LECTURE_1,
                day=self.day_of_week_1,
                start=self.start_time_1,
                end=self.end_time_1,
                room=self.room_number_1,
            ),
            SessionDescriptor(
                kind=SessionKind.LECTURE_2,
                day=self.day_of_week_2,
                start=self.start_time_2,
                end=self.end_time_2,
                room=self.room_number_2,
            ),
        ]
        if self.has_lab:
            out.append(
                SessionDescriptor(
                    kind=SessionKind.LAB,
                    day=self.lab_day_of_week,
                    start=self.lab_start_time,
                    end=self.lab_end_time,
                    room=self.lab_number,
                )
            )
        return out
