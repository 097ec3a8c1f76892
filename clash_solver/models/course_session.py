from sqlalchemy import Column, Integer, String, Time, ForeignKey
from sqlalchemy.orm import relationship
from clash_solver.database import Base

class CourseSession(Base):
    __tablename__ = "course_sessions"

    id = Column(Integer, primary_key=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"))

    kind = Column(String(16), nullable=False)     # LECTURE_1 / LECTURE_2 / LAB
    day_of_week = Column(String(10))              # MONDAY..SUNDAY
    start_time = Column(Time)
    end_time = Column(Time)
    room = Column(String(50))

    course = relationship("Course", back_populates="sessions")
