from sqlalchemy import Column, String, Integer
from sqlalchemy.orm import relationship
from clash_solver.database import Base

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True)

    course_name = Column(String(255), nullable=False, index=True)
    section_name = Column(String(50), nullable=False, index=True)
    teacher_name = Column(String(255))
    credit_hours = Column(Integer)

    # lab is optional
    lab_teacher_name = Column(String(255))
    lab_section_name = Column(String(50))

    # relationship
    sessions = relationship("CourseSession", back_populates="course", cascade="all, delete-orphan")
