from sqlalchemy import Column, Integer, String, DateTime, JSON
from clash_solver.database import Base


class SavedTimetable(Base):
    __tablename__ = "saved_timetables"

    id = Column(String(36), primary_key=True)
    # 0 = newest, the collection is always rewritten as a whole
    position = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    entries = Column(JSON, nullable=False)
