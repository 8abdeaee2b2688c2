"""Semester with its reviewer chain holders and weekly slot grid."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from portal.db.session import Base


DEFAULT_WORKING_DAYS = [1, 2, 3, 4, 5]

DEFAULT_TIME_SLOTS = [
    {"slot_number": 1, "start_time": "08:30", "end_time": "09:20", "label": "Slot 1"},
    {"slot_number": 2, "start_time": "09:20", "end_time": "10:10", "label": "Slot 2"},
    {"slot_number": 3, "start_time": "10:30", "end_time": "11:20", "label": "Slot 3"},
    {"slot_number": 4, "start_time": "11:20", "end_time": "12:10", "label": "Slot 4"},
    {"slot_number": 5, "start_time": "12:20", "end_time": "13:10", "label": "Slot 5"},
    {"slot_number": 6, "start_time": "14:00", "end_time": "14:50", "label": "Slot 6"},
    {"slot_number": 7, "start_time": "14:50", "end_time": "15:40", "label": "Slot 7"},
    {"slot_number": 8, "start_time": "15:40", "end_time": "16:30", "label": "Slot 8"},
]


class Semester(Base):
    __tablename__ = "semesters"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, unique=True)
    academic_year = Column(String(20), nullable=False)
    type = Column(String(20), nullable=False)  # fall | spring | summer
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String(30), nullable=False, default="planning")
    ug_coordinator_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    co_chairman_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    chairman_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    working_days = Column(JSON, nullable=False, default=lambda: list(DEFAULT_WORKING_DAYS))
    time_slots = Column(JSON, nullable=False, default=lambda: [dict(s) for s in DEFAULT_TIME_SLOTS])
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    class_advisors = relationship("SemesterAdvisor", back_populates="semester", cascade="all, delete-orphan")


class SemesterAdvisor(Base):
    """Class advisor of one study year for a semester."""

    __tablename__ = "semester_advisors"
    __table_args__ = (
        UniqueConstraint("semester_id", "year", name="uq_semester_advisor_year"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    semester_id = Column(Uuid(as_uuid=True), ForeignKey("semesters.id", ondelete="CASCADE"), nullable=False)
    year = Column(Integer, nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    semester = relationship("Semester", back_populates="class_advisors")
