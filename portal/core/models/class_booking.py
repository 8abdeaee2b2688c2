"""Booked weekly slot. One row per (semester, year, section, day, slot)."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from portal.db.session import Base


SECTION_SLOT_CONSTRAINT = "uq_booking_section_slot"
TEACHER_SLOT_CONSTRAINT = "uq_booking_teacher_slot"
SECTION_SLOT_COLUMNS = ("semester_id", "year", "section", "day_of_week", "slot_number")
TEACHER_SLOT_COLUMNS = ("semester_id", "teacher_id", "day_of_week", "slot_number")


class ClassBooking(Base):
    __tablename__ = "class_bookings"
    __table_args__ = (
        # A year/section cannot host two classes at once
        UniqueConstraint(*SECTION_SLOT_COLUMNS, name=SECTION_SLOT_CONSTRAINT),
        # A teacher cannot teach two classes at once
        UniqueConstraint(*TEACHER_SLOT_COLUMNS, name=TEACHER_SLOT_CONSTRAINT),
        CheckConstraint("year BETWEEN 1 AND 4", name="ck_booking_year"),
        CheckConstraint("day_of_week BETWEEN 1 AND 6", name="ck_booking_day"),
        CheckConstraint("slot_number BETWEEN 1 AND 10", name="ck_booking_slot"),
        Index("ix_booking_semester_teacher", "semester_id", "teacher_id"),
        Index("ix_booking_semester_year_section", "semester_id", "year", "section"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    semester_id = Column(Uuid(as_uuid=True), ForeignKey("semesters.id", ondelete="RESTRICT"), nullable=False)
    course_id = Column(Uuid(as_uuid=True), ForeignKey("courses.id", ondelete="RESTRICT"), nullable=False)
    teacher_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    assignment_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("course_assignments.id", ondelete="RESTRICT"),
        nullable=False,
    )
    year = Column(Integer, nullable=False)
    section = Column(String(10), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 1=Monday .. 6=Saturday
    slot_number = Column(Integer, nullable=False)
    start_time = Column(String(5), nullable=False, default="")  # HH:MM
    end_time = Column(String(5), nullable=False, default="")
    room = Column(String(50), nullable=False, default="")
    booked_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    teacher = relationship("User", foreign_keys=[teacher_id])
    course = relationship("Course")
