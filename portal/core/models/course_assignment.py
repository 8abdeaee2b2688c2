"""Teacher-to-course pairing for a semester. Parent of outlines and bookings."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from portal.db.session import Base


class CourseAssignment(Base):
    __tablename__ = "course_assignments"
    __table_args__ = (
        UniqueConstraint("semester_id", "teacher_id", "course_id", "year", name="uq_course_assignment"),
        CheckConstraint("year BETWEEN 1 AND 4", name="ck_course_assignment_year"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    semester_id = Column(Uuid(as_uuid=True), ForeignKey("semesters.id", ondelete="RESTRICT"), nullable=False, index=True)
    teacher_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    course_id = Column(Uuid(as_uuid=True), ForeignKey("courses.id", ondelete="RESTRICT"), nullable=False)
    year = Column(Integer, nullable=False)
    section = Column(String(10), nullable=True)
    # Mirrors the latest outline's status; written in the same transaction as the outline.
    outline_status = Column(String(30), nullable=True)
    assigned_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    semester = relationship("Semester")
    course = relationship("Course")
    teacher = relationship("User", foreign_keys=[teacher_id])
