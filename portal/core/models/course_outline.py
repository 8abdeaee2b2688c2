"""One row per submitted outline version; advanced through the review chain, never deleted."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from portal.db.session import Base


class CourseOutline(Base):
    __tablename__ = "course_outlines"
    __table_args__ = (
        UniqueConstraint("assignment_id", "version", name="uq_outline_assignment_version"),
        CheckConstraint("version >= 1", name="ck_outline_version"),
        # Reviewer present exactly while the outline is in review
        CheckConstraint(
            "(status IN ('submitted', 'coordinator_review', 'co_chairman_review', 'chairman_review'))"
            " = (current_reviewer_role IS NOT NULL)",
            name="ck_outline_status_reviewer",
        ),
        Index("ix_outline_semester_status", "semester_id", "status"),
        Index("ix_outline_teacher_semester", "teacher_id", "semester_id"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    assignment_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("course_assignments.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    teacher_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    course_id = Column(Uuid(as_uuid=True), ForeignKey("courses.id", ondelete="RESTRICT"), nullable=False)
    semester_id = Column(Uuid(as_uuid=True), ForeignKey("semesters.id", ondelete="RESTRICT"), nullable=False)
    file_url = Column(Text, nullable=False)
    file_name = Column(String(255), nullable=False)
    file_type = Column(String(10), nullable=False, default="pdf")
    version = Column(Integer, nullable=False, default=1)
    status = Column(String(30), nullable=False, default="submitted")
    current_reviewer_role = Column(String(30), nullable=True, default="class_advisor")
    # Bumped on every transition; a review must name the revision it saw.
    revision = Column(Integer, nullable=False, default=1)
    submitted_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejection_comments = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    assignment = relationship("CourseAssignment")
    teacher = relationship("User", foreign_keys=[teacher_id])
    course = relationship("Course")
    semester = relationship("Semester")
    reviews = relationship("OutlineReview", back_populates="outline", order_by="OutlineReview.reviewed_at")
