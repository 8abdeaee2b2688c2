"""Append-only record of one reviewer decision."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from portal.db.session import Base


class OutlineReview(Base):
    __tablename__ = "outline_reviews"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    outline_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("course_outlines.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    reviewer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    reviewer_role = Column(String(30), nullable=False)
    decision = Column(String(20), nullable=False)  # approved | rejected
    comments = Column(Text, nullable=False, default="")
    reviewed_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    outline = relationship("CourseOutline", back_populates="reviews")
