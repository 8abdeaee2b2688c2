import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text, Uuid

from portal.db.session import Base


class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("year BETWEEN 1 AND 4", name="ck_course_year"),
        CheckConstraint("credits BETWEEN 1 AND 6", name="ck_course_credits"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    course_code = Column(String(20), nullable=False, unique=True)
    course_name = Column(String(255), nullable=False)
    year = Column(Integer, nullable=False)
    semester = Column(Integer, nullable=False)  # 1 | 2 within the study year
    credits = Column(Integer, nullable=False)
    department = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
