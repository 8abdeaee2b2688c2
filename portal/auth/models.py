import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, Uuid

from portal.db.session import Base


class User(Base):
    """Department user. The role decides which dashboards and review stage the user owns."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    # admin, chairman, co_chairman, ug_coordinator, class_advisor, teacher, student
    role = Column(String(50), nullable=False)
    employee_id = Column(String(50), nullable=True, unique=True)
    status = Column(String(20), nullable=False, default="ACTIVE")
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
