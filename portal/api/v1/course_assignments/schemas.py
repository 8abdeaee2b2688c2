from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class CourseAssignmentCreate(BaseModel):
    semester_id: UUID
    teacher_id: UUID
    course_id: UUID
    year: Optional[int] = Field(None, ge=1, le=4, description="Defaults to the course's study year")
    section: Optional[str] = Field(None, max_length=10)


class CourseAssignmentResponse(BaseModel):
    id: UUID
    semester_id: UUID
    teacher_id: UUID
    course_id: UUID
    year: int
    section: Optional[str] = None
    outline_status: Optional[str] = None
    assigned_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
