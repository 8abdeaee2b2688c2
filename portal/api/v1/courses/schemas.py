from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class CourseCreate(BaseModel):
    course_code: str = Field(..., min_length=1, max_length=20)
    course_name: str = Field(..., min_length=1, max_length=255)
    year: int = Field(..., ge=1, le=4)
    semester: int = Field(..., ge=1, le=2)
    credits: int = Field(..., ge=1, le=6)
    department: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None


class CourseResponse(BaseModel):
    id: UUID
    course_code: str
    course_name: str
    year: int
    semester: int
    credits: int
    department: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CourseSummary(BaseModel):
    """Course fields shown next to outlines and bookings."""

    id: UUID
    course_code: str
    course_name: str

    class Config:
        from_attributes = True
