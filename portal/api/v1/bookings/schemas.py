from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from portal.auth.schemas import UserInfo
from portal.api.v1.courses.schemas import CourseSummary


def _parse_hhmm(v: Optional[str]) -> Optional[str]:
    """24-hour HH:MM; blank means "use the semester's slot time"."""
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    return datetime.strptime(v, "%H:%M").strftime("%H:%M")


class BookingCreate(BaseModel):
    """Identifying fields are checked by the service so the error can list every missing one."""

    semester_id: Optional[UUID] = None
    course_id: Optional[UUID] = None
    teacher_id: Optional[UUID] = None
    assignment_id: Optional[UUID] = None
    year: Optional[int] = None
    section: Optional[str] = Field(None, max_length=10)
    day_of_week: Optional[int] = Field(None, description="1=Monday .. 6=Saturday")
    slot_number: Optional[int] = Field(None, description="1..10")
    start_time: Optional[str] = Field(None, description="24-hour format, e.g. 08:30")
    end_time: Optional[str] = Field(None, description="24-hour format, e.g. 09:20")
    room: Optional[str] = Field(None, max_length=50)

    @field_validator("start_time", "end_time")
    @classmethod
    def parse_time(cls, v: Optional[str]) -> Optional[str]:
        return _parse_hhmm(v)


class BookingResponse(BaseModel):
    id: UUID
    semester_id: UUID
    course_id: UUID
    teacher_id: UUID
    assignment_id: UUID
    year: int
    section: str
    day_of_week: int
    slot_number: int
    start_time: str
    end_time: str
    room: str
    booked_at: datetime

    teacher: Optional[UserInfo] = None
    course: Optional[CourseSummary] = None


class BookingDeleteResponse(BaseModel):
    success: bool = True
    message: str = "Booking deleted"
