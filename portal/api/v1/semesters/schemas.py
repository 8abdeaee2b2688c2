from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from portal.core.enums import SemesterStatus, SemesterType


def _check_hhmm(v: str) -> str:
    """24-hour HH:MM."""
    v = v.strip()
    datetime.strptime(v, "%H:%M")
    return v


class TimeSlotConfig(BaseModel):
    slot_number: int = Field(..., ge=1, le=10)
    start_time: str = Field(..., description="24-hour format, e.g. 08:30")
    end_time: str = Field(..., description="24-hour format, e.g. 09:20")
    label: str

    @field_validator("start_time", "end_time")
    @classmethod
    def parse_time(cls, v: str) -> str:
        return _check_hhmm(v)


class SemesterCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    academic_year: str = Field(..., min_length=1, max_length=20)
    type: SemesterType
    start_date: date
    end_date: date
    ug_coordinator_id: Optional[UUID] = None
    co_chairman_id: Optional[UUID] = None
    chairman_id: Optional[UUID] = None
    working_days: Optional[List[int]] = None
    time_slots: Optional[List[TimeSlotConfig]] = None

    @model_validator(mode="after")
    def validate_dates(self) -> "SemesterCreate":
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        if self.working_days is not None and any(d < 1 or d > 6 for d in self.working_days):
            raise ValueError("working_days must be between 1 (Monday) and 6 (Saturday)")
        return self


class SemesterUpdate(BaseModel):
    status: Optional[SemesterStatus] = None
    ug_coordinator_id: Optional[UUID] = None
    co_chairman_id: Optional[UUID] = None
    chairman_id: Optional[UUID] = None


class SemesterAdvisorSet(BaseModel):
    year: int = Field(..., ge=1, le=4)
    user_id: UUID


class SemesterAdvisorResponse(BaseModel):
    year: int
    user_id: UUID

    class Config:
        from_attributes = True


class SemesterResponse(BaseModel):
    id: UUID
    name: str
    academic_year: str
    type: str
    start_date: date
    end_date: date
    status: str
    ug_coordinator_id: Optional[UUID] = None
    co_chairman_id: Optional[UUID] = None
    chairman_id: Optional[UUID] = None
    working_days: List[int]
    time_slots: List[TimeSlotConfig]
    class_advisors: List[SemesterAdvisorResponse] = []
    created_at: datetime
