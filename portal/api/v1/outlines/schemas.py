from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from portal.auth.schemas import UserInfo
from portal.core.enums import OutlineFileType
from portal.api.v1.courses.schemas import CourseSummary


# ----- Submit outline -----
class OutlineCreate(BaseModel):
    """Required fields are checked by the service so the error can list every missing one."""

    assignment_id: Optional[UUID] = None
    teacher_id: Optional[UUID] = None
    course_id: Optional[UUID] = None
    semester_id: Optional[UUID] = None
    file_url: Optional[str] = Field(None, max_length=2000)
    file_name: Optional[str] = Field(None, max_length=255)
    file_type: OutlineFileType = OutlineFileType.PDF


# ----- Review decision -----
class OutlineReviewSubmit(BaseModel):
    reviewer_id: Optional[UUID] = None
    reviewer_role: Optional[str] = None
    decision: Optional[str] = Field(None, description="approved | rejected")
    comments: Optional[str] = Field(None, max_length=5000)
    expected_revision: Optional[int] = Field(
        None, ge=1, description="Outline revision the reviewer acted on; stale revisions are refused"
    )


class OutlineReviewResponse(BaseModel):
    id: UUID
    outline_id: UUID
    reviewer_id: UUID
    reviewer_role: str
    decision: str
    comments: str
    reviewed_at: datetime

    class Config:
        from_attributes = True


class SemesterSummary(BaseModel):
    id: UUID
    name: str
    status: str

    class Config:
        from_attributes = True


class OutlineResponse(BaseModel):
    id: UUID
    assignment_id: UUID
    teacher_id: UUID
    course_id: UUID
    semester_id: UUID
    file_url: str
    file_name: str
    file_type: str
    version: int
    status: str
    current_reviewer_role: Optional[str] = None
    revision: int
    submitted_at: datetime
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_comments: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    teacher: Optional[UserInfo] = None
    course: Optional[CourseSummary] = None
    semester: Optional[SemesterSummary] = None
    reviews: List[OutlineReviewResponse] = []
