"""
Resolve which user holds a reviewer role for a semester.
class_advisor: the semester's advisor for the course's study year
ug_coordinator / co_chairman / chairman: the holder named on the semester
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.enums import ReviewerRole
from portal.core.models import Semester, SemesterAdvisor


async def resolve_reviewer(
    db: AsyncSession,
    semester_id: UUID,
    reviewer_role: Optional[str],
    year: Optional[int] = None,
) -> Optional[UUID]:
    """
    Return user_id of the person who reviews at this stage, or None when the
    semester has nobody configured for it (caller skips the notification).
    """
    if reviewer_role is None:
        return None
    if reviewer_role == ReviewerRole.CLASS_ADVISOR.value:
        if year is None:
            return None
        r = await db.execute(
            select(SemesterAdvisor.user_id).where(
                SemesterAdvisor.semester_id == semester_id,
                SemesterAdvisor.year == year,
            )
        )
        return r.scalar_one_or_none()

    semester = await db.get(Semester, semester_id)
    if not semester:
        return None
    if reviewer_role == ReviewerRole.UG_COORDINATOR.value:
        return semester.ug_coordinator_id
    if reviewer_role == ReviewerRole.CO_CHAIRMAN.value:
        return semester.co_chairman_id
    if reviewer_role == ReviewerRole.CHAIRMAN.value:
        return semester.chairman_id
    return None
