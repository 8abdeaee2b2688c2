from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.exceptions import ConflictServiceError
from portal.core.models import Course

from .schemas import CourseCreate, CourseResponse


async def create_course(db: AsyncSession, payload: CourseCreate) -> CourseResponse:
    code = payload.course_code.strip().upper()
    existing = (await db.execute(select(Course.id).where(Course.course_code == code))).scalar_one_or_none()
    if existing:
        raise ConflictServiceError(f"Course with code '{code}' already exists")
    course = Course(
        course_code=code,
        course_name=payload.course_name.strip(),
        year=payload.year,
        semester=payload.semester,
        credits=payload.credits,
        department=payload.department,
        description=payload.description,
    )
    db.add(course)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictServiceError(f"Course with code '{code}' already exists") from e
    await db.refresh(course)
    return CourseResponse.model_validate(course)


async def list_courses(db: AsyncSession, year: Optional[int] = None) -> List[CourseResponse]:
    stmt = select(Course)
    if year is not None:
        stmt = stmt.where(Course.year == year)
    stmt = stmt.order_by(Course.year, Course.course_code)
    result = await db.execute(stmt)
    return [CourseResponse.model_validate(c) for c in result.scalars().all()]
