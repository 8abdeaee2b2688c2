import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.enums import NotificationType, UserRole
from portal.core.exceptions import ConflictServiceError, NotFoundServiceError, ValidationServiceError
from portal.core.models import Course, CourseAssignment, Semester, User

from portal.api.v1.notifications.service import notify

from .schemas import CourseAssignmentCreate, CourseAssignmentResponse

logger = logging.getLogger(__name__)


async def create_assignment(
    db: AsyncSession,
    payload: CourseAssignmentCreate,
    assigned_by: Optional[UUID] = None,
) -> CourseAssignmentResponse:
    semester = await db.get(Semester, payload.semester_id)
    if not semester:
        raise NotFoundServiceError("Semester not found")
    course = await db.get(Course, payload.course_id)
    if not course:
        raise NotFoundServiceError("Course not found")
    teacher = await db.get(User, payload.teacher_id)
    if not teacher:
        raise NotFoundServiceError("Teacher not found")
    if teacher.role == UserRole.STUDENT.value:
        raise ValidationServiceError("Courses can only be assigned to teaching staff")

    year = payload.year if payload.year is not None else course.year
    existing = (
        await db.execute(
            select(CourseAssignment.id).where(
                CourseAssignment.semester_id == payload.semester_id,
                CourseAssignment.teacher_id == payload.teacher_id,
                CourseAssignment.course_id == payload.course_id,
                CourseAssignment.year == year,
            )
        )
    ).scalar_one_or_none()
    if existing:
        raise ConflictServiceError("This course is already assigned to the teacher for this semester")

    obj = CourseAssignment(
        semester_id=payload.semester_id,
        teacher_id=payload.teacher_id,
        course_id=payload.course_id,
        year=year,
        section=payload.section.strip() if payload.section else None,
        assigned_by=assigned_by,
    )
    db.add(obj)
    notify(
        db,
        teacher.id,
        NotificationType.COURSE_ASSIGNED,
        "New course assigned",
        f"You have been assigned {course.course_code} ({course.course_name}) for {semester.name}.",
        link="/teacher/courses",
    )
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictServiceError("This course is already assigned to the teacher for this semester") from e
    await db.refresh(obj)
    logger.info("Assigned course %s to teacher %s (semester %s)", course.course_code, teacher.id, semester.id)
    return CourseAssignmentResponse.model_validate(obj)


async def list_assignments(
    db: AsyncSession,
    semester_id: Optional[UUID] = None,
    teacher_id: Optional[UUID] = None,
    course_id: Optional[UUID] = None,
) -> List[CourseAssignmentResponse]:
    stmt = select(CourseAssignment)
    if semester_id is not None:
        stmt = stmt.where(CourseAssignment.semester_id == semester_id)
    if teacher_id is not None:
        stmt = stmt.where(CourseAssignment.teacher_id == teacher_id)
    if course_id is not None:
        stmt = stmt.where(CourseAssignment.course_id == course_id)
    stmt = stmt.order_by(CourseAssignment.year, CourseAssignment.created_at)
    result = await db.execute(stmt)
    return [CourseAssignmentResponse.model_validate(a) for a in result.scalars().all()]


async def get_assignment(db: AsyncSession, assignment_id: UUID) -> Optional[CourseAssignmentResponse]:
    obj = await db.get(CourseAssignment, assignment_id)
    return CourseAssignmentResponse.model_validate(obj) if obj else None
