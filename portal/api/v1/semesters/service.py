import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from portal.core.enums import NotificationType, SemesterStatus, UserRole
from portal.core.exceptions import ConflictServiceError, NotFoundServiceError, ValidationServiceError
from portal.core.models import CourseAssignment, Semester, SemesterAdvisor, User

from portal.api.v1.notifications.service import notify

from .schemas import (
    SemesterAdvisorResponse,
    SemesterAdvisorSet,
    SemesterCreate,
    SemesterResponse,
    SemesterUpdate,
    TimeSlotConfig,
)

logger = logging.getLogger(__name__)


def _to_response(s: Semester) -> SemesterResponse:
    return SemesterResponse(
        id=s.id,
        name=s.name,
        academic_year=s.academic_year,
        type=s.type,
        start_date=s.start_date,
        end_date=s.end_date,
        status=s.status,
        ug_coordinator_id=s.ug_coordinator_id,
        co_chairman_id=s.co_chairman_id,
        chairman_id=s.chairman_id,
        working_days=list(s.working_days or []),
        time_slots=[TimeSlotConfig(**ts) for ts in (s.time_slots or [])],
        class_advisors=[
            SemesterAdvisorResponse(year=a.year, user_id=a.user_id)
            for a in sorted(s.class_advisors, key=lambda a: a.year)
        ],
        created_at=s.created_at,
    )


async def _load(db: AsyncSession, semester_id: UUID) -> Optional[Semester]:
    result = await db.execute(
        select(Semester)
        .options(selectinload(Semester.class_advisors))
        .where(Semester.id == semester_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _check_holder(db: AsyncSession, user_id: Optional[UUID], role: UserRole, field: str) -> None:
    if user_id is None:
        return
    user = await db.get(User, user_id)
    if not user or user.role not in (role.value, UserRole.ADMIN.value):
        raise ValidationServiceError(f"{field} must reference a user with role {role.value}")


async def create_semester(db: AsyncSession, payload: SemesterCreate) -> SemesterResponse:
    await _check_holder(db, payload.ug_coordinator_id, UserRole.UG_COORDINATOR, "ug_coordinator_id")
    await _check_holder(db, payload.co_chairman_id, UserRole.CO_CHAIRMAN, "co_chairman_id")
    await _check_holder(db, payload.chairman_id, UserRole.CHAIRMAN, "chairman_id")

    sem = Semester(
        name=payload.name.strip(),
        academic_year=payload.academic_year.strip(),
        type=payload.type.value,
        start_date=payload.start_date,
        end_date=payload.end_date,
        status=SemesterStatus.PLANNING.value,
        ug_coordinator_id=payload.ug_coordinator_id,
        co_chairman_id=payload.co_chairman_id,
        chairman_id=payload.chairman_id,
    )
    if payload.working_days is not None:
        sem.working_days = sorted(set(payload.working_days))
    if payload.time_slots is not None:
        sem.time_slots = [ts.model_dump() for ts in sorted(payload.time_slots, key=lambda t: t.slot_number)]
    db.add(sem)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictServiceError(f"Semester '{payload.name}' already exists") from e
    return _to_response(await _load(db, sem.id))


async def list_semesters(db: AsyncSession, status: Optional[str] = None) -> List[SemesterResponse]:
    stmt = select(Semester).options(selectinload(Semester.class_advisors))
    if status is not None:
        stmt = stmt.where(Semester.status == status)
    stmt = stmt.order_by(Semester.start_date.desc())
    result = await db.execute(stmt)
    return [_to_response(s) for s in result.scalars().all()]


async def get_semester(db: AsyncSession, semester_id: UUID) -> Optional[SemesterResponse]:
    sem = await _load(db, semester_id)
    return _to_response(sem) if sem else None


async def update_semester(
    db: AsyncSession,
    semester_id: UUID,
    payload: SemesterUpdate,
) -> SemesterResponse:
    sem = await _load(db, semester_id)
    if not sem:
        raise NotFoundServiceError("Semester not found")
    await _check_holder(db, payload.ug_coordinator_id, UserRole.UG_COORDINATOR, "ug_coordinator_id")
    await _check_holder(db, payload.co_chairman_id, UserRole.CO_CHAIRMAN, "co_chairman_id")
    await _check_holder(db, payload.chairman_id, UserRole.CHAIRMAN, "chairman_id")

    if payload.ug_coordinator_id is not None:
        sem.ug_coordinator_id = payload.ug_coordinator_id
    if payload.co_chairman_id is not None:
        sem.co_chairman_id = payload.co_chairman_id
    if payload.chairman_id is not None:
        sem.chairman_id = payload.chairman_id
    if payload.status is not None and payload.status.value != sem.status:
        logger.info("Semester %s status %s -> %s", sem.id, sem.status, payload.status.value)
        sem.status = payload.status.value
        if payload.status == SemesterStatus.SCHEDULING:
            await _notify_scheduling_open(db, sem)
    await db.commit()
    return _to_response(await _load(db, sem.id))


async def _notify_scheduling_open(db: AsyncSession, sem: Semester) -> None:
    result = await db.execute(
        select(CourseAssignment.teacher_id)
        .where(CourseAssignment.semester_id == sem.id)
        .distinct()
    )
    for teacher_id in result.scalars().all():
        notify(
            db,
            teacher_id,
            NotificationType.SCHEDULING_OPEN,
            "Class scheduling is open",
            f"You can now book class slots for {sem.name}.",
            link="/teacher/schedule",
        )


async def set_class_advisor(
    db: AsyncSession,
    semester_id: UUID,
    payload: SemesterAdvisorSet,
) -> SemesterResponse:
    """Assign (or replace) the class advisor for one study year."""
    sem = await _load(db, semester_id)
    if not sem:
        raise NotFoundServiceError("Semester not found")
    await _check_holder(db, payload.user_id, UserRole.CLASS_ADVISOR, "user_id")

    existing = next((a for a in sem.class_advisors if a.year == payload.year), None)
    if existing:
        existing.user_id = payload.user_id
    else:
        db.add(SemesterAdvisor(semester_id=sem.id, year=payload.year, user_id=payload.user_id))
    await db.commit()
    return _to_response(await _load(db, sem.id))
