"""
First-come-first-served class slot booking.

Two bookings may never share (semester, year, section, day, slot) nor
(semester, teacher, day, slot). The pre-checks only produce a friendly error;
the unique constraints on class_bookings are what actually refuse a double
booking, and a violation there is reported with the same message.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from portal.auth.schemas import UserInfo
from portal.core.config import settings
from portal.core.enums import NotificationType, OutlineStatus, UserRole
from portal.core.exceptions import (
    AuthorizationServiceError,
    ConflictServiceError,
    NotFoundServiceError,
    ValidationServiceError,
)
from portal.core.models import ClassBooking, Course, CourseAssignment, Semester
from portal.core.models.class_booking import (
    SECTION_SLOT_COLUMNS,
    SECTION_SLOT_CONSTRAINT,
    TEACHER_SLOT_COLUMNS,
    TEACHER_SLOT_CONSTRAINT,
)

from portal.api.v1.audit.service import log_audit
from portal.api.v1.courses.schemas import CourseSummary
from portal.api.v1.notifications.service import notify

from .schemas import BookingCreate, BookingResponse

logger = logging.getLogger(__name__)

ENTITY_BOOKING = "CLASS_BOOKING"

SLOT_CONFLICT_MESSAGE = "This slot is already booked for this year/section."
TEACHER_CONFLICT_MESSAGE = "Teacher already has a class booked at this time slot."

DAY_RANGE = (1, 6)
SLOT_RANGE = (1, 10)
YEAR_RANGE = (1, 4)

_REQUIRED = (
    "semester_id",
    "course_id",
    "teacher_id",
    "assignment_id",
    "year",
    "section",
    "day_of_week",
    "slot_number",
)


def _to_response(b: ClassBooking) -> BookingResponse:
    return BookingResponse(
        id=b.id,
        semester_id=b.semester_id,
        course_id=b.course_id,
        teacher_id=b.teacher_id,
        assignment_id=b.assignment_id,
        year=b.year,
        section=b.section,
        day_of_week=b.day_of_week,
        slot_number=b.slot_number,
        start_time=b.start_time,
        end_time=b.end_time,
        room=b.room,
        booked_at=b.booked_at,
        teacher=UserInfo.model_validate(b.teacher) if b.teacher else None,
        course=CourseSummary.model_validate(b.course) if b.course else None,
    )


def _booking_query():
    return select(ClassBooking).options(
        selectinload(ClassBooking.teacher),
        selectinload(ClassBooking.course),
    )


def _validate(payload: BookingCreate) -> None:
    missing = []
    for name in _REQUIRED:
        value = getattr(payload, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    if missing:
        raise ValidationServiceError(f"Missing required fields: {', '.join(missing)}")
    for name, (lo, hi) in (("year", YEAR_RANGE), ("day_of_week", DAY_RANGE), ("slot_number", SLOT_RANGE)):
        value = getattr(payload, name)
        if not lo <= value <= hi:
            raise ValidationServiceError(f"{name} must be between {lo} and {hi}")


async def _find_conflict(
    db: AsyncSession,
    semester_id: UUID,
    teacher_id: UUID,
    year: int,
    section: str,
    day_of_week: int,
    slot_number: int,
) -> Optional[str]:
    """Conflict message for the first occupied dimension, or None if the slot is free."""
    slot_taken = (
        await db.execute(
            select(ClassBooking.id).where(
                ClassBooking.semester_id == semester_id,
                ClassBooking.year == year,
                ClassBooking.section == section,
                ClassBooking.day_of_week == day_of_week,
                ClassBooking.slot_number == slot_number,
            ).limit(1)
        )
    ).scalar_one_or_none()
    if slot_taken:
        return SLOT_CONFLICT_MESSAGE

    teacher_busy = (
        await db.execute(
            select(ClassBooking.id).where(
                ClassBooking.semester_id == semester_id,
                ClassBooking.teacher_id == teacher_id,
                ClassBooking.day_of_week == day_of_week,
                ClassBooking.slot_number == slot_number,
            ).limit(1)
        )
    ).scalar_one_or_none()
    if teacher_busy:
        return TEACHER_CONFLICT_MESSAGE
    return None


def _sqlite_unique_failure(columns) -> str:
    return "UNIQUE constraint failed: " + ", ".join(f"{ClassBooking.__tablename__}.{c}" for c in columns)


_UNIQUE_VIOLATIONS = (
    (TEACHER_SLOT_CONSTRAINT, _sqlite_unique_failure(TEACHER_SLOT_COLUMNS), TEACHER_CONFLICT_MESSAGE),
    (SECTION_SLOT_CONSTRAINT, _sqlite_unique_failure(SECTION_SLOT_COLUMNS), SLOT_CONFLICT_MESSAGE),
)


def _conflict_from_integrity_error(e: IntegrityError) -> Optional[str]:
    """Map a unique violation to its conflict message by constraint name (Postgres) or column list (SQLite)."""
    text = str(e.orig)
    for constraint_name, sqlite_text, message in _UNIQUE_VIOLATIONS:
        if f'"{constraint_name}"' in text or sqlite_text in text:
            return message
    return None


def _slot_times(semester: Semester, slot_number: int):
    for ts in semester.time_slots or []:
        if ts.get("slot_number") == slot_number:
            return ts.get("start_time", ""), ts.get("end_time", "")
    return "", ""


async def create_booking(
    db: AsyncSession,
    payload: BookingCreate,
    performed_by: Optional[UUID] = None,
    performed_by_role: Optional[str] = None,
) -> BookingResponse:
    _validate(payload)
    section = payload.section.strip()

    assignment = await db.get(CourseAssignment, payload.assignment_id)
    if not assignment:
        raise NotFoundServiceError("Course assignment not found")
    if (
        assignment.teacher_id != payload.teacher_id
        or assignment.course_id != payload.course_id
        or assignment.semester_id != payload.semester_id
    ):
        raise ValidationServiceError("teacher_id, course_id and semester_id must match the course assignment")
    if payload.year != assignment.year:
        raise ValidationServiceError(f"year must match the course assignment (year {assignment.year})")
    if assignment.section and section != assignment.section:
        raise ValidationServiceError(f"section must match the course assignment (section {assignment.section})")
    if settings.require_approved_outline_for_booking and assignment.outline_status != OutlineStatus.APPROVED.value:
        raise ValidationServiceError("The course outline must be approved before booking class slots")

    semester = await db.get(Semester, payload.semester_id)
    if not semester:
        raise NotFoundServiceError("Semester not found")

    default_start, default_end = _slot_times(semester, payload.slot_number)
    start_time = payload.start_time or default_start
    end_time = payload.end_time or default_end
    # HH:MM strings are zero-padded, so string order is time order
    if start_time and end_time and end_time <= start_time:
        raise ValidationServiceError("end_time must be after start_time")

    key = dict(
        semester_id=payload.semester_id,
        teacher_id=payload.teacher_id,
        year=payload.year,
        section=section,
        day_of_week=payload.day_of_week,
        slot_number=payload.slot_number,
    )
    conflict = await _find_conflict(db, **key)
    if conflict:
        logger.info("Booking refused (%s): %s", conflict, key)
        raise ConflictServiceError(conflict)

    booking = ClassBooking(
        course_id=payload.course_id,
        assignment_id=payload.assignment_id,
        start_time=start_time,
        end_time=end_time,
        room=(payload.room or "").strip(),
        **key,
    )
    try:
        db.add(booking)
        await db.flush()
        await log_audit(
            db, ENTITY_BOOKING, booking.id, "BOOKED",
            performed_by=performed_by,
            performed_by_role=performed_by_role,
            remarks=f"Year {booking.year}{booking.section}, day {booking.day_of_week}, slot {booking.slot_number}",
        )
        course = await db.get(Course, payload.course_id)
        notify(
            db,
            payload.teacher_id,
            NotificationType.SLOT_BOOKED,
            "Class slot booked",
            f"{course.course_code if course else 'Class'} booked for year {booking.year} section {section}, "
            f"day {booking.day_of_week} slot {booking.slot_number}.",
            link="/teacher/schedule",
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        message = _conflict_from_integrity_error(e) or await _find_conflict(db, **key)
        if message is None:
            raise
        logger.warning("Booking refused at insert (%s): %s", message, key)
        raise ConflictServiceError(message) from e

    logger.info("Booked %s for teacher %s", booking.id, booking.teacher_id)
    return await get_booking(db, booking.id)


async def get_booking(db: AsyncSession, booking_id: UUID) -> Optional[BookingResponse]:
    result = await db.execute(
        _booking_query()
        .where(ClassBooking.id == booking_id)
        .execution_options(populate_existing=True)
    )
    obj = result.scalar_one_or_none()
    return _to_response(obj) if obj else None


async def list_bookings(
    db: AsyncSession,
    semester_id: Optional[UUID] = None,
    year: Optional[int] = None,
    section: Optional[str] = None,
    teacher_id: Optional[UUID] = None,
    day_of_week: Optional[int] = None,
) -> List[BookingResponse]:
    stmt = _booking_query()
    if semester_id is not None:
        stmt = stmt.where(ClassBooking.semester_id == semester_id)
    if year is not None:
        stmt = stmt.where(ClassBooking.year == year)
    if section is not None:
        section = section.strip()
        stmt = stmt.where(ClassBooking.section == section)
    if teacher_id is not None:
        stmt = stmt.where(ClassBooking.teacher_id == teacher_id)
    if day_of_week is not None:
        stmt = stmt.where(ClassBooking.day_of_week == day_of_week)
    stmt = stmt.order_by(ClassBooking.day_of_week, ClassBooking.slot_number)
    result = await db.execute(stmt)
    return [_to_response(b) for b in result.scalars().all()]


async def delete_booking(
    db: AsyncSession,
    booking_id: UUID,
    performed_by: Optional[UUID] = None,
    performed_by_role: Optional[str] = None,
) -> None:
    """Remove a booking, freeing its slot. Non-admins may only remove their own bookings."""
    obj = await db.get(ClassBooking, booking_id)
    if not obj:
        raise NotFoundServiceError("Booking not found")
    if performed_by_role not in (None, UserRole.ADMIN.value) and obj.teacher_id != performed_by:
        raise AuthorizationServiceError("You can only delete your own bookings")
    await log_audit(
        db, ENTITY_BOOKING, obj.id, "DELETED",
        performed_by=performed_by,
        performed_by_role=performed_by_role,
        remarks=f"Year {obj.year}{obj.section}, day {obj.day_of_week}, slot {obj.slot_number}",
    )
    await db.delete(obj)
    await db.commit()
    logger.info("Booking %s deleted", booking_id)
