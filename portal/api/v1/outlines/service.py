"""Outline submit, list and review with the approval chain, assignment mirror and audit."""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from portal.auth.schemas import UserInfo
from portal.core.enums import IN_REVIEW_STATUSES, NotificationType, OutlineStatus, ReviewDecision, UserRole
from portal.core.exceptions import (
    AuthorizationServiceError,
    ConflictServiceError,
    NotFoundServiceError,
    ServiceError,
    ValidationServiceError,
)
from portal.core.models import Course, CourseAssignment, CourseOutline, OutlineReview, User

from portal.api.v1.audit.service import log_audit
from portal.api.v1.courses.schemas import CourseSummary
from portal.api.v1.notifications.resolver import resolve_reviewer
from portal.api.v1.notifications.service import notify

from .review_chain import INITIAL_STEP, next_step
from .schemas import OutlineCreate, OutlineResponse, OutlineReviewResponse, OutlineReviewSubmit, SemesterSummary

logger = logging.getLogger(__name__)

ENTITY_OUTLINE = "COURSE_OUTLINE"

STALE_OUTLINE_MESSAGE = "This outline was updated by another review. Reload it and try again."

_OUTLINE_REQUIRED = ("assignment_id", "teacher_id", "course_id", "semester_id", "file_url", "file_name")
_REVIEW_REQUIRED = ("reviewer_id", "reviewer_role", "decision")


def _missing_fields(payload, fields) -> List[str]:
    missing = []
    for name in fields:
        value = getattr(payload, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def _to_response(o: CourseOutline, with_reviews: bool = False) -> OutlineResponse:
    resp = OutlineResponse.model_validate(
        {
            "id": o.id,
            "assignment_id": o.assignment_id,
            "teacher_id": o.teacher_id,
            "course_id": o.course_id,
            "semester_id": o.semester_id,
            "file_url": o.file_url,
            "file_name": o.file_name,
            "file_type": o.file_type,
            "version": o.version,
            "status": o.status,
            "current_reviewer_role": o.current_reviewer_role,
            "revision": o.revision,
            "submitted_at": o.submitted_at,
            "approved_at": o.approved_at,
            "rejected_at": o.rejected_at,
            "rejection_comments": o.rejection_comments,
            "created_at": o.created_at,
            "updated_at": o.updated_at,
            "teacher": UserInfo.model_validate(o.teacher) if o.teacher else None,
            "course": CourseSummary.model_validate(o.course) if o.course else None,
            "semester": SemesterSummary.model_validate(o.semester) if o.semester else None,
        }
    )
    if with_reviews:
        resp.reviews = [OutlineReviewResponse.model_validate(r) for r in o.reviews]
    return resp


def _outline_query():
    return select(CourseOutline).options(
        selectinload(CourseOutline.teacher),
        selectinload(CourseOutline.course),
        selectinload(CourseOutline.semester),
    )


async def get_outline(db: AsyncSession, outline_id: UUID) -> Optional[OutlineResponse]:
    """Outline with resolved teacher/course/semester and its review history (oldest first)."""
    result = await db.execute(
        _outline_query()
        .options(selectinload(CourseOutline.reviews))
        .where(CourseOutline.id == outline_id)
        .execution_options(populate_existing=True)
    )
    obj = result.scalar_one_or_none()
    return _to_response(obj, with_reviews=True) if obj else None


async def list_outlines(
    db: AsyncSession,
    semester_id: Optional[UUID] = None,
    teacher_id: Optional[UUID] = None,
    status: Optional[str] = None,
    current_reviewer_role: Optional[str] = None,
    assignment_id: Optional[UUID] = None,
) -> List[OutlineResponse]:
    stmt = _outline_query()
    if semester_id is not None:
        stmt = stmt.where(CourseOutline.semester_id == semester_id)
    if teacher_id is not None:
        stmt = stmt.where(CourseOutline.teacher_id == teacher_id)
    if status is not None:
        stmt = stmt.where(CourseOutline.status == status)
    if current_reviewer_role is not None:
        stmt = stmt.where(CourseOutline.current_reviewer_role == current_reviewer_role)
    if assignment_id is not None:
        stmt = stmt.where(CourseOutline.assignment_id == assignment_id)
    stmt = stmt.order_by(CourseOutline.created_at.desc(), CourseOutline.version.desc())
    result = await db.execute(stmt)
    return [_to_response(o) for o in result.scalars().all()]


async def create_outline(
    db: AsyncSession,
    payload: OutlineCreate,
    submitted_by_role: Optional[str] = None,
) -> OutlineResponse:
    """
    Submit a new outline version for an assignment.
    Version = previous max + 1. Earlier versions still in review are superseded.
    """
    missing = _missing_fields(payload, _OUTLINE_REQUIRED)
    if missing:
        raise ValidationServiceError(f"Missing required fields: {', '.join(missing)}")

    assignment = await db.get(CourseAssignment, payload.assignment_id)
    if not assignment:
        raise NotFoundServiceError("Course assignment not found")
    if (
        assignment.teacher_id != payload.teacher_id
        or assignment.course_id != payload.course_id
        or assignment.semester_id != payload.semester_id
    ):
        raise ValidationServiceError("teacher_id, course_id and semester_id must match the course assignment")

    max_version = (
        await db.execute(
            select(func.max(CourseOutline.version)).where(CourseOutline.assignment_id == assignment.id)
        )
    ).scalar_one_or_none()
    version = (max_version or 0) + 1

    try:
        pending = (
            await db.execute(
                select(CourseOutline).where(
                    CourseOutline.assignment_id == assignment.id,
                    CourseOutline.status.in_([s.value for s in IN_REVIEW_STATUSES]),
                )
            )
        ).scalars().all()
        for old in pending:
            await log_audit(
                db, ENTITY_OUTLINE, old.id, "SUPERSEDED",
                from_status=old.status,
                to_status=OutlineStatus.SUPERSEDED,
                performed_by=payload.teacher_id,
                performed_by_role=submitted_by_role,
                remarks=f"Replaced by version {version}",
            )
            old.status = OutlineStatus.SUPERSEDED.value
            old.current_reviewer_role = None
            old.revision = old.revision + 1

        outline = CourseOutline(
            assignment_id=assignment.id,
            teacher_id=payload.teacher_id,
            course_id=payload.course_id,
            semester_id=payload.semester_id,
            file_url=payload.file_url.strip(),
            file_name=payload.file_name.strip(),
            file_type=payload.file_type.value,
            version=version,
            status=INITIAL_STEP.next_status.value,
            current_reviewer_role=INITIAL_STEP.next_role.value,
            revision=1,
        )
        db.add(outline)
        await db.flush()

        assignment.outline_status = outline.status
        await log_audit(
            db, ENTITY_OUTLINE, outline.id, "SUBMITTED",
            to_status=outline.status,
            performed_by=payload.teacher_id,
            performed_by_role=submitted_by_role,
            remarks=f"Version {version}",
        )
        course = await db.get(Course, payload.course_id)
        advisor_id = await resolve_reviewer(db, assignment.semester_id, outline.current_reviewer_role, assignment.year)
        notify(
            db,
            advisor_id,
            NotificationType.OUTLINE_SUBMITTED,
            "Course outline awaiting your review",
            f"Version {version} of the {course.course_code if course else 'course'} outline was submitted.",
            link=f"/outlines/{outline.id}",
        )
        await db.commit()
    except IntegrityError as e:
        # Unique (assignment_id, version): another submission won the race.
        await db.rollback()
        raise ConflictServiceError("Another outline version was submitted at the same time. Please retry.") from e

    logger.info("Outline %s submitted for assignment %s (version %d)", outline.id, assignment.id, version)
    return await get_outline(db, outline.id)


async def submit_review(
    db: AsyncSession,
    outline_id: UUID,
    payload: OutlineReviewSubmit,
) -> OutlineResponse:
    """
    Record one reviewer decision and advance the outline.

    The review row, the outline transition, the assignment mirror, audit and
    notifications commit together. The outline update is conditional on the
    revision and reviewer read here, so a concurrent duplicate decision updates
    nothing and is refused as stale.
    """
    missing = _missing_fields(payload, _REVIEW_REQUIRED)
    if missing:
        raise ValidationServiceError(f"Missing required fields: {', '.join(missing)}")
    try:
        decision = ReviewDecision(payload.decision)
    except ValueError:
        raise ValidationServiceError('decision must be "approved" or "rejected"')

    outline = await db.get(CourseOutline, outline_id, populate_existing=True)
    if not outline:
        raise NotFoundServiceError("Outline not found")

    reviewer_role = payload.reviewer_role
    reviewer = await db.get(User, payload.reviewer_id)
    if not reviewer:
        raise NotFoundServiceError("Reviewer not found")
    if reviewer.role not in (reviewer_role, UserRole.ADMIN.value):
        raise AuthorizationServiceError(f"Reviewer holds role {reviewer.role}, not {reviewer_role}")
    if outline.current_reviewer_role != reviewer_role:
        if outline.current_reviewer_role is None:
            raise AuthorizationServiceError(
                f"This outline is {outline.status} and is not awaiting review from {reviewer_role}"
            )
        raise AuthorizationServiceError(
            f"This outline is currently awaiting review from {outline.current_reviewer_role}, not {reviewer_role}"
        )
    if payload.expected_revision is not None and payload.expected_revision != outline.revision:
        raise ConflictServiceError(STALE_OUTLINE_MESSAGE)

    step = next_step(reviewer_role, decision)
    from_status = outline.status
    seen_revision = outline.revision
    comments = (payload.comments or "").strip()
    now = datetime.utcnow()

    values = {
        "status": step.next_status.value,
        "current_reviewer_role": step.next_role.value if step.next_role else None,
        "revision": seen_revision + 1,
        "updated_at": now,
    }
    if step.next_status == OutlineStatus.REJECTED:
        values["rejected_at"] = now
        values["rejection_comments"] = comments
    elif step.next_status == OutlineStatus.APPROVED:
        values["approved_at"] = now

    try:
        db.add(
            OutlineReview(
                outline_id=outline.id,
                reviewer_id=payload.reviewer_id,
                reviewer_role=reviewer_role,
                decision=decision.value,
                comments=comments,
                reviewed_at=now,
            )
        )
        result = await db.execute(
            update(CourseOutline)
            .where(
                CourseOutline.id == outline.id,
                CourseOutline.revision == seen_revision,
                CourseOutline.current_reviewer_role == reviewer_role,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictServiceError(STALE_OUTLINE_MESSAGE)

        await db.execute(
            update(CourseAssignment)
            .where(CourseAssignment.id == outline.assignment_id)
            .values(outline_status=step.next_status.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        await log_audit(
            db, ENTITY_OUTLINE, outline.id, decision.value.upper(),
            from_status=from_status,
            to_status=step.next_status,
            performed_by=payload.reviewer_id,
            performed_by_role=reviewer_role,
            remarks=comments or None,
        )
        await _notify_review_outcome(db, outline, step.next_status, step.next_role, comments)
        await db.commit()
    except ServiceError:
        await db.rollback()
        raise
    except IntegrityError as e:
        await db.rollback()
        raise ValidationServiceError("The review references a user or outline that no longer exists") from e

    logger.info(
        "Outline %s %s by %s: %s -> %s",
        outline.id, decision.value, reviewer_role, from_status, step.next_status.value,
    )
    return await get_outline(db, outline.id)


async def _notify_review_outcome(
    db: AsyncSession,
    outline: CourseOutline,
    new_status: OutlineStatus,
    next_role,
    comments: str,
) -> None:
    course = await db.get(Course, outline.course_id)
    label = course.course_code if course else "course"
    link = f"/outlines/{outline.id}"
    if new_status == OutlineStatus.REJECTED:
        notify(
            db,
            outline.teacher_id,
            NotificationType.OUTLINE_REJECTED,
            "Course outline rejected",
            f"Your {label} outline (version {outline.version}) was rejected."
            + (f" Comments: {comments}" if comments else ""),
            link=link,
        )
        return
    if new_status == OutlineStatus.APPROVED:
        notify(
            db,
            outline.teacher_id,
            NotificationType.OUTLINE_APPROVED,
            "Course outline approved",
            f"Your {label} outline (version {outline.version}) has been approved.",
            link=link,
        )
        return
    assignment = await db.get(CourseAssignment, outline.assignment_id)
    reviewer_id = await resolve_reviewer(
        db, outline.semester_id, next_role.value if next_role else None, assignment.year if assignment else None
    )
    notify(
        db,
        reviewer_id,
        NotificationType.REVIEW_PENDING,
        "Course outline awaiting your review",
        f"The {label} outline (version {outline.version}) is ready for your review.",
        link=link,
    )


async def list_reviews(db: AsyncSession, outline_id: UUID) -> List[OutlineReviewResponse]:
    if not await db.get(CourseOutline, outline_id):
        raise NotFoundServiceError("Outline not found")
    result = await db.execute(
        select(OutlineReview)
        .where(OutlineReview.outline_id == outline_id)
        .order_by(OutlineReview.reviewed_at)
    )
    return [OutlineReviewResponse.model_validate(r) for r in result.scalars().all()]
