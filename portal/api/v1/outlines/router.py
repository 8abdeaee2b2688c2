from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.auth.schemas import CurrentUser
from portal.core.enums import UserRole
from portal.core.exceptions import ServiceError
from portal.db.session import get_db

from .schemas import OutlineCreate, OutlineResponse, OutlineReviewResponse, OutlineReviewSubmit
from . import service

router = APIRouter(prefix="/api/v1/outlines", tags=["outlines"])


def _is_admin(user: CurrentUser) -> bool:
    return user.role == UserRole.ADMIN.value


@router.post(
    "",
    response_model=OutlineResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_outline(
    payload: OutlineCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Submit a new outline version. Teachers may only submit their own outlines."""
    if current_user.role == UserRole.STUDENT.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    if not _is_admin(current_user) and payload.teacher_id is not None and payload.teacher_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only submit your own outlines")
    try:
        return await service.create_outline(db, payload, submitted_by_role=current_user.role)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[OutlineResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_outlines(
    semester_id: Optional[UUID] = Query(None),
    teacher_id: Optional[UUID] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_reviewer_role: Optional[str] = Query(None),
    assignment_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_outlines(
        db,
        semester_id=semester_id,
        teacher_id=teacher_id,
        status=status_filter,
        current_reviewer_role=current_reviewer_role,
        assignment_id=assignment_id,
    )


@router.get(
    "/{outline_id}",
    response_model=OutlineResponse,
    dependencies=[Depends(get_current_user)],
)
async def get_outline(
    outline_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    obj = await service.get_outline(db, outline_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Outline not found")
    return obj


@router.get(
    "/{outline_id}/reviews",
    response_model=List[OutlineReviewResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_outline_reviews(
    outline_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    try:
        return await service.list_reviews(db, outline_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/{outline_id}/review",
    response_model=OutlineResponse,
)
async def review_outline(
    outline_id: UUID,
    payload: OutlineReviewSubmit,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Approve or reject the outline at its current stage. Reviewers act only as themselves."""
    if not _is_admin(current_user):
        if payload.reviewer_id is not None and payload.reviewer_id != current_user.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only review as yourself")
        if payload.reviewer_role is not None and payload.reviewer_role != current_user.role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Your role is {current_user.role}, not {payload.reviewer_role}",
            )
    try:
        return await service.submit_review(db, outline_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
