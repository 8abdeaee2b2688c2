from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.auth.schemas import CurrentUser
from portal.core.enums import UserRole
from portal.core.exceptions import ServiceError
from portal.db.session import get_db

from .schemas import BookingCreate, BookingDeleteResponse, BookingResponse
from . import service

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Book a weekly slot. Teachers book for themselves; admin may book for anyone."""
    if current_user.role == UserRole.STUDENT.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    if (
        current_user.role != UserRole.ADMIN.value
        and payload.teacher_id is not None
        and payload.teacher_id != current_user.id
    ):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only book slots for yourself")
    try:
        return await service.create_booking(
            db, payload, performed_by=current_user.id, performed_by_role=current_user.role
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[BookingResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_bookings(
    semester_id: Optional[UUID] = Query(None),
    year: Optional[int] = Query(None, ge=1, le=4),
    section: Optional[str] = Query(None),
    teacher_id: Optional[UUID] = Query(None),
    day_of_week: Optional[int] = Query(None, ge=1, le=6),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_bookings(
        db,
        semester_id=semester_id,
        year=year,
        section=section,
        teacher_id=teacher_id,
        day_of_week=day_of_week,
    )


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    dependencies=[Depends(get_current_user)],
)
async def get_booking(
    booking_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    obj = await service.get_booking(db, booking_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return obj


@router.delete(
    "/{booking_id}",
    response_model=BookingDeleteResponse,
)
async def delete_booking(
    booking_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        await service.delete_booking(
            db, booking_id, performed_by=current_user.id, performed_by_role=current_user.role
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return BookingDeleteResponse()
