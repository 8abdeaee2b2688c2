from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.auth.schemas import CurrentUser
from portal.core.exceptions import ServiceError
from portal.db.session import get_db

from .schemas import MarkReadResponse, NotificationListResponse
from . import service

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_my_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> NotificationListResponse:
    """Latest notifications for the current user, with the total unread count."""
    return await service.list_notifications(db, current_user.id, unread_only=unread_only, limit=limit)


@router.post("/read-all", response_model=MarkReadResponse)
async def mark_all_read(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> MarkReadResponse:
    return await service.mark_all_read(db, current_user.id)


@router.post("/{notification_id}/read", response_model=MarkReadResponse)
async def mark_read(
    notification_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> MarkReadResponse:
    try:
        return await service.mark_read(db, current_user.id, notification_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
