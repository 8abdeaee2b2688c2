"""In-app notifications. Producers add rows inside their own transaction; the caller commits."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.enums import NotificationType
from portal.core.exceptions import NotFoundServiceError
from portal.core.models import Notification

from .schemas import MarkReadResponse, NotificationListResponse, NotificationResponse

logger = logging.getLogger(__name__)


def notify(
    db: AsyncSession,
    user_id: Optional[UUID],
    type: NotificationType,
    title: str,
    message: str,
    link: Optional[str] = None,
) -> None:
    """Queue a notification on the session. No-op when there is no recipient."""
    if user_id is None:
        logger.debug("Skipping %s notification: no recipient", type.value)
        return
    db.add(
        Notification(
            user_id=user_id,
            type=type.value,
            title=title,
            message=message,
            link=link,
            is_read=False,
        )
    )


async def list_notifications(
    db: AsyncSession,
    user_id: UUID,
    unread_only: bool = False,
    limit: int = 20,
) -> NotificationListResponse:
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc()).limit(limit)
    rows = (await db.execute(stmt)).scalars().all()

    unread_count = (
        await db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        )
    ).scalar_one()
    return NotificationListResponse(
        data=[NotificationResponse.model_validate(n) for n in rows],
        unread_count=unread_count,
    )


async def mark_read(db: AsyncSession, user_id: UUID, notification_id: UUID) -> MarkReadResponse:
    n = await db.get(Notification, notification_id)
    if not n or n.user_id != user_id:
        raise NotFoundServiceError("Notification not found")
    n.is_read = True
    await db.commit()
    return MarkReadResponse(updated=1)


async def mark_all_read(db: AsyncSession, user_id: UUID) -> MarkReadResponse:
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    await db.commit()
    return MarkReadResponse(updated=result.rowcount or 0)
