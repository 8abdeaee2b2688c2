"""Append-only trail of outline and booking state changes."""

import logging
from enum import Enum
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.models import AuditLog

from .schemas import AuditLogResponse

logger = logging.getLogger(__name__)

Status = Union[str, Enum, None]


def _status_value(status: Status) -> Optional[str]:
    return status.value if isinstance(status, Enum) else status


async def log_audit(
    db: AsyncSession,
    entity_type: str,
    entity_id: UUID,
    action: str,
    *,
    from_status: Status = None,
    to_status: Status = None,
    performed_by: Optional[UUID] = None,
    performed_by_role: Optional[str] = None,
    remarks: Optional[str] = None,
) -> AuditLog:
    """Stage one entry on the caller's session; it is written with the caller's commit."""
    entry = AuditLog(
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        from_status=_status_value(from_status),
        to_status=_status_value(to_status),
        performed_by=performed_by,
        performed_by_role=performed_by_role,
        remarks=remarks,
    )
    db.add(entry)
    logger.debug("Audit %s %s %s: %s -> %s", entity_type, entity_id, action, entry.from_status, entry.to_status)
    return entry


async def list_audit_logs(
    db: AsyncSession,
    entity_type: Optional[str] = None,
    entity_id: Optional[UUID] = None,
    limit: int = 100,
) -> List[AuditLogResponse]:
    """Newest first."""
    stmt = select(AuditLog)
    if entity_type is not None:
        stmt = stmt.where(AuditLog.entity_type == entity_type)
    if entity_id is not None:
        stmt = stmt.where(AuditLog.entity_id == entity_id)
    stmt = stmt.order_by(AuditLog.timestamp.desc()).limit(limit)
    result = await db.execute(stmt)
    return [AuditLogResponse.model_validate(a) for a in result.scalars().all()]
