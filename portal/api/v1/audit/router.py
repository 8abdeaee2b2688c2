from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.rbac import require_admin
from portal.db.session import get_db

from .schemas import AuditLogResponse
from . import service

router = APIRouter(prefix="/api/v1/audit-logs", tags=["audit"])


@router.get(
    "",
    response_model=List[AuditLogResponse],
    dependencies=[Depends(require_admin)],
)
async def list_audit_logs(
    entity_type: Optional[str] = Query(None),
    entity_id: Optional[UUID] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_audit_logs(db, entity_type=entity_type, entity_id=entity_id, limit=limit)
