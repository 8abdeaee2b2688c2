from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.auth.rbac import require_admin
from portal.core.exceptions import ServiceError
from portal.db.session import get_db

from .schemas import SemesterAdvisorSet, SemesterCreate, SemesterResponse, SemesterUpdate
from . import service

router = APIRouter(prefix="/api/v1/semesters", tags=["semesters"])


@router.post(
    "",
    response_model=SemesterResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_semester(
    payload: SemesterCreate,
    db: AsyncSession = Depends(get_db),
):
    try:
        return await service.create_semester(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[SemesterResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_semesters(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_semesters(db, status=status_filter)


@router.get(
    "/{semester_id}",
    response_model=SemesterResponse,
    dependencies=[Depends(get_current_user)],
)
async def get_semester(
    semester_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    obj = await service.get_semester(db, semester_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Semester not found")
    return obj


@router.patch(
    "/{semester_id}",
    response_model=SemesterResponse,
    dependencies=[Depends(require_admin)],
)
async def update_semester(
    semester_id: UUID,
    payload: SemesterUpdate,
    db: AsyncSession = Depends(get_db),
):
    try:
        return await service.update_semester(db, semester_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{semester_id}/class-advisors",
    response_model=SemesterResponse,
    dependencies=[Depends(require_admin)],
)
async def set_class_advisor(
    semester_id: UUID,
    payload: SemesterAdvisorSet,
    db: AsyncSession = Depends(get_db),
):
    try:
        return await service.set_class_advisor(db, semester_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
