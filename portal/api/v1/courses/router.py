from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.auth.rbac import require_admin
from portal.core.exceptions import ServiceError
from portal.db.session import get_db

from .schemas import CourseCreate, CourseResponse
from . import service

router = APIRouter(prefix="/api/v1/courses", tags=["courses"])


@router.post(
    "",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_course(
    payload: CourseCreate,
    db: AsyncSession = Depends(get_db),
):
    try:
        return await service.create_course(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[CourseResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_courses(
    year: Optional[int] = Query(None, ge=1, le=4),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_courses(db, year=year)
