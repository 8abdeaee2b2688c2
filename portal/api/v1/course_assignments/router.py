from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.auth.rbac import require_roles
from portal.auth.schemas import CurrentUser
from portal.core.enums import UserRole
from portal.core.exceptions import ServiceError
from portal.db.session import get_db

from .schemas import CourseAssignmentCreate, CourseAssignmentResponse
from . import service

router = APIRouter(prefix="/api/v1/course-assignments", tags=["course-assignments"])


@router.post(
    "",
    response_model=CourseAssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_assignment(
    payload: CourseAssignmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(UserRole.CLASS_ADVISOR)),
):
    try:
        return await service.create_assignment(db, payload, assigned_by=current_user.id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[CourseAssignmentResponse],
    dependencies=[Depends(get_current_user)],
)
async def list_assignments(
    semester_id: Optional[UUID] = Query(None),
    teacher_id: Optional[UUID] = Query(None),
    course_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_assignments(db, semester_id=semester_id, teacher_id=teacher_id, course_id=course_id)


@router.get(
    "/{assignment_id}",
    response_model=CourseAssignmentResponse,
    dependencies=[Depends(get_current_user)],
)
async def get_assignment(
    assignment_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    obj = await service.get_assignment(db, assignment_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course assignment not found")
    return obj
