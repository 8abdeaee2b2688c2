import logging
from datetime import datetime, timezone

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.models import User
from portal.auth.schemas import LoginRequest, LoginResponse, UserCreate, UserInfo
from portal.auth.security import create_access_token, hash_password, verify_password
from portal.core.exceptions import ConflictServiceError, ServiceError

logger = logging.getLogger(__name__)


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    result = await db.execute(select(User).where(User.email == payload.email))
    user = result.scalar_one_or_none()
    if not user or not verify_password(payload.password, user.password_hash):
        raise ServiceError("Invalid email or password", status.HTTP_401_UNAUTHORIZED)
    if user.status != "ACTIVE":
        raise ServiceError("User account is not active", status.HTTP_403_FORBIDDEN)

    token = create_access_token(subject={"sub": str(user.id), "role": user.role})
    logger.info("User %s logged in as %s", user.id, user.role)
    return LoginResponse(
        access_token=token,
        user=UserInfo.model_validate(user),
        issued_at=datetime.now(timezone.utc),
    )


async def create_user(db: AsyncSession, payload: UserCreate) -> UserInfo:
    existing = (
        await db.execute(select(User.id).where(User.email == payload.email))
    ).scalar_one_or_none()
    if existing:
        raise ConflictServiceError("Email is already in use")

    user = User(
        name=payload.name.strip(),
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=payload.role.value,
        employee_id=payload.employee_id.strip() if payload.employee_id else None,
        status="ACTIVE",
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictServiceError("Email or employee ID is already in use") from e
    await db.refresh(user)
    return UserInfo.model_validate(user)
