from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from portal.core.enums import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserInfo(BaseModel):
    id: UUID
    name: str
    email: EmailStr
    role: str
    employee_id: Optional[str] = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserInfo
    issued_at: datetime


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole
    employee_id: Optional[str] = Field(None, max_length=50)


class CurrentUser(BaseModel):
    """Lightweight representation of the authenticated user for role checks."""

    id: UUID
    name: str
    role: str
