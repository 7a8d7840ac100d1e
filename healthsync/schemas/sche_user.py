from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from healthsync.helpers.enums import UserRole


class UserSummaryResponse(BaseModel):
    id: UUID
    full_name: str
    email: EmailStr
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class UserItemResponse(UserSummaryResponse):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserRegisterRequest(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    role: UserRole = UserRole.PATIENT


class LoginRequest(BaseModel):
    username: EmailStr
    password: str


class UserUpdateMeRequest(BaseModel):
    # role is deliberately absent: it cannot change after sign-up
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=72)
