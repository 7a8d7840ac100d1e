from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from healthsync.helpers.enums import CheckupStatus
from healthsync.schemas.sche_user import UserSummaryResponse


class CheckupCreateRequest(BaseModel):
    patient_id: UUID
    date: datetime
    purpose: str
    notes: Optional[str] = None


class CheckupUpdateRequest(BaseModel):
    date: Optional[datetime] = None
    purpose: Optional[str] = None
    notes: Optional[str] = None


class CheckupStatusRequest(BaseModel):
    status: CheckupStatus


class CheckupResponse(BaseModel):
    id: UUID
    doctor_id: UUID
    patient_id: UUID
    date: datetime
    purpose: str
    status: CheckupStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    doctor: Optional[UserSummaryResponse] = None
    patient: Optional[UserSummaryResponse] = None

    model_config = ConfigDict(from_attributes=True)
