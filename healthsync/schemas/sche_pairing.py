from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from healthsync.schemas.sche_user import UserSummaryResponse


class PairingLinkResponse(BaseModel):
    id: UUID
    doctor_id: UUID
    patient_id: UUID
    created_at: Optional[datetime] = None
    doctor: Optional[UserSummaryResponse] = None
    patient: Optional[UserSummaryResponse] = None

    model_config = ConfigDict(from_attributes=True)
