from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class MessageCreateRequest(BaseModel):
    receiver_id: UUID
    message: str
    # Defaults to the caller; any other value is rejected
    sender_id: Optional[UUID] = None


class MessageResponse(BaseModel):
    id: UUID
    sender_id: UUID
    receiver_id: UUID
    message: str
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)
