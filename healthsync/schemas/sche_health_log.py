from datetime import date as date_type, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from healthsync.helpers.enums import AlertLevel, HealthMetric


class HealthLogCreateRequest(BaseModel):
    date: Optional[date_type] = None
    steps: int = Field(0, ge=0)
    water_ml: int = Field(0, ge=0)
    heart_rate: int = Field(0, ge=0)
    sleep_hours: float = Field(0, ge=0)
    notes: Optional[str] = None

    @field_validator('sleep_hours')
    @classmethod
    def round_sleep_hours(cls, value: float) -> float:
        # numeric(3,1): the bound applies to the stored, rounded value
        value = round(value, 1)
        if value >= 100:
            raise ValueError('sleep_hours must be less than 100')
        return value


class HealthLogResponse(BaseModel):
    id: UUID
    user_id: UUID
    date: date_type
    steps: int
    water_ml: int
    heart_rate: int
    sleep_hours: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class HealthAlert(BaseModel):
    type: AlertLevel
    message: str


class HealthAverages(BaseModel):
    steps: int
    water_ml: int
    heart_rate: int
    sleep_hours: float


class HealthSummaryResponse(BaseModel):
    patient_id: UUID
    latest: Optional[HealthLogResponse] = None
    averages: Optional[HealthAverages] = None
    alerts: List[HealthAlert] = []
    entries: int = 0


class HealthStatsResponse(BaseModel):
    metric: HealthMetric
    count: int
    average: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    trend: Optional[str] = None
