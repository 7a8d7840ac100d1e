import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import Depends

from healthsync.core.config import settings
from healthsync.core.policy import AccessPolicy, Principal, cached_lookup
from healthsync.helpers.enums import Operation, ResourceType, HealthMetric
from healthsync.helpers.exception_handler import ForbiddenException
from healthsync.helpers.health_metrics import health_alerts, average_metrics, metric_stats, matches_search
from healthsync.models.model_health_log import HealthLog
from healthsync.repository.repo_health_log import HealthLogRepository
from healthsync.repository.repo_pairing import PairingRepository
from healthsync.schemas.sche_health_log import (
    HealthLogCreateRequest, HealthLogResponse, HealthSummaryResponse, HealthStatsResponse
)

logger = logging.getLogger(__name__)


class HealthLogService:
    def __init__(self, health_log_repo: HealthLogRepository = Depends(), pairing_repo: PairingRepository = Depends()):
        self.health_log_repo = health_log_repo
        self.policy = AccessPolicy(is_paired=cached_lookup(pairing_repo.is_linked))

    def append(self, data: HealthLogCreateRequest, principal: Principal) -> HealthLogResponse:
        """Always a new row, even when the patient already logged the same day."""
        if not principal.is_patient:
            raise ForbiddenException('Only patients can log health data')

        health_log = HealthLog(
            user_id=principal.id,
            date=data.date or date.today(),
            steps=data.steps,
            water_ml=data.water_ml,
            heart_rate=data.heart_rate,
            sleep_hours=data.sleep_hours,
            notes=data.notes.strip() if data.notes and data.notes.strip() else None,
        )
        self.policy.authorize(principal, Operation.CREATE, ResourceType.HEALTH_LOG, health_log)
        created = self.health_log_repo.create(health_log)
        logger.info(f"Health log {created.id} appended for patient {principal.id}")
        return HealthLogResponse.model_validate(created)

    def history(self, patient_id: UUID, principal: Principal, limit: Optional[int] = None,
                start_date: Optional[date] = None, end_date: Optional[date] = None,
                query: Optional[str] = None) -> List[HealthLogResponse]:
        """Newest first. Patients nobody let the principal see come back empty, never as an error."""
        logs = self.health_log_repo.get_history(principal, patient_id, limit=limit,
                                                start_date=start_date, end_date=end_date)
        logs = self.policy.filter_readable(principal, ResourceType.HEALTH_LOG, logs)
        if query:
            logs = [log for log in logs if matches_search(log, query)]
        return [HealthLogResponse.model_validate(log) for log in logs]

    def summary(self, patient_id: UUID, principal: Principal) -> HealthSummaryResponse:
        logs = self.history(patient_id, principal, limit=settings.DASHBOARD_HISTORY_LIMIT)
        latest = logs[0] if logs else None
        return HealthSummaryResponse(
            patient_id=patient_id,
            latest=latest,
            averages=average_metrics(logs),
            alerts=health_alerts(latest),
            entries=len(logs),
        )

    def stats(self, patient_id: UUID, metric: HealthMetric, principal: Principal,
              start_date: Optional[date] = None, end_date: Optional[date] = None,
              query: Optional[str] = None) -> HealthStatsResponse:
        logs = self.history(patient_id, principal, start_date=start_date, end_date=end_date, query=query)
        return HealthStatsResponse(**metric_stats(logs, metric))
