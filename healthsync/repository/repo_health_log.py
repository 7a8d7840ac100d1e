from datetime import date
from typing import List, Optional
from uuid import UUID
from fastapi import Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session, Query

from healthsync.core.policy import Principal
from healthsync.db.base import get_db
from healthsync.models.model_health_log import HealthLog
from healthsync.repository.repo_base import save
from healthsync.repository.repo_pairing import PairingRepository


class HealthLogRepository:
    def __init__(self, db_session: Session = Depends(get_db)):
        self.db = db_session

    def create(self, health_log: HealthLog) -> HealthLog:
        return save(self.db, health_log)

    def visible_to(self, principal: Principal) -> Query:
        """Rows the principal may read: their own, plus paired patients' rows for doctors."""
        predicate = HealthLog.user_id == principal.id
        if principal.is_doctor:
            predicate = or_(predicate, HealthLog.user_id.in_(PairingRepository.linked_patient_ids(principal.id)))
        return self.db.query(HealthLog).filter(predicate)

    def get_history(self, principal: Principal, patient_id: UUID, limit: Optional[int] = None,
                    start_date: Optional[date] = None, end_date: Optional[date] = None) -> List[HealthLog]:
        query = self.visible_to(principal).filter(HealthLog.user_id == patient_id)
        if start_date:
            query = query.filter(HealthLog.date >= start_date)
        if end_date:
            query = query.filter(HealthLog.date <= end_date)
        query = query.order_by(HealthLog.date.desc(), HealthLog.created_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()
