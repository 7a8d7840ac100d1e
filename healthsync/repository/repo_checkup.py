from typing import List, Optional
from uuid import UUID
from fastapi import Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session, Query

from healthsync.core.policy import Principal
from healthsync.db.base import get_db
from healthsync.helpers.enums import CheckupStatus
from healthsync.models.model_checkup import Checkup
from healthsync.repository.repo_base import save


class CheckupRepository:
    def __init__(self, db_session: Session = Depends(get_db)):
        self.db = db_session

    def create(self, checkup: Checkup) -> Checkup:
        return save(self.db, checkup)

    def update(self, checkup: Checkup) -> Checkup:
        return save(self.db, checkup, add=False)

    def visible_to(self, principal: Principal) -> Query:
        predicate = Checkup.doctor_id == principal.id
        if principal.is_patient:
            predicate = or_(predicate, Checkup.patient_id == principal.id)
        return self.db.query(Checkup).filter(predicate)

    def get_visible(self, principal: Principal, checkup_id: UUID) -> Optional[Checkup]:
        return self.visible_to(principal).filter(Checkup.id == checkup_id).first()

    def list_visible(self, principal: Principal, status: Optional[CheckupStatus] = None) -> List[Checkup]:
        query = self.visible_to(principal)
        if status is not None:
            query = query.filter(Checkup.status == status.value)
        return query.order_by(Checkup.date.asc()).all()
