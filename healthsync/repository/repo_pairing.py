"""
Repository for the doctor_patient_links table.

Every pairing question in the application is answered here: the policy engine
calls ``is_linked`` and the health-log store filters with ``linked_patient_ids``.
"""
import logging
from typing import List, Optional
from uuid import UUID
from fastapi import Depends
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from healthsync.core.policy import Principal
from healthsync.db.base import get_db
from healthsync.helpers.exception_handler import StoreException
from healthsync.models.model_doctor_patient_link import DoctorPatientLink
from healthsync.models.model_user import User
from healthsync.repository.repo_base import save

logger = logging.getLogger(__name__)


class PairingRepository:
    def __init__(self, db_session: Session = Depends(get_db)):
        self.db = db_session

    def get(self, doctor_id: UUID, patient_id: UUID) -> Optional[DoctorPatientLink]:
        return self.db.query(DoctorPatientLink).filter(
            DoctorPatientLink.doctor_id == doctor_id,
            DoctorPatientLink.patient_id == patient_id
        ).first()

    def link(self, doctor_id: UUID, patient_id: UUID) -> DoctorPatientLink:
        """
        Insert a link, relying on the unique (doctor_id, patient_id) constraint.

        A duplicate is rolled back and the existing row returned.
        """
        link = DoctorPatientLink(doctor_id=doctor_id, patient_id=patient_id)
        self.db.add(link)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            existing = self.get(doctor_id, patient_id)
            if existing is None:
                logger.error(f"Could not link doctor={doctor_id} to patient={patient_id}")
                raise StoreException()
            logger.info(f"Link already present: doctor={doctor_id}, patient={patient_id}")
            return existing
        return save(self.db, link, add=False)

    def is_linked(self, doctor_id: UUID, patient_id: UUID) -> bool:
        return self.db.query(DoctorPatientLink.id).filter(
            DoctorPatientLink.doctor_id == doctor_id,
            DoctorPatientLink.patient_id == patient_id
        ).first() is not None

    @staticmethod
    def linked_patient_ids(doctor_id: UUID):
        return select(DoctorPatientLink.patient_id).where(DoctorPatientLink.doctor_id == doctor_id)

    def get_patients_of(self, doctor_id: UUID) -> List[User]:
        return self.db.query(User).join(
            DoctorPatientLink, DoctorPatientLink.patient_id == User.id
        ).filter(
            DoctorPatientLink.doctor_id == doctor_id
        ).order_by(User.full_name.asc()).all()

    def get_doctors_of(self, patient_id: UUID) -> List[User]:
        return self.db.query(User).join(
            DoctorPatientLink, DoctorPatientLink.doctor_id == User.id
        ).filter(
            DoctorPatientLink.patient_id == patient_id
        ).order_by(DoctorPatientLink.created_at.asc()).all()

    def get_visible_links(self, principal: Principal) -> List[DoctorPatientLink]:
        return self.db.query(DoctorPatientLink).filter(
            or_(DoctorPatientLink.doctor_id == principal.id, DoctorPatientLink.patient_id == principal.id)
        ).order_by(DoctorPatientLink.created_at.asc()).all()
