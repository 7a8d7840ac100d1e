import logging
from typing import List, Optional
from uuid import UUID

from fastapi import Depends

from healthsync.core.policy import AccessPolicy, Principal, cached_lookup
from healthsync.helpers.enums import UserRole, ResourceType
from healthsync.helpers.exception_handler import ValidateException, ForbiddenException
from healthsync.repository.repo_pairing import PairingRepository
from healthsync.repository.repo_user import UserRepository
from healthsync.schemas.sche_pairing import PairingLinkResponse
from healthsync.schemas.sche_user import UserSummaryResponse

logger = logging.getLogger(__name__)


class PairingService:
    def __init__(self, pairing_repo: PairingRepository = Depends(), user_repo: UserRepository = Depends()):
        self.pairing_repo = pairing_repo
        self.user_repo = user_repo
        self.policy = AccessPolicy(is_paired=cached_lookup(pairing_repo.is_linked))

    def link(self, doctor_id: UUID, patient_id: UUID) -> PairingLinkResponse:
        """Administrative pairing. Linking an already linked pair returns the existing link."""
        doctor = self.user_repo.get_by_id(doctor_id)
        if not doctor or doctor.role != UserRole.DOCTOR.value:
            raise ValidateException('Doctor not found')
        patient = self.user_repo.get_by_id(patient_id)
        if not patient or patient.role != UserRole.PATIENT.value:
            raise ValidateException('Patient not found')

        link = self.pairing_repo.link(doctor.id, patient.id)
        logger.info(f"Doctor {doctor.id} linked to patient {patient.id}")
        return PairingLinkResponse.model_validate(link)

    def get_links(self, principal: Principal) -> List[PairingLinkResponse]:
        links = self.pairing_repo.get_visible_links(principal)
        links = self.policy.filter_readable(principal, ResourceType.PAIRING_LINK, links)
        return [PairingLinkResponse.model_validate(link) for link in links]

    def patients_of(self, principal: Principal) -> List[UserSummaryResponse]:
        if not principal.is_doctor:
            raise ForbiddenException('Only doctors have patients')
        return [UserSummaryResponse.model_validate(u) for u in self.pairing_repo.get_patients_of(principal.id)]

    def doctor_of(self, principal: Principal) -> Optional[UserSummaryResponse]:
        if not principal.is_patient:
            raise ForbiddenException('Only patients have an assigned doctor')
        # the model allows several doctors; the portal shows the first assigned
        doctors = self.pairing_repo.get_doctors_of(principal.id)
        return UserSummaryResponse.model_validate(doctors[0]) if doctors else None
