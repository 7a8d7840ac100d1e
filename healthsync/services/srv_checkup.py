import logging
from typing import List, Optional
from uuid import UUID

from fastapi import Depends

from healthsync.core.config import settings
from healthsync.core.policy import AccessPolicy, Principal, cached_lookup
from healthsync.helpers.enums import UserRole, CheckupStatus, Operation, ResourceType
from healthsync.helpers.exception_handler import (
    ForbiddenException, NotFoundException, ValidateException, InvalidTransitionException
)
from healthsync.models.model_checkup import Checkup
from healthsync.repository.repo_checkup import CheckupRepository
from healthsync.repository.repo_pairing import PairingRepository
from healthsync.repository.repo_user import UserRepository
from healthsync.schemas.sche_checkup import (
    CheckupCreateRequest, CheckupUpdateRequest, CheckupResponse
)

logger = logging.getLogger(__name__)

# upcoming is the only state with a way out
CHECKUP_TRANSITIONS = {
    CheckupStatus.UPCOMING: {CheckupStatus.COMPLETED, CheckupStatus.CANCELLED},
    CheckupStatus.COMPLETED: set(),
    CheckupStatus.CANCELLED: set(),
}


def is_terminal(status: CheckupStatus) -> bool:
    return not CHECKUP_TRANSITIONS[status]


class CheckupService:
    def __init__(self, checkup_repo: CheckupRepository = Depends(), user_repo: UserRepository = Depends(),
                 pairing_repo: PairingRepository = Depends()):
        self.checkup_repo = checkup_repo
        self.user_repo = user_repo
        self.pairing_repo = pairing_repo
        self.policy = AccessPolicy(is_paired=cached_lookup(pairing_repo.is_linked))

    def create(self, data: CheckupCreateRequest, principal: Principal) -> CheckupResponse:
        if not principal.is_doctor:
            raise ForbiddenException('Only doctors can schedule checkups')

        purpose = data.purpose.strip()
        if not purpose:
            raise ValidateException('Purpose is required')
        patient = self.user_repo.get_by_id(data.patient_id)
        if not patient or patient.role != UserRole.PATIENT.value:
            raise ValidateException('Patient not found')
        if settings.REQUIRE_PAIRING_FOR_CHECKUPS and not self.pairing_repo.is_linked(principal.id, patient.id):
            raise ForbiddenException('Checkups can only be scheduled for paired patients')

        checkup = Checkup(
            doctor_id=principal.id,
            patient_id=patient.id,
            date=data.date,
            purpose=purpose,
            status=CheckupStatus.UPCOMING.value,
            notes=data.notes,
        )
        self.policy.authorize(principal, Operation.CREATE, ResourceType.CHECKUP, checkup)
        created = self.checkup_repo.create(checkup)
        logger.info(f"Checkup {created.id} scheduled by doctor {principal.id}")
        return CheckupResponse.model_validate(created)

    def update(self, checkup_id: UUID, data: CheckupUpdateRequest, principal: Principal) -> CheckupResponse:
        checkup = self._get_for_doctor(checkup_id, principal)

        if data.purpose is not None:
            if not data.purpose.strip():
                raise ValidateException('Purpose is required')
            checkup.purpose = data.purpose.strip()
        if data.date is not None:
            checkup.date = data.date
        if data.notes is not None:
            checkup.notes = data.notes

        return CheckupResponse.model_validate(self.checkup_repo.update(checkup))

    def set_status(self, checkup_id: UUID, status: CheckupStatus, principal: Principal) -> CheckupResponse:
        checkup = self._get_for_doctor(checkup_id, principal)
        current = CheckupStatus(checkup.status)

        if status not in CHECKUP_TRANSITIONS[current]:
            if is_terminal(current) and settings.CHECKUP_TERMINAL_TRANSITION == 'ignore':
                logger.info(f"Ignored {current.value} -> {status.value} for checkup {checkup.id}")
                return CheckupResponse.model_validate(checkup)
            if is_terminal(current):
                raise InvalidTransitionException(f'Checkup is already {current.value}')
            raise ValidateException(f'Cannot change checkup status from {current.value} to {status.value}')

        checkup.status = status.value
        updated = self.checkup_repo.update(checkup)
        logger.info(f"Checkup {checkup.id} is now {status.value}")
        return CheckupResponse.model_validate(updated)

    def list_checkups(self, principal: Principal, status: Optional[CheckupStatus] = None) -> List[CheckupResponse]:
        checkups = self.checkup_repo.list_visible(principal, status)
        checkups = self.policy.filter_readable(principal, ResourceType.CHECKUP, checkups)
        return [CheckupResponse.model_validate(c) for c in checkups]

    def _get_for_doctor(self, checkup_id: UUID, principal: Principal) -> Checkup:
        checkup = self.checkup_repo.get_visible(principal, checkup_id)
        if not checkup:
            raise NotFoundException('Checkup not found')
        self.policy.authorize(principal, Operation.UPDATE, ResourceType.CHECKUP, checkup)
        # the policy lets the patient through; changes stay with the scheduling doctor
        if str(checkup.doctor_id) != str(principal.id):
            raise ForbiddenException('Only the scheduling doctor can change this checkup')
        return checkup
