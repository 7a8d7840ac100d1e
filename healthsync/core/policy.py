"""
Row-level access policy.

``AccessPolicy.decide`` is a pure function of the principal, the operation and
the row being touched. Pairing is the only outside fact it needs, and it is
asked for through the ``is_paired`` callable so the registry stays the single
source of truth. Anything no rule allows is denied.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional
from uuid import UUID

from healthsync.helpers.enums import UserRole, Operation, ResourceType, Decision
from healthsync.helpers.exception_handler import ForbiddenException

logger = logging.getLogger(__name__)

PairingLookup = Callable[[UUID, UUID], bool]


@dataclass(frozen=True)
class Principal:
    """Who is asking. Resolved per request and passed explicitly to every check."""
    id: UUID
    role: UserRole
    email: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def is_doctor(self) -> bool:
        return self.role is UserRole.DOCTOR

    @property
    def is_patient(self) -> bool:
        return self.role is UserRole.PATIENT


def cached_lookup(lookup: PairingLookup) -> PairingLookup:
    """Memoize pairing answers for the lifetime of one request."""
    answers = {}

    def wrapper(doctor_id: UUID, patient_id: UUID) -> bool:
        key = (str(doctor_id), str(patient_id))
        if key not in answers:
            answers[key] = bool(lookup(doctor_id, patient_id))
        return answers[key]

    return wrapper


def _same(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


class AccessPolicy:

    def __init__(self, is_paired: PairingLookup):
        self.is_paired = is_paired
        self._rules = {
            ResourceType.USER: self._user_rule,
            ResourceType.HEALTH_LOG: self._health_log_rule,
            ResourceType.PAIRING_LINK: self._pairing_link_rule,
            ResourceType.MESSAGE: self._message_rule,
            ResourceType.CHECKUP: self._checkup_rule,
        }

    def decide(self, principal: Optional[Principal], operation: Operation,
               resource_type: ResourceType, resource: Any) -> Decision:
        if principal is None or resource is None:
            return Decision.DENY
        rule = self._rules.get(resource_type)
        if rule is None:
            return Decision.DENY
        return Decision.ALLOW if rule(principal, operation, resource) else Decision.DENY

    def is_allowed(self, principal: Optional[Principal], operation: Operation,
                   resource_type: ResourceType, resource: Any) -> bool:
        return self.decide(principal, operation, resource_type, resource) is Decision.ALLOW

    def authorize(self, principal: Principal, operation: Operation,
                  resource_type: ResourceType, resource: Any) -> None:
        if not self.is_allowed(principal, operation, resource_type, resource):
            logger.warning(
                f"Denied {operation.value} on {resource_type.value} for principal {principal.id}"
            )
            raise ForbiddenException(f"Not allowed to {operation.value} this resource")

    def filter_readable(self, principal: Principal, resource_type: ResourceType,
                        rows: Iterable[Any]) -> List[Any]:
        return [row for row in rows if self.is_allowed(principal, Operation.READ, resource_type, row)]

    # Rules

    @staticmethod
    def _user_rule(principal: Principal, operation: Operation, user: Any) -> bool:
        if operation in (Operation.READ, Operation.UPDATE):
            return _same(principal.id, user.id)
        return False

    def _health_log_rule(self, principal: Principal, operation: Operation, log: Any) -> bool:
        if _same(principal.id, log.user_id):
            return True
        if operation is not Operation.READ:
            return False
        if principal.role is UserRole.DOCTOR:
            return bool(self.is_paired(principal.id, log.user_id))
        if principal.role is UserRole.PATIENT:
            return False
        return False

    @staticmethod
    def _pairing_link_rule(principal: Principal, operation: Operation, link: Any) -> bool:
        if operation is not Operation.READ:
            return False
        return _same(principal.id, link.doctor_id) or _same(principal.id, link.patient_id)

    @staticmethod
    def _message_rule(principal: Principal, operation: Operation, message: Any) -> bool:
        if operation is Operation.READ:
            return _same(principal.id, message.sender_id) or _same(principal.id, message.receiver_id)
        if operation is Operation.CREATE:
            return _same(principal.id, message.sender_id)
        # messages are immutable
        return False

    @staticmethod
    def _checkup_rule(principal: Principal, operation: Operation, checkup: Any) -> bool:
        if _same(principal.id, checkup.doctor_id):
            return True
        if principal.role is UserRole.PATIENT:
            return _same(principal.id, checkup.patient_id)
        if principal.role is UserRole.DOCTOR:
            return False
        return False
