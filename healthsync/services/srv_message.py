import logging
from typing import List
from uuid import UUID

from fastapi import Depends

from healthsync.core.config import settings
from healthsync.core.policy import AccessPolicy, Principal, cached_lookup
from healthsync.helpers.enums import Operation, ResourceType
from healthsync.helpers.exception_handler import ValidateException, ForbiddenException
from healthsync.models.model_message import Message
from healthsync.repository.repo_message import MessageRepository
from healthsync.repository.repo_pairing import PairingRepository
from healthsync.repository.repo_user import UserRepository
from healthsync.schemas.sche_message import MessageCreateRequest, MessageResponse

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, message_repo: MessageRepository = Depends(), user_repo: UserRepository = Depends(),
                 pairing_repo: PairingRepository = Depends()):
        self.message_repo = message_repo
        self.user_repo = user_repo
        self.pairing_repo = pairing_repo
        self.policy = AccessPolicy(is_paired=cached_lookup(pairing_repo.is_linked))

    def send(self, data: MessageCreateRequest, principal: Principal) -> MessageResponse:
        message = Message(
            sender_id=data.sender_id or principal.id,
            receiver_id=data.receiver_id,
            message=data.message.strip(),
        )
        self.policy.authorize(principal, Operation.CREATE, ResourceType.MESSAGE, message)

        if not message.message:
            raise ValidateException('Message cannot be empty')
        if not self.user_repo.get_by_id(message.receiver_id):
            raise ValidateException('Receiver not found')
        if settings.REQUIRE_PAIRING_FOR_MESSAGES and not self._paired_either_way(principal.id, message.receiver_id):
            raise ForbiddenException('Messages can only be sent within a doctor-patient pairing')

        created = self.message_repo.create(message)
        logger.info(f"Message {created.id} sent by {principal.id}")
        return MessageResponse.model_validate(created)

    def thread(self, user_a: UUID, user_b: UUID, principal: Principal) -> List[MessageResponse]:
        """Oldest first. A principal outside the pair gets an empty thread."""
        messages = self.message_repo.get_thread(principal, user_a, user_b)
        messages = self.policy.filter_readable(principal, ResourceType.MESSAGE, messages)
        return [MessageResponse.model_validate(m) for m in messages]

    def _paired_either_way(self, first: UUID, second: UUID) -> bool:
        return self.pairing_repo.is_linked(first, second) or self.pairing_repo.is_linked(second, first)
