from typing import List
from uuid import UUID
from fastapi import Depends
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from healthsync.core.policy import Principal
from healthsync.db.base import get_db
from healthsync.models.model_message import Message
from healthsync.repository.repo_base import save


class MessageRepository:
    def __init__(self, db_session: Session = Depends(get_db)):
        self.db = db_session

    def create(self, message: Message) -> Message:
        return save(self.db, message)

    def get_thread(self, principal: Principal, user_a: UUID, user_b: UUID) -> List[Message]:
        return self.db.query(Message).filter(
            or_(
                and_(Message.sender_id == user_a, Message.receiver_id == user_b),
                and_(Message.sender_id == user_b, Message.receiver_id == user_a),
            ),
            or_(Message.sender_id == principal.id, Message.receiver_id == principal.id)
        ).order_by(Message.timestamp.asc()).all()
