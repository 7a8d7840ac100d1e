from sqlalchemy import Column, DateTime, ForeignKey, Text, Uuid, Index
from healthsync.models.model_base import Base, utc_now
import uuid

class Message(Base):
    __tablename__ = "messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    sender_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    message = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=utc_now, nullable=False)


Index('idx_messages_conversation', Message.sender_id, Message.receiver_id, Message.timestamp.desc())
