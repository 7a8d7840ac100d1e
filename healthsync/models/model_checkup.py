from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Uuid, Index, CheckConstraint
from sqlalchemy.orm import relationship
from healthsync.models.model_base import Base, utc_now
import uuid

class Checkup(Base):
    __tablename__ = "checkups"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    doctor_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    patient_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    purpose = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default='upcoming')
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    doctor = relationship("User", foreign_keys=[doctor_id], lazy="joined")
    patient = relationship("User", foreign_keys=[patient_id], lazy="joined")

    __table_args__ = (
        CheckConstraint("status IN ('upcoming', 'completed', 'cancelled')", name='ck_checkups_status'),
        Index('idx_checkups_patient_date', 'patient_id', 'date'),
    )
