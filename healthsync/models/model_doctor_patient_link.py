from sqlalchemy import Column, DateTime, ForeignKey, Uuid, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from healthsync.models.model_base import Base, utc_now
import uuid

class DoctorPatientLink(Base):
    __tablename__ = "doctor_patient_links"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    doctor_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    patient_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    doctor = relationship("User", foreign_keys=[doctor_id], lazy="joined")
    patient = relationship("User", foreign_keys=[patient_id], lazy="joined")

    __table_args__ = (
        UniqueConstraint('doctor_id', 'patient_id', name='uq_doctor_patient'),
        Index('idx_doctor_patient_links_doctor', 'doctor_id'),
    )
