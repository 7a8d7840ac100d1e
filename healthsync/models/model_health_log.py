from sqlalchemy import Column, Integer, Numeric, Date, DateTime, ForeignKey, Text, Uuid, Index, CheckConstraint
from healthsync.models.model_base import Base, utc_now
import uuid

class HealthLog(Base):
    __tablename__ = "health_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    steps = Column(Integer, nullable=False, default=0)
    water_ml = Column(Integer, nullable=False, default=0)
    heart_rate = Column(Integer, nullable=False, default=0)
    sleep_hours = Column(Numeric(3, 1, asdecimal=False), nullable=False, default=0)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    # No unique (user_id, date): several entries per day are allowed
    __table_args__ = (
        CheckConstraint('steps >= 0 AND water_ml >= 0 AND heart_rate >= 0 AND sleep_hours >= 0',
                        name='ck_health_logs_non_negative'),
    )


Index('idx_health_logs_user_date', HealthLog.user_id, HealthLog.date.desc())
