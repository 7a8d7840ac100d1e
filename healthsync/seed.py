"""
Administrative commands.

    python -m healthsync.seed demo
    python -m healthsync.seed link doctor@example.org patient@example.org

Pairing has no self-service flow; links are created here.
"""
import argparse
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from healthsync.core.security import get_password_hash
from healthsync.db.base import SessionLocal, engine
from healthsync.helpers.enums import UserRole, CheckupStatus
from healthsync.models import Base, User, HealthLog, Checkup
from healthsync.repository.repo_pairing import PairingRepository
from healthsync.repository.repo_user import UserRepository
from healthsync.services.srv_pairing import PairingService

logger = logging.getLogger(__name__)

DEMO_DOCTOR_ID = UUID('11111111-1111-1111-1111-111111111111')
DEMO_PATIENT_ID = UUID('22222222-2222-2222-2222-222222222222')
DEMO_PASSWORD = 'password123'


def upsert_user(db: Session, email: str, full_name: str, role: UserRole,
                password: str = DEMO_PASSWORD, user_id: Optional[UUID] = None) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user
    user = User(email=email, full_name=full_name, role=role.value,
                hashed_password=get_password_hash(password))
    if user_id is not None:
        user.id = user_id
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def link_by_email(db: Session, doctor_email: str, patient_email: str):
    user_repo = UserRepository(db)
    doctor = user_repo.get_by_email(doctor_email)
    patient = user_repo.get_by_email(patient_email)
    if not doctor or not patient:
        raise SystemExit(f"Unknown account: {doctor_email if not doctor else patient_email}")
    return PairingService(PairingRepository(db), user_repo).link(doctor.id, patient.id)


def seed_demo(db: Session) -> None:
    doctor = upsert_user(db, 'doctor@gmail.com', 'Dr. Sarah Johnson', UserRole.DOCTOR, user_id=DEMO_DOCTOR_ID)
    patient = upsert_user(db, 'patient@gmail.com', 'John Smith', UserRole.PATIENT, user_id=DEMO_PATIENT_ID)
    PairingRepository(db).link(doctor.id, patient.id)

    if not db.query(HealthLog).filter(HealthLog.user_id == patient.id).first():
        today = date.today()
        for days_ago, steps, water_ml, heart_rate, sleep_hours in (
            (1, 8500, 2000, 72, 7.5),
            (2, 6200, 1800, 68, 8.0),
            (3, 9100, 2200, 75, 6.5),
        ):
            db.add(HealthLog(user_id=patient.id, date=today - timedelta(days=days_ago), steps=steps,
                             water_ml=water_ml, heart_rate=heart_rate, sleep_hours=sleep_hours))
    if not db.query(Checkup).filter(Checkup.patient_id == patient.id).first():
        db.add(Checkup(doctor_id=doctor.id, patient_id=patient.id,
                       date=datetime.now(timezone.utc) + timedelta(days=7),
                       purpose='Regular Health Checkup', status=CheckupStatus.UPCOMING.value))
    db.commit()


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog='healthsync.seed')
    commands = parser.add_subparsers(dest='command', required=True)
    commands.add_parser('demo', help='create the demo doctor, patient and sample data')
    link = commands.add_parser('link', help='pair a doctor with a patient')
    link.add_argument('doctor_email')
    link.add_argument('patient_email')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if args.command == 'demo':
            seed_demo(db)
            logger.info("Demo data ready")
        else:
            created = link_by_email(db, args.doctor_email, args.patient_email)
            logger.info(f"Linked doctor {created.doctor_id} to patient {created.patient_id}")
    finally:
        db.close()


if __name__ == '__main__':
    main()
