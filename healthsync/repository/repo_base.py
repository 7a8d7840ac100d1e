import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthsync.helpers.exception_handler import StoreException

logger = logging.getLogger(__name__)


def save(db: Session, instance, add: bool = True):
    """Commit ``instance``; any database failure is rolled back and surfaced as StoreException."""
    try:
        if add:
            db.add(instance)
        db.commit()
        db.refresh(instance)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Write to {type(instance).__tablename__} failed: {e}")
        raise StoreException()
    return instance
