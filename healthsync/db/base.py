from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from healthsync.core.config import settings

connect_args = {}
engine_kwargs = {}
if settings.DATABASE_URL.startswith('sqlite'):
    # SQLite needs check_same_thread=False for the threadpool FastAPI runs sync routes in
    connect_args = {"check_same_thread": False}
    if settings.DATABASE_URL in ('sqlite://', 'sqlite:///:memory:'):
        engine_kwargs['poolclass'] = StaticPool

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args, **engine_kwargs)

if engine.dialect.name == 'sqlite':
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
