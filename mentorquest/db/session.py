"""Engine, session factory and declarative base."""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from mentorquest.core.config import get_settings

Base = declarative_base()

# Execution option read by the SQLite "begin" hook: "IMMEDIATE" takes the write lock up front
SQLITE_BEGIN = "sqlite_begin"


def make_engine(url: str, **kwargs):
    connect_args = kwargs.pop("connect_args", {})
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        # sessions are used from the threadpool and the QOTD batch thread
        connect_args.setdefault("check_same_thread", False)
        # seconds a writer waits for another writer's lock before failing
        connect_args.setdefault("timeout", get_settings().sqlite_busy_timeout)
    engine = create_engine(url, connect_args=connect_args, future=True, **kwargs)
    if is_sqlite:
        # let SQLAlchemy own BEGIN so SAVEPOINTs nest inside the real transaction
        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys = ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _on_begin(conn):
            mode = conn.get_execution_options().get(SQLITE_BEGIN)
            conn.exec_driver_sql(f"BEGIN {mode}" if mode else "BEGIN")

    return engine


def begin_write(db: Session) -> None:
    """Start a fresh transaction on ``db`` that intends to write.

    Any open (read) transaction is committed first. On SQLite the new one
    starts with BEGIN IMMEDIATE, so concurrent writers queue on the busy
    timeout instead of failing when they upgrade their locks.
    """
    if db.in_transaction():
        db.commit()
    db.connection(execution_options={SQLITE_BEGIN: "IMMEDIATE"})


engine = make_engine(get_settings().database_url)
SessionLocal = sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
