"""Database engine, session factory and transaction helper."""
from contextlib import contextmanager
from typing import Iterator

import structlog
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from box_organizer.config import settings
from box_organizer.errors import InternalError

logger = structlog.get_logger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}


def configure_sqlite(engine: Engine) -> Engine:
    """
    Let SQLite honour foreign keys and savepoints.

    pysqlite defers BEGIN until the first write, which breaks SAVEPOINT
    handling; transactions are started explicitly instead.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(connection):
        connection.exec_driver_sql("BEGIN")

    return engine


engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
if engine.dialect.name == "sqlite":
    configure_sqlite(engine)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    """Yield a session for one request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """Create all tables."""
    # Models register themselves on Base when imported
    import box_organizer.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Run a block as a single transaction.

    Commits when the block finishes, rolls back on any exception. Database
    errors are re-raised as ``InternalError``; application errors propagate
    unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("database_error", error=str(exc))
        raise InternalError("Database operation failed") from exc
    except Exception:
        db.rollback()
        raise
