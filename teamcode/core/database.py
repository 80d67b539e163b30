# teamcode/core/database.py
import functools
import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from teamcode.models import Base
from teamcode.core.config import DATABASE_URL
from teamcode.core.errors import StoreError

logger = logging.getLogger(__name__)

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False  # only needed for SQLite

engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def init_db() -> None:
    Base.metadata.create_all(bind=engine)

def get_db():
    """
    Yields a database session for FastAPI dependencies.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def is_readonly_error(exc: Exception) -> bool:
    """True when the driver reports that the database was opened read-only."""
    if not isinstance(exc, OperationalError):
        return False
    message = str(getattr(exc, "orig", None) or exc).lower()
    return "readonly database" in message or "read-only" in message


def reconnect(db: Session) -> None:
    """
    Drop every pooled connection behind `db` so the next statement opens a
    fresh one. The session must already be rolled back.
    """
    bind = db.get_bind()
    logger.warning("Reconnecting to %s after read-only database error", bind.url)
    bind.dispose()


def store_operation(func):
    """
    Wraps a unit of work that takes the session as its first argument.

    A read-only database error triggers one rollback, reconnect and retry.
    Any other SQLAlchemy failure is rolled back and re-raised as StoreError.
    Errors raised by the operation itself pass through untouched.
    """
    @functools.wraps(func)
    def wrapper(db: Session, *args, **kwargs):
        retried = False
        while True:
            try:
                return func(db, *args, **kwargs)
            except OperationalError as exc:
                db.rollback()
                if not retried and is_readonly_error(exc):
                    retried = True
                    reconnect(db)
                    continue
                logger.error("Store operation %s failed: %s", func.__name__, exc)
                raise StoreError(f"Database error during {func.__name__}") from exc
            except SQLAlchemyError as exc:
                db.rollback()
                logger.error("Store operation %s failed: %s", func.__name__, exc)
                raise StoreError(f"Database error during {func.__name__}") from exc
    return wrapper
