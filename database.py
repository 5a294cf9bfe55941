# backend/database.py
import functools
import logging
import sqlite3

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine
from sqlmodel import create_engine, SQLModel, Session

from core.config import settings
from core.exceptions import StorageFailure

logger = logging.getLogger(__name__)

# Create the engine
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    connect_args={"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {},
)


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_and_tables(bind=None):
    """Initializes the database and creates all tables from models package"""
    # Importing models package ensures SQLModel metadata is populated
    import models  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)

# Dependency to get a database session
def get_session():
    """Provides a transactional database session."""
    with Session(engine) as session:
        yield session


def storage_operation(func):
    """Roll back and re-raise database errors from a store method as StorageFailure."""
    @functools.wraps(func)
    def wrapper(store, *args, **kwargs):
        try:
            return func(store, *args, **kwargs)
        except SQLAlchemyError as e:
            store.session.rollback()
            logger.error(f"Storage operation {func.__qualname__} failed: {e}")
            raise StorageFailure(str(e)) from e
    return wrapper
