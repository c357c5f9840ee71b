# rotations/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
import logging

from rotations.core.config import DATABASE_URL, SQL_ECHO
from rotations.models.base import Base  # noqa: F401  re-exported for scripts and tests

if SQL_ECHO:
    logging.getLogger('sqlalchemy.engine').setLevel(logging.INFO)


def create_db_engine(url: str, echo: bool = False):
    """Build an engine for ``url``.

    SQLite connections get foreign keys switched on and a busy timeout, so
    concurrent writers wait for the lock instead of failing straight away.
    """
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 30},
        )

        @event.listens_for(engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True  # Checks connection before using
    )


engine = create_db_engine(DATABASE_URL, echo=SQL_ECHO)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
