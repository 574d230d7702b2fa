# task_service/database.py
"""Database engine, session dependency, and schema bootstrap using SQLModel."""

import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from task_service import config

logger = logging.getLogger(__name__)


def build_engine(url: str) -> Engine:
    """Create an engine with a bounded, reusable connection pool.

    SQLite gets ``check_same_thread=False`` because FastAPI runs sync
    handlers in a threadpool; server databases get a fixed-size pool.
    """
    if url.startswith("sqlite"):
        return create_engine(
            url, echo=False, connect_args={"check_same_thread": False}
        )
    return create_engine(
        url,
        echo=False,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=0,
        pool_pre_ping=True,
    )


engine = build_engine(config.database_url())


def create_db_and_tables() -> None:
    """Create the ``tasks`` table if it does not exist yet."""
    logger.info("Ensuring schema on %s", engine.url.render_as_string(hide_password=True))
    SQLModel.metadata.create_all(engine)


def ping(session: Session) -> bool:
    """Run a trivial query; raises the driver error when the database is down."""
    row = session.connection().execute(text("SELECT 1 AS ok")).first()
    return row is not None and row[0] == 1


def get_session():
    """Yield a database session for FastAPI dependency injection."""
    with Session(engine) as session:
        yield session
