"""Store connection and schema bootstrap."""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import URL, Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from taskapi.errors import StoreConnectionError
from taskapi.models import Base
from taskapi.storage.task_store import TaskStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionInfo:
    """PostgreSQL connection parameters."""

    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    dbname: str = "postgres"
    sslmode: str = "disable"
    password: str = field(default="", repr=False)

    def url(self) -> URL:
        return URL.create(
            "postgresql+psycopg",
            username=self.user,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.dbname,
            query={"sslmode": self.sslmode},
        )


def connect(target: ConnectionInfo | URL | str, **engine_options: Any) -> Engine:
    """Create an engine and verify it with a round-trip query.

    Args:
        target: Connection parameters or a database URL.
        **engine_options: Passed through to ``create_engine``.

    Returns:
        Engine whose pool holds at least one live connection.

    Raises:
        StoreConnectionError: If a session cannot be opened or the check query fails.
    """
    url = target.url() if isinstance(target, ConnectionInfo) else target

    try:
        engine = create_engine(url, **engine_options)
    except (SQLAlchemyError, ImportError) as err:
        raise StoreConnectionError(f"Cannot create database engine: {err}") from err

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as err:
        engine.dispose()
        raise StoreConnectionError(f"Database is unreachable: {err}") from err

    logger.info(f"Connected to database: {engine.url.render_as_string(hide_password=True)}")
    return engine


def ensure_schema(engine: Engine) -> None:
    """Create the ``tasks`` table unless it already exists.

    Existing tables are left untouched, even if their columns differ.
    """
    Base.metadata.create_all(engine, checkfirst=True)
    logger.info("Task table ensured")


def open_store(target: ConnectionInfo | URL | str, **engine_options: Any) -> TaskStore:
    """Connect, ensure the schema and return a store bound to the engine."""
    engine = connect(target, **engine_options)
    try:
        ensure_schema(engine)
    except SQLAlchemyError as err:
        engine.dispose()
        raise StoreConnectionError(f"Cannot create task table: {err}") from err
    return TaskStore(engine)
