from enum import Enum
from pathlib import Path
from typing import Optional

import structlog
from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import create_engine, Session, SQLModel

from ..core.errors import StoreUnavailable
# Registers the tables on SQLModel.metadata
from ..models import Task, User  # noqa: F401

log = structlog.get_logger()


class DatabaseState(str, Enum):
    uninitialized = "uninitialized"
    ready = "ready"
    failed = "failed"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(db_url: str, echo: bool = False) -> Engine:
    # --- CONFIGURATION FOR SQLITE ---
    if db_url.startswith("sqlite"):
        engine = create_engine(
            db_url,
            echo=echo,
            connect_args={"check_same_thread": False}
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    # --- CONFIGURATION FOR POSTGRESQL ---
    # Ensure URL starts with postgresql:// and does NOT use an async driver
    sync_url = db_url.replace("postgres://", "postgresql://")
    if "+asyncpg" in sync_url:
        sync_url = sync_url.replace("+asyncpg", "")

    return create_engine(
        sync_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10
    )


class Database:
    """Engine plus an explicit lifecycle state.

    Lives on ``app.state.database``; request handlers only get a session
    once :meth:`initialize` has succeeded.
    """

    def __init__(self, db_url: str, echo: bool = False):
        self.url = db_url
        self.engine = build_engine(db_url, echo=echo)
        self.state = DatabaseState.uninitialized
        self.error: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.state is DatabaseState.ready

    def initialize(self) -> DatabaseState:
        url = make_url(self.url)
        try:
            if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            SQLModel.metadata.create_all(self.engine)
        except (OSError, SQLAlchemyError) as exc:
            self.state = DatabaseState.failed
            self.error = str(exc)
            log.error("database_init_failed", url=self.engine.url.render_as_string(), error=self.error)
            return self.state

        self.state = DatabaseState.ready
        self.error = None
        log.info("database_ready", url=self.engine.url.render_as_string())
        return self.state

    def dispose(self) -> None:
        self.engine.dispose()
        self.state = DatabaseState.uninitialized


# Dependency: one session per request, only once the database is ready
def get_session(request: Request):
    database: Database = request.app.state.database
    if not database.is_ready:
        raise StoreUnavailable(f"Database is {database.state.value}")

    with Session(database.engine) as session:
        yield session
