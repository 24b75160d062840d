"""Database connection management for usage tracking."""

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Optional, Union

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)

DATABASE_URL_ENV = "USAGE_DATABASE_URL"
DEFAULT_DATABASE_PATH = "legal_semantic_diff_usage.db"
IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def get_database_url(path: Optional[Union[str, Path]] = None) -> str:
    """
    Build the usage database URL.

    An explicit ``path`` gives a SQLite file URL. Without one,
    ``USAGE_DATABASE_URL`` is used when set, else a SQLite file in the
    working directory.
    """
    if path is not None:
        return f"sqlite:///{path}"
    return os.environ.get(DATABASE_URL_ENV) or f"sqlite:///{DEFAULT_DATABASE_PATH}"


class DatabaseManager:
    """
    Owns the engine and session factory of the usage database.

    SQLite is the default backend. Its connections are shared across
    threads because usage is recorded from request handler threads, and an
    in-memory database is pinned to a single connection so that its tables
    outlive the first session. Any other SQLAlchemy URL is passed through
    unchanged; its driver must be installed separately.
    """

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        """
        Args:
            database_url: Connection URL. Defaults to ``get_database_url()``.
            echo: Log every SQL statement.
        """
        self._database_url = database_url or get_database_url()
        self._echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def database_url(self) -> str:
        return self._database_url

    @property
    def is_sqlite(self) -> bool:
        return self._database_url.startswith("sqlite")

    @property
    def is_in_memory(self) -> bool:
        return self._database_url in IN_MEMORY_URLS

    def _engine_options(self) -> Dict[str, Any]:
        if not self.is_sqlite:
            return {"pool_pre_ping": True}
        options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if self.is_in_memory:
            options["poolclass"] = StaticPool
        return options

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            logger.debug(f"Connecting usage database {self._database_url}")
            self._engine = create_engine(
                self._database_url, echo=self._echo, **self._engine_options()
            )
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine, autoflush=False)
        return self._session_factory

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Yield a session that commits on success and rolls back on error.
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self) -> None:
        """Create the usage tables that do not exist yet."""
        Base.metadata.create_all(self.engine)

    def drop_all_tables(self) -> None:
        """Drop the usage tables and every recorded row."""
        Base.metadata.drop_all(self.engine)

    def close(self) -> None:
        """Dispose of the engine; the next access reconnects."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None

    def health_check(self) -> bool:
        """Return True when the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Usage database health check failed: {e}")
            return False
