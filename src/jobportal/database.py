"""Database connection pool and session management."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Create Base class for declarative models
Base = declarative_base()


class Database:
    """
    Process-wide connection pool, created once and passed to the app.

    Lifecycle:
        - ``connect()`` at startup creates any missing tables
        - ``session()`` opens an ORM session per unit of work
        - ``dispose()`` at shutdown closes pooled connections
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        """
        Build the engine and session factory. No connection is opened yet.

        Args:
            url: SQLAlchemy database URL
            echo: Log every SQL statement
        """
        self.url = make_url(url)
        engine_kwargs: dict = {"echo": echo}
        if self.url.get_backend_name() == "sqlite":
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if self.url.database in (None, "", ":memory:"):
                # One shared connection, otherwise each checkout sees an empty DB
                engine_kwargs["poolclass"] = StaticPool
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def connect(self) -> None:
        """Create all tables defined on ``Base`` that don't exist yet."""
        # Registers every model on Base.metadata
        from jobportal import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info(
            "Database connected (%s), tables: %s",
            self.url.render_as_string(hide_password=True),
            ", ".join(Base.metadata.tables.keys()),
        )

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connection pool disposed")

    def session(self) -> Session:
        return self.SessionLocal()


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency function to get database session.

    Yields:
        Session: SQLAlchemy database session bound to the app's Database
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
