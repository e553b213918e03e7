# gatekeeper/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy (MySQL via PyMySQL by default). The engine runs with NullPool,
so every registry operation acquires its own connection and releases it when
the operation's session closes. Nothing is held between calls.
"""

from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine, exc, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from gatekeeper.exceptions import DatabaseUnavailableError, RegistryError
from gatekeeper.utils.logger import get_logger

logger = get_logger(__name__)

Base = declarative_base()


class Gateway:
    """Opens and closes connections to the relational store."""

    def __init__(self, url, echo: bool = False):
        self.url = url
        self.engine = create_engine(
            url,
            poolclass=NullPool,          # acquire-use-release per call
            echo=echo,                   # Set True to log all SQL queries (debug only)
        )
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self._tables_ready = False

    @classmethod
    def from_settings(cls, settings) -> "Gateway":
        return cls(settings.database.url)

    @contextmanager
    def session(self):
        """
        Yields a DB session for one logical operation and always closes it.
        Closing rolls back anything left uncommitted and releases the connection.
        The first session that reaches the database creates the tables.
        """
        if not self._tables_ready:
            self.create_tables()
        db = self._session_factory()
        try:
            yield db
        except exc.OperationalError as e:
            logger.error(f"Database unavailable: {e}")
            raise DatabaseUnavailableError(f"Cannot connect to the database: {e.orig}") from e
        except exc.SQLAlchemyError as e:
            logger.error(f"Database error: {e}", exc_info=True)
            raise RegistryError() from e
        finally:
            db.close()

    def create_tables(self):
        """
        Creates the visitors table. Safe to call multiple times.
        Import the model here so SQLAlchemy knows about it.
        """
        from gatekeeper.models.visitor import Visitor  # noqa

        try:
            Base.metadata.create_all(bind=self.engine)
        except exc.OperationalError as e:
            raise DatabaseUnavailableError(f"Cannot connect to the database: {e.orig}") from e
        except exc.SQLAlchemyError as e:
            logger.error(f"Cannot create tables: {e}", exc_info=True)
            raise RegistryError(f"Cannot create tables: {e}") from e
        if not self._tables_ready:
            logger.info("✅ Database tables ready")
        self._tables_ready = True

    def check_connection(self) -> bool:
        """Runs SELECT 1. Returns False instead of raising when the DB is down."""
        try:
            with self.session() as db:
                db.execute(text("SELECT 1"))
            return True
        except (DatabaseUnavailableError, RegistryError):
            return False

    def dispose(self):
        self.engine.dispose()


def get_gateway(request: Request) -> Gateway:
    """FastAPI dependency — the gateway built by create_app()."""
    return request.app.state.gateway
