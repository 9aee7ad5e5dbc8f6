"""
Task Manager Database Module
============================

SQLAlchemy persistence layer for the task table.

Features:
- Declarative ORM model for task records
- Connection pooling with configurable limits
- Session context manager with automatic rollback
- Query logging through engine event listeners

Timestamps are plain columns here. The lifecycle manager stamps them before
a record is handed to the store.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from sqlalchemy import (
    create_engine,
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    event,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Statement logger, kept separate so it can be silenced independently
query_logger = logging.getLogger('taskmanager.database.queries')

Base = declarative_base()


# ============================================================================
# DATABASE MODELS
# ============================================================================

class TaskRecord(Base):
    """
    Persisted task row.
    """
    __tablename__ = 'tasks'

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)

    # Naive UTC timestamps
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    # SQLite would otherwise hand out the id of a deleted last row again
    __table_args__ = {'sqlite_autoincrement': True}

    def __repr__(self):
        return f"<TaskRecord(id={self.id}, title='{self.title}', completed={self.completed})>"


# ============================================================================
# DATABASE CONNECTION AND POOLING
# ============================================================================

class DatabaseConfig:
    """Database configuration with pooling defaults"""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        echo: bool = False,
    ):
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.echo = echo

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith('sqlite')

    @property
    def is_memory(self) -> bool:
        return self.is_sqlite and (
            self.database_url in ('sqlite://', 'sqlite:///:memory:')
        )

    def engine_options(self) -> Dict[str, Any]:
        """Keyword arguments for create_engine()."""
        options: Dict[str, Any] = {'echo': self.echo}

        if self.is_sqlite:
            # Requests are served from a thread pool
            options['connect_args'] = {'check_same_thread': False}
            if self.is_memory:
                # One connection, otherwise every checkout sees an empty database
                options['poolclass'] = StaticPool
            return options

        options.update(
            pool_size=self.pool_size,
            max_overflow=self.max_overflow,
            pool_timeout=self.pool_timeout,
            pool_recycle=self.pool_recycle,
            pool_pre_ping=True,
        )
        return options


class DatabaseManager:
    """
    Database manager with connection pooling and transaction management.

    Every session handed out by get_session() commits on success and rolls
    back on error, so each call is one unit of work.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.engine = None
        self.session_factory = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self):
        """Initialize database engine and session factory"""
        if self._initialized:
            logger.warning("DatabaseManager already initialized")
            return

        try:
            self.engine = create_engine(
                self.config.database_url,
                **self.config.engine_options()
            )

            self.session_factory = sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
            )

            Base.metadata.create_all(self.engine)

            self._setup_event_listeners()

            self._initialized = True
            logger.info("Database initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    def _setup_event_listeners(self):
        """Set up SQLAlchemy event listeners for query logging"""

        @event.listens_for(self.engine, "before_cursor_execute")
        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            query_logger.debug(f"Query: {statement}")
            query_logger.debug(f"Parameters: {parameters}")

        @event.listens_for(self.engine, "handle_error")
        def handle_error(exception_context):
            query_logger.error(
                f"Database error: {exception_context.original_exception}"
            )

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """
        Context manager for database sessions with automatic rollback.

        Usage:
            with db_manager.get_session() as session:
                record = session.get(TaskRecord, 1)
        """
        if not self._initialized:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")

        session = self.session_factory()
        try:
            yield session
            session.commit()
            logger.debug("Session committed successfully")
        except Exception as e:
            session.rollback()
            logger.error(f"Session rollback due to error: {e}")
            raise
        finally:
            session.close()

    def drop_all(self):
        """Drop and recreate every table. Used to reset test databases."""
        if not self._initialized:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")

        Base.metadata.drop_all(self.engine)
        Base.metadata.create_all(self.engine)
        logger.info("Database tables recreated")

    def close(self):
        """Close database connections"""
        if self.engine:
            self.engine.dispose()
            logger.info("Database engine disposed")
        self._initialized = False
