"""
Database engine and session management
"""

import logging
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.infrastructure.configuration.config import get_config
from storefront.infrastructure.database.models import Base
from storefront.infrastructure.utilities.constants import DatabaseSettings
from storefront.infrastructure.utilities.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the engine and session factory for one database URL"""

    def __init__(self, config: Optional[Any] = None):
        self.config = config or get_config()
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self.logger = logging.getLogger(__name__)

    def get_engine(self) -> Engine:
        """Get database engine with proper configuration"""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """Create database engine with environment-specific settings"""
        database_url = self.config.database_url

        if database_url.startswith("sqlite"):
            if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
                Path(database_url.replace("sqlite:///", "", 1)).parent.mkdir(
                    parents=True, exist_ok=True
                )
            # One shared connection so in-memory databases survive across sessions
            return create_engine(
                database_url,
                poolclass=StaticPool,
                connect_args={
                    "check_same_thread": False,
                    "timeout": DatabaseSettings.CONNECTION_TIMEOUT_SECONDS,
                },
            )

        if self.config.environment == "production":
            pool_size = DatabaseSettings.PRODUCTION_POOL_SIZE
            max_overflow = DatabaseSettings.PRODUCTION_MAX_OVERFLOW
        else:
            pool_size = DatabaseSettings.DEVELOPMENT_POOL_SIZE
            max_overflow = DatabaseSettings.DEVELOPMENT_MAX_OVERFLOW

        return create_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=DatabaseSettings.POOL_RECYCLE_SECONDS,
            pool_pre_ping=True,
        )

    def get_session_factory(self) -> sessionmaker:
        """Get session factory"""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.get_engine(),
                expire_on_commit=False
            )
        return self._session_factory

    def get_session(self) -> Session:
        """Get database session"""
        return self.get_session_factory()()

    def create_tables(self) -> None:
        """Create all database tables"""
        try:
            Base.metadata.create_all(self.get_engine())
            self.logger.info("Database tables created successfully")
        except SQLAlchemyError as e:
            self.logger.error("Failed to create database tables: %s", e, exc_info=True)
            raise DatabaseError(
                f"Failed to create database tables: {e}", operation="create_tables"
            ) from e

    def drop_tables(self) -> None:
        """Drop all database tables"""
        try:
            Base.metadata.drop_all(self.get_engine())
            self.logger.info("Database tables dropped successfully")
        except SQLAlchemyError as e:
            self.logger.error("Failed to drop database tables: %s", e, exc_info=True)
            raise DatabaseError(
                f"Failed to drop database tables: {e}", operation="drop_tables"
            ) from e

    def close(self) -> None:
        """Close database connections"""
        if self._engine:
            self._engine.dispose()
            self._engine = None
        self._session_factory = None
        self.logger.info("Database connections closed")


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Get global database manager instance"""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def reset_db_manager() -> None:
    """Dispose the global manager so the next call re-reads configuration"""
    global _db_manager
    if _db_manager is not None:
        _db_manager.close()
    _db_manager = None


def get_db_session() -> Session:
    """Get database session - convenience function"""
    return get_db_manager().get_session()


def init_db(config: Optional[Any] = None) -> DatabaseManager:
    """
    Initialize database tables.

    With ``config`` the global manager is rebuilt for it unless it already
    serves that configuration.
    """
    global _db_manager
    if config is not None and (_db_manager is None or _db_manager.config is not config):
        reset_db_manager()
        _db_manager = DatabaseManager(config)

    manager = get_db_manager()
    try:
        manager.create_tables()
    except DatabaseError:
        logger.error("Failed to initialize database")
        raise
    return manager
