"""
RecipeShare Database Configuration
Async database setup with SQLAlchemy 2.0
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import MetaData, event, text
from contextlib import asynccontextmanager
import structlog
from typing import AsyncGenerator, Optional

from core.config import settings

logger = structlog.get_logger()

# Database engine
engine: Optional[AsyncEngine] = None
async_session_factory: Optional[async_sessionmaker] = None


class Base(DeclarativeBase):
    """Base class for all database models"""

    metadata = MetaData(
        naming_convention={
            "ix": "ix_%(column_0_label)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s"
        }
    )


def _configure_sqlite(sqlite_engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy own transaction boundaries on SQLite so SAVEPOINTs work,
    and turn on foreign key enforcement.
    """

    @event.listens_for(sqlite_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(sqlite_engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


async def init_db(database_url: Optional[str] = None) -> None:
    """Initialize database connection"""
    global engine, async_session_factory

    url = database_url or settings.database_url_async

    try:
        if url.startswith("sqlite"):
            engine = create_async_engine(url, echo=settings.DATABASE_ECHO)
            _configure_sqlite(engine)
        else:
            engine = create_async_engine(
                url,
                pool_size=settings.DATABASE_POOL_SIZE,
                max_overflow=settings.DATABASE_MAX_OVERFLOW,
                pool_timeout=settings.DATABASE_POOL_TIMEOUT,
                pool_pre_ping=True,
                pool_recycle=3600,  # 1 hour
                echo=settings.DATABASE_ECHO,
            )

        async_session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        # Test connection
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

        logger.info("Database connection initialized", dialect=engine.dialect.name)

    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise


async def create_tables() -> None:
    """Create all tables registered on Base.metadata (development and tests)"""
    if engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    import models  # noqa: F401  registers every mapper on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables() -> None:
    """Drop all tables registered on Base.metadata"""
    if engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def close_db() -> None:
    """Close database connections"""
    global engine, async_session_factory

    if engine:
        await engine.dispose()
        engine = None
        async_session_factory = None
        logger.info("Database connections closed")


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager for database sessions
    Provides automatic transaction management and cleanup
    """
    if not async_session_factory:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.debug("Database session rolled back", error=str(e), error_type=type(e).__name__)
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for FastAPI to get database session
    """
    async with get_db_session() as session:
        yield session


@asynccontextmanager
async def run_in_transaction(session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Run several statements as one unit of work.

    Commits when the block exits cleanly; on any exception rolls back
    everything issued in the block and re-raises.
    """
    try:
        yield session
        await session.commit()
    except Exception as e:
        await session.rollback()
        logger.warning("Transaction rolled back", error=str(e), error_type=type(e).__name__)
        raise


class DatabaseHealthCheck:
    """Database health check utilities"""

    @staticmethod
    async def check_connection() -> bool:
        """Check if database connection is healthy"""
        try:
            async with get_db_session() as session:
                result = await session.execute(text("SELECT 1"))
                return result.scalar() == 1
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False

    @staticmethod
    async def get_connection_info() -> dict:
        """Get database connection information"""
        if not engine:
            return {"status": "not_initialized"}

        pool = engine.pool
        return {
            "status": "healthy",
            "dialect": engine.dialect.name,
            "pool": pool.status(),
        }


__all__ = [
    "Base",
    "init_db",
    "create_tables",
    "drop_tables",
    "close_db",
    "get_db_session",
    "get_db",
    "run_in_transaction",
    "DatabaseHealthCheck"
]
