"""Database connection management for async Postgres operations.

This module provides async connection management using SQLAlchemy's async engine
with SQLModel. Postgres URLs are rewritten for the asyncpg driver; sqlite URLs
(used by the test suite) are passed through unchanged.
"""
import os
import ssl
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)

# Global engine instance (initialized lazily)
_engine: AsyncEngine | None = None
_async_session_maker: sessionmaker | None = None


def get_database_url() -> tuple[str, dict]:
    """Get and validate DATABASE_URL from environment.

    Returns:
        Tuple of (database URL with async driver, connect_args dict).

    Raises:
        ValueError: If DATABASE_URL is not set.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable is not set")

    if database_url.startswith("sqlite"):
        return database_url, {}

    # Parse the URL to extract and handle query parameters
    parsed = urlparse(database_url)
    query_params = parse_qs(parsed.query)

    connect_args = {}
    sslmode = query_params.get('sslmode', [None])[0]

    # Remove asyncpg-incompatible parameters from query string
    incompatible_params = ['sslmode', 'channel_binding', 'options']
    filtered_params = {k: v for k, v in query_params.items() if k not in incompatible_params}
    new_query = urlencode(filtered_params, doseq=True) if filtered_params else ''

    clean_url = urlunparse((
        'postgresql+asyncpg',
        parsed.netloc,
        parsed.path,
        parsed.params,
        new_query,
        parsed.fragment
    ))

    if sslmode == 'require':
        # Encrypt without verifying the server certificate, like libpq
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        connect_args['ssl'] = ssl_context
    elif sslmode == 'verify-ca':
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        connect_args['ssl'] = ssl_context
    elif sslmode == 'verify-full':
        connect_args['ssl'] = ssl.create_default_context()

    return clean_url, connect_args


def get_engine() -> AsyncEngine:
    """Get or create the async database engine.

    Returns:
        The AsyncEngine instance.
    """
    global _engine

    if _engine is None:
        database_url, connect_args = get_database_url()

        if database_url.startswith("sqlite"):
            _engine = create_async_engine(database_url, connect_args=connect_args)
        else:
            _engine = create_async_engine(
                database_url,
                pool_pre_ping=True,  # Verify connections before use
                pool_size=5,
                max_overflow=10,
                pool_recycle=300,  # Recycle connections every 5 minutes
                echo=False,
                connect_args=connect_args,
            )

        logger.info("Database engine created successfully")

    return _engine


def get_session_maker() -> sessionmaker:
    """Get or create the async session maker.

    Returns:
        The sessionmaker configured for async sessions.
    """
    global _async_session_maker

    if _async_session_maker is None:
        engine = get_engine()
        _async_session_maker = sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    return _async_session_maker


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Async context manager for database sessions.

    Usage:
        async with get_async_session() as session:
            result = await session.execute(query)

    Yields:
        An AsyncSession instance.
    """
    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error(f"Database session error: {e}", exc_info=True)
            raise
        finally:
            await session.close()


async def create_tables() -> None:
    """Create the tasks table if it does not exist."""
    # Imported for its side effect of registering the table on SQLModel.metadata
    from models import db_models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables ensured")


async def close_engine() -> None:
    """Close the database engine and cleanup connections.

    Should be called during application shutdown.
    """
    global _engine, _async_session_maker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_maker = None
        logger.info("Database engine closed")
