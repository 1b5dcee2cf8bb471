"""
Listing Intake Database Connection

CONNECTION METHOD - Pure asyncpg:
- one asyncpg connection pool per process, created in the FastAPI lifespan
- handed to request handlers through the ``get_pool`` dependency
- single connections (``get_db_connection``) only for scripts such as migrations
"""

import logging
import os
import urllib.parse

import asyncpg  # type: ignore

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL")

DB_USER = os.getenv("LISTINGS_DB_USER")
DB_PASSWORD = os.getenv("LISTINGS_DB_PASSWORD")
DB_NAME = os.getenv("LISTINGS_DATABASE_NAME")
DB_HOST = os.getenv("LISTINGS_DB_HOST")
DB_PORT = os.getenv("LISTINGS_DB_PORT", "5432")

# "require" for hosted Postgres that only accepts TLS
DB_SSL = os.getenv("LISTINGS_DB_SSL")
POOL_MAX_SIZE = int(os.getenv("LISTINGS_DB_POOL_MAX", "20"))

if DATABASE_URL:
    ASYNCPG_URL = DATABASE_URL
else:
    # Validate required env vars
    if not all([DB_USER, DB_PASSWORD, DB_NAME, DB_HOST]):
        raise ValueError("Missing required LISTINGS database environment variables")

    # URL encode password to handle special characters
    encoded_password = urllib.parse.quote_plus(DB_PASSWORD)  # type: ignore[arg-type]
    ASYNCPG_URL = f"postgresql://{DB_USER}:{encoded_password}@{DB_HOST}:{DB_PORT}/{DB_NAME}"


# Global pool instance
_db_pool: asyncpg.Pool | None = None


async def create_asyncpg_pool() -> asyncpg.Pool:
    """Create the process-wide asyncpg pool"""
    pool = await asyncpg.create_pool(
        ASYNCPG_URL,
        min_size=0,
        max_size=POOL_MAX_SIZE,
        command_timeout=60,
        ssl=DB_SSL,
    )
    logger.info(f"Database pool ready (max_size={POOL_MAX_SIZE})")
    return pool


async def get_db_connection() -> asyncpg.Connection:
    """Get single asyncpg connection for simple operations"""
    return await asyncpg.connect(ASYNCPG_URL, ssl=DB_SSL)


def get_pool() -> asyncpg.Pool:
    """Get database pool with runtime check"""
    if _db_pool is None:
        raise RuntimeError("Database pool not initialized")
    return _db_pool
