import logging
import re
from typing import Any, Dict, List, Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine
from sqlalchemy.orm import declarative_base
from app.core.config import settings

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\$(\d+)")


def _engine_options(url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"pool_pre_ping": True}  # Verify connections before using them
    if not url.startswith("sqlite"):
        options["pool_size"] = 10  # Connection pool size
        options["max_overflow"] = 20  # Allow up to 20 connections beyond pool_size
    return options


# Create SQLAlchemy async engine
engine = create_async_engine(
    settings.SQLALCHEMY_DATABASE_URL,
    **_engine_options(settings.SQLALCHEMY_DATABASE_URL)
)

# Create Base class for table models
Base = declarative_base()


async def get_db():
    """
    Dependency function to get a database connection.
    Used in FastAPI endpoints with Depends(get_db)

    The whole request runs in one transaction: committed when the endpoint
    returns, rolled back if it raises.
    """
    async with engine.begin() as conn:
        yield conn


async def execute(db: AsyncConnection, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """
    Run a query written with $1..$n positional placeholders.

    Args:
        db: Open database connection
        sql: Query text; only placeholders and allow-listed identifiers
        values: Parameters, in placeholder order

    Returns:
        Result rows as plain dicts (empty for statements without RETURNING)
    """
    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
    statement = _PLACEHOLDER.sub(r":p\1", sql)
    if db.dialect.name == "sqlite":
        # SQLite has no ILIKE; its LIKE is already case-insensitive for ASCII
        statement = statement.replace(" ILIKE ", " LIKE ")

    logger.debug(f"SQL: {' '.join(statement.split())} | params: {list(values)}")
    result = await db.execute(text(statement), params)
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings()]


async def init_db():
    """
    Initialize database.

    Creates any missing tables from the models registered on Base.
    """
    from app.models import company, job, user  # Import models to register them
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
