"""
CRUD operations for jobs.

Jobs are looked up by title. `equity` is a NUMERIC column and is always
read back as text ("0.043") so callers never see float rounding.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncConnection

from app.core.database import execute
from app.core.errors import DuplicateEntityError, NotFoundError
from app.core.sql import FLAG, LOWER, SUBSTRING, Predicate, check_fields, compile_filter, compile_update

logger = logging.getLogger(__name__)

JOB_COLUMNS = 'id, title, salary, CAST(equity AS TEXT) AS equity, company_handle AS "companyHandle"'

# Moving a job to another company isn't supported.
UPDATE_FIELDS = ("title", "salary", "equity")

# Salary lower bound is strict (salary > minSalary). hasEquity only filters
# when it is exactly True; False means "don't filter", not "no equity".
FILTER_GRAMMAR = (
    Predicate("title", "title", SUBSTRING),
    Predicate("minSalary", "salary", LOWER, ">"),
    Predicate("hasEquity", "equity", FLAG),
)


async def create(db: AsyncConnection, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a new job.

    Args:
        db: Database connection
        data: {title, salary, equity, companyHandle}

    Returns:
        The stored job, including its generated id

    Raises:
        DuplicateEntityError: If the title is taken
        NotFoundError: If the company doesn't exist
    """
    title = data["title"]
    duplicate = await execute(db, "SELECT title FROM jobs WHERE title = $1", [title])
    if duplicate:
        raise DuplicateEntityError(f"Duplicate job: {title}")

    company_handle = data["companyHandle"]
    company = await execute(db, "SELECT handle FROM companies WHERE handle = $1", [company_handle])
    if not company:
        raise NotFoundError(f"No company: {company_handle}")

    rows = await execute(
        db,
        f"""INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {JOB_COLUMNS}""",
        [title, data.get("salary"), data.get("equity"), company_handle]
    )
    logger.info(f"Created job {rows[0]['id']}: {title}")
    return rows[0]


async def find_all(db: AsyncConnection, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List jobs ordered by title.

    Args:
        db: Database connection
        filters: Any of {title, minSalary, hasEquity}; title is a
            case-insensitive substring match
    """
    where = compile_filter(filters or {}, FILTER_GRAMMAR)
    return await execute(
        db,
        f"""SELECT {JOB_COLUMNS}
            FROM jobs
            {where.text}
            ORDER BY title""",
        where.values
    )


async def get(db: AsyncConnection, title: str) -> Dict[str, Any]:
    """
    Get a job by title.

    Raises:
        NotFoundError: If no job has this title
    """
    rows = await execute(db, f"SELECT {JOB_COLUMNS} FROM jobs WHERE title = $1", [title])
    if not rows:
        raise NotFoundError(f"No job: {title}")
    return rows[0]


async def update(db: AsyncConnection, title: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job.

    None values are dropped before the update is built, so sending
    ``{"salary": null}`` leaves the salary as it was. 0 is kept.

    Args:
        db: Database connection
        title: Job to update
        data: Any of {title, salary, equity}

    Raises:
        BadFieldError: If data has a field outside UPDATE_FIELDS
        DuplicateEntityError: If the new title belongs to another job
        EmptyUpdateError: If no non-null fields are left
        NotFoundError: If no job has this title
    """
    check_fields(data, UPDATE_FIELDS)
    fields = {name: value for name, value in data.items() if value is not None}
    clause = compile_update(fields, {})

    new_title = fields.get("title")
    if new_title and new_title != title:
        duplicate = await execute(db, "SELECT title FROM jobs WHERE title = $1", [new_title])
        if duplicate:
            raise DuplicateEntityError(f"Duplicate job: {new_title}")

    rows = await execute(
        db,
        f"""UPDATE jobs
            SET {clause.text}
            WHERE title = ${clause.next_index}
            RETURNING {JOB_COLUMNS}""",
        [*clause.values, title]
    )
    if not rows:
        raise NotFoundError(f"No job: {title}")

    logger.info(f"Updated job {title}: {', '.join(fields)}")
    return rows[0]


async def remove(db: AsyncConnection, title: str) -> None:
    """
    Delete a job by title.

    Raises:
        NotFoundError: If no job has this title
    """
    rows = await execute(db, "DELETE FROM jobs WHERE title = $1 RETURNING id", [title])
    if not rows:
        raise NotFoundError(f"No job: {title}")
    logger.info(f"Deleted job {title}")
