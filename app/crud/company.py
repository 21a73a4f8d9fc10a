"""
CRUD operations for companies.

Queries are written against the `companies` table directly; partial
updates and list filters go through the clause builders in app.core.sql.
Rows come back with camelCase keys (``numEmployees``, ``logoUrl``).
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncConnection

from app.core.database import execute
from app.core.errors import BadRequestError, DuplicateEntityError, NotFoundError
from app.core.sql import LOWER, SUBSTRING, UPPER, Predicate, check_fields, compile_filter, compile_update

logger = logging.getLogger(__name__)

# Output field -> column
FIELD_TO_COLUMN = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

COMPANY_FIELDS = ("handle", "name", "description", "numEmployees", "logoUrl")

# Fields a PATCH may touch. `handle` is the key and can't be changed.
# None is a real value here: it clears the column.
UPDATE_FIELDS = ("name", "description", "numEmployees", "logoUrl")

# Columns that are NOT NULL, so None can't clear them.
REQUIRED_FIELDS = ("name",)

# Falsy criteria (None, 0, "") don't filter.
FILTER_GRAMMAR = (
    Predicate("minEmployees", "num_employees", LOWER, ">="),
    Predicate("maxEmployees", "num_employees", UPPER, "<="),
    Predicate("nameLike", "name", SUBSTRING),
)


def _select_list(fields: Sequence[str]) -> str:
    parts = []
    for name in fields:
        column = FIELD_TO_COLUMN.get(name, name)
        parts.append(column if column == name else f'{column} AS "{name}"')
    return ", ".join(parts)


def selectable_columns(criteria: Mapping[str, Any]) -> List[str]:
    """
    Pick the fields a company listing returns.

    An unfiltered listing returns every field. A filtered one leaves out
    `numEmployees` unless an employee-count bound was part of the filter.
    """
    if not any(criteria.get(p.key) for p in FILTER_GRAMMAR):
        return list(COMPANY_FIELDS)
    if criteria.get("minEmployees") or criteria.get("maxEmployees"):
        return list(COMPANY_FIELDS)
    return [name for name in COMPANY_FIELDS if name != "numEmployees"]


async def _check_name_free(db: AsyncConnection, name: str, handle: Optional[str] = None) -> None:
    """Raise DuplicateEntityError if a company other than `handle` uses `name`."""
    rows = await execute(db, "SELECT handle FROM companies WHERE name = $1", [name])
    if any(row["handle"] != handle for row in rows):
        raise DuplicateEntityError(f"Duplicate company name: {name}")


async def create(db: AsyncConnection, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a new company.

    Args:
        db: Database connection
        data: {handle, name, description, numEmployees, logoUrl}

    Returns:
        The stored company

    Raises:
        DuplicateEntityError: If the handle or the name is taken
    """
    handle = data["handle"]
    duplicate = await execute(db, "SELECT handle FROM companies WHERE handle = $1", [handle])
    if duplicate:
        raise DuplicateEntityError(f"Duplicate company: {handle}")
    await _check_name_free(db, data["name"])

    rows = await execute(
        db,
        f"""INSERT INTO companies (handle, name, description, num_employees, logo_url)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {_select_list(COMPANY_FIELDS)}""",
        [
            handle,
            data["name"],
            data.get("description"),
            data.get("numEmployees"),
            data.get("logoUrl"),
        ]
    )
    logger.info(f"Created company {handle}")
    return rows[0]


async def find_all(db: AsyncConnection, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name, optionally filtered.

    Args:
        db: Database connection
        filters: Any of {minEmployees, maxEmployees, nameLike}

    Raises:
        InvalidRangeError: If minEmployees > maxEmployees
    """
    filters = filters or {}
    where = compile_filter(filters, FILTER_GRAMMAR)
    return await execute(
        db,
        f"""SELECT {_select_list(selectable_columns(filters))}
            FROM companies
            {where.text}
            ORDER BY name""",
        where.values
    )


async def get(db: AsyncConnection, handle: str) -> Dict[str, Any]:
    """
    Get a company with its jobs.

    `jobs` ([{id, title, salary, equity}]) is only present when the company
    has at least one job; clients rely on the key being absent otherwise.

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = await execute(
        db,
        f"SELECT {_select_list(COMPANY_FIELDS)} FROM companies WHERE handle = $1",
        [handle]
    )
    if not rows:
        raise NotFoundError(f"No company: {handle}")
    company = rows[0]

    jobs = await execute(
        db,
        """SELECT id, title, salary, CAST(equity AS TEXT) AS equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [handle]
    )
    if jobs:
        company["jobs"] = jobs
    return company


async def update(db: AsyncConnection, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; only the fields given are changed.

    Args:
        db: Database connection
        handle: Company to update
        data: Any of {name, description, numEmployees, logoUrl}

    Raises:
        BadFieldError: If data has a field outside UPDATE_FIELDS
        BadRequestError: If a REQUIRED_FIELDS member is set to None
        DuplicateEntityError: If the new name belongs to another company
        EmptyUpdateError: If data is empty
        NotFoundError: If no company has this handle
    """
    check_fields(data, UPDATE_FIELDS)
    for name in REQUIRED_FIELDS:
        if name in data and data[name] is None:
            raise BadRequestError(f"{name} cannot be null")
    clause = compile_update(data, FIELD_TO_COLUMN)
    if data.get("name"):
        await _check_name_free(db, data["name"], handle)

    rows = await execute(
        db,
        f"""UPDATE companies
            SET {clause.text}
            WHERE handle = ${clause.next_index}
            RETURNING {_select_list(COMPANY_FIELDS)}""",
        [*clause.values, handle]
    )
    if not rows:
        raise NotFoundError(f"No company: {handle}")

    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return rows[0]


async def remove(db: AsyncConnection, handle: str) -> None:
    """
    Delete a company (its jobs go with it).

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = await execute(db, "DELETE FROM companies WHERE handle = $1 RETURNING handle", [handle])
    if not rows:
        raise NotFoundError(f"No company: {handle}")
    logger.info(f"Deleted company {handle}")
