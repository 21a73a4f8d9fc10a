"""
CRUD operations for users and their job applications.

Password hashing runs in the threadpool so bcrypt doesn't stall the event
loop.
"""

import logging
from typing import Any, Dict, List, Mapping

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncConnection

from app.core.database import execute
from app.core.errors import DuplicateEntityError, NotFoundError, UnauthorizedError
from app.core.security import get_password_hash, verify_password
from app.core.sql import check_fields, compile_update

logger = logging.getLogger(__name__)

FIELD_TO_COLUMN = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}

USER_COLUMNS = 'username, first_name AS "firstName", last_name AS "lastName", email, is_admin AS "isAdmin"'

# Username and admin flag can't be changed through an update.
UPDATE_FIELDS = ("firstName", "lastName", "password", "email")


async def register(db: AsyncConnection, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Register a new user.

    Args:
        db: Database connection
        data: {username, password, firstName, lastName, email, isAdmin}

    Returns:
        The stored user, without the password

    Raises:
        DuplicateEntityError: If the username is taken
    """
    username = data["username"]
    duplicate = await execute(db, "SELECT username FROM users WHERE username = $1", [username])
    if duplicate:
        raise DuplicateEntityError(f"Duplicate username: {username}")

    hashed_password = await run_in_threadpool(get_password_hash, data["password"])
    rows = await execute(
        db,
        f"""INSERT INTO users (username, password, first_name, last_name, email, is_admin)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {USER_COLUMNS}""",
        [
            username,
            hashed_password,
            data["firstName"],
            data["lastName"],
            data["email"],
            bool(data.get("isAdmin", False)),
        ]
    )
    logger.info(f"Registered user {username} (admin: {rows[0]['isAdmin']})")
    return rows[0]


async def authenticate(db: AsyncConnection, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Returns:
        The user, without the password

    Raises:
        UnauthorizedError: If the user doesn't exist or the password is wrong
    """
    rows = await execute(
        db,
        f"SELECT {USER_COLUMNS}, password FROM users WHERE username = $1",
        [username]
    )
    if rows:
        user = rows[0]
        hashed_password = user.pop("password")
        if await run_in_threadpool(verify_password, password, hashed_password):
            return user

    logger.warning(f"Failed login for {username}")
    raise UnauthorizedError("Invalid username/password")


async def find_all(db: AsyncConnection) -> List[Dict[str, Any]]:
    """List all users ordered by username."""
    return await execute(db, f"SELECT {USER_COLUMNS} FROM users ORDER BY username")


async def get(db: AsyncConnection, username: str) -> Dict[str, Any]:
    """
    Get a user with the ids of the jobs they applied to.

    `jobs` is omitted when the user has no applications.

    Raises:
        NotFoundError: If no user has this username
    """
    rows = await execute(db, f"SELECT {USER_COLUMNS} FROM users WHERE username = $1", [username])
    if not rows:
        raise NotFoundError(f"No user: {username}")
    user = rows[0]

    applications = await execute(
        db,
        "SELECT job_id FROM applications WHERE username = $1 ORDER BY job_id",
        [username]
    )
    if applications:
        user["jobs"] = [row["job_id"] for row in applications]
    return user


async def update(db: AsyncConnection, username: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a user.

    None values are dropped (every user column is NOT NULL). A new password
    is hashed before it is stored.

    Raises:
        BadFieldError: If data has a field outside UPDATE_FIELDS
        EmptyUpdateError: If no non-null fields are left
        NotFoundError: If no user has this username
    """
    check_fields(data, UPDATE_FIELDS)
    fields = {name: value for name, value in data.items() if value is not None}
    if "password" in fields:
        fields["password"] = await run_in_threadpool(get_password_hash, fields["password"])

    clause = compile_update(fields, FIELD_TO_COLUMN)
    rows = await execute(
        db,
        f"""UPDATE users
            SET {clause.text}
            WHERE username = ${clause.next_index}
            RETURNING {USER_COLUMNS}""",
        [*clause.values, username]
    )
    if not rows:
        raise NotFoundError(f"No user: {username}")

    logger.info(f"Updated user {username}: {', '.join(fields)}")
    return rows[0]


async def remove(db: AsyncConnection, username: str) -> None:
    """
    Delete a user.

    Raises:
        NotFoundError: If no user has this username
    """
    rows = await execute(db, "DELETE FROM users WHERE username = $1 RETURNING username", [username])
    if not rows:
        raise NotFoundError(f"No user: {username}")
    logger.info(f"Deleted user {username}")


async def apply_to_job(db: AsyncConnection, username: str, job_id: int) -> int:
    """
    Record that a user applied to a job.

    Returns:
        The job id

    Raises:
        NotFoundError: If the user or the job doesn't exist
        DuplicateEntityError: If the user already applied to this job
    """
    if not await execute(db, "SELECT id FROM jobs WHERE id = $1", [job_id]):
        raise NotFoundError(f"No job: {job_id}")
    if not await execute(db, "SELECT username FROM users WHERE username = $1", [username]):
        raise NotFoundError(f"No user: {username}")

    existing = await execute(
        db,
        "SELECT job_id FROM applications WHERE username = $1 AND job_id = $2",
        [username, job_id]
    )
    if existing:
        raise DuplicateEntityError(f"{username} already applied to job {job_id}")

    await execute(db, "INSERT INTO applications (username, job_id) VALUES ($1, $2)", [username, job_id])
    logger.info(f"User {username} applied to job {job_id}")
    return job_id
