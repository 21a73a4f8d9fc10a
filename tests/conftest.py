"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- A seeded SQLite database per test
- Database connections for repository tests
- FastAPI test client
- Auth headers for a regular user and an admin
"""

import asyncio
import os
import sqlite3
from decimal import Decimal

# Must be set before app.core.config is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JSON_LOGS"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from app.core.database import Base, execute, get_db
from app.core.security import create_access_token
from app.crud import company as company_crud
from app.crud import job as job_crud
from app.crud import user as user_crud
from app import models  # noqa: F401  registers tables on Base
from main import app

# sqlite3 can't bind Decimal; the NUMERIC column converts the text back
sqlite3.register_adapter(Decimal, str)


async def seed_database(db):
    """
    Seed the fixture data set.

    companies: c1, c2, c3 with 1, 2, 3 employees
    jobs: j1 (c1, 110000, 0), j2 (c2, 200000, 0), j3 (c3, 55000, 0),
          j4 (c2, 89000, 0.043)
    users: u1, u2 (regular), u3 (admin); u2 has applied to j4
    """
    for n in (1, 2, 3):
        await company_crud.create(db, {
            "handle": f"c{n}",
            "name": f"C{n}",
            "description": f"Desc{n}",
            "numEmployees": n,
            "logoUrl": f"http://c{n}.img",
        })

    for n in (1, 2, 3):
        await user_crud.register(db, {
            "username": f"u{n}",
            "password": f"password{n}",
            "firstName": f"U{n}F",
            "lastName": f"U{n}L",
            "email": f"user{n}@user.com",
            "isAdmin": n == 3,
        })

    jobs = [
        ("j1", 110000, "0", "c1"),
        ("j2", 200000, "0", "c2"),
        ("j3", 55000, "0", "c3"),
        ("j4", 89000, "0.043", "c2"),
    ]
    for title, salary, equity, handle in jobs:
        await job_crud.create(db, {
            "title": title,
            "salary": salary,
            "equity": equity,
            "companyHandle": handle,
        })

    j4 = await execute(db, "SELECT id FROM jobs WHERE title = $1", ["j4"])
    await execute(db, "INSERT INTO applications (username, job_id) VALUES ($1, $2)", ["u2", j4[0]["id"]])


async def _create_and_seed(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await seed_database(conn)


@pytest.fixture
def engine(tmp_path):
    """
    File-backed SQLite engine, fresh for each test.

    NullPool opens a new connection per use, so the same engine works from
    both the test's event loop and the TestClient's.
    """
    return create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)


@pytest_asyncio.fixture
async def db(engine):
    """
    Seeded connection for repository tests.
    Everything the test does is rolled back afterwards.
    """
    await _create_and_seed(engine)
    async with engine.connect() as conn:
        transaction = await conn.begin()
        try:
            yield conn
        finally:
            await transaction.rollback()
    await engine.dispose()


@pytest.fixture
def client(engine):
    """
    FastAPI test client with overridden database dependency.
    """
    asyncio.run(_create_and_seed(engine))

    async def override_get_db():
        async with engine.begin() as conn:
            yield conn

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def user_headers():
    """Bearer headers for u1, a regular user"""
    return {"Authorization": f"Bearer {create_access_token('u1', False)}"}


@pytest.fixture
def admin_headers():
    """Bearer headers for u3, an admin"""
    return {"Authorization": f"Bearer {create_access_token('u3', True)}"}
