"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path
from typing import Any, Dict

import pytest
from sqlalchemy import text

from jobboard.database import Store, init_database


@pytest.fixture
def db_url(tmp_path) -> str:
    """SQLite database URL inside the test's temp directory."""
    return f"sqlite:///{tmp_path / 'jobboard_test.db'}"


@pytest.fixture
def engine(db_url):
    """Initialized engine with companies c1..c3 and jobs j1..j3."""
    engine = init_database(db_url)
    with engine.begin() as conn:
        conn.execute(text("""
            INSERT INTO companies (handle, name, num_employees, description, logo_url)
            VALUES ('c1', 'C1', 1, 'Desc1', 'http://c1.img'),
                   ('c2', 'C2', 2, 'Desc2', 'http://c2.img'),
                   ('c3', 'C3', 3, 'Desc3', 'http://c3.img')"""))
        conn.execute(text("""
            INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ('j1', 100, 0.1, 'c1'),
                   ('j2', 200, 0, 'c1'),
                   ('j3', 300, NULL, 'c2')"""))
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    """Store on a connection whose transaction is rolled back after the test."""
    connection = engine.connect()
    trans = connection.begin()
    yield Store(connection)
    trans.rollback()
    connection.close()


@pytest.fixture
def new_company() -> Dict[str, Any]:
    """Valid company creation data."""
    return {
        "handle": "new",
        "name": "New",
        "description": "New Description",
        "numEmployees": 1,
        "logoUrl": "http://new.img",
    }


@pytest.fixture
def new_job() -> Dict[str, Any]:
    """Valid job creation data."""
    return {
        "title": "new job",
        "salary": 50000,
        "equity": 0.05,
        "companyHandle": "c3",
    }


@pytest.fixture
def seed_file(tmp_path) -> Path:
    """Seed file with two companies and two jobs."""
    seed_path = tmp_path / "seed.json"
    data = {
        "companies": [
            {
                "handle": "acme",
                "name": "Acme Corp",
                "description": "Anvils",
                "numEmployees": 250,
                "logoUrl": None,
            },
            {
                "handle": "beta",
                "name": "Beta Labs",
                "description": "Research",
                "numEmployees": 12,
                "logoUrl": "http://beta.img",
            },
        ],
        "jobs": [
            {"title": "Engineer", "salary": 120000, "equity": 0.01, "companyHandle": "acme"},
            {"title": "Analyst", "salary": 80000, "equity": 0, "companyHandle": "beta"},
        ],
    }
    seed_path.write_text(json.dumps(data, indent=2))
    return seed_path
