"""
Tests for database.py - schema, engine setup and the Store wrapper.
"""

import pytest
from decimal import Decimal
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError

from jobboard.database import Store, init_database, transaction
from jobboard.logger import StructuredLogger


class TestDatabaseInit:
    """Test database initialization."""

    def test_init_creates_database_file(self, tmp_path):
        """Test that init_database creates the database file."""
        db_path = tmp_path / "test.db"
        assert not db_path.exists()

        engine = init_database(f"sqlite:///{db_path}")
        engine.dispose()

        assert db_path.exists()

    def test_init_creates_tables(self, tmp_path):
        """Test that init_database creates both tables."""
        engine = init_database(f"sqlite:///{tmp_path / 'test.db'}")

        tables = set(inspect(engine).get_table_names())
        assert {"companies", "jobs"} <= tables
        engine.dispose()

    def test_init_creates_parent_directories(self, tmp_path):
        """Test that init_database creates parent directories if missing."""
        db_path = tmp_path / "nested" / "dir" / "test.db"
        assert not db_path.parent.exists()

        engine = init_database(f"sqlite:///{db_path}")
        engine.dispose()

        assert db_path.exists()

    def test_init_is_idempotent(self, engine, db_url):
        """Re-initializing keeps existing rows."""
        again = init_database(db_url)
        with again.connect() as conn:
            count = conn.execute(text("SELECT COUNT(*) FROM companies")).scalar()
        again.dispose()
        assert count == 3


class TestStore:
    """Test statement execution through the Store."""

    @pytest.fixture
    def quiet_logger(self):
        return StructuredLogger(name="test-store", enable_console=False, enable_file=False)

    def test_positional_placeholders(self, store):
        """$n placeholders bind to values in order."""
        rows = store.execute(
            "SELECT handle FROM companies WHERE num_employees >= $1 AND num_employees <= $2 ORDER BY handle",
            [2, 3],
        )
        assert rows == [{"handle": "c2"}, {"handle": "c3"}]

    def test_rows_are_dicts_keyed_by_alias(self, store):
        """Aliased columns come back under their alias."""
        rows = store.execute(
            'SELECT num_employees AS "numEmployees" FROM companies WHERE handle = $1', ["c1"]
        )
        assert rows == [{"numEmployees": 1}]

    def test_placeholder_reused_out_of_order(self, store):
        """A placeholder can appear anywhere in the statement."""
        rows = store.execute(
            "SELECT handle FROM companies WHERE handle = $2 OR name = $1", ["C3", "c1"]
        )
        assert sorted(r["handle"] for r in rows) == ["c1", "c3"]

    def test_ilike_on_sqlite(self, store):
        """ILIKE matches case-insensitively on SQLite."""
        rows = store.execute("SELECT handle FROM companies WHERE name ILIKE $1", ["%c2%"])
        assert rows == [{"handle": "c2"}]

    def test_decimal_values_bind(self, store):
        """Decimal values are accepted."""
        store.execute(
            "UPDATE jobs SET equity = $1 WHERE title = $2", [Decimal("0.25"), "j2"]
        )
        rows = store.execute("SELECT equity FROM jobs WHERE title = $1", ["j2"])
        assert Decimal(str(rows[0]["equity"])) == Decimal("0.25")

    def test_statement_without_rows_returns_empty_list(self, store):
        """Statements with no result set return []."""
        assert store.execute("DELETE FROM jobs WHERE title = $1", ["j3"]) == []

    def test_metrics_recorded(self, engine, quiet_logger):
        """Each execution is counted by kind and rows."""
        with engine.connect() as conn:
            store = Store(conn, logger=quiet_logger)
            store.execute("SELECT handle FROM companies")
            store.execute("SELECT handle FROM companies WHERE handle = $1", ["c1"])

        metrics = quiet_logger.get_metrics()
        assert metrics["queries_executed"] == 2
        assert metrics["rows_returned"] == 4
        assert metrics["statements_by_kind"] == {"SELECT": 2}

    def test_foreign_keys_enforced(self, store):
        """Jobs must reference an existing company."""
        with pytest.raises(IntegrityError):
            store.execute(
                "INSERT INTO jobs (title, salary, equity, company_handle) VALUES ($1, $2, $3, $4)",
                ["orphan", 1, 0, "nope"],
            )

    def test_equity_check_constraint(self, store):
        """Equity above 1 is rejected by the store."""
        with pytest.raises(IntegrityError):
            store.execute("UPDATE jobs SET equity = $1 WHERE title = $2", [1.5, "j1"])


class TestTransaction:
    """Test the transaction context manager."""

    def test_commits_on_success(self, engine):
        """Changes persist after the block exits normally."""
        with transaction(engine) as store:
            store.execute("DELETE FROM jobs WHERE title = $1", ["j3"])

        with transaction(engine) as store:
            assert store.execute("SELECT title FROM jobs WHERE title = $1", ["j3"]) == []

    def test_rolls_back_on_error(self, engine):
        """Changes are discarded when the block raises."""
        with pytest.raises(RuntimeError):
            with transaction(engine) as store:
                store.execute("DELETE FROM jobs WHERE title = $1", ["j3"])
                raise RuntimeError("boom")

        with transaction(engine) as store:
            assert store.execute("SELECT title FROM jobs WHERE title = $1", ["j3"]) == [{"title": "j3"}]
