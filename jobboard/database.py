"""
Database schema and connection management.

Tables are declared with SQLAlchemy; statements are issued as parameterized
SQL through the Store wrapper.
"""

import re
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    event,
    text,
)
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.orm import declarative_base

from .logger import StructuredLogger, get_logger

Base = declarative_base()

_PLACEHOLDER = re.compile(r"\$(\d+)")
_ILIKE = re.compile(r"\bILIKE\b", re.IGNORECASE)


class Company(Base):
    """Company table."""

    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, nullable=False, unique=True)
    num_employees = Column(Integer, CheckConstraint("num_employees >= 0"))
    description = Column(Text, nullable=False)
    logo_url = Column(Text)


class Job(Base):
    """Job table."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer, CheckConstraint("salary >= 0"))
    equity = Column(Numeric, CheckConstraint("equity >= 0 AND equity <= 1.0"))
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL.

    SQLite connections get foreign key enforcement switched on.
    """
    engine = create_engine(database_url)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def init_database(database_url: str) -> Engine:
    """
    Initialize database and create tables.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        Engine bound to the initialized database
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
    return engine


class Store:
    """
    Executes ``$n``-style parameterized statements on a connection.

    The connection and its transaction belong to the caller.
    """

    def __init__(self, connection: Connection, logger: Optional[StructuredLogger] = None):
        self.connection = connection
        self.logger = logger or get_logger()
        self._sqlite = connection.dialect.name == "sqlite"

    def execute(self, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Run a statement and return its rows as dicts.

        Args:
            sql: Statement using $1..$n placeholders
            values: Values bound to the placeholders, in order

        Returns:
            Rows keyed by column name; empty for statements without a result set
        """
        statement, params = self._prepare(sql, values)
        result = self.connection.execute(text(statement), params)
        rows = [dict(row) for row in result.mappings()] if result.returns_rows else []

        kind = sql.split(None, 1)[0].upper() if sql.strip() else ""
        self.logger.record_query(kind, len(rows))
        self.logger.debug("Executed statement", kind=kind, params=len(params), rows=len(rows))
        return rows

    def _prepare(self, sql: str, values: Sequence[Any]):
        statement = _PLACEHOLDER.sub(lambda m: f":p{m.group(1)}", sql)
        params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}

        if self._sqlite:
            # SQLite LIKE is case-insensitive for ASCII and has no ILIKE
            statement = _ILIKE.sub("LIKE", statement)
            params = {
                k: (str(v) if isinstance(v, Decimal) else v) for k, v in params.items()
            }

        return statement, params


@contextmanager
def transaction(engine: Engine) -> Iterator[Store]:
    """Yield a Store in a transaction that commits on success and rolls back on error."""
    with engine.begin() as connection:
        yield Store(connection)
