"""
Jobs Repository.

Business key: ``title``. The surrogate ``id`` is returned but never used
for lookup.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..database import Store
from ..errors import ConflictError, InvalidArgumentError, NotFoundError
from ..filters import JobFilter, job_where_clause
from ..logger import get_logger
from ..schema import JOB_KEY, JOB_UPDATABLE_FIELDS, validate_update
from ..sql import sql_for_partial_update


_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'


def job_record(row: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize equity to Decimal so every backend yields equal records."""
    equity = row.get("equity")
    if equity is not None and not isinstance(equity, Decimal):
        equity = Decimal(str(equity))
    return {**row, "equity": equity}


def _not_found(title: str) -> NotFoundError:
    logger = get_logger()
    logger.warning("Job not found", title=title)
    logger.record_error("NotFoundError")
    return NotFoundError(f"No job: {title}")


def create(store: Store, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a job and return it with its assigned id.

    Args:
        store: Store to run statements on
        data: {title, salary, equity, companyHandle}

    Raises:
        ConflictError: If a job with this title exists
    """
    title = data["title"]
    company_handle = data["companyHandle"]
    duplicate_check = store.execute(
        """SELECT title
           FROM jobs
           WHERE title = $1""",
        [title],
    )
    if duplicate_check:
        get_logger().warning("Duplicate job", title=title, company_handle=company_handle)
        get_logger().record_error("ConflictError")
        raise ConflictError(f"Duplicate job: {title} at {company_handle}")

    rows = store.execute(
        f"""INSERT INTO jobs
           (title, salary, equity, company_handle)
           VALUES ($1, $2, $3, $4)
           RETURNING {_COLUMNS}""",
        [title, data.get("salary"), data.get("equity"), company_handle],
    )
    get_logger().info("Job created", title=title, company_handle=company_handle)
    return job_record(rows[0])


def find_all(store: Store, criteria: Optional[JobFilter] = None) -> List[Dict[str, Any]]:
    """List jobs ordered by title, optionally filtered."""
    where, values = job_where_clause(criteria)

    query = f"""SELECT {_COLUMNS}
           FROM jobs"""
    if where:
        query += f" WHERE {where}"
    query += " ORDER BY title"

    return [job_record(row) for row in store.execute(query, values)]


def get(store: Store, title: str) -> Dict[str, Any]:
    """
    Return the job with this title.

    Raises:
        NotFoundError: If no job has this title
    """
    rows = store.execute(
        f"""SELECT {_COLUMNS}
           FROM jobs
           WHERE title = $1""",
        [title],
    )
    if not rows:
        raise _not_found(title)
    return job_record(rows[0])


def update(store: Store, title: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job; only the given fields change.

    Every job with this title is updated; the first updated row is returned.

    Args:
        store: Store to run statements on
        title: Job to update
        data: Any of {salary, equity}

    Raises:
        InvalidArgumentError: If data is empty or names a non-updatable field
        NotFoundError: If no job has this title
    """
    errors = validate_update(data, JOB_UPDATABLE_FIELDS, JOB_KEY)
    if errors:
        get_logger().record_error("InvalidArgumentError")
        raise InvalidArgumentError("; ".join(errors))

    set_cols, values = sql_for_partial_update(data)
    title_var_idx = f"${len(values) + 1}"

    rows = store.execute(
        f"""UPDATE jobs
           SET {set_cols}
           WHERE title = {title_var_idx}
           RETURNING {_COLUMNS}""",
        [*values, title],
    )
    if not rows:
        raise _not_found(title)

    get_logger().info("Job updated", title=title, fields=list(data))
    return job_record(rows[0])


def remove(store: Store, title: str) -> None:
    """
    Delete every job with this title.

    Raises:
        NotFoundError: If no job has this title
    """
    rows = store.execute(
        """DELETE
           FROM jobs
           WHERE title = $1
           RETURNING title""",
        [title],
    )
    if not rows:
        raise _not_found(title)

    get_logger().info("Job removed", title=title)
