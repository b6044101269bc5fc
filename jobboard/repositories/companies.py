"""
Companies Repository.

Business key: ``handle``. Records use the API field names
(numEmployees, logoUrl).
"""

from typing import Any, Dict, List, Optional

from ..database import Store
from ..errors import ConflictError, InvalidArgumentError, NotFoundError
from ..filters import CompanyFilter, company_where_clause
from ..logger import get_logger
from ..schema import COMPANY_KEY, COMPANY_UPDATABLE_FIELDS, validate_update
from ..sql import sql_for_partial_update
from .jobs import job_record


COLUMN_NAMES = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

_COLUMNS = ('handle, name, description, '
            'num_employees AS "numEmployees", logo_url AS "logoUrl"')


def _not_found(handle: str) -> NotFoundError:
    logger = get_logger()
    logger.warning("Company not found", handle=handle)
    logger.record_error("NotFoundError")
    return NotFoundError(f"No company: {handle}")


def create(store: Store, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a company and return it as stored.

    Args:
        store: Store to run statements on
        data: {handle, name, description, numEmployees, logoUrl}

    Raises:
        ConflictError: If the handle is already taken
    """
    handle = data["handle"]
    duplicate_check = store.execute(
        """SELECT handle
           FROM companies
           WHERE handle = $1""",
        [handle],
    )
    if duplicate_check:
        get_logger().warning("Duplicate company", handle=handle)
        get_logger().record_error("ConflictError")
        raise ConflictError(f"Duplicate company: {handle}")

    rows = store.execute(
        f"""INSERT INTO companies
           (handle, name, description, num_employees, logo_url)
           VALUES ($1, $2, $3, $4, $5)
           RETURNING {_COLUMNS}""",
        [
            handle,
            data["name"],
            data["description"],
            data.get("numEmployees"),
            data.get("logoUrl"),
        ],
    )
    get_logger().info("Company created", handle=handle)
    return rows[0]


def find_all(store: Store, criteria: Optional[CompanyFilter] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name, optionally filtered.

    Raises:
        InvalidArgumentError: If min_employees > max_employees
    """
    where, values = company_where_clause(criteria)

    query = f"""SELECT {_COLUMNS}
           FROM companies"""
    if where:
        query += f" WHERE {where}"
    query += " ORDER BY name"

    return store.execute(query, values)


def get(store: Store, handle: str) -> Dict[str, Any]:
    """
    Return a company with its jobs.

    Jobs are [{id, title, salary, equity}, ...] in the order the join
    returns them.

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = store.execute(
        """SELECT c.handle,
                  c.name,
                  c.description,
                  c.num_employees AS "numEmployees",
                  c.logo_url AS "logoUrl",
                  j.id AS "jobId",
                  j.title AS "jobTitle",
                  j.salary AS "jobSalary",
                  j.equity AS "jobEquity"
           FROM companies AS c
           LEFT JOIN jobs AS j ON c.handle = j.company_handle
           WHERE c.handle = $1""",
        [handle],
    )
    if not rows:
        raise _not_found(handle)

    first = rows[0]
    company = {
        "handle": first["handle"],
        "name": first["name"],
        "description": first["description"],
        "numEmployees": first["numEmployees"],
        "logoUrl": first["logoUrl"],
    }
    # LEFT JOIN yields a single all-NULL job row for companies without jobs
    company["jobs"] = [
        job_record({
            "id": row["jobId"],
            "title": row["jobTitle"],
            "salary": row["jobSalary"],
            "equity": row["jobEquity"],
        })
        for row in rows
        if row["jobId"] is not None
    ]
    return company


def update(store: Store, handle: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; only the given fields change.

    Args:
        store: Store to run statements on
        handle: Company to update
        data: Any of {name, description, numEmployees, logoUrl}

    Raises:
        InvalidArgumentError: If data is empty or names a non-updatable field
        NotFoundError: If no company has this handle
    """
    errors = validate_update(data, COMPANY_UPDATABLE_FIELDS, COMPANY_KEY)
    if errors:
        get_logger().record_error("InvalidArgumentError")
        raise InvalidArgumentError("; ".join(errors))

    set_cols, values = sql_for_partial_update(data, COLUMN_NAMES)
    handle_var_idx = f"${len(values) + 1}"

    rows = store.execute(
        f"""UPDATE companies
           SET {set_cols}
           WHERE handle = {handle_var_idx}
           RETURNING {_COLUMNS}""",
        [*values, handle],
    )
    if not rows:
        raise _not_found(handle)

    get_logger().info("Company updated", handle=handle, fields=list(data))
    return rows[0]


def remove(store: Store, handle: str) -> None:
    """
    Delete a company (its jobs go with it).

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = store.execute(
        """DELETE
           FROM companies
           WHERE handle = $1
           RETURNING handle""",
        [handle],
    )
    if not rows:
        raise _not_found(handle)

    get_logger().info("Company removed", handle=handle)
