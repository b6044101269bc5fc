"""
Search criteria for listing companies and jobs.

Each builder turns an optional criteria record into a WHERE fragment (without
the ``WHERE`` keyword) and the values bound to its ``$n`` placeholders.
Criteria are checked in a fixed order and placeholders are numbered from 1
with no gaps. An empty fragment means "no filtering".
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .errors import InvalidArgumentError


@dataclass(frozen=True)
class CompanyFilter:
    """Optional criteria for company listings. ``None`` means absent."""

    name: Optional[str] = None
    min_employees: Optional[int] = None
    max_employees: Optional[int] = None


@dataclass(frozen=True)
class JobFilter:
    """Optional criteria for job listings. ``None`` means absent."""

    title: Optional[str] = None
    min_salary: Optional[int] = None
    has_equity: Optional[bool] = None


def company_where_clause(criteria: Optional[CompanyFilter] = None) -> Tuple[str, List[Any]]:
    """
    Build the company listing predicate.

    Order: min_employees, max_employees, name. ``name`` is a case-insensitive
    substring match and the empty string counts as absent.

    Raises:
        InvalidArgumentError: If min_employees > max_employees
    """
    criteria = criteria or CompanyFilter()
    min_employees = criteria.min_employees
    max_employees = criteria.max_employees

    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise InvalidArgumentError("Minimum employees can not be greater than maximum employees")

    where_clauses: List[str] = []
    values: List[Any] = []

    if min_employees is not None:
        values.append(min_employees)
        where_clauses.append(f"num_employees >= ${len(values)}")

    if max_employees is not None:
        values.append(max_employees)
        where_clauses.append(f"num_employees <= ${len(values)}")

    if criteria.name:
        values.append(f"%{criteria.name}%")
        where_clauses.append(f"name ILIKE ${len(values)}")

    return " AND ".join(where_clauses), values


def job_where_clause(criteria: Optional[JobFilter] = None) -> Tuple[str, List[Any]]:
    """
    Build the job listing predicate.

    Order: min_salary, title, has_equity. The equity test binds no value,
    so it never consumes a placeholder.
    """
    criteria = criteria or JobFilter()

    where_clauses: List[str] = []
    values: List[Any] = []

    if criteria.min_salary is not None:
        values.append(criteria.min_salary)
        where_clauses.append(f"salary >= ${len(values)}")

    if criteria.title:
        values.append(f"%{criteria.title}%")
        where_clauses.append(f"title ILIKE ${len(values)}")

    if criteria.has_equity is True:
        where_clauses.append("equity > 0")
    elif criteria.has_equity is False:
        where_clauses.append("equity = 0")

    return " AND ".join(where_clauses), values
