"""
Load companies and jobs from a JSON seed file.

Format:
    {"companies": [{handle, name, description, numEmployees, logoUrl}, ...],
     "jobs": [{title, salary, equity, companyHandle}, ...]}
"""

import json
from decimal import Decimal
from pathlib import Path
from typing import Dict

from .database import Store
from .errors import ConflictError
from .logger import get_logger
from .repositories import companies, jobs


def seed_from_json(path: Path, store: Store) -> Dict[str, int]:
    """
    Insert every record in the file, skipping duplicates.

    Companies go first so jobs can reference them.

    Args:
        path: Path to the seed JSON file
        store: Store to insert through

    Returns:
        Counts: {"companies": n, "jobs": n, "skipped": n}
    """
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f, parse_float=Decimal)

    counts = {"companies": 0, "jobs": 0, "skipped": 0}

    for company in data.get("companies", []):
        try:
            companies.create(store, company)
            counts["companies"] += 1
        except ConflictError:
            counts["skipped"] += 1

    for job in data.get("jobs", []):
        try:
            jobs.create(store, job)
            counts["jobs"] += 1
        except ConflictError:
            counts["skipped"] += 1

    get_logger().info(f"Seeded {path}", **counts)
    return counts
