from typing import Any, Dict, Iterable, List

COMPANY_KEY = "handle"
COMPANY_UPDATABLE_FIELDS = ["name", "description", "numEmployees", "logoUrl"]

JOB_KEY = "title"
JOB_UPDATABLE_FIELDS = ["salary", "equity"]


def validate_update(data: Dict[str, Any], updatable: Iterable[str], key: str) -> List[str]:
    """
    Returns a list of error messages for a partial update. Empty list means valid.

    The business key can never be a SET target and only known columns may
    reach the statement. Emptiness is left to the SQL builder.
    """
    errors: List[str] = []
    allowed = set(updatable)

    if key in data:
        errors.append(f"Field '{key}' cannot be updated")

    for f in data:
        if f != key and f not in allowed:
            errors.append(f"Unknown field: {f}")

    return errors
