from typing import Any, Dict, List, Optional, Tuple

from .errors import InvalidArgumentError


def sql_for_partial_update(
    data_to_update: Dict[str, Any],
    js_to_sql: Optional[Dict[str, str]] = None,
) -> Tuple[str, List[Any]]:
    """
    Build the SET fragment of a parameterized UPDATE from a partial record.

    Keys are translated to column names through ``js_to_sql`` and fall back to
    the key itself. Placeholders are allocated in the dict's iteration order,
    so callers can append their own predicate as ``$len(values) + 1``.

        {"firstName": "Aliya", "age": 32}, {"firstName": "first_name"}
        => ('"first_name"=$1, "age"=$2', ["Aliya", 32])

    Args:
        data_to_update: Field name -> new value, at least one entry
        js_to_sql: Field name -> SQL column name

    Returns:
        Tuple of (set_cols, values)

    Raises:
        InvalidArgumentError: If there is nothing to update
    """
    if not data_to_update:
        raise InvalidArgumentError("No data")

    js_to_sql = js_to_sql or {}
    cols = [
        f'"{js_to_sql.get(name, name)}"=${idx}'
        for idx, name in enumerate(data_to_update, start=1)
    ]
    return ", ".join(cols), list(data_to_update.values())
