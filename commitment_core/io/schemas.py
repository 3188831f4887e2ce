"""Column constants, list helpers, and type coercion for CSV I/O."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Input CSV column names
# ---------------------------------------------------------------------------

EMPLOYEES_COLS = [
    "employee_id",
    "name",
    "capacity_percent",
    "vacation_days",
    "billable",
]

COMMITMENTS_COLS = [
    "commitment_id",
    "employee_id",
    "target_type",
    "target_id",
    "start_date",
    "end_date",
    "percent",
]

CLIENTS_COLS = [
    "client_id",
    "name",
]

PROJECTS_COLS = [
    "project_id",
    "name",
    "client_id",
]

# ---------------------------------------------------------------------------
# Output column names
# ---------------------------------------------------------------------------

EXCEPTIONS_COLS = [
    "employee_id",
    "employee_name",
    "kind",
    "start_date",
    "end_date",
    "magnitude",
    "sources",
    "availability_date",
    "vacation_days",
]

COMMITMENT_SHEET_COLS = [
    "commitment_id",
    "employee_name",
    "target_type",
    "target_name",
    "percent",
    "start_date",
    "end_date",
]

# ---------------------------------------------------------------------------
# Pipe-separated field helpers
# ---------------------------------------------------------------------------

PIPE = "|"


def pipe_join(values: list | tuple | None) -> str:
    """Join a list into a pipe-separated string. Empty/None -> empty string."""
    if not values:
        return ""
    return PIPE.join(str(v) for v in values if v is not None and str(v).strip())


def pipe_split(value: str | None) -> list[str]:
    """Split a pipe-separated string into a list. Empty/None -> empty list."""
    if not value or not str(value).strip():
        return []
    return [v.strip() for v in str(value).split(PIPE) if v.strip()]


# ---------------------------------------------------------------------------
# Type coercion helpers for reading CSV values
# ---------------------------------------------------------------------------


def _blank(value: str | None) -> bool:
    return value is None or str(value).strip() == ""


def to_number(value: str | None, default: float = 0) -> float:
    """Coerce a CSV string to int when integral, else float. Empty/None -> default.

    Whole numbers stay ints so that magnitudes compare exactly.
    """
    if _blank(value):
        return default
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def to_int(value: str | None) -> int:
    """Coerce a CSV string to int. "5.0" is accepted, "1.5" is not.

    Raises ValueError on empty, non-numeric or non-integral input.
    """
    if _blank(value):
        raise ValueError("missing integer value")
    number = to_number(value)
    if isinstance(number, float):
        if not number.is_integer():
            raise ValueError(f"expected an integer, got {str(value).strip()!r}")
        return int(number)
    return number


def to_int_or_none(value: str | None) -> int | None:
    if _blank(value):
        return None
    return to_int(value)


def to_bool(value: str | None, default: bool = False) -> bool:
    """Coerce a CSV string to bool. TRUE/true/1/yes -> True."""
    if _blank(value):
        return default
    return str(value).strip().upper() in ("TRUE", "1", "YES")
