"""Commitment analysis core: find under-, over- and vacation exceptions."""

from .analyzer import analyze_employee, analyze_exceptions, deduplicate_per_employee
from .date_utils import add_days, add_months, compare, format_date, is_same_day, parse_date, today
from .lookups import NameLookup
from .models import (
    AllocationException,
    Client,
    Commitment,
    DateParseError,
    DateRange,
    DomainError,
    Employee,
    ExcessVacation,
    ExceptionKind,
    InvalidDateRangeError,
    InvalidEntityError,
    OverAllocation,
    Project,
    Snapshot,
    TargetType,
    UnderAllocation,
)
from .validation import validate_snapshot

__all__ = [
    "AllocationException",
    "Client",
    "Commitment",
    "DateParseError",
    "DateRange",
    "DomainError",
    "Employee",
    "ExcessVacation",
    "ExceptionKind",
    "InvalidDateRangeError",
    "InvalidEntityError",
    "NameLookup",
    "OverAllocation",
    "Project",
    "Snapshot",
    "TargetType",
    "UnderAllocation",
    "add_days",
    "add_months",
    "analyze_employee",
    "analyze_exceptions",
    "compare",
    "deduplicate_per_employee",
    "format_date",
    "is_same_day",
    "parse_date",
    "today",
    "validate_snapshot",
]
