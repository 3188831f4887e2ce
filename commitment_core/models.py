"""Entity snapshots, the analysis window, and analyzer output types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, ClassVar


class DomainError(ValueError):
    """Base class for invalid input handed to the commitment core."""


class InvalidDateRangeError(DomainError):
    pass


class InvalidEntityError(DomainError):
    pass


class DateParseError(DomainError):
    pass


class TargetType(str, Enum):
    CLIENT = "CLIENT"
    PROJECT = "PROJECT"


class ExceptionKind(str, Enum):
    UNDER = "UNDER"
    OVER = "OVER"
    VACATION = "VACATION"


@dataclass(frozen=True)
class Employee:
    id: int
    name: str
    capacity_percent: float
    vacation_days: float = 0
    billable: bool = True


@dataclass(frozen=True)
class Client:
    id: int
    name: str


@dataclass(frozen=True)
class Project:
    id: int
    name: str
    client_id: int | None = None


@dataclass(frozen=True)
class Commitment:
    """A percentage of an employee's time promised to a client or project.

    Both dates are inclusive. ``None`` leaves that side unbounded.
    """

    id: int
    employee_id: int
    target_type: TargetType
    target_id: int
    start_date: date | None
    end_date: date | None
    percent: float

    def is_active(self, interval_start: date, interval_end: date) -> bool:
        """True if active anywhere in the half-open ``[interval_start, interval_end)``."""
        starts_before_end = self.start_date is None or self.start_date < interval_end
        ends_after_start = self.end_date is None or self.end_date >= interval_start
        return starts_before_end and ends_after_start


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidDateRangeError(
                f"Invalid date range: {self.start.isoformat()} is after {self.end.isoformat()}"
            )
        # The analyzer needs the day after the window as a change point.
        if self.end == date.max:
            raise InvalidDateRangeError(f"Invalid date range: end must be before {date.max.isoformat()}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class Snapshot:
    """One consistent set of entities handed to the analyzer."""

    employees: tuple[Employee, ...] = ()
    commitments: tuple[Commitment, ...] = ()
    clients: tuple[Client, ...] = ()
    projects: tuple[Project, ...] = ()
    snapshot_id: str = ""


# ---------------------------------------------------------------------------
# Analyzer output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AllocationException:
    employee_id: int
    employee_name: str
    start_date: date
    end_date: date
    magnitude: float
    availability_date: date

    kind: ClassVar[ExceptionKind]

    @property
    def is_allocation(self) -> bool:
        return self.kind is not ExceptionKind.VACATION

    def as_dict(self) -> dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "kind": self.kind.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "magnitude": self.magnitude,
            "sources": list(getattr(self, "sources", ())),
            "availability_date": self.availability_date.isoformat(),
            "vacation_days": getattr(self, "vacation_days", None),
        }


@dataclass(frozen=True)
class UnderAllocation(AllocationException):
    # Only set when the period was reclassified as "fully committed until".
    sources: tuple[str, ...] = field(default=())

    kind: ClassVar[ExceptionKind] = ExceptionKind.UNDER

    @property
    def reclassified(self) -> bool:
        return bool(self.sources)


@dataclass(frozen=True)
class OverAllocation(AllocationException):
    sources: tuple[str, ...] = field(default=())

    kind: ClassVar[ExceptionKind] = ExceptionKind.OVER


@dataclass(frozen=True)
class ExcessVacation(AllocationException):
    vacation_days: float = 0

    kind: ClassVar[ExceptionKind] = ExceptionKind.VACATION
