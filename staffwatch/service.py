"""Application use cases around the commitment analyzer."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Any
from uuid import uuid4

from commitment_core.analyzer import analyze_employee, analyze_exceptions
from commitment_core.date_utils import add_months, today
from commitment_core.io import summarize_exceptions
from commitment_core.lookups import NameLookup
from commitment_core.models import AllocationException, DateRange, Snapshot
from commitment_core.validation import validate_snapshot

from .config import DEFAULT_WINDOW_MONTHS

logger = logging.getLogger(__name__)

UTC = timezone.utc


def now_utc_iso() -> str:
    return datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


class ExceptionService:
    """Runs the analyzer over one snapshot with the default query window.

    Without explicit dates the window starts today and spans
    ``window_months`` calendar months.
    """

    def __init__(
        self,
        snapshot: Snapshot,
        *,
        tz: tzinfo | None = None,
        window_months: int = DEFAULT_WINDOW_MONTHS,
    ):
        self.snapshot = snapshot
        self.tz = tz
        self.window_months = window_months

    def resolve_window(self, from_date: date | None = None, to_date: date | None = None) -> DateRange:
        start = from_date or today(self.tz)
        end = to_date or add_months(start, self.window_months)
        return DateRange(start, end)

    def get_exceptions(
        self, from_date: date | None = None, to_date: date | None = None
    ) -> list[AllocationException]:
        window = self.resolve_window(from_date, to_date)
        s = self.snapshot
        exceptions = analyze_exceptions(
            s.employees, s.commitments, s.clients, s.projects, window.start, window.end
        )
        logger.info(
            "Found %d exceptions for %d employees between %s and %s",
            len(exceptions),
            len(s.employees),
            window.start,
            window.end,
        )
        return exceptions

    def build_report(self, from_date: date | None = None, to_date: date | None = None) -> dict[str, Any]:
        window = self.resolve_window(from_date, to_date)
        exceptions = self.get_exceptions(window.start, window.end)

        s = self.snapshot
        violations = validate_snapshot(s.employees, s.commitments, s.clients, s.projects)
        if violations:
            logger.warning("Snapshot %s has %d validation issues", s.snapshot_id or "-", len(violations))

        return {
            "report_id": f"report-{uuid4().hex[:12]}",
            "generated_at": now_utc_iso(),
            "snapshot_id": s.snapshot_id,
            "range": {"from": window.start.isoformat(), "to": window.end.isoformat()},
            "exceptions": [ex.as_dict() for ex in exceptions],
            "summary": summarize_exceptions(exceptions, window),
            "validation": violations,
        }

    def employee_timeline(
        self,
        employee_id: int,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[AllocationException]:
        """Every UNDER/OVER period of one employee, before per-employee deduplication."""
        employee = next((e for e in self.snapshot.employees if e.id == employee_id), None)
        if employee is None:
            raise KeyError(f"employee_id not found: {employee_id}")

        window = self.resolve_window(from_date, to_date)
        lookup = NameLookup.from_entities(self.snapshot.clients, self.snapshot.projects)
        return analyze_employee(employee, self.snapshot.commitments, window, lookup)
