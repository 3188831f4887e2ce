"""Write an exception report to exceptions.csv and summary.json.

The report is the dict assembled by the application layer: metadata, the
exceptions as plain dicts (see AllocationException.as_dict) and a summary.
"""

from __future__ import annotations

import csv
import json
from collections import Counter
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from commitment_core.models import (
    AllocationException,
    DateRange,
    ExceptionKind,
    UnderAllocation,
)

from .schemas import EXCEPTIONS_COLS, pipe_join


def summarize_exceptions(exceptions: Iterable[AllocationException], window: DateRange) -> dict[str, Any]:
    """Aggregate counts and totals for a list of analyzer results."""
    exceptions = list(exceptions)
    kinds = Counter(ex.kind.value for ex in exceptions)
    availability = sorted(ex.availability_date for ex in exceptions)

    return {
        "range_from": window.start.isoformat(),
        "range_to": window.end.isoformat(),
        "total": len(exceptions),
        "employees": len({ex.employee_id for ex in exceptions}),
        "available_now": sum(1 for ex in exceptions if ex.availability_date == window.start),
        "by_kind": {k.value: kinds.get(k.value, 0) for k in ExceptionKind},
        "free_percent_total": sum(ex.magnitude for ex in exceptions if ex.kind is ExceptionKind.UNDER),
        "excess_percent_total": sum(ex.magnitude for ex in exceptions if ex.kind is ExceptionKind.OVER),
        "reclassified_under": sum(1 for ex in exceptions if isinstance(ex, UnderAllocation) and ex.reclassified),
        "earliest_availability": availability[0].isoformat() if availability else None,
        "latest_availability": availability[-1].isoformat() if availability else None,
    }


def _exception_row(ex: dict[str, Any]) -> dict[str, Any]:
    vacation = ex.get("vacation_days")
    return {
        "employee_id": ex.get("employee_id", ""),
        "employee_name": ex.get("employee_name", ""),
        "kind": ex.get("kind", ""),
        "start_date": ex.get("start_date", ""),
        "end_date": ex.get("end_date", ""),
        "magnitude": ex.get("magnitude", 0),
        "sources": pipe_join(ex.get("sources", [])),
        "availability_date": ex.get("availability_date", ""),
        "vacation_days": vacation if vacation is not None else "",
    }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def write_output(report: dict[str, Any], directory: Path) -> dict[str, Path]:
    """Write exceptions.csv and summary.json. Returns {filename: Path}."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    csv_path = directory / "exceptions.csv"
    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=EXCEPTIONS_COLS)
        writer.writeheader()
        writer.writerows(_exception_row(ex) for ex in report.get("exceptions", []))

    summary = {
        "report_id": report.get("report_id", ""),
        "generated_at": report.get("generated_at", ""),
        "snapshot_id": report.get("snapshot_id", ""),
        "range_from": report.get("range", {}).get("from", ""),
        "range_to": report.get("range", {}).get("to", ""),
        "summary": report.get("summary", {}),
        "validation_issues": len(report.get("validation", [])),
    }
    summary_path = directory / "summary.json"
    summary_path.write_text(
        json.dumps(summary, indent=2, ensure_ascii=False, default=str) + "\n",
        encoding="utf-8",
    )

    return {"exceptions.csv": csv_path, "summary.json": summary_path}
