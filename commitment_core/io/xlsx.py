"""Render an exception report to an XLSX workbook."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from commitment_core.lookups import NameLookup
from commitment_core.models import Snapshot

from .schemas import COMMITMENT_SHEET_COLS

_EXCEPTION_HEADERS = [
    ("EmployeeName", "employee_name", 30),
    ("ExceptionType", "kind", 15),
    ("StartDate", "start_date", 15),
    ("EndDate", "end_date", 15),
    ("FreeOrExcessPercent", "magnitude", 20),
    ("SourceProjectsOrClients", "sources", 50),
    ("AvailabilityDate", "availability_date", 18),
    ("VacationDays", "vacation_days", 14),
]

_COMMITMENT_WIDTHS = [14, 30, 12, 40, 12, 15, 15]


def _get_openpyxl():
    try:
        from openpyxl import Workbook
        from openpyxl.styles import Font, PatternFill
        from openpyxl.utils import get_column_letter
        return Workbook, Font, PatternFill, get_column_letter
    except ImportError as exc:
        raise ImportError("openpyxl is required for XLSX export: pip install openpyxl") from exc


def _style_headers(worksheets):
    """Apply bold + blue fill to header row of each worksheet."""
    _, Font, PatternFill, _ = _get_openpyxl()
    header_font = Font(bold=True)
    header_fill = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
    for ws in worksheets:
        for cell in ws[1]:
            cell.font = header_font
            cell.fill = header_fill


def _set_widths(ws, widths: list[int]) -> None:
    *_, get_column_letter = _get_openpyxl()
    for idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def _exception_cells(ex: dict[str, Any]) -> list[Any]:
    cells = []
    for _, key, _ in _EXCEPTION_HEADERS:
        value = ex.get(key)
        if key == "sources":
            value = ", ".join(value or []) or "None"
        elif value is None:
            value = ""
        cells.append(value)
    return cells


def _commitment_rows(snapshot: Snapshot) -> list[list[Any]]:
    lookup = NameLookup.from_entities(snapshot.clients, snapshot.projects)
    names = {e.id: e.name for e in snapshot.employees}
    ordered = sorted(snapshot.commitments, key=lambda c: (names.get(c.employee_id, ""), c.id))
    rows = []
    for c in ordered:
        rows.append(
            [
                c.id,
                names.get(c.employee_id, ""),
                c.target_type.value,
                lookup.display_name(c),
                c.percent,
                c.start_date.isoformat() if c.start_date else "",
                c.end_date.isoformat() if c.end_date else "",
            ]
        )
    return rows


def render_xlsx(
    report: dict[str, Any],
    path: Path,
    *,
    snapshot: Snapshot | None = None,
) -> Path:
    """Render a report to a multi-sheet XLSX workbook.

    Base sheets (always): Exceptions, Summary.
    Commitments sheet when the input snapshot is provided.

    Returns the path to the written file.
    """
    Workbook, _, _, _ = _get_openpyxl()

    wb = Workbook()
    all_sheets = []

    # --- Exceptions sheet ---
    ws_exc = wb.active
    ws_exc.title = "Exceptions"
    ws_exc.append([header for header, _, _ in _EXCEPTION_HEADERS])
    for ex in report.get("exceptions", []):
        ws_exc.append(_exception_cells(ex))
    _set_widths(ws_exc, [width for _, _, width in _EXCEPTION_HEADERS])
    all_sheets.append(ws_exc)

    # --- Summary sheet ---
    ws_summary = wb.create_sheet("Summary")
    summary = report.get("summary", {})
    fields = [
        ("report_id", report.get("report_id", "")),
        ("generated_at", report.get("generated_at", "")),
        ("snapshot_id", report.get("snapshot_id", "")),
        ("range_from", report.get("range", {}).get("from", "")),
        ("range_to", report.get("range", {}).get("to", "")),
        ("total", summary.get("total", 0)),
        ("available_now", summary.get("available_now", 0)),
    ]
    fields.extend((f"count_{kind}", count) for kind, count in summary.get("by_kind", {}).items())
    fields.extend(
        [
            ("free_percent_total", summary.get("free_percent_total", 0)),
            ("excess_percent_total", summary.get("excess_percent_total", 0)),
            ("validation_issues", len(report.get("validation", []))),
        ]
    )
    ws_summary.append(["Field", "Value"])
    for name, value in fields:
        ws_summary.append([name, value])
    _set_widths(ws_summary, [24, 30])
    all_sheets.append(ws_summary)

    # --- Commitments sheet (only when the snapshot is provided) ---
    if snapshot is not None:
        ws_commit = wb.create_sheet("Commitments")
        ws_commit.append(COMMITMENT_SHEET_COLS)
        for row in _commitment_rows(snapshot):
            ws_commit.append(row)
        _set_widths(ws_commit, _COMMITMENT_WIDTHS)
        all_sheets.append(ws_commit)

    _style_headers(all_sheets)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    return path
