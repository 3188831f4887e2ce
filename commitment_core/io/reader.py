"""Read a CSV input directory into a Snapshot for the analyzer."""

from __future__ import annotations

import csv
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from commitment_core.date_utils import parse_optional_date
from commitment_core.models import (
    Client,
    Commitment,
    Employee,
    Project,
    Snapshot,
    TargetType,
)

from .schemas import to_bool, to_int, to_int_or_none, to_number

T = TypeVar("T")


def load_input(directory: Path) -> tuple[Snapshot, dict[str, Any]]:
    """Read CSV input dir -> (snapshot, meta_dict).

    meta.json is optional; the four CSV files are required.
    Raises FileNotFoundError if a required file is missing and ValueError
    (naming file and line) for malformed rows.
    """
    d = Path(directory)

    meta_path = d / "meta.json"
    meta_dict = _read_json(meta_path) if meta_path.exists() else {}

    employees = _parse_rows(d / "employees.csv", _employee)
    clients = _parse_rows(d / "clients.csv", _client)
    projects = _parse_rows(d / "projects.csv", _project)
    commitments = _parse_rows(d / "commitments.csv", _commitment)

    snapshot = Snapshot(
        employees=tuple(employees),
        commitments=tuple(commitments),
        clients=tuple(clients),
        projects=tuple(projects),
        snapshot_id=str(meta_dict.get("snapshot_id", "")),
    )
    return snapshot, meta_dict


# ---------------------------------------------------------------------------
# Row parsers
# ---------------------------------------------------------------------------


def _employee(row: dict[str, str]) -> Employee:
    return Employee(
        id=to_int(row.get("employee_id")),
        name=(row.get("name") or "").strip(),
        capacity_percent=to_number(row.get("capacity_percent")),
        vacation_days=to_number(row.get("vacation_days")),
        billable=to_bool(row.get("billable"), default=True),
    )


def _client(row: dict[str, str]) -> Client:
    return Client(id=to_int(row.get("client_id")), name=(row.get("name") or "").strip())


def _project(row: dict[str, str]) -> Project:
    return Project(
        id=to_int(row.get("project_id")),
        name=(row.get("name") or "").strip(),
        client_id=to_int_or_none(row.get("client_id")),
    )


def _commitment(row: dict[str, str]) -> Commitment:
    return Commitment(
        id=to_int(row.get("commitment_id")),
        employee_id=to_int(row.get("employee_id")),
        target_type=TargetType((row.get("target_type") or "").strip().upper()),
        target_id=to_int(row.get("target_id")),
        start_date=parse_optional_date(row.get("start_date")),
        end_date=parse_optional_date(row.get("end_date")),
        percent=to_number(row.get("percent")),
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _parse_rows(path: Path, parse: Callable[[dict[str, str]], T]) -> list[T]:
    out: list[T] = []
    # Line 1 is the header.
    for line_no, row in enumerate(_read_csv(path), start=2):
        try:
            out.append(parse(row))
        except ValueError as exc:
            raise ValueError(f"{path.name} line {line_no}: {exc}") from exc
    return out


def _read_json(path: Path) -> dict:
    """Read and parse a JSON file."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _read_csv(path: Path) -> list[dict[str, str]]:
    """Read a CSV file into a list of dicts via csv.DictReader."""
    if not path.exists():
        raise FileNotFoundError(f"Required file not found: {path}")
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))
