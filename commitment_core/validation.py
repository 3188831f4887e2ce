"""Entity checks that belong upstream of the analyzer.

The check_* helpers raise on the first problem and suit create/update
paths. validate_snapshot() collects every problem in a loaded snapshot so
an import can be reviewed before it is analyzed.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .models import (
    Client,
    Commitment,
    Employee,
    InvalidEntityError,
    Project,
    TargetType,
)


def _require_name(kind: str, name: str | None) -> None:
    if not name or not str(name).strip():
        raise InvalidEntityError(f"{kind} name is required")


def _require_percent(label: str, value: float) -> None:
    if value < 0 or value > 100:
        raise InvalidEntityError(f"{label} must be between 0 and 100")


def check_employee(employee: Employee) -> None:
    _require_name("Employee", employee.name)
    _require_percent("Capacity percent", employee.capacity_percent)
    if employee.vacation_days < 0:
        raise InvalidEntityError("Vacation days must not be negative")


def check_client(client: Client) -> None:
    _require_name("Client", client.name)


def check_project(project: Project) -> None:
    _require_name("Project", project.name)


def check_commitment(commitment: Commitment) -> None:
    _require_percent("Commitment percent", commitment.percent)
    if not isinstance(commitment.target_type, TargetType):
        raise InvalidEntityError(f"Unknown target type: {commitment.target_type!r}")
    start, end = commitment.start_date, commitment.end_date
    if start is not None and end is not None and start > end:
        raise InvalidEntityError("Start date must be before or equal to end date")


def _collect(entity: str, entity_id: int, check, value: Any, out: list[dict[str, Any]]) -> None:
    try:
        check(value)
    except InvalidEntityError as exc:
        out.append({"entity": entity, "id": entity_id, "reason": str(exc)})


def validate_snapshot(
    employees: Iterable[Employee],
    commitments: Iterable[Commitment],
    clients: Iterable[Client],
    projects: Iterable[Project],
) -> list[dict[str, Any]]:
    """Return every field and reference problem as ``{entity, id, reason}`` rows."""
    employees = list(employees)
    clients = list(clients)
    projects = list(projects)

    violations: list[dict[str, Any]] = []
    employee_ids = {e.id for e in employees}
    client_ids = {c.id for c in clients}
    project_ids = {p.id for p in projects}

    for e in employees:
        _collect("employee", e.id, check_employee, e, violations)
    for c in clients:
        _collect("client", c.id, check_client, c, violations)
    for p in projects:
        _collect("project", p.id, check_project, p, violations)
        if p.client_id is not None and p.client_id not in client_ids:
            violations.append({"entity": "project", "id": p.id, "reason": f"Client with id {p.client_id} not found"})

    for a in commitments:
        _collect("commitment", a.id, check_commitment, a, violations)
        if a.employee_id not in employee_ids:
            violations.append(
                {"entity": "commitment", "id": a.id, "reason": f"Employee with id {a.employee_id} not found"}
            )
        if a.target_type == TargetType.CLIENT and a.target_id not in client_ids:
            violations.append({"entity": "commitment", "id": a.id, "reason": f"Client with id {a.target_id} not found"})
        elif a.target_type == TargetType.PROJECT and a.target_id not in project_ids:
            violations.append(
                {"entity": "commitment", "id": a.id, "reason": f"Project with id {a.target_id} not found"}
            )

    return violations
