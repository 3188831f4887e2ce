from datetime import date

import pytest

from commitment_core.models import (
    Client,
    Commitment,
    Employee,
    InvalidEntityError,
    Project,
    TargetType,
)
from commitment_core.validation import (
    check_commitment,
    check_employee,
    check_project,
    validate_snapshot,
)


def _commitment(**overrides):
    fields = dict(
        id=1,
        employee_id=1,
        target_type=TargetType.PROJECT,
        target_id=1,
        start_date=date(2026, 1, 1),
        end_date=date(2026, 1, 31),
        percent=50,
    )
    fields.update(overrides)
    return Commitment(**fields)


class TestChecks:
    def test_valid_employee(self):
        check_employee(Employee(1, "Anna", 100, 3))

    @pytest.mark.parametrize(
        "employee, message",
        [
            (Employee(1, "  ", 100), "name is required"),
            (Employee(1, "Anna", 120), "Capacity percent"),
            (Employee(1, "Anna", -1), "Capacity percent"),
            (Employee(1, "Anna", 100, -2), "Vacation days"),
        ],
    )
    def test_invalid_employee(self, employee, message):
        with pytest.raises(InvalidEntityError, match=message):
            check_employee(employee)

    def test_project_requires_name(self):
        with pytest.raises(InvalidEntityError, match="Project name is required"):
            check_project(Project(1, ""))

    def test_commitment_percent_bounds(self):
        check_commitment(_commitment(percent=0))
        check_commitment(_commitment(percent=100))
        with pytest.raises(InvalidEntityError, match="between 0 and 100"):
            check_commitment(_commitment(percent=101))

    def test_commitment_date_order(self):
        check_commitment(_commitment(start_date=date(2026, 1, 5), end_date=date(2026, 1, 5)))
        check_commitment(_commitment(start_date=None, end_date=None))
        with pytest.raises(InvalidEntityError, match="Start date"):
            check_commitment(_commitment(start_date=date(2026, 2, 1), end_date=date(2026, 1, 1)))

    def test_commitment_target_type(self):
        with pytest.raises(InvalidEntityError, match="Unknown target type"):
            check_commitment(_commitment(target_type="TEAM"))

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            check_employee(Employee(1, "", 100))


class TestValidateSnapshot:
    def test_clean_snapshot(self):
        violations = validate_snapshot(
            [Employee(1, "Anna", 100)],
            [_commitment(), _commitment(id=2, target_type=TargetType.CLIENT, target_id=1)],
            [Client(1, "Acme")],
            [Project(1, "Website", 1)],
        )
        assert violations == []

    def test_collects_every_problem(self):
        violations = validate_snapshot(
            [Employee(1, "Anna", 150)],
            [
                _commitment(id=1, employee_id=9),
                _commitment(id=2, target_type=TargetType.CLIENT, target_id=7),
                _commitment(id=3, target_id=8, percent=-5),
            ],
            [Client(1, "Acme")],
            [Project(1, "Website", 4)],
        )
        reasons = {(v["entity"], v["id"], v["reason"]) for v in violations}
        assert ("employee", 1, "Capacity percent must be between 0 and 100") in reasons
        assert ("project", 1, "Client with id 4 not found") in reasons
        assert ("commitment", 1, "Employee with id 9 not found") in reasons
        assert ("commitment", 2, "Client with id 7 not found") in reasons
        assert ("commitment", 3, "Project with id 8 not found") in reasons
        assert ("commitment", 3, "Commitment percent must be between 0 and 100") in reasons
        assert len(violations) == 6
