"""Tests for load_input against the minimal fixture and broken copies of it."""

from __future__ import annotations

import shutil
from datetime import date
from pathlib import Path

import pytest

from commitment_core.io.reader import load_input
from commitment_core.models import DateParseError, TargetType

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "minimal"


@pytest.fixture
def minimal_input():
    return load_input(FIXTURES_DIR)


@pytest.fixture
def fixture_copy(tmp_path):
    target = tmp_path / "input"
    shutil.copytree(FIXTURES_DIR, target)
    return target


class TestLoadInput:
    def test_counts(self, minimal_input):
        snapshot, _ = minimal_input
        assert len(snapshot.employees) == 4
        assert len(snapshot.clients) == 2
        assert len(snapshot.projects) == 3
        assert len(snapshot.commitments) == 5

    def test_meta(self, minimal_input):
        snapshot, meta = minimal_input
        assert snapshot.snapshot_id == "snap-2026-01"
        assert meta["range_from"] == "2026-01-01"
        assert meta["range_to"] == "2026-01-31"

    def test_employee_fields(self, minimal_input):
        snapshot, _ = minimal_input
        lukas = next(e for e in snapshot.employees if e.name == "Lukas Schmidt")
        assert lukas.capacity_percent == 100
        assert lukas.vacation_days == 2.5
        assert lukas.billable is True

    def test_billable_flags(self, minimal_input):
        snapshot, _ = minimal_input
        by_name = {e.name: e for e in snapshot.employees}
        assert by_name["Omer Yilmaz"].billable is False
        # Blank billable column defaults to billable.
        assert by_name["Jane Smith"].billable is True

    def test_project_client_optional(self, minimal_input):
        snapshot, _ = minimal_input
        by_id = {p.id: p for p in snapshot.projects}
        assert by_id[1].client_id == 1
        assert by_id[3].client_id is None

    def test_commitment_fields(self, minimal_input):
        snapshot, _ = minimal_input
        by_id = {c.id: c for c in snapshot.commitments}
        assert by_id[1].target_type is TargetType.PROJECT
        assert (by_id[1].start_date, by_id[1].end_date) == (date(2026, 1, 1), date(2026, 1, 15))
        assert by_id[2].start_date is None and by_id[2].end_date is None
        assert by_id[3].target_type is TargetType.CLIENT
        assert by_id[3].percent == 50

    def test_meta_is_optional(self, fixture_copy):
        (fixture_copy / "meta.json").unlink()
        snapshot, meta = load_input(fixture_copy)
        assert meta == {}
        assert snapshot.snapshot_id == ""

    def test_missing_csv(self, fixture_copy):
        (fixture_copy / "commitments.csv").unlink()
        with pytest.raises(FileNotFoundError, match="commitments.csv"):
            load_input(fixture_copy)

    def test_bad_date_names_file_and_line(self, fixture_copy):
        path = fixture_copy / "commitments.csv"
        path.write_text(
            path.read_text(encoding="utf-8").replace("2026-01-15,100", "2026-02-30,100"),
            encoding="utf-8",
        )
        with pytest.raises(ValueError, match="commitments.csv line 2") as info:
            load_input(fixture_copy)
        assert isinstance(info.value.__cause__, DateParseError)

    def test_fractional_id_rejected(self, fixture_copy):
        path = fixture_copy / "employees.csv"
        path.write_text(
            path.read_text(encoding="utf-8").replace("1,Anna Meier", "1.5,Anna Meier"),
            encoding="utf-8",
        )
        with pytest.raises(ValueError, match="employees.csv line 2: expected an integer"):
            load_input(fixture_copy)

    def test_unknown_target_type(self, fixture_copy):
        path = fixture_copy / "commitments.csv"
        path.write_text(
            path.read_text(encoding="utf-8").replace("2,CLIENT,2", "2,TEAM,2"),
            encoding="utf-8",
        )
        with pytest.raises(ValueError, match="commitments.csv line 4"):
            load_input(fixture_copy)

    def test_target_type_case_insensitive(self, fixture_copy):
        path = fixture_copy / "commitments.csv"
        path.write_text(
            path.read_text(encoding="utf-8").replace("2,CLIENT,2", "2,client,2"),
            encoding="utf-8",
        )
        snapshot, _ = load_input(fixture_copy)
        assert {c.id: c for c in snapshot.commitments}[3].target_type is TargetType.CLIENT
