"""Allocation-exception analysis.

For every employee the query window is cut at each date where the set of
active commitments can change. Each resulting interval has a constant
committed percentage, which is compared against the employee's capacity.
Differences become UNDER/OVER intervals that are reclassified, merged and
annotated before the per-employee winner is picked.

Everything here is pure: no I/O, inputs are never mutated.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import date

from .date_utils import add_days
from .lookups import NameLookup
from .models import (
    AllocationException,
    Client,
    Commitment,
    DateRange,
    Employee,
    ExcessVacation,
    ExceptionKind,
    OverAllocation,
    Project,
    UnderAllocation,
)

logger = logging.getLogger(__name__)

# Employees with more vacation days than this get a VACATION exception.
VACATION_DAYS_THRESHOLD = 8
# Lapsing commitments within this many points of capacity count as "fully committed".
FULL_COMMITMENT_TOLERANCE = 1
# An UNDER period ending this close to the window end runs "to the edge".
WINDOW_EDGE_TOLERANCE_DAYS = 2


@dataclass(frozen=True)
class _Interval:
    kind: ExceptionKind
    start: date
    end: date  # exclusive until finalized by _merge_contiguous
    magnitude: float
    sources: tuple[Commitment, ...] = ()


# ---------------------------------------------------------------------------
# Interval scan
# ---------------------------------------------------------------------------


def collect_change_points(commitments: Iterable[Commitment], window: DateRange) -> list[date]:
    """Sorted dates where the committed percentage may change."""
    points = {window.start, add_days(window.end, 1)}
    for c in commitments:
        if c.start_date is not None and c.start_date <= window.end:
            points.add(c.start_date)
        if c.end_date is not None and c.end_date >= window.start:
            # Clamped to the sentinel; later points never bound an in-window interval.
            points.add(add_days(min(c.end_date, window.end), 1))
    return sorted(points)


def committed_percent(
    commitments: Iterable[Commitment], start: date, end: date
) -> tuple[float, tuple[Commitment, ...]]:
    """Total percent and the commitments active in ``[start, end)``."""
    active = tuple(c for c in commitments if c.is_active(start, end))
    return sum(c.percent for c in active), active


def _scan_intervals(
    employee: Employee, commitments: Sequence[Commitment], window: DateRange
) -> list[_Interval]:
    points = collect_change_points(commitments, window)
    raw: list[_Interval] = []
    for start, end in zip(points, points[1:]):
        if not window.contains(start):
            continue
        total, active = committed_percent(commitments, start, end)
        diff = total - employee.capacity_percent
        if diff < 0:
            raw.append(_Interval(ExceptionKind.UNDER, start, end, -diff))
        elif diff > 0:
            raw.append(_Interval(ExceptionKind.OVER, start, end, diff, active))
    return raw


# ---------------------------------------------------------------------------
# Post-processing
# ---------------------------------------------------------------------------


def _reclassify_under(
    interval: _Interval,
    commitments: Sequence[Commitment],
    window: DateRange,
    capacity: float,
) -> _Interval:
    """Re-express a free period as "fully committed until" when it follows a lapse."""
    if interval.kind is not ExceptionKind.UNDER:
        return interval

    day_before = add_days(interval.start, -1)
    lapsing = tuple(c for c in commitments if c.end_date is not None and c.end_date == day_before)
    if not lapsing:
        return interval

    total = sum(c.percent for c in lapsing)
    if abs(total - capacity) > FULL_COMMITMENT_TOLERANCE:
        return interval

    earliest = min(c.start_date or window.start for c in lapsing)
    start = max(earliest, window.start)
    end = min(day_before, window.end)
    if start > end:
        # Lapsed before the window opened; nothing to show inside it.
        return interval

    return replace(interval, start=start, end=add_days(end, 1), sources=lapsing)


def _carve(interval: _Interval, taken: Sequence[tuple[date, date]]) -> list[_Interval]:
    """Parts of ``interval`` outside every half-open ``[start, end)`` in ``taken``."""
    pieces = [interval]
    for start, end in taken:
        remaining: list[_Interval] = []
        for piece in pieces:
            if end <= piece.start or start >= piece.end:
                remaining.append(piece)
                continue
            if piece.start < start:
                remaining.append(replace(piece, end=start))
            if end < piece.end:
                remaining.append(replace(piece, start=end))
        pieces = remaining
    return pieces


def _resolve_overlaps(intervals: Iterable[_Interval]) -> list[_Interval]:
    """Keep per-employee periods disjoint once reclassification has moved some.

    A reclassified UNDER claims its range first (earliest start wins between
    two of them); every other period keeps only the days left unclaimed.
    """
    claimed: list[_Interval] = []
    others: list[_Interval] = []
    for interval in intervals:
        if interval.kind is ExceptionKind.UNDER and interval.sources:
            claimed.append(interval)
        else:
            others.append(interval)

    taken: list[tuple[date, date]] = []
    resolved: list[_Interval] = []
    for interval in sorted(claimed, key=lambda i: i.start):
        resolved.extend(_carve(interval, taken))
        taken.append((interval.start, interval.end))
    for interval in others:
        resolved.extend(_carve(interval, taken))
    return resolved


def _can_merge(current: _Interval, nxt: _Interval) -> bool:
    return (
        current.kind is nxt.kind
        and current.magnitude == nxt.magnitude
        and current.end == nxt.start
    )


def _extend(current: _Interval, nxt: _Interval) -> _Interval:
    sources = current.sources
    if current.kind is ExceptionKind.OVER:
        by_id = {c.id: c for c in current.sources}
        for c in nxt.sources:
            by_id.setdefault(c.id, c)
        sources = tuple(by_id.values())
    return replace(current, end=nxt.end, sources=sources)


def _merge_contiguous(intervals: Iterable[_Interval]) -> list[_Interval]:
    """Fold contiguous equal intervals, then make end dates inclusive."""
    merged: list[_Interval] = []
    for nxt in sorted(intervals, key=lambda i: i.start):
        if merged and _can_merge(merged[-1], nxt):
            merged[-1] = _extend(merged[-1], nxt)
        else:
            merged.append(nxt)
    return [replace(i, end=add_days(i.end, -1)) for i in merged]


def availability_date(
    kind: ExceptionKind,
    end: date,
    window: DateRange,
    *,
    has_sources: bool,
) -> date:
    """The date a planner should look at when asking "when is this person free"."""
    if kind is ExceptionKind.VACATION:
        return window.start
    if kind is ExceptionKind.UNDER and not has_sources:
        if abs((end - window.end).days) <= WINDOW_EDGE_TOLERANCE_DAYS:
            return window.end
        return end
    return end


def vacation_exception(employee: Employee, window: DateRange) -> ExcessVacation:
    return ExcessVacation(
        employee_id=employee.id,
        employee_name=employee.name,
        start_date=window.start,
        end_date=window.end,
        magnitude=employee.vacation_days,
        availability_date=window.start,
        vacation_days=employee.vacation_days,
    )


def _to_exception(
    employee: Employee, interval: _Interval, window: DateRange, lookup: NameLookup
) -> AllocationException:
    names = lookup.source_names(interval.sources)
    available = availability_date(interval.kind, interval.end, window, has_sources=bool(names))
    cls = UnderAllocation if interval.kind is ExceptionKind.UNDER else OverAllocation
    return cls(
        employee_id=employee.id,
        employee_name=employee.name,
        start_date=interval.start,
        end_date=interval.end,
        magnitude=interval.magnitude,
        availability_date=available,
        sources=names,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_employee(
    employee: Employee,
    commitments: Iterable[Commitment],
    window: DateRange,
    lookup: NameLookup | None = None,
    *,
    reclassify: bool = True,
) -> list[AllocationException]:
    """Every UNDER/OVER period of one employee, ordered by start date.

    Commitments of other employees are ignored. Billability and vacation are
    not considered here; see analyze_exceptions(). With ``reclassify=False``
    free periods are reported as found, without the "fully committed until"
    rewrite.
    """
    lookup = lookup or NameLookup({}, {})
    own = [c for c in commitments if c.employee_id == employee.id]

    raw = _scan_intervals(employee, own, window)
    if reclassify:
        raw = _resolve_overlaps(_reclassify_under(i, own, window, employee.capacity_percent) for i in raw)
    merged = _merge_contiguous(raw)
    return [_to_exception(employee, i, window, lookup) for i in merged]


def _replaces(existing: AllocationException, candidate: AllocationException) -> bool:
    if candidate.is_allocation and not existing.is_allocation:
        return True
    if candidate.is_allocation and existing.is_allocation:
        return candidate.availability_date < existing.availability_date
    return False


def deduplicate_per_employee(exceptions: Iterable[AllocationException]) -> list[AllocationException]:
    """Keep one exception per employee, in first-discovery order.

    UNDER/OVER beats VACATION; between two UNDER/OVER the earlier
    availability date wins and ties keep the first one seen.
    """
    chosen: dict[int, AllocationException] = {}
    for ex in exceptions:
        current = chosen.get(ex.employee_id)
        if current is None or _replaces(current, ex):
            chosen[ex.employee_id] = ex
    return list(chosen.values())


def analyze_exceptions(
    employees: Iterable[Employee],
    commitments: Iterable[Commitment],
    clients: Iterable[Client],
    projects: Iterable[Project],
    from_date: date,
    to_date: date,
) -> list[AllocationException]:
    """Analyze all employees over ``[from_date, to_date]``.

    Returns at most one exception per employee, sorted by availability date.
    Raises InvalidDateRangeError when ``from_date`` is after ``to_date``.
    """
    window = DateRange(from_date, to_date)
    lookup = NameLookup.from_entities(clients, projects)

    by_employee: dict[int, list[Commitment]] = defaultdict(list)
    for c in commitments:
        by_employee[c.employee_id].append(c)

    discovered: list[AllocationException] = []
    employee_count = 0
    for employee in employees:
        employee_count += 1
        if employee.billable:
            discovered.extend(analyze_employee(employee, by_employee.get(employee.id, []), window, lookup))
        if employee.vacation_days > VACATION_DAYS_THRESHOLD:
            discovered.append(vacation_exception(employee, window))

    result = sorted(deduplicate_per_employee(discovered), key=lambda ex: ex.availability_date)
    logger.debug(
        "Analyzed %d employees over %s..%s: %d raw, %d reported",
        employee_count,
        window.start,
        window.end,
        len(discovered),
        len(result),
    )
    return result
