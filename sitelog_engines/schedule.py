"""
Module: sitelog_engines.schedule
Responsibility:
    Reconcile a project's planned schedule with its daily log reports:
    derive the planned completion date (including approved extensions),
    build the effective checkpoint sequence with synthetic 0% / 100%
    anchors, interpolate planned progress for any calendar date, pick the
    latest reported actual progress and count the remaining calendar days.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import sitelog_kernel/domain.

Invariants enforced:
    - Purity: no clock access; "today" is always a parameter.
    - Inputs are frozen dataclasses and are never mutated.
    - Nothing is cached: every call recomputes from its arguments.
    - Schedule points sharing a date are never de-duplicated; ordering is
      a stable sort on date, so ties keep their source order.
    - Log entries sharing a date are never re-ordered; the first one in
      the supplied (newest-first) order wins.

Failure modes:
    - None.  Missing or malformed data degrades to ``None`` ("unknown")
      or to an explicit ``has_data=False`` result.  These functions run
      inline in a rendering path and must not raise.

Usage:
    from sitelog_engines.schedule import (
        ProjectSchedule, SchedulePoint, compute_planned_completion_date,
        build_effective_schedule, planned_progress_as_of,
    )

    completion = compute_planned_completion_date(project=schedule)
    points = build_effective_schedule(
        project=schedule, planned_completion_date=completion,
    )
    planned = planned_progress_as_of(schedule=points, as_of_date=today)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum

from sitelog_kernel.domain.values import (
    is_blank,
    parse_percentage,
    round_percentage,
)
from sitelog_kernel.logging_config import get_logger
from sitelog_engines.tracer import traced_engine

logger = get_logger("engines.schedule")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class ContractType(str, Enum):
    """How the contract duration is counted."""

    CALENDAR_DAYS = "calendar_days"
    WORKING_DAYS = "working_days"


@dataclass(frozen=True)
class SchedulePoint:
    """An admin-declared checkpoint: planned completion % on a date."""

    point_date: date
    progress: Decimal


@dataclass(frozen=True)
class Extension:
    """An approved contract-duration extension."""

    id: str
    days: int
    approval_date: date | None = None
    doc_number: str = ""
    reason: str = ""


@dataclass(frozen=True)
class ProjectSchedule:
    """
    The schedule-relevant slice of a project record.

    Contract:
        Every field is optional so a freshly created record (no start date,
        no duration, no checkpoints) is representable.
    Guarantees:
        - ``schedule_data`` keeps the source order; the engine sorts a copy.
    Non-goals:
        - Does not validate that checkpoints fall inside the contract
          period.
    """

    start_date: date | None = None
    contract_duration: int | None = None
    extensions: tuple[Extension, ...] = ()
    schedule_data: tuple[SchedulePoint, ...] = ()
    end_date: date | None = None  # manually entered completion date
    contract_type: ContractType = ContractType.CALENDAR_DAYS


@dataclass(frozen=True)
class ProgressLog:
    """
    One daily-log observation of actual completion.

    ``actual_progress`` is kept exactly as reported (``"35"``, ``"35%"``,
    ``None``); the engine parses it.
    """

    log_date: date | None
    actual_progress: str | Decimal | int | float | None = None
    log_entry_id: str | None = None
    project_id: str | None = None

    @property
    def has_reported_progress(self) -> bool:
        return not is_blank(self.actual_progress)


@dataclass(frozen=True)
class ActualProgress:
    """
    Latest reported actual progress.

    Guarantees:
        - ``has_data`` is False only when no entry carried a value; in that
          case ``value`` is 0 and must not be shown as "0%".
    """

    value: Decimal
    has_data: bool
    log_date: date | None = None
    log_entry_id: str | None = None

    @classmethod
    def no_data(cls) -> ActualProgress:
        return cls(value=_ZERO, has_data=False)


# ---------------------------------------------------------------------------
# Completion date
# ---------------------------------------------------------------------------


def total_extension_days(extensions: Sequence[Extension]) -> int:
    """Sum of approved extension days."""
    return sum(ext.days for ext in extensions)


@traced_engine("schedule", "1.0", fingerprint_fields=("project",))
def compute_planned_completion_date(project: ProjectSchedule) -> date | None:
    """
    Planned completion date: start + duration + extensions - 1 days.

    Postconditions:
        - ``None`` when ``start_date`` is unknown.
        - Working-day contracts return the manually entered ``end_date``
          (calendar arithmetic does not apply to them).
        - Calendar-day contracts without a duration fall back to a manual
          ``end_date`` when one exists.
        - ``None`` when the day count puts the date outside the calendar
          (a mistyped duration or extension).
    """
    if project.start_date is None:
        return None

    if project.contract_type == ContractType.WORKING_DAYS:
        return project.end_date

    duration = project.contract_duration or 0
    if duration <= 0 and project.end_date is not None:
        return project.end_date

    total_days = duration + total_extension_days(project.extensions)
    try:
        return project.start_date + timedelta(days=total_days - 1)
    except OverflowError:
        logger.warning("planned_completion_out_of_range", extra={
            "start_date": project.start_date.isoformat(),
            "total_days": total_days,
        })
        return None


# ---------------------------------------------------------------------------
# Effective schedule and interpolation
# ---------------------------------------------------------------------------


@traced_engine(
    "schedule", "1.0",
    fingerprint_fields=("project", "planned_completion_date"),
)
def build_effective_schedule(
    project: ProjectSchedule,
    planned_completion_date: date | None,
) -> tuple[SchedulePoint, ...]:
    """
    Sorted checkpoints bracketed by synthetic start/end anchors.

    Postconditions:
        - Stable ascending order by date (ties keep source order).
        - Starts with ``(start_date, 0)`` unless the first checkpoint is
          already on ``start_date``; omitted when ``start_date`` is unknown.
        - Ends with ``(planned_completion_date, 100)`` unless the last
          checkpoint is already on that date; omitted when unknown.
    """
    points = sorted(project.schedule_data, key=lambda p: p.point_date)

    start = project.start_date
    if start is not None and (not points or points[0].point_date != start):
        points.insert(0, SchedulePoint(point_date=start, progress=_ZERO))

    if planned_completion_date is not None and (
        not points or points[-1].point_date != planned_completion_date
    ):
        points.append(
            SchedulePoint(point_date=planned_completion_date, progress=_HUNDRED)
        )

    return tuple(points)


def interpolate_planned_progress(
    schedule: Sequence[SchedulePoint],
    as_of_date: date,
) -> Decimal:
    """
    Planned progress on ``as_of_date`` at full precision.

    Postconditions:
        - Empty schedule -> 0.
        - On or before the first checkpoint -> the first checkpoint's value.
        - After the last checkpoint -> the last checkpoint's value.
        - Otherwise linear in elapsed days between the bracketing
          checkpoints, where the upper bracket is the first checkpoint
          dated on or after ``as_of_date``.
    """
    if not schedule:
        return _ZERO

    next_idx = -1
    for idx, point in enumerate(schedule):
        if point.point_date >= as_of_date:
            next_idx = idx
            break

    if next_idx == 0:
        return schedule[0].progress
    if next_idx == -1:
        return schedule[-1].progress

    p1 = schedule[next_idx - 1]
    p2 = schedule[next_idx]
    # Every point before next_idx is dated strictly before as_of_date, so span > 0.
    span = Decimal((p2.point_date - p1.point_date).days)
    elapsed = Decimal((as_of_date - p1.point_date).days)
    return p1.progress + (p2.progress - p1.progress) * elapsed / span


@traced_engine("schedule", "1.0", fingerprint_fields=("schedule", "as_of_date"))
def planned_progress_as_of(
    schedule: Sequence[SchedulePoint],
    as_of_date: date,
    places: int = 1,
) -> Decimal:
    """Planned progress on ``as_of_date`` rounded for display."""
    return round_percentage(
        interpolate_planned_progress(schedule, as_of_date), places
    )


# ---------------------------------------------------------------------------
# Actual progress
# ---------------------------------------------------------------------------


@traced_engine("schedule", "1.0", fingerprint_fields=("log_entries",))
def latest_actual_progress(log_entries: Sequence[ProgressLog]) -> ActualProgress:
    """
    First entry, in supplied order, that reports an actual progress value.

    Preconditions:
        - ``log_entries`` belong to one project and are ordered newest
          first by the record source.
    Postconditions:
        - Unparseable values count as 0 but still set ``has_data``.
        - No reporting entry -> ``ActualProgress.no_data()``.
    """
    for entry in log_entries:
        if entry.has_reported_progress:
            return ActualProgress(
                value=parse_percentage(entry.actual_progress),
                has_data=True,
                log_date=entry.log_date,
                log_entry_id=entry.log_entry_id,
            )
    return ActualProgress.no_data()


def actual_progress_on(
    log_entries: Sequence[ProgressLog],
    on_date: date,
) -> ActualProgress:
    """Actual progress reported by the first entry dated exactly ``on_date``."""
    for entry in log_entries:
        if entry.log_date == on_date and entry.has_reported_progress:
            return ActualProgress(
                value=parse_percentage(entry.actual_progress),
                has_data=True,
                log_date=entry.log_date,
                log_entry_id=entry.log_entry_id,
            )
    return ActualProgress.no_data()


# ---------------------------------------------------------------------------
# Remaining days
# ---------------------------------------------------------------------------


def remaining_days(
    planned_completion_date: date | None,
    today: date,
) -> int | None:
    """
    Calendar days left until the planned completion date.

    Negative values mean the schedule has overrun and are returned as-is.
    ``None`` when the completion date is unknown.
    """
    if planned_completion_date is None:
        return None
    return (planned_completion_date - today).days


# ---------------------------------------------------------------------------
# One computation pass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProgressSnapshot:
    """
    Every derived schedule value for one project as of one day.

    Guarantees:
        - All fields were computed against the same ``as_of_date``.
        - ``planned_completion_date`` / ``remaining_days`` are ``None``
          when the start date is unknown.
        - ``schedule_variance`` is ``None`` when no actual progress has
          been reported.
    """

    as_of_date: date
    planned_completion_date: date | None
    total_extension_days: int
    effective_schedule: tuple[SchedulePoint, ...]
    planned_progress: Decimal
    actual: ActualProgress
    actual_today: ActualProgress
    remaining_days: int | None

    @property
    def is_overrun(self) -> bool:
        """True when the planned completion date has passed."""
        return self.remaining_days is not None and self.remaining_days < 0

    @property
    def schedule_variance(self) -> Decimal | None:
        """Actual minus planned progress (negative = behind schedule)."""
        if not self.actual.has_data:
            return None
        return self.actual.value - self.planned_progress


@traced_engine(
    "schedule", "1.0",
    fingerprint_fields=("project", "log_entries", "as_of_date"),
)
def reconcile_progress(
    project: ProjectSchedule,
    log_entries: Sequence[ProgressLog],
    as_of_date: date,
    places: int = 1,
) -> ProgressSnapshot:
    """
    Compute the full progress snapshot in one pass.

    Args:
        project: Schedule slice of the project record.
        log_entries: The project's log entries, newest first.
        as_of_date: The evaluation day, sampled once by the caller.
        places: Display precision for planned progress.
    """
    completion = compute_planned_completion_date(project=project)
    schedule = build_effective_schedule(
        project=project,
        planned_completion_date=completion,
    )
    snapshot = ProgressSnapshot(
        as_of_date=as_of_date,
        planned_completion_date=completion,
        total_extension_days=total_extension_days(project.extensions),
        effective_schedule=schedule,
        planned_progress=planned_progress_as_of(
            schedule=schedule, as_of_date=as_of_date, places=places,
        ),
        actual=latest_actual_progress(log_entries=log_entries),
        actual_today=actual_progress_on(log_entries, as_of_date),
        remaining_days=remaining_days(completion, as_of_date),
    )

    logger.debug("progress_reconciled", extra={
        "as_of_date": as_of_date.isoformat(),
        "planned_completion_date": completion.isoformat() if completion else None,
        "checkpoint_count": len(schedule),
        "log_count": len(log_entries),
        "planned_progress": str(snapshot.planned_progress),
        "has_actual": snapshot.actual.has_data,
        "remaining_days": snapshot.remaining_days,
    })
    return snapshot
