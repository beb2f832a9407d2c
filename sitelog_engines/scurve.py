"""
Module: sitelog_engines.scurve
Responsibility:
    Derive the planned-vs-actual S-curve chart series for a project:
    ``step_count`` equal time increments between the start date and the
    planned completion date, plus the end anchor.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import sitelog_kernel/domain and sibling engine modules.

Invariants enforced:
    - Purity: "now" is a parameter, never read from a clock.
    - ``actual_series`` holds ``None`` ("no value", drawn as a gap) for
      every partition timestamp later than ``now + future_tolerance``.
      Timestamps ascend, so ``None`` markers only ever trail.
    - Planned values are a step function over declared checkpoints
      (latest checkpoint dated on or before the timestamp), or a straight
      0 -> 100 ramp when the project has no checkpoints at all.

Failure modes:
    - None.  An unknown start or completion date yields an empty series.

Usage:
    from sitelog_engines.scurve import build_s_curve_series

    series = build_s_curve_series(
        project=schedule, log_entries=logs, now=clock.now(),
    )
    chart = series.to_chart_data()
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from sitelog_kernel.domain.values import parse_percentage, round_percentage
from sitelog_kernel.logging_config import get_logger
from sitelog_engines.schedule import (
    ProgressLog,
    ProjectSchedule,
    SchedulePoint,
    compute_planned_completion_date,
)
from sitelog_engines.tracer import traced_engine

logger = get_logger("engines.scurve")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")

DEFAULT_STEP_COUNT = 6
DEFAULT_LABEL_FORMAT = "{month}/{day}"


@dataclass(frozen=True)
class SCurveSeries:
    """
    Chart-ready S-curve data.

    Guarantees:
        - ``labels``, ``timestamps``, ``planned_series`` and
          ``actual_series`` have equal length.
        - ``None`` in ``actual_series`` means "no value", never zero.
    """

    labels: tuple[str, ...]
    timestamps: tuple[datetime, ...]
    planned_series: tuple[Decimal, ...]
    actual_series: tuple[Decimal | None, ...]
    has_actual_data: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.timestamps

    def to_chart_data(self) -> dict[str, list]:
        """Renderer payload: plain floats, ``None`` kept for gaps."""
        return {
            "labels": list(self.labels),
            "planned_series": [float(v) for v in self.planned_series],
            "actual_series": [
                None if v is None else float(v) for v in self.actual_series
            ],
        }


EMPTY_SERIES = SCurveSeries(labels=(), timestamps=(), planned_series=(), actual_series=())


def _midnight(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _wall_clock(now: datetime) -> datetime:
    """Drop tzinfo so site-local wall-clock time compares with calendar days."""
    return now.replace(tzinfo=None)


def partition_timestamps(
    start: datetime,
    end: datetime,
    step_count: int,
) -> tuple[datetime, ...]:
    """``step_count`` equal increments from ``start``; the last point is ``end``."""
    span = end - start
    points = [start + span * i / step_count for i in range(step_count)]
    points.append(end)
    return tuple(points)


def format_label(ts: datetime, label_format: str = DEFAULT_LABEL_FORMAT) -> str:
    """Chart axis label, e.g. ``"3/7"`` (no zero padding)."""
    return label_format.format(year=ts.year, month=ts.month, day=ts.day)


def _planned_value(
    ts: datetime,
    checkpoints: Sequence[SchedulePoint],
    start: datetime,
    end: datetime,
    places: int,
) -> Decimal:
    if not checkpoints:
        if end <= start:
            return _HUNDRED if ts >= end else _ZERO
        elapsed = Decimal(int((ts - start).total_seconds()))
        ratio = elapsed / Decimal(int((end - start).total_seconds()))
        ratio = min(max(ratio, _ZERO), Decimal(1))
        return round_percentage(ratio * _HUNDRED, places)

    value = _ZERO
    for point in checkpoints:
        if _midnight(point.point_date) <= ts:
            value = point.progress
        else:
            break
    return value


def _actual_value(ts: datetime, log_entries: Sequence[ProgressLog]) -> Decimal:
    # First entry in supplied order wins among entries sharing the latest date.
    best: ProgressLog | None = None
    for entry in log_entries:
        if entry.log_date is None or not entry.has_reported_progress:
            continue
        if _midnight(entry.log_date) > ts:
            continue
        if best is None or entry.log_date > best.log_date:
            best = entry
    if best is None:
        return _ZERO
    return parse_percentage(best.actual_progress)


@traced_engine(
    "scurve", "1.0",
    fingerprint_fields=("project", "log_entries", "now", "step_count"),
)
def build_s_curve_series(
    project: ProjectSchedule,
    log_entries: Sequence[ProgressLog],
    now: datetime,
    step_count: int = DEFAULT_STEP_COUNT,
    future_tolerance: timedelta = timedelta(0),
    label_format: str = DEFAULT_LABEL_FORMAT,
    places: int = 1,
) -> SCurveSeries:
    """
    Build the planned and actual S-curve series.

    Args:
        project: Schedule slice of the project record.
        log_entries: The project's log entries, newest first.
        now: Evaluation time (site-local wall clock).
        step_count: Number of equal increments (``step_count + 1`` points).
        future_tolerance: Actual values are drawn up to ``now`` plus this.
        label_format: ``str.format`` template with year/month/day fields.
        places: Display precision for ramp values.

    Returns:
        SCurveSeries; empty when start or completion date is unknown.
        When the completion date is not after the start date, a single
        point at ``now`` is produced.  When no actual value can be drawn
        (no reports, or every point is in the future) the actual series is
        ``0`` at the first point (``None`` if that point is itself in the
        future) and ``None`` elsewhere.
    """
    completion = compute_planned_completion_date(project=project)
    if project.start_date is None or completion is None:
        logger.debug("s_curve_skipped_unknown_dates", extra={
            "has_start_date": project.start_date is not None,
            "has_completion_date": completion is not None,
        })
        return EMPTY_SERIES

    wall_now = _wall_clock(now)
    start = _midnight(project.start_date)
    end = _midnight(completion)
    if end > start:
        timestamps = partition_timestamps(start, end, max(step_count, 1))
    else:
        timestamps = (wall_now,)

    checkpoints = sorted(project.schedule_data, key=lambda p: p.point_date)
    planned = tuple(
        _planned_value(ts, checkpoints, start, end, places) for ts in timestamps
    )

    cutoff = wall_now + future_tolerance
    reporting = [e for e in log_entries if e.log_date is not None and e.has_reported_progress]
    actual: list[Decimal | None] = [
        None if ts > cutoff else _actual_value(ts, reporting) for ts in timestamps
    ]
    has_actual_data = bool(reporting) and any(v is not None for v in actual)
    if not has_actual_data:
        first = _ZERO if timestamps[0] <= cutoff else None
        actual = [first] + [None] * (len(timestamps) - 1)

    return SCurveSeries(
        labels=tuple(format_label(ts, label_format) for ts in timestamps),
        timestamps=timestamps,
        planned_series=planned,
        actual_series=tuple(actual),
        has_actual_data=has_actual_data,
    )
