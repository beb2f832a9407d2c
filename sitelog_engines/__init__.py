"""
Module: sitelog_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    schedule-reconciliation engines.  This is the import surface that
    higher layers (sitelog_modules, scripts) use.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import sitelog_kernel/domain (and sibling engine modules).
    MUST NOT import sitelog_modules or sitelog_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      "Today" and "now" are passed in by the caller, sampled once per
      computation pass.
    - Decimal-only arithmetic for percentages and amounts.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - None at call time.  Missing data degrades to ``None`` / ``has_data``.

Usage:
    from sitelog_engines import reconcile_progress, build_s_curve_series
"""

from sitelog_kernel.logging_config import get_logger

logger = get_logger("engines")

from sitelog_engines.contract_amount import (
    AmendedAmount,
    AmountRevision,
    calculate_amended_amount,
)
from sitelog_engines.portfolio import (
    BEHIND_STATUS,
    LogIssueInput,
    PortfolioSummary,
    is_issue,
    summarize_portfolio,
)
from sitelog_engines.schedule import (
    ActualProgress,
    ContractType,
    Extension,
    ProgressLog,
    ProgressSnapshot,
    ProjectSchedule,
    SchedulePoint,
    actual_progress_on,
    build_effective_schedule,
    compute_planned_completion_date,
    interpolate_planned_progress,
    latest_actual_progress,
    planned_progress_as_of,
    reconcile_progress,
    remaining_days,
    total_extension_days,
)
from sitelog_engines.scurve import (
    EMPTY_SERIES,
    SCurveSeries,
    build_s_curve_series,
    format_label,
    partition_timestamps,
)
from sitelog_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # Contract amount
    "AmendedAmount",
    "AmountRevision",
    "calculate_amended_amount",
    # Portfolio
    "BEHIND_STATUS",
    "LogIssueInput",
    "PortfolioSummary",
    "is_issue",
    "summarize_portfolio",
    # Schedule
    "ActualProgress",
    "ContractType",
    "Extension",
    "ProgressLog",
    "ProgressSnapshot",
    "ProjectSchedule",
    "SchedulePoint",
    "actual_progress_on",
    "build_effective_schedule",
    "compute_planned_completion_date",
    "interpolate_planned_progress",
    "latest_actual_progress",
    "planned_progress_as_of",
    "reconcile_progress",
    "remaining_days",
    "total_extension_days",
    # S-curve
    "EMPTY_SERIES",
    "SCurveSeries",
    "build_s_curve_series",
    "format_label",
    "partition_timestamps",
    # Tracer
    "compute_input_fingerprint",
    "traced_engine",
]
