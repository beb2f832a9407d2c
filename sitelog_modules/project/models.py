"""
Project Domain Models (``sitelog_modules.project.models``).

Responsibility
--------------
Frozen dataclass value objects for a construction project record and the
progress summary derived from it.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by
``ProjectService`` and returned to callers.  ``Project.to_schedule()``
hands the engines the slice they need.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* Amounts and percentages use ``Decimal`` -- NEVER ``float``.
* ``extensions``, ``schedule_data`` and the amount revisions keep their
  record order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sitelog_engines.contract_amount import AmountRevision
from sitelog_engines.schedule import (
    ContractType,
    Extension,
    ProjectSchedule,
    SchedulePoint,
)


class ProjectStatus(str, Enum):
    """Execution status as entered by the site administrator."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    BEHIND = "behind"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    ACCEPTED = "accepted"


@dataclass(frozen=True)
class Project:
    """A construction project record."""
    id: UUID
    name: str
    address: str = ""
    manager: str = ""
    status: str = ProjectStatus.NOT_STARTED.value
    award_date: date | None = None
    start_date: date | None = None
    contract_duration: int | None = None
    end_date: date | None = None  # manual completion date (working-day contracts)
    contract_type: ContractType = ContractType.CALENDAR_DAYS
    original_amount: Decimal | None = None
    extensions: tuple[Extension, ...] = ()
    schedule_data: tuple[SchedulePoint, ...] = ()
    change_orders: tuple[AmountRevision, ...] = ()
    subsequent_expansions: tuple[AmountRevision, ...] = ()

    def to_schedule(self) -> ProjectSchedule:
        return ProjectSchedule(
            start_date=self.start_date,
            contract_duration=self.contract_duration,
            extensions=self.extensions,
            schedule_data=self.schedule_data,
            end_date=self.end_date,
            contract_type=self.contract_type,
        )


@dataclass(frozen=True)
class ProgressSummary:
    """
    Progress figures for one project, all computed against one evaluation day.

    ``actual_progress`` and ``today_actual_progress`` are ``None`` when no
    value was reported (shown as "not updated yet", never as 0%).
    ``planned_completion_date`` and ``remaining_days`` are ``None`` while
    the start date is unknown.
    """
    project_id: UUID
    as_of_date: date
    planned_completion_date: date | None
    total_extension_days: int
    planned_progress: Decimal
    actual_progress: Decimal | None
    actual_log_date: date | None
    today_actual_progress: Decimal | None
    remaining_days: int | None
    is_overrun: bool
    schedule_variance: Decimal | None

    @property
    def has_actual_data(self) -> bool:
        return self.actual_progress is not None
