"""
Daily Log Domain Models (``sitelog_modules.logs.models``).

Frozen value objects for a daily site log entry.  ``actual_progress`` is
kept as reported so "not reported" stays distinguishable from ``"0"``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from uuid import UUID

from sitelog_engines.portfolio import LogIssueInput
from sitelog_engines.schedule import ProgressLog


class LogStatus(str, Enum):
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    ISSUE = "issue"


@dataclass(frozen=True)
class LogEntry:
    """One daily log entry for one project."""
    id: UUID
    project_id: UUID
    log_date: date
    weather: str = ""
    temperature: str = ""
    content: str = ""
    reporter: str = ""
    status: str = LogStatus.DRAFT.value
    actual_progress: str | None = None
    issues: str = ""

    def to_progress_log(self) -> ProgressLog:
        return ProgressLog(
            log_date=self.log_date,
            actual_progress=self.actual_progress,
            log_entry_id=str(self.id),
            project_id=str(self.project_id),
        )

    def to_issue_input(self) -> LogIssueInput:
        return LogIssueInput(status=self.status, issues=self.issues)
