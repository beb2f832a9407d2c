"""
sitelog_engines.portfolio -- Dashboard counts across all projects.

Responsibility:
    Count projects that are on schedule versus behind schedule, and daily
    log entries that raise a site issue.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - A project is "behind" only when its status says so; every other
      status (including missing) counts as normal.
    - A log entry is an issue when its status is one of ``issue_statuses``
      or its issue text is non-blank.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sitelog_kernel.domain.values import is_blank
from sitelog_engines.tracer import traced_engine

BEHIND_STATUS = "behind"
DEFAULT_ISSUE_STATUSES: tuple[str, ...] = ("issue",)


@dataclass(frozen=True)
class LogIssueInput:
    """The fields of a log entry that decide whether it reports an issue."""

    status: str | None = None
    issues: str | None = None


@dataclass(frozen=True)
class PortfolioSummary:
    normal_count: int
    behind_count: int
    issue_count: int

    @property
    def project_count(self) -> int:
        return self.normal_count + self.behind_count


def is_issue(entry: LogIssueInput, issue_statuses: Iterable[str] = DEFAULT_ISSUE_STATUSES) -> bool:
    """True when the log entry is flagged or carries issue text."""
    if entry.status is not None and entry.status in tuple(issue_statuses):
        return True
    return not is_blank(entry.issues)


@traced_engine("portfolio", "1.0")
def summarize_portfolio(
    project_statuses: Sequence[str | None],
    log_entries: Sequence[LogIssueInput],
    issue_statuses: Sequence[str] = DEFAULT_ISSUE_STATUSES,
) -> PortfolioSummary:
    """Count normal/behind projects and issue-bearing log entries."""
    behind = sum(1 for status in project_statuses if status == BEHIND_STATUS)
    issues = sum(1 for entry in log_entries if is_issue(entry, issue_statuses))
    return PortfolioSummary(
        normal_count=len(project_statuses) - behind,
        behind_count=behind,
        issue_count=issues,
    )
