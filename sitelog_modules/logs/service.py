"""
Daily Log Module Service (``sitelog_modules.logs.service``).

Responsibility
--------------
Create, edit, list and delete daily site log entries, and move entries
through the review workflow.

Architecture position
---------------------
**Modules layer** -- ``LogService`` is the sole public entry point for
log entry persistence.  Progress calculations over the returned entries
belong to ``ProjectService`` and the engines.

Invariants enforced
-------------------
* Each mutating method owns the transaction boundary (``commit`` on
  success, ``rollback`` and re-raise on failure).
* Listings are newest first by date; entries sharing a date keep their
  insertion order.
* Review workflow: draft -> pending_review -> approved | rejected, and
  rejected or issue -> pending_review on resubmission.  Any other move raises
  ``InvalidLogStatusTransitionError``.

Failure modes
-------------
* ``ProjectNotFoundError`` -- adding a log to an unknown project.
* ``LogEntryNotFoundError`` -- unknown log entry id.
* ``InvalidLogStatusTransitionError`` -- review step not allowed.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID, uuid4

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from sitelog_config import ProgressConfig, get_active_config
from sitelog_kernel.domain.clock import Clock, SystemClock
from sitelog_kernel.exceptions import (
    InvalidLogStatusTransitionError,
    LogEntryNotFoundError,
    ProjectNotFoundError,
)
from sitelog_kernel.logging_config import LogContext, get_logger
from sitelog_engines.portfolio import is_issue
from sitelog_modules.logs.models import LogEntry, LogStatus
from sitelog_modules.logs.orm import LogEntryModel

logger = get_logger("modules.logs.service")

_EDITABLE_FIELDS = frozenset({
    "log_date", "weather", "temperature", "content", "reporter",
    "actual_progress", "issues",
})

_TRANSITIONS: dict[str, frozenset[str]] = {
    LogStatus.DRAFT.value: frozenset({LogStatus.PENDING_REVIEW.value}),
    LogStatus.ISSUE.value: frozenset({LogStatus.PENDING_REVIEW.value}),
    LogStatus.REJECTED.value: frozenset({LogStatus.PENDING_REVIEW.value}),
    LogStatus.PENDING_REVIEW.value: frozenset({
        LogStatus.APPROVED.value, LogStatus.REJECTED.value,
    }),
    LogStatus.APPROVED.value: frozenset(),
}


def _progress_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class LogService:
    """
    Persistence and review workflow for daily log entries.

    Guarantees
    ----------
    * Clock is injectable; ``add_log`` without a date uses the clock's day.
    * Returned objects are frozen ``LogEntry`` DTOs, never ORM rows.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: ProgressConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()

    # =========================================================================
    # Queries
    # =========================================================================

    def _get_model(self, log_entry_id: UUID) -> LogEntryModel:
        model = self._session.get(LogEntryModel, log_entry_id)
        if model is None:
            raise LogEntryNotFoundError(str(log_entry_id))
        return model

    def get_log(self, log_entry_id: UUID) -> LogEntry:
        return self._get_model(log_entry_id).to_dto()

    def logs_for_project(self, project_id: UUID) -> list[LogEntry]:
        """Entries for one project, newest date first, insertion order within a date."""
        stmt = (
            select(LogEntryModel)
            .where(LogEntryModel.project_id == project_id)
            .order_by(LogEntryModel.log_date.desc(), LogEntryModel.sequence.asc())
        )
        return [m.to_dto() for m in self._session.scalars(stmt)]

    def logs_on_date(self, log_date: date, project_id: UUID | None = None) -> list[LogEntry]:
        """Entries dated exactly ``log_date`` (calendar view), optionally for one project."""
        stmt = select(LogEntryModel).where(LogEntryModel.log_date == log_date)
        if project_id is not None:
            stmt = stmt.where(LogEntryModel.project_id == project_id)
        stmt = stmt.order_by(LogEntryModel.sequence.asc(), LogEntryModel.created_at.asc())
        return [m.to_dto() for m in self._session.scalars(stmt)]

    def all_logs(self) -> list[LogEntry]:
        stmt = select(LogEntryModel).order_by(
            LogEntryModel.log_date.desc(), LogEntryModel.sequence.asc(),
        )
        return [m.to_dto() for m in self._session.scalars(stmt)]

    def issue_logs(self, project_id: UUID | None = None) -> list[LogEntry]:
        """Entries flagged with an issue status or carrying issue text."""
        entries = self.all_logs() if project_id is None else self.logs_for_project(project_id)
        return [
            e for e in entries
            if is_issue(e.to_issue_input(), self._config.issue_statuses)
        ]

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_log(
        self,
        project_id: UUID,
        actor_id: UUID,
        log_date: date | None = None,
        weather: str = "",
        temperature: str = "",
        content: str = "",
        reporter: str = "",
        actual_progress: object = None,
        issues: str = "",
        status: LogStatus | str = LogStatus.DRAFT,
    ) -> LogEntry:
        """Record a daily log entry; ``log_date`` defaults to today."""
        entry = LogEntry(
            id=uuid4(),
            project_id=project_id,
            log_date=log_date or self._clock.today(),
            weather=weather,
            temperature=temperature,
            content=content,
            reporter=reporter,
            status=LogStatus(status).value,
            actual_progress=_progress_text(actual_progress),
            issues=issues or "",
        )
        from sitelog_modules.project.orm import ProjectModel

        try:
            if self._session.get(ProjectModel, project_id) is None:
                raise ProjectNotFoundError(str(project_id))
            next_sequence = self._session.scalar(
                select(func.coalesce(func.max(LogEntryModel.sequence), 0))
                .where(LogEntryModel.project_id == project_id)
            ) + 1
            self._session.add(
                LogEntryModel.from_dto(entry, created_by_id=actor_id, sequence=next_sequence)
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("log_entry_create_rolled_back", exc_info=True)
            raise

        with LogContext.bind(project_id=project_id, log_entry_id=entry.id):
            logger.info("log_entry_created", extra={
                "log_date": entry.log_date.isoformat(),
                "has_actual_progress": entry.actual_progress is not None,
            })
        return entry

    def update_log(self, log_entry_id: UUID, actor_id: UUID, **changes: object) -> LogEntry:
        """
        Edit log entry fields.

        Raises:
            ValueError: A field is unknown or not editable (status moves go
                through the review methods).
        """
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable on a log entry: {sorted(unknown)}")
        try:
            model = self._get_model(log_entry_id)
            for name, value in changes.items():
                if name == "actual_progress":
                    value = _progress_text(value)
                elif name != "log_date":
                    value = "" if value is None else str(value)
                setattr(model, name, value)
            model.updated_by_id = actor_id
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("log_entry_update_rolled_back", exc_info=True)
            raise

        logger.info("log_entry_updated", extra={
            "log_entry_id": str(log_entry_id),
            "fields": sorted(changes),
        })
        return model.to_dto()

    def delete_log(self, log_entry_id: UUID, actor_id: UUID) -> None:
        try:
            model = self._get_model(log_entry_id)
            self._session.delete(model)
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("log_entry_delete_rolled_back", exc_info=True)
            raise
        logger.info("log_entry_deleted", extra={
            "log_entry_id": str(log_entry_id),
            "actor_id": str(actor_id),
        })

    # =========================================================================
    # Review workflow
    # =========================================================================

    def _transition(self, log_entry_id: UUID, actor_id: UUID, to_status: LogStatus) -> LogEntry:
        try:
            model = self._get_model(log_entry_id)
            from_status = model.status
            if to_status.value not in _TRANSITIONS.get(from_status, frozenset()):
                raise InvalidLogStatusTransitionError(
                    str(log_entry_id), from_status, to_status.value,
                )
            model.status = to_status.value
            model.updated_by_id = actor_id
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("log_entry_transition_rolled_back", exc_info=True)
            raise

        logger.info("log_entry_status_changed", extra={
            "log_entry_id": str(log_entry_id),
            "from_status": from_status,
            "to_status": to_status.value,
        })
        return model.to_dto()

    def submit_for_review(self, log_entry_id: UUID, actor_id: UUID) -> LogEntry:
        return self._transition(log_entry_id, actor_id, LogStatus.PENDING_REVIEW)

    def approve(self, log_entry_id: UUID, actor_id: UUID) -> LogEntry:
        return self._transition(log_entry_id, actor_id, LogStatus.APPROVED)

    def reject(self, log_entry_id: UUID, actor_id: UUID) -> LogEntry:
        return self._transition(log_entry_id, actor_id, LogStatus.REJECTED)
