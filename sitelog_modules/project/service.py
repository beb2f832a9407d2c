"""
Project Module Service (``sitelog_modules.project.service``).

Responsibility
--------------
Orchestrates project record maintenance (create, edit, delete, approved
extensions, contract amount revisions, planned schedule replacement and
import) and the read-side progress figures (progress summary, S-curve,
portfolio dashboard counts) by delegating pure computation to
``sitelog_engines``.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``ProjectService`` is the sole public
entry point for project operations.  It composes the pure engines
(``reconcile_progress``, ``build_s_curve_series``,
``calculate_amended_amount``, ``summarize_portfolio``) with ORM
persistence.

Invariants enforced
-------------------
* Each mutating method owns the transaction boundary (``commit`` on
  success, ``rollback`` and re-raise on failure).
* Read-side methods sample the clock exactly once per call, so every
  figure in one result refers to the same day.
* Derived values are never persisted.

Failure modes
-------------
* ``ProjectNotFoundError`` / ``ExtensionNotFoundError`` -- unknown ids.
* ``ScheduleImportError`` family -- planning file problems; the stored
  schedule is left untouched.
* ``ValueError`` -- unknown field names passed to ``update_project``.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from sitelog_config import ProgressConfig, get_active_config
from sitelog_kernel.domain.clock import Clock, SystemClock
from sitelog_kernel.domain.values import parse_decimal
from sitelog_kernel.exceptions import ExtensionNotFoundError, ProjectNotFoundError
from sitelog_kernel.logging_config import LogContext, get_logger
from sitelog_engines.contract_amount import AmendedAmount, calculate_amended_amount
from sitelog_engines.portfolio import PortfolioSummary, summarize_portfolio
from sitelog_engines.schedule import ContractType, SchedulePoint, reconcile_progress
from sitelog_engines.scurve import SCurveSeries, build_s_curve_series
from sitelog_ingestion.schedule_import import ScheduleImportResult, import_schedule_file
from sitelog_modules.logs.models import LogEntry
from sitelog_modules.logs.orm import LogEntryModel
from sitelog_modules.logs.service import LogService
from sitelog_modules.project.models import Project, ProgressSummary, ProjectStatus
from sitelog_modules.project.orm import (
    CHANGE_ORDER,
    SUBSEQUENT_EXPANSION,
    AmountRevisionModel,
    ExtensionModel,
    ProjectModel,
    SchedulePointModel,
)

logger = get_logger("modules.project.service")

_EDITABLE_FIELDS = frozenset({
    "name", "address", "manager", "status", "award_date", "start_date",
    "contract_duration", "end_date", "contract_type", "original_amount",
})


class ProjectService:
    """
    Orchestrates project records and progress figures.

    Contract
    --------
    * Mutating methods return the refreshed ``Project`` DTO.
    * ``progress_summary`` / ``s_curve`` accept the project's log entries
      (newest first); when omitted they are loaded through ``LogService``.

    Guarantees
    ----------
    * Clock is injectable for deterministic testing.
    * Percentages and amounts use ``Decimal`` -- NEVER ``float``.

    Non-goals
    ---------
    * Does NOT validate that checkpoints are monotonic or fall inside
      the contract period.
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

    def _get_model(self, project_id: UUID) -> ProjectModel:
        model = self._session.get(ProjectModel, project_id)
        if model is None:
            raise ProjectNotFoundError(str(project_id))
        return model

    def get_project(self, project_id: UUID) -> Project:
        return self._get_model(project_id).to_dto()

    def list_projects(self) -> list[Project]:
        stmt = select(ProjectModel).order_by(ProjectModel.name, ProjectModel.created_at)
        return [m.to_dto() for m in self._session.scalars(stmt)]

    # =========================================================================
    # Project Setup
    # =========================================================================

    def create_project(
        self,
        name: str,
        actor_id: UUID,
        start_date: date | None = None,
        contract_duration: int | None = None,
        end_date: date | None = None,
        contract_type: ContractType | str | None = None,
        address: str = "",
        manager: str = "",
        status: ProjectStatus | str = ProjectStatus.NOT_STARTED,
        award_date: date | None = None,
        original_amount: Decimal | str | None = None,
    ) -> Project:
        """Create a project record (all schedule fields optional)."""
        project = Project(
            id=uuid4(),
            name=name,
            address=address,
            manager=manager,
            status=ProjectStatus(status).value,
            award_date=award_date,
            start_date=start_date,
            contract_duration=contract_duration,
            end_date=end_date,
            contract_type=ContractType(contract_type or self._config.default_contract_type),
            original_amount=None if original_amount is None else parse_decimal(original_amount),
        )
        try:
            self._session.add(ProjectModel.from_dto(project, created_by_id=actor_id))
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("project_create_rolled_back", exc_info=True)
            raise

        with LogContext.bind(project_id=project.id, actor_id=actor_id):
            logger.info("project_created", extra={
                "project_name": name,
                "contract_type": project.contract_type.value,
                "has_start_date": start_date is not None,
            })
        return project

    def update_project(self, project_id: UUID, actor_id: UUID, **changes: Any) -> Project:
        """
        Edit project columns.

        Raises:
            ValueError: A field is unknown or is an owned list (use the
                dedicated extension / schedule / revision methods).
        """
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable on a project: {sorted(unknown)}")
        try:
            model = self._get_model(project_id)
            for name, value in changes.items():
                if name == "contract_type":
                    value = ContractType(value).value
                elif name == "status":
                    value = ProjectStatus(value).value
                elif name == "original_amount" and value is not None:
                    value = parse_decimal(value)
                setattr(model, name, value)
            model.updated_by_id = actor_id
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("project_update_rolled_back", exc_info=True)
            raise

        logger.info("project_updated", extra={
            "project_id": str(project_id),
            "fields": sorted(changes),
        })
        return model.to_dto()

    def delete_project(self, project_id: UUID, actor_id: UUID) -> None:
        """Delete a project together with its log entries."""
        try:
            model = self._get_model(project_id)
            self._session.execute(
                delete(LogEntryModel).where(LogEntryModel.project_id == project_id)
            )
            self._session.delete(model)
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("project_delete_rolled_back", exc_info=True)
            raise
        logger.info("project_deleted", extra={
            "project_id": str(project_id),
            "actor_id": str(actor_id),
        })

    # =========================================================================
    # Extensions
    # =========================================================================

    def add_extension(
        self,
        project_id: UUID,
        days: int,
        actor_id: UUID,
        approval_date: date | None = None,
        doc_number: str = "",
        reason: str = "",
    ) -> Project:
        """Append an approved extension; the completion date moves by ``days``."""
        try:
            model = self._get_model(project_id)
            model.extensions.append(ExtensionModel(
                id=uuid4(),
                position=len(model.extensions),
                days=days,
                approval_date=approval_date,
                doc_number=doc_number,
                reason=reason,
                created_by_id=actor_id,
            ))
            model.updated_by_id = actor_id
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("extension_add_rolled_back", exc_info=True)
            raise

        logger.info("extension_added", extra={
            "project_id": str(project_id),
            "days": days,
            "doc_number": doc_number,
        })
        return model.to_dto()

    def remove_extension(self, project_id: UUID, extension_id: UUID | str, actor_id: UUID) -> Project:
        try:
            model = self._get_model(project_id)
            target = next(
                (ext for ext in model.extensions if str(ext.id) == str(extension_id)),
                None,
            )
            if target is None:
                raise ExtensionNotFoundError(str(project_id), str(extension_id))
            model.extensions.remove(target)
            model.updated_by_id = actor_id
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("extension_remove_rolled_back", exc_info=True)
            raise

        logger.info("extension_removed", extra={
            "project_id": str(project_id),
            "extension_id": str(extension_id),
        })
        return model.to_dto()

    # =========================================================================
    # Contract amount
    # =========================================================================

    def _add_revision(
        self,
        kind: str,
        project_id: UUID,
        amount: Decimal | str,
        actor_id: UUID,
        revision_date: date | None,
        doc_number: str,
        reason: str,
    ) -> Project:
        try:
            model = self._get_model(project_id)
            model.amount_revisions.append(AmountRevisionModel(
                id=uuid4(),
                kind=kind,
                position=len(model.amount_revisions),
                amount=parse_decimal(amount),
                revision_date=revision_date,
                doc_number=doc_number,
                reason=reason,
                created_by_id=actor_id,
            ))
            model.updated_by_id = actor_id
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("amount_revision_rolled_back", exc_info=True)
            raise

        logger.info("amount_revision_added", extra={
            "project_id": str(project_id),
            "kind": kind,
            "amount": str(parse_decimal(amount)),
        })
        return model.to_dto()

    def add_change_order(
        self,
        project_id: UUID,
        amount: Decimal | str,
        actor_id: UUID,
        revision_date: date | None = None,
        doc_number: str = "",
        reason: str = "",
    ) -> Project:
        return self._add_revision(
            CHANGE_ORDER, project_id, amount, actor_id, revision_date, doc_number, reason,
        )

    def add_subsequent_expansion(
        self,
        project_id: UUID,
        amount: Decimal | str,
        actor_id: UUID,
        revision_date: date | None = None,
        doc_number: str = "",
        reason: str = "",
    ) -> Project:
        return self._add_revision(
            SUBSEQUENT_EXPANSION, project_id, amount, actor_id, revision_date, doc_number, reason,
        )

    def amended_amount(self, project_id: UUID) -> AmendedAmount:
        project = self.get_project(project_id)
        return calculate_amended_amount(
            original_amount=project.original_amount,
            change_orders=project.change_orders,
            subsequent_expansions=project.subsequent_expansions,
        )

    # =========================================================================
    # Planned schedule
    # =========================================================================

    def replace_schedule(
        self,
        project_id: UUID,
        points: Sequence[SchedulePoint],
        actor_id: UUID,
    ) -> Project:
        """Wholesale-replace the planned checkpoints, keeping the given order."""
        try:
            model = self._get_model(project_id)
            model.schedule_points.clear()
            self._session.flush()
            for position, point in enumerate(points):
                model.schedule_points.append(SchedulePointModel(
                    id=uuid4(),
                    position=position,
                    point_date=point.point_date,
                    progress=point.progress,
                    created_by_id=actor_id,
                ))
            model.updated_by_id = actor_id
            self._session.commit()
        except Exception:
            self._session.rollback()
            logger.warning("schedule_replace_rolled_back", exc_info=True)
            raise

        logger.info("schedule_replaced", extra={
            "project_id": str(project_id),
            "point_count": len(points),
        })
        return model.to_dto()

    def import_schedule(
        self,
        project_id: UUID,
        source_path: Path | str,
        actor_id: UUID,
        options: dict[str, Any] | None = None,
    ) -> ScheduleImportResult:
        """Read a planning file and make its checkpoints the project's schedule."""
        self._get_model(project_id)
        result = import_schedule_file(source_path, options=options)
        self.replace_schedule(project_id, result.points, actor_id)
        return result

    # =========================================================================
    # Progress figures
    # =========================================================================

    def _log_entries(self, project_id: UUID, log_entries: Sequence[LogEntry] | None) -> Sequence[LogEntry]:
        if log_entries is not None:
            return log_entries
        return LogService(self._session, clock=self._clock, config=self._config).logs_for_project(project_id)

    def progress_summary(
        self,
        project_id: UUID,
        log_entries: Sequence[LogEntry] | None = None,
    ) -> ProgressSummary:
        """Planned vs. actual progress for today (clock sampled once)."""
        project = self.get_project(project_id)
        entries = self._log_entries(project_id, log_entries)
        today = self._clock.today()

        snapshot = reconcile_progress(
            project=project.to_schedule(),
            log_entries=[e.to_progress_log() for e in entries],
            as_of_date=today,
            places=self._config.display_precision,
        )
        return ProgressSummary(
            project_id=project_id,
            as_of_date=today,
            planned_completion_date=snapshot.planned_completion_date,
            total_extension_days=snapshot.total_extension_days,
            planned_progress=snapshot.planned_progress,
            actual_progress=snapshot.actual.value if snapshot.actual.has_data else None,
            actual_log_date=snapshot.actual.log_date,
            today_actual_progress=(
                snapshot.actual_today.value if snapshot.actual_today.has_data else None
            ),
            remaining_days=snapshot.remaining_days,
            is_overrun=snapshot.is_overrun,
            schedule_variance=snapshot.schedule_variance,
        )

    def s_curve(
        self,
        project_id: UUID,
        log_entries: Sequence[LogEntry] | None = None,
    ) -> SCurveSeries:
        """Planned/actual S-curve series evaluated at the clock's current time."""
        project = self.get_project(project_id)
        entries = self._log_entries(project_id, log_entries)
        return build_s_curve_series(
            project=project.to_schedule(),
            log_entries=[e.to_progress_log() for e in entries],
            now=self._clock.now(),
            step_count=self._config.s_curve_steps,
            future_tolerance=self._config.future_tolerance,
            label_format=self._config.label_format,
            places=self._config.display_precision,
        )

    def portfolio_summary(self, log_entries: Sequence[LogEntry] | None = None) -> PortfolioSummary:
        """Dashboard counts: normal vs. behind projects, issue log entries."""
        if log_entries is None:
            log_entries = LogService(self._session, clock=self._clock, config=self._config).all_logs()
        statuses = list(self._session.scalars(select(ProjectModel.status)))
        return summarize_portfolio(
            project_statuses=statuses,
            log_entries=[e.to_issue_input() for e in log_entries],
            issue_statuses=self._config.issue_statuses,
        )
