"""
SQLAlchemy ORM persistence models for the Project module.

Responsibility
--------------
Provide database-backed persistence for project records and their owned
lists: approved extensions, planned schedule checkpoints and contract
amount revisions (change orders, subsequent expansions).  Derived values
(planned completion date, progress, S-curve) are never stored.

Architecture position
---------------------
**Modules layer** -- ORM models consumed by ``ProjectService`` for
persistence.  Inherits from ``TrackedBase`` (kernel db layer).

Invariants enforced
-------------------
* Owned lists carry a ``position`` column and load ordered by it, so
  record order (and schedule tie order) survives a round trip.
* Amounts and percentages use ``Decimal`` (Numeric) -- NEVER float.
* Enum fields stored as String for readability and portability.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sitelog_kernel.db.base import TrackedBase
from sitelog_engines.contract_amount import AmountRevision
from sitelog_engines.schedule import ContractType, Extension, SchedulePoint

CHANGE_ORDER = "change_order"
SUBSEQUENT_EXPANSION = "subsequent_expansion"

# ---------------------------------------------------------------------------
# ProjectModel
# ---------------------------------------------------------------------------


class ProjectModel(TrackedBase):
    """
    A construction project record.

    Maps to the ``Project`` DTO in ``sitelog_modules.project.models``.
    """

    __tablename__ = "site_projects"

    __table_args__ = (
        Index("idx_site_project_status", "status"),
        Index("idx_site_project_name", "name"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    manager: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="not_started")
    award_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    contract_duration: Mapped[int | None] = mapped_column(nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    contract_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ContractType.CALENDAR_DAYS.value,
    )
    original_amount: Mapped[Decimal | None] = mapped_column(nullable=True)

    # Relationships
    extensions: Mapped[list["ExtensionModel"]] = relationship(
        "ExtensionModel",
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ExtensionModel.position",
    )

    schedule_points: Mapped[list["SchedulePointModel"]] = relationship(
        "SchedulePointModel",
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="SchedulePointModel.position",
    )

    amount_revisions: Mapped[list["AmountRevisionModel"]] = relationship(
        "AmountRevisionModel",
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="AmountRevisionModel.position",
    )

    def revisions_of(self, kind: str) -> list["AmountRevisionModel"]:
        return [r for r in self.amount_revisions if r.kind == kind]

    def to_dto(self):
        from sitelog_modules.project.models import Project

        return Project(
            id=self.id,
            name=self.name,
            address=self.address,
            manager=self.manager,
            status=self.status,
            award_date=self.award_date,
            start_date=self.start_date,
            contract_duration=self.contract_duration,
            end_date=self.end_date,
            contract_type=ContractType(self.contract_type),
            original_amount=self.original_amount,
            extensions=tuple(ext.to_dto() for ext in self.extensions),
            schedule_data=tuple(p.to_dto() for p in self.schedule_points),
            change_orders=tuple(r.to_dto() for r in self.revisions_of(CHANGE_ORDER)),
            subsequent_expansions=tuple(
                r.to_dto() for r in self.revisions_of(SUBSEQUENT_EXPANSION)
            ),
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "ProjectModel":
        """Project columns only; owned lists are added through the service."""
        return cls(
            id=dto.id,
            name=dto.name,
            address=dto.address,
            manager=dto.manager,
            status=dto.status,
            award_date=dto.award_date,
            start_date=dto.start_date,
            contract_duration=dto.contract_duration,
            end_date=dto.end_date,
            contract_type=ContractType(dto.contract_type).value,
            original_amount=dto.original_amount,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<ProjectModel {self.name} [{self.status}]>"


# ---------------------------------------------------------------------------
# ExtensionModel
# ---------------------------------------------------------------------------


class ExtensionModel(TrackedBase):
    """An approved contract-duration extension."""

    __tablename__ = "site_project_extensions"

    __table_args__ = (
        Index("idx_site_extension_project", "project_id"),
    )

    project_id: Mapped[UUID] = mapped_column(ForeignKey("site_projects.id"), nullable=False)
    position: Mapped[int] = mapped_column(nullable=False, default=0)
    days: Mapped[int] = mapped_column(nullable=False, default=0)
    approval_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    doc_number: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    reason: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    project: Mapped["ProjectModel"] = relationship(
        "ProjectModel",
        back_populates="extensions",
    )

    def to_dto(self) -> Extension:
        return Extension(
            id=str(self.id),
            days=self.days,
            approval_date=self.approval_date,
            doc_number=self.doc_number,
            reason=self.reason,
        )

    def __repr__(self) -> str:
        return f"<ExtensionModel +{self.days}d {self.doc_number}>"


# ---------------------------------------------------------------------------
# SchedulePointModel
# ---------------------------------------------------------------------------


class SchedulePointModel(TrackedBase):
    """A planned-progress checkpoint. Duplicate dates are allowed."""

    __tablename__ = "site_schedule_points"

    __table_args__ = (
        Index("idx_site_schedule_project", "project_id"),
    )

    project_id: Mapped[UUID] = mapped_column(ForeignKey("site_projects.id"), nullable=False)
    position: Mapped[int] = mapped_column(nullable=False, default=0)
    point_date: Mapped[date] = mapped_column(Date, nullable=False)
    progress: Mapped[Decimal] = mapped_column(nullable=False)

    project: Mapped["ProjectModel"] = relationship(
        "ProjectModel",
        back_populates="schedule_points",
    )

    def to_dto(self) -> SchedulePoint:
        return SchedulePoint(point_date=self.point_date, progress=self.progress)

    def __repr__(self) -> str:
        return f"<SchedulePointModel {self.point_date} {self.progress}%>"


# ---------------------------------------------------------------------------
# AmountRevisionModel
# ---------------------------------------------------------------------------


class AmountRevisionModel(TrackedBase):
    """A change order or subsequent expansion (``kind`` tells which)."""

    __tablename__ = "site_amount_revisions"

    __table_args__ = (
        Index("idx_site_revision_project", "project_id"),
        Index("idx_site_revision_kind", "kind"),
    )

    project_id: Mapped[UUID] = mapped_column(ForeignKey("site_projects.id"), nullable=False)
    kind: Mapped[str] = mapped_column(String(30), nullable=False)
    position: Mapped[int] = mapped_column(nullable=False, default=0)
    amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    revision_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    doc_number: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    reason: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    project: Mapped["ProjectModel"] = relationship(
        "ProjectModel",
        back_populates="amount_revisions",
    )

    def to_dto(self) -> AmountRevision:
        return AmountRevision(
            amount=self.amount,
            revision_date=self.revision_date,
            doc_number=self.doc_number,
            reason=self.reason,
        )

    def __repr__(self) -> str:
        return f"<AmountRevisionModel {self.kind} {self.amount}>"
