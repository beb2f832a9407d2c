"""
SQLAlchemy ORM persistence model for daily site log entries.

Invariants enforced
-------------------
* ``sequence`` increases per project in insertion order; listings sort by
  date descending, then sequence ascending, so entries sharing a date keep
  the order they were recorded in.
* ``actual_progress`` is stored as the reported text, NULL when not
  reported.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sitelog_kernel.db.base import TrackedBase


class LogEntryModel(TrackedBase):
    """
    A daily site log entry.

    Maps to the ``LogEntry`` DTO in ``sitelog_modules.logs.models``.
    """

    __tablename__ = "site_log_entries"

    __table_args__ = (
        Index("idx_site_log_project_date", "project_id", "log_date"),
        Index("idx_site_log_status", "status"),
    )

    project_id: Mapped[UUID] = mapped_column(ForeignKey("site_projects.id"), nullable=False)
    log_date: Mapped[date] = mapped_column(Date, nullable=False)
    sequence: Mapped[int] = mapped_column(nullable=False, default=0)
    weather: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    temperature: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    reporter: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="draft")
    actual_progress: Mapped[str | None] = mapped_column(String(20), nullable=True)
    issues: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def to_dto(self):
        from sitelog_modules.logs.models import LogEntry

        return LogEntry(
            id=self.id,
            project_id=self.project_id,
            log_date=self.log_date,
            weather=self.weather,
            temperature=self.temperature,
            content=self.content,
            reporter=self.reporter,
            status=self.status,
            actual_progress=self.actual_progress,
            issues=self.issues,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID, sequence: int = 0) -> "LogEntryModel":
        return cls(
            id=dto.id,
            project_id=dto.project_id,
            log_date=dto.log_date,
            sequence=sequence,
            weather=dto.weather,
            temperature=dto.temperature,
            content=dto.content,
            reporter=dto.reporter,
            status=dto.status,
            actual_progress=dto.actual_progress,
            issues=dto.issues,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<LogEntryModel {self.log_date} [{self.status}]>"
