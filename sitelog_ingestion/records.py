"""
Record mapping: pure transformation from raw document-store dicts to the
engine's frozen input types.

Documents arrive camelCase with any field possibly absent (a freshly
created project has no ``startDate``, no ``extensions`` and no
``scheduleData`` key at all).  Legacy keys are accepted as aliases:
``duration`` for ``contractDuration`` and ``number`` for an extension's
``docNumber``.  ZERO I/O.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping

from sitelog_kernel.domain.values import (
    is_blank,
    parse_calendar_date,
    parse_days,
    parse_percentage,
)
from sitelog_kernel.logging_config import get_logger
from sitelog_engines.contract_amount import AmountRevision
from sitelog_engines.schedule import (
    ContractType,
    Extension,
    ProgressLog,
    ProjectSchedule,
    SchedulePoint,
)

logger = get_logger("ingestion.records")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")

# Contract type labels seen in stored documents (UI labels and enum values).
_CONTRACT_TYPES: dict[str, ContractType] = {
    "calendar_days": ContractType.CALENDAR_DAYS,
    "calendar": ContractType.CALENDAR_DAYS,
    "日曆天": ContractType.CALENDAR_DAYS,
    "working_days": ContractType.WORKING_DAYS,
    "working": ContractType.WORKING_DAYS,
    "工作天": ContractType.WORKING_DAYS,
}


def _first_present(doc: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = doc.get(key)
        if not is_blank(value):
            return value
    return None


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def parse_contract_type(
    value: Any,
    default: ContractType = ContractType.CALENDAR_DAYS,
) -> ContractType:
    """Map a stored contract type label to ``ContractType``; unknown labels use ``default``."""
    if isinstance(value, ContractType):
        return value
    if is_blank(value):
        return default
    return _CONTRACT_TYPES.get(str(value).strip().lower(), default)


def extension_from_document(doc: Mapping[str, Any], index: int = 0) -> Extension:
    """Build an ``Extension``; missing ids fall back to the list position."""
    ext_id = doc.get("id")
    return Extension(
        id=str(ext_id) if not is_blank(ext_id) else str(index),
        days=parse_days(doc.get("days")),
        approval_date=parse_calendar_date(doc.get("date")),
        doc_number=str(_first_present(doc, "docNumber", "number") or ""),
        reason=str(doc.get("reason") or ""),
    )


def schedule_points_from_documents(docs: Any) -> tuple[SchedulePoint, ...]:
    """
    Build schedule points in source order.

    Points without a parseable date cannot be placed on the timeline and
    are dropped; unparseable progress values count as 0 and values outside
    0..100 are clamped into that range.
    """
    points: list[SchedulePoint] = []
    dropped = 0
    clamped = 0
    for raw in _as_list(docs):
        if not isinstance(raw, Mapping):
            dropped += 1
            continue
        point_date = parse_calendar_date(raw.get("date"))
        if point_date is None:
            dropped += 1
            continue
        progress = parse_percentage(raw.get("progress"))
        if progress < _ZERO or progress > _HUNDRED:
            clamped += 1
            progress = min(max(progress, _ZERO), _HUNDRED)
        points.append(SchedulePoint(point_date=point_date, progress=progress))
    if dropped:
        logger.warning("schedule_points_dropped", extra={"dropped_count": dropped})
    if clamped:
        logger.warning("schedule_points_clamped", extra={"clamped_count": clamped})
    return tuple(points)


def project_from_document(
    doc: Mapping[str, Any],
    default_contract_type: ContractType = ContractType.CALENDAR_DAYS,
) -> ProjectSchedule:
    """Map a raw project document to ``ProjectSchedule``."""
    duration_raw = _first_present(doc, "contractDuration", "duration")
    return ProjectSchedule(
        start_date=parse_calendar_date(doc.get("startDate")),
        contract_duration=None if duration_raw is None else parse_days(duration_raw),
        extensions=tuple(
            extension_from_document(ext, idx)
            for idx, ext in enumerate(_as_list(doc.get("extensions")))
            if isinstance(ext, Mapping)
        ),
        schedule_data=schedule_points_from_documents(doc.get("scheduleData")),
        end_date=parse_calendar_date(doc.get("endDate")),
        contract_type=parse_contract_type(
            _first_present(doc, "contractType", "type"), default_contract_type,
        ),
    )


def log_entry_from_document(doc: Mapping[str, Any]) -> ProgressLog:
    """
    Map a raw log document to ``ProgressLog``.

    ``actualProgress`` is passed through unparsed so that "not reported"
    (absent or blank) stays distinguishable from a reported ``"0"``.
    """
    log_id = doc.get("id")
    project_id = _first_present(doc, "projectId", "project")
    return ProgressLog(
        log_date=parse_calendar_date(doc.get("date")),
        actual_progress=doc.get("actualProgress"),
        log_entry_id=None if is_blank(log_id) else str(log_id),
        project_id=None if project_id is None else str(project_id),
    )


def amount_revisions_from_documents(docs: Any) -> tuple[AmountRevision, ...]:
    """Map change order / subsequent expansion documents, keeping record order."""
    return tuple(
        AmountRevision(
            amount=raw.get("amount"),
            revision_date=parse_calendar_date(raw.get("date")),
            doc_number=str(_first_present(raw, "docNumber", "number") or ""),
            reason=str(raw.get("reason") or ""),
        )
        for raw in _as_list(docs)
        if isinstance(raw, Mapping)
    )
