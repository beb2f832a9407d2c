"""
Planning schedule import: header-detected date/progress columns to
``SchedulePoint`` list.

Responsibility:
    Turn a planning file (CSV or XLSX) into the ordered list of
    checkpoints that wholesale-replaces a project's schedule.

Architecture position:
    Ingestion -- file I/O through source adapters; no DB access.

Invariants enforced:
    - Source row order is preserved (no sorting, no de-duplication).
    - A row with an unparseable date, or a progress outside 0..100, is
      skipped and counted; it never aborts the import.

Failure modes:
    - UnsupportedSourceFormatError: no adapter for the file suffix.
    - ScheduleColumnsNotFoundError: no header row within the scan window
      has both a date column and a progress column.
    - ScheduleImportError: the file cannot be read or decoded.
"""

from __future__ import annotations

import zipfile
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable

from sitelog_kernel.domain.values import is_blank, parse_calendar_date, parse_decimal
from sitelog_kernel.exceptions import ScheduleColumnsNotFoundError, ScheduleImportError
from sitelog_kernel.logging_config import get_logger
from sitelog_engines.schedule import SchedulePoint
from sitelog_ingestion.adapters import adapter_for_path
from sitelog_ingestion.adapters.base import SourceAdapter

logger = get_logger("ingestion.schedule_import")

DATE_KEYWORDS: tuple[str, ...] = ("date", "日期", "時間")
PROGRESS_KEYWORDS: tuple[str, ...] = (
    "progress", "planned", "percent", "%", "預定進度", "預定", "進度",
)
HEADER_SCAN_ROWS = 15

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ScheduleImportResult:
    """Checkpoints read from a planning file, with skip accounting."""

    points: tuple[SchedulePoint, ...]
    skipped_rows: int
    date_column: str
    progress_column: str

    def to_documents(self) -> list[dict[str, Any]]:
        """Checkpoints as ``{date, progress}`` dicts for the record store."""
        return [
            {"date": p.point_date.isoformat(), "progress": str(p.progress)}
            for p in self.points
        ]


def _normalize(value: Any) -> str:
    if value is None:
        return ""
    return " ".join(str(value).split()).lower()


def _find_column(cells: list[str], keywords: Iterable[str], exclude: int | None = None) -> int | None:
    for idx, cell in enumerate(cells):
        if idx == exclude or not cell:
            continue
        if any(kw in cell for kw in keywords):
            return idx
    return None


def detect_columns(row: list[Any]) -> tuple[int, int] | None:
    """
    Locate the date and progress columns in a candidate header row.

    Returns ``(date_index, progress_index)`` or ``None``.  The date column
    is matched first; the progress column is the first other column
    matching a progress keyword.
    """
    cells = [_normalize(v) for v in row]
    date_idx = _find_column(cells, DATE_KEYWORDS)
    if date_idx is None:
        return None
    progress_idx = _find_column(cells, PROGRESS_KEYWORDS, exclude=date_idx)
    if progress_idx is None:
        return None
    return date_idx, progress_idx


def _cell(row: list[Any], idx: int) -> Any:
    return row[idx] if idx < len(row) else None


def parse_schedule_rows(rows: Iterable[list[Any]], source: str = "<rows>") -> ScheduleImportResult:
    """
    Build checkpoints from raw rows (header row included).

    Raises:
        ScheduleColumnsNotFoundError: No header row detected in the first
            ``HEADER_SCAN_ROWS`` rows.
    """
    columns: tuple[int, int] | None = None
    header: list[Any] = []
    seen_headers: list[str] = []
    points: list[SchedulePoint] = []
    skipped = 0

    for row_number, row in enumerate(rows):
        if columns is None:
            if row_number >= HEADER_SCAN_ROWS:
                break
            columns = detect_columns(row)
            if columns is None:
                seen_headers.extend(str(v) for v in row if not is_blank(v))
            else:
                header = row
            continue

        date_idx, progress_idx = columns
        raw_date = _cell(row, date_idx)
        raw_progress = _cell(row, progress_idx)
        if is_blank(raw_date) and is_blank(raw_progress):
            continue

        point_date = parse_calendar_date(raw_date)
        if point_date is None or is_blank(raw_progress):
            skipped += 1
            continue
        progress = parse_decimal(raw_progress)
        if progress < _ZERO or progress > _HUNDRED:
            skipped += 1
            continue
        points.append(SchedulePoint(point_date=point_date, progress=progress))

    if columns is None:
        raise ScheduleColumnsNotFoundError(source, tuple(seen_headers[:20]))

    result = ScheduleImportResult(
        points=tuple(points),
        skipped_rows=skipped,
        date_column=str(header[columns[0]]).strip(),
        progress_column=str(header[columns[1]]).strip(),
    )
    logger.info("schedule_import_completed", extra={
        "source": source,
        "point_count": len(result.points),
        "skipped_rows": result.skipped_rows,
        "date_column": result.date_column,
        "progress_column": result.progress_column,
    })
    return result


def import_schedule_file(
    source_path: Path | str,
    options: dict[str, Any] | None = None,
    adapter: SourceAdapter | None = None,
) -> ScheduleImportResult:
    """
    Read a planning file and return its checkpoints.

    Args:
        source_path: CSV or XLSX file.
        options: Adapter options (encoding, delimiter, sheet, skip_rows).
        adapter: Explicit adapter; chosen by suffix when omitted.
    """
    path = Path(source_path)
    adapter = adapter or adapter_for_path(path)
    logger.info("schedule_import_started", extra={
        "source": str(path),
        "adapter": type(adapter).__name__,
    })
    try:
        return parse_schedule_rows(adapter.read_rows(path, options or {}), source=str(path))
    except (OSError, UnicodeDecodeError, ValueError, KeyError, zipfile.BadZipFile) as exc:
        logger.warning("schedule_import_failed", extra={
            "source": str(path),
            "error": str(exc),
        })
        raise ScheduleImportError(str(path), str(exc)) from exc
