"""
Source adapter protocol and preview DTO.

Contract:
    SourceAdapter.read_rows() yields one list of raw cell values per line.
    SourceAdapter.read() yields one dict per record, keyed by the header row.
    SourceAdapter.preview() returns a quick snapshot: row count, columns, sample rows.

Architecture: sitelog_ingestion/adapters. File I/O only, no DB or engine imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Protocol, runtime_checkable


@runtime_checkable
class SourceAdapter(Protocol):
    """Protocol for reading planning files into rows and record dicts."""

    def read_rows(self, source_path: Path, options: dict[str, Any]) -> Iterator[list[Any]]:
        """Yield raw cell values, header row included. Streams."""
        ...

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Yield one dict per record below the header row."""
        ...

    def preview(self, source_path: Path, options: dict[str, Any]) -> "SourcePreview":
        """Quick preview: row count, detected columns, sample rows."""
        ...


@dataclass(frozen=True)
class SourcePreview:
    """Result of probing a source file (row count, columns, first N rows)."""

    row_count: int
    columns: tuple[str, ...]
    sample_rows: tuple[dict[str, Any], ...]  # First 5 rows; do not mutate
    encoding: str | None = None
    detected_delimiter: str | None = None


def header_names(row: list[Any]) -> list[str]:
    """Column names for a header row; blanks become ``Column_N``, duplicates get a suffix."""
    headers: list[str] = []
    for idx, value in enumerate(row):
        key = "" if value is None else " ".join(str(value).split())
        key = key or f"Column_{idx + 1}"
        base = key
        cnt = 0
        while key in headers:
            cnt += 1
            key = f"{base}_{cnt}"
        headers.append(key)
    return headers


def is_empty_row(row: list[Any]) -> bool:
    return not any(v is not None and str(v).strip() != "" for v in row)
