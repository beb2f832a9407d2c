"""
CSV source adapter for planning schedules exported from spreadsheet tools.

Uses the csv module. Configurable: delimiter, encoding, quoting, skip_rows.
Handles BOM via utf-8-sig when encoding is utf-8 (Excel "CSV UTF-8" exports
carry one). Streams rows.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Iterator

from sitelog_ingestion.adapters.base import SourcePreview, header_names, is_empty_row


_QUOTING = {
    "minimal": csv.QUOTE_MINIMAL,
    "all": csv.QUOTE_ALL,
    "nonnumeric": csv.QUOTE_NONNUMERIC,
    "none": csv.QUOTE_NONE,
}


def _get_encoding(options: dict[str, Any]) -> str:
    enc = options.get("encoding", "utf-8")
    if enc.lower() == "utf-8":
        return "utf-8-sig"  # Strip BOM if present
    return enc


def _get_quoting(options: dict[str, Any]) -> int:
    q = options.get("quoting", "minimal")
    if isinstance(q, int):
        return q
    return _QUOTING.get(str(q).lower(), csv.QUOTE_MINIMAL)


class CsvSourceAdapter:
    """Read CSV files as raw rows or as one dict per row."""

    def read_rows(self, source_path: Path, options: dict[str, Any]) -> Iterator[list[Any]]:
        encoding = _get_encoding(options)
        delimiter = options.get("delimiter", ",")
        skip_rows = int(options.get("skip_rows", 0))
        quoting = _get_quoting(options)

        with source_path.open("r", encoding=encoding, newline="") as f:
            for _ in range(skip_rows):
                next(f, None)
            reader = csv.reader(f, delimiter=delimiter, quoting=quoting)
            for row in reader:
                yield [cell.strip() for cell in row]

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        rows = self.read_rows(source_path, options)
        headers: list[str] | None = None
        for row in rows:
            if headers is None:
                headers = header_names(row)
                continue
            if is_empty_row(row):
                continue
            yield dict(zip(headers, row))

    def preview(self, source_path: Path, options: dict[str, Any]) -> SourcePreview:
        encoding = _get_encoding(options)
        delimiter = options.get("delimiter", ",")
        sample_size = 5

        columns: tuple[str, ...] = ()
        sample: list[dict[str, Any]] = []
        count = 0
        for idx, row in enumerate(self.read_rows(source_path, options)):
            if idx == 0:
                columns = tuple(header_names(row))
                continue
            if is_empty_row(row):
                continue
            count += 1
            if len(sample) < sample_size:
                sample.append(dict(zip(columns, row)))

        return SourcePreview(
            row_count=count,
            columns=columns,
            sample_rows=tuple(sample),
            encoding=encoding,
            detected_delimiter=delimiter,
        )
