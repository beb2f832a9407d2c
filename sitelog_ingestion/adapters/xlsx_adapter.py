"""
XLSX source adapter for planning schedules kept as Excel workbooks.

Supports:
  - sheet by index (0-based) or name
  - skip_rows before the header
  - normalized cell values (strings stripped, integral floats as int,
    dates and datetimes passed through untouched)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

import openpyxl

from sitelog_ingestion.adapters.base import SourcePreview, header_names, is_empty_row


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, float):
        if value == int(value):
            return int(value)
        return value
    if isinstance(value, str):
        return value.strip()
    return value


class XlsxSourceAdapter:
    """
    Read .xlsx files as raw rows or as one dict per row.

    source_options:
      sheet: 0-based sheet index (int) or sheet name (str). Default: active sheet.
      skip_rows: number of rows to skip at top of sheet. Default: 0.
      max_rows: upper bound on rows read. Default: 100_000.
    """

    def read_rows(self, source_path: Path, options: dict[str, Any]) -> Iterator[list[Any]]:
        wb = openpyxl.load_workbook(source_path, read_only=True, data_only=True)
        try:
            sheet = self._get_sheet(wb, options)
            skip_rows = int(options.get("skip_rows", 0))
            max_rows = int(options.get("max_rows", 100_000))
            for values in sheet.iter_rows(
                min_row=1 + skip_rows, max_row=max_rows, values_only=True,
            ):
                row = [_cell_value(v) for v in values]
                while row and row[-1] == "":
                    row.pop()
                yield row
        finally:
            wb.close()

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        headers: list[str] | None = None
        for row in self.read_rows(source_path, options):
            if headers is None:
                if is_empty_row(row):
                    continue
                headers = header_names(row)
                continue
            if is_empty_row(row):
                continue
            yield dict(zip(headers, row))

    def _get_sheet(self, wb: Any, options: dict[str, Any]) -> Any:
        sheet_ref = options.get("sheet")
        if sheet_ref is None:
            return wb.active
        if isinstance(sheet_ref, int):
            return wb.worksheets[sheet_ref]
        return wb[sheet_ref]

    def preview(self, source_path: Path, options: dict[str, Any]) -> SourcePreview:
        records = list(self.read(source_path, {**options, "max_rows": options.get("max_rows", 500)}))
        columns = tuple(records[0].keys()) if records else ()
        return SourcePreview(
            row_count=len(records),
            columns=columns,
            sample_rows=tuple(records[:5]),
            encoding=None,
            detected_delimiter=None,
        )
