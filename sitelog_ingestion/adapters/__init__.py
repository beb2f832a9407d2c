"""Source adapters for planning schedule files (file I/O only, no DB)."""

from pathlib import Path

from sitelog_kernel.exceptions import UnsupportedSourceFormatError
from sitelog_ingestion.adapters.base import SourceAdapter, SourcePreview
from sitelog_ingestion.adapters.csv_adapter import CsvSourceAdapter
from sitelog_ingestion.adapters.xlsx_adapter import XlsxSourceAdapter

_ADAPTERS_BY_SUFFIX: dict[str, type] = {
    ".csv": CsvSourceAdapter,
    ".txt": CsvSourceAdapter,
    ".xlsx": XlsxSourceAdapter,
    ".xlsm": XlsxSourceAdapter,
}


def adapter_for_path(source_path: Path) -> SourceAdapter:
    """
    Pick a source adapter from the file suffix.

    Raises:
        UnsupportedSourceFormatError: No adapter handles the suffix.
    """
    suffix = Path(source_path).suffix.lower()
    adapter_cls = _ADAPTERS_BY_SUFFIX.get(suffix)
    if adapter_cls is None:
        raise UnsupportedSourceFormatError(str(source_path), suffix)
    return adapter_cls()


__all__ = [
    "SourceAdapter",
    "SourcePreview",
    "CsvSourceAdapter",
    "XlsxSourceAdapter",
    "adapter_for_path",
]
