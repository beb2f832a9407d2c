"""
sitelog_ingestion -- Boundary between raw records/files and the engines.

Maps document-store dicts to the engines' frozen types and reads planning
schedule files (CSV, XLSX) into checkpoint lists.

Architecture:
    sitelog_ingestion/ is a top-level package. It may import kernel and
    engines; nothing in kernel/ or engines/ imports from ingestion.
"""

from sitelog_ingestion.records import (
    amount_revisions_from_documents,
    extension_from_document,
    log_entry_from_document,
    parse_contract_type,
    project_from_document,
    schedule_points_from_documents,
)
from sitelog_ingestion.schedule_import import (
    ScheduleImportResult,
    detect_columns,
    import_schedule_file,
    parse_schedule_rows,
)

__all__ = [
    "amount_revisions_from_documents",
    "extension_from_document",
    "log_entry_from_document",
    "parse_contract_type",
    "project_from_document",
    "schedule_points_from_documents",
    "ScheduleImportResult",
    "detect_columns",
    "import_schedule_file",
    "parse_schedule_rows",
]
