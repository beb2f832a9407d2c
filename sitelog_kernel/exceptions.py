"""
Typed Exception Hierarchy for the site log system.

Every error raised outside the pure engines has a TYPED exception class
with a machine-readable ``code`` class attribute and structured data
attributes, so callers catch by type and never parse message strings.

The schedule reconciliation engine itself never raises on missing or
malformed data; it degrades to explicit "unknown" / "no data" values.
These exceptions belong to the ingestion, configuration and service
layers.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    SiteLogError (base)
    |
    +-- ScheduleImportError
    |   +-- ScheduleColumnsNotFoundError
    |   +-- UnsupportedSourceFormatError
    |
    +-- RecordNotFoundError
    |   +-- ProjectNotFoundError
    |   +-- LogEntryNotFoundError
    |   +-- ExtensionNotFoundError
    |
    +-- LogWorkflowError
    |   +-- InvalidLogStatusTransitionError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                           | When Raised
----------------|--------------------------------|-------------------------------------
Import          | SCHEDULE_IMPORT_FAILED         | Planning file unreadable
                | SCHEDULE_COLUMNS_NOT_FOUND     | No date/progress header detected
                | UNSUPPORTED_SOURCE_FORMAT      | File suffix has no adapter
----------------|--------------------------------|-------------------------------------
Records         | PROJECT_NOT_FOUND              | Project ID doesn't exist
                | LOG_ENTRY_NOT_FOUND            | Log entry ID doesn't exist
                | EXTENSION_NOT_FOUND            | Extension ID not on the project
----------------|--------------------------------|-------------------------------------
Log workflow    | INVALID_LOG_STATUS_TRANSITION  | Review step not allowed from status
----------------|--------------------------------|-------------------------------------
Configuration   | INVALID_CONFIGURATION          | YAML value out of range / wrong type
"""


class SiteLogError(Exception):
    """
    Base exception for all site log errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "SITELOG_ERROR"


# Schedule import exceptions


class ScheduleImportError(SiteLogError):
    """A planning schedule file could not be imported."""

    code: str = "SCHEDULE_IMPORT_FAILED"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Schedule import failed for {source}: {reason}")


class ScheduleColumnsNotFoundError(ScheduleImportError):
    """No header row with both a date and a progress column was found."""

    code: str = "SCHEDULE_COLUMNS_NOT_FOUND"

    def __init__(self, source: str, columns: tuple[str, ...] = ()):
        self.columns = columns
        super().__init__(
            source,
            f"no date/progress columns detected (saw {list(columns)})",
        )


class UnsupportedSourceFormatError(ScheduleImportError):
    """The file suffix has no registered source adapter."""

    code: str = "UNSUPPORTED_SOURCE_FORMAT"

    def __init__(self, source: str, suffix: str):
        self.suffix = suffix
        super().__init__(source, f"unsupported file type {suffix!r}")


# Record lookup exceptions


class RecordNotFoundError(SiteLogError):
    """Base exception for missing records."""

    code: str = "RECORD_NOT_FOUND"


class ProjectNotFoundError(RecordNotFoundError):
    """Project with given ID was not found."""

    code: str = "PROJECT_NOT_FOUND"

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class LogEntryNotFoundError(RecordNotFoundError):
    """Log entry with given ID was not found."""

    code: str = "LOG_ENTRY_NOT_FOUND"

    def __init__(self, log_entry_id: str):
        self.log_entry_id = log_entry_id
        super().__init__(f"Log entry not found: {log_entry_id}")


class ExtensionNotFoundError(RecordNotFoundError):
    """Extension with given ID is not attached to the project."""

    code: str = "EXTENSION_NOT_FOUND"

    def __init__(self, project_id: str, extension_id: str):
        self.project_id = project_id
        self.extension_id = extension_id
        super().__init__(
            f"Extension {extension_id} not found on project {project_id}"
        )


# Log review workflow exceptions


class LogWorkflowError(SiteLogError):
    """Base exception for daily log review workflow errors."""

    code: str = "LOG_WORKFLOW_ERROR"


class InvalidLogStatusTransitionError(LogWorkflowError):
    """The requested review step is not allowed from the current status."""

    code: str = "INVALID_LOG_STATUS_TRANSITION"

    def __init__(self, log_entry_id: str, from_status: str, to_status: str):
        self.log_entry_id = log_entry_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Log entry {log_entry_id} cannot move from {from_status} to {to_status}"
        )


# Configuration exceptions


class ConfigurationError(SiteLogError):
    """A configuration value is missing, mistyped or out of range."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, key: str, value: object, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid configuration {key}={value!r}: {reason}")
