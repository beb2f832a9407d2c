"""
Daily Log Module (``sitelog_modules.logs``).

Daily site log entries (weather, work content, reporter, reported actual
progress, issues) and their review workflow.
"""

from sitelog_modules.logs.models import LogEntry, LogStatus
from sitelog_modules.logs.service import LogService

__all__ = [
    "LogEntry",
    "LogService",
    "LogStatus",
]
