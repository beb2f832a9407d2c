"""
Project Module (``sitelog_modules.project``).

Responsibility
--------------
Construction project records (contract period, approved extensions,
contract amount revisions, planned schedule checkpoints) and the progress
figures derived from them: planned vs. actual progress, remaining days,
S-curve chart data and dashboard counts.

Architecture position
---------------------
**Modules layer** -- domain models, ORM models and a service facade that
delegates every calculation to ``sitelog_engines``.
"""

from sitelog_modules.project.models import Project, ProgressSummary, ProjectStatus
from sitelog_modules.project.service import ProjectService

__all__ = [
    "Project",
    "ProgressSummary",
    "ProjectService",
    "ProjectStatus",
]
