"""
Site log modules.

Thin orchestration layers over the kernel and the engines.
Each module contains:
- Domain models (the nouns)
- ORM persistence models
- A service facade owning the transaction boundary

Modules:
- Project: project records, extensions, contract amount revisions,
  planned schedule, progress summaries and S-curve data
- Logs: daily site log entries and their review workflow

Actual calculation logic lives in sitelog_engines.
"""
