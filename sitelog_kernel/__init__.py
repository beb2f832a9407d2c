"""
SiteLog Kernel

Shared foundation for the construction-site progress system:
- Structured JSON logging with request-scoped context
- Typed exceptions with machine-readable codes
- Injectable clock and calendar-date normalization
- SQLAlchemy declarative base and session management
"""

__version__ = "0.1.0"
