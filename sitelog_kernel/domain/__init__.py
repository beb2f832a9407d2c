"""
Pure domain layer.

Value parsing and the clock abstraction, with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O (except SystemClock)
"""

from sitelog_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from sitelog_kernel.domain.values import (
    is_blank,
    parse_calendar_date,
    parse_days,
    parse_decimal,
    parse_percentage,
    round_percentage,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "is_blank",
    "parse_calendar_date",
    "parse_days",
    "parse_decimal",
    "parse_percentage",
    "round_percentage",
]
