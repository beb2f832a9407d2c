"""
Clock -- Injectable source of "now" for services.

Responsibility:
    Services read the evaluation time through a ``Clock`` so that engine
    code never calls ``datetime.now()`` or ``date.today()`` and tests can
    pin the site calendar day.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O (except SystemClock,
    which is the one sanctioned I/O boundary for time).

Invariants enforced:
    - A computation pass samples the clock once; every derived value in
      that pass agrees on what "today" means.

Failure modes:
    (none)
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """
    Abstract clock interface.

    Contract:
        Services that need the current time receive a Clock instance via
        constructor injection.

    Guarantees:
        - ``now()`` returns a timezone-aware ``datetime`` in site-local time.
        - ``today()`` returns the local calendar day of ``now()``.
    """

    @abstractmethod
    def now(self) -> datetime:
        ...

    def today(self) -> date:
        """Local calendar day of ``now()``."""
        return self.now().date()


class SystemClock(Clock):
    """Wall clock in the host's local timezone (the site's calendar day)."""

    def now(self) -> datetime:
        return datetime.now().astimezone()


class DeterministicClock(Clock):
    """
    Test clock pinned to a site-local time.

    ``now()`` returns the same value on repeated calls until
    ``advance_days()`` moves it forward by whole calendar days.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or datetime(
            2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc
        )

    def now(self) -> datetime:
        return self._fixed_time

    def advance_days(self, days: int = 1) -> None:
        """Move the clock by ``days`` calendar days (negative moves back)."""
        self._fixed_time += timedelta(days=days)
