"""
Values -- Tolerant parsers for the record-source boundary.

Responsibility:
    Converts the loosely typed fields delivered by the document store
    (calendar dates with ``/`` or ``-`` separators, percentages stored as
    strings such as ``"20%"``, day counts typed into free-text inputs) into
    canonical Python values before any engine computation.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by engines and the ingestion layer.

Invariants enforced:
    - Raw date strings are never compared; every date is normalized to a
      ``datetime.date`` first.
    - Percentages use ``Decimal`` arithmetic end to end.

Failure modes:
    - None.  Unparseable dates become ``None`` ("unknown"), unparseable
      numbers become zero.  Callers that must tell "unknown" from zero
      check for ``None`` before calling ``parse_percentage``.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_ZERO = Decimal("0")

# YYYY-MM-DD or YYYY/MM/DD, single-digit month/day allowed, optional time suffix
_DATE_PATTERN = re.compile(r"^\s*(\d{4})[-/](\d{1,2})[-/](\d{1,2})(?:[T\s].*)?$")


def parse_calendar_date(value: Any) -> date | None:
    """
    Normalize a calendar date from the record source.

    Postconditions:
        - Returns a ``date`` for ``date``/``datetime`` inputs and for strings
          shaped ``YYYY-MM-DD`` or ``YYYY/MM/DD``.
        - Returns ``None`` for ``None``, blank strings, malformed strings and
          impossible dates (e.g. ``2026-02-30``).
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    match = _DATE_PATTERN.match(value)
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def is_blank(value: Any) -> bool:
    """True for ``None`` and whitespace-only strings."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_decimal(value: Any) -> Decimal:
    """
    Parse a number such as ``35``, ``"35.5"``, ``"20%"`` or ``"1,250,000"``.

    Postconditions:
        - Returns a finite ``Decimal``.
        - Unparseable, blank or non-finite input yields ``Decimal("0")``.
    """
    if value is None or isinstance(value, bool):
        return _ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        text = str(value).strip().replace("%", "").replace(",", "").strip()
        if not text:
            return _ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return _ZERO

    if not result.is_finite():
        return _ZERO
    return result


def parse_percentage(value: Any) -> Decimal:
    """Parse a progress percentage; ``"20%"`` and ``20`` both yield 20."""
    return parse_decimal(value)


def parse_days(value: Any) -> int:
    """
    Parse a whole number of days (contract duration, extension days).

    Fractional values are truncated; anything unparseable counts as 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    parsed = parse_decimal(value)
    return int(parsed)


def round_percentage(value: Decimal, places: int = 1) -> Decimal:
    """
    Round a percentage for display (half-up, ``places`` decimals).

    A value too large to carry ``places`` decimals within the decimal
    context precision yields 0.
    """
    quantum = Decimal(1).scaleb(-places)
    try:
        return value.quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return _ZERO.quantize(quantum)
