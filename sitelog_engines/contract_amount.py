"""
sitelog_engines.contract_amount -- Amended contract amount.

Responsibility:
    Derive a project's amended contract amount from the original award
    amount, its change orders and its subsequent expansions.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import sitelog_kernel/domain.

Invariants enforced:
    - The latest change order (last in record order) with a positive amount
      replaces the original amount as the base.
    - Only the latest subsequent expansion is added on top of the base.
    - ``amended_amount`` is ``None`` when there are no change orders and no
      expansions, so "unchanged" is distinguishable from a recomputed value.
    - Decimal-only arithmetic; unparseable amounts count as zero.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from sitelog_kernel.domain.values import parse_decimal
from sitelog_kernel.logging_config import get_logger
from sitelog_engines.tracer import traced_engine

logger = get_logger("engines.contract_amount")


@dataclass(frozen=True)
class AmountRevision:
    """A change order or subsequent expansion, as entered by an administrator."""

    amount: Any
    revision_date: date | None = None
    doc_number: str = ""
    reason: str = ""

    @property
    def parsed_amount(self) -> Decimal:
        return parse_decimal(self.amount)


@dataclass(frozen=True)
class AmendedAmount:
    """Result of an amended-amount calculation."""

    base_amount: Decimal
    expansion_amount: Decimal
    total_amount: Decimal
    amended_amount: Decimal | None

    @property
    def is_amended(self) -> bool:
        return self.amended_amount is not None


@traced_engine(
    "contract_amount", "1.0",
    fingerprint_fields=("original_amount", "change_orders", "subsequent_expansions"),
)
def calculate_amended_amount(
    original_amount: Any,
    change_orders: Sequence[AmountRevision] = (),
    subsequent_expansions: Sequence[AmountRevision] = (),
) -> AmendedAmount:
    """
    Compute the amended contract amount.

    Args:
        original_amount: Award amount; strings such as ``"1,250,000"`` accepted.
        change_orders: Change orders in record order (latest last).
        subsequent_expansions: Expansions in record order (latest last).
    """
    base = parse_decimal(original_amount)
    if change_orders:
        latest_change = change_orders[-1].parsed_amount
        if latest_change > 0:
            base = latest_change

    expansion = Decimal("0")
    if subsequent_expansions:
        expansion = subsequent_expansions[-1].parsed_amount

    total = base + expansion
    has_changes = bool(change_orders) or bool(subsequent_expansions)

    logger.debug("amended_amount_calculated", extra={
        "change_order_count": len(change_orders),
        "expansion_count": len(subsequent_expansions),
        "total_amount": str(total),
    })

    return AmendedAmount(
        base_amount=base,
        expansion_amount=expansion,
        total_amount=total,
        amended_amount=total if has_changes else None,
    )
