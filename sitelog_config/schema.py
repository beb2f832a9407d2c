"""
ProgressConfig schema.

The runtime configuration artifact for progress reconciliation.  YAML is
parsed into this frozen type by the loader; services hold one instance
for the lifetime of a request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from sitelog_engines.schedule import ContractType


@dataclass(frozen=True)
class ProgressConfig:
    """Validated progress settings."""

    config_id: str = "sitelog-defaults"
    version: int = 1
    s_curve_steps: int = 6
    future_tolerance_days: int = 0
    display_precision: int = 1
    label_format: str = "{month}/{day}"
    default_contract_type: ContractType = ContractType.CALENDAR_DAYS
    issue_statuses: tuple[str, ...] = ("issue",)
    checksum: str = ""

    @property
    def future_tolerance(self) -> timedelta:
        return timedelta(days=self.future_tolerance_days)
