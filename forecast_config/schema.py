"""
ForecastConfig schema.

The frozen runtime settings of the forecast engine.  YAML is parsed into
this type by ``forecast_config.loader``; callers only ever see it through
``forecast_config.get_active_config()``.

Every field has the value the engines default to, so the engines never
need to import this package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from forecast_kernel.domain.date_range import DEFAULT_PRESETS, RangePreset


@dataclass(frozen=True)
class ForecastConfig:
    """Engine vocabulary and constants."""

    config_id: str = "default"
    version: int = 1

    # MRR normalization
    weeks_per_month: Decimal = Decimal("4.345")

    # Display fallbacks
    uncategorized_label: str = "Uncategorized"
    unknown_customer_label: str = "Unknown"

    # Status and type vocabulary of the payment processor
    active_status: str = "Active"
    realized_statuses: frozenset[str] = frozenset({"Approved", "Settled"})
    declined_status: str = "Declined"
    return_type: str = "Return"
    recurring_source: str = "Recurring"

    presets: tuple[RangePreset, ...] = DEFAULT_PRESETS

    # SHA-256 of the canonical source document; empty for in-code defaults
    checksum: str = field(default="", compare=False)

    def preset_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.presets)
