from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class ValuationResult:
    valid: bool
    in_range: bool
    token0_amount: Decimal
    token1_amount: Decimal
    usd_value: Decimal
    unclaimed_fees0: Decimal
    unclaimed_fees1: Decimal
    unclaimed_fees_usd: Decimal
    claimed_fees_usd: Decimal
    original_investment_usd: Decimal
    safe_original_investment_usd: Decimal
    profit_loss_usd: Decimal
    hodl_value_usd: Decimal
    impermanent_loss_usd: Decimal
    vs_hodl_usd: Decimal
    position_age_days: Decimal
    apr: Decimal
    apr_capped: bool
    warnings: list[str] = field(default_factory=list)

    @property
    def earnings_usd(self) -> Decimal:
        return self.unclaimed_fees_usd + self.claimed_fees_usd
