from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class SimulateReturnsInput:
    deposit_usd: Decimal
    price_lower: Decimal
    price_upper: Decimal
    days: int
    volume_24h_usd: Decimal
    tvl_usd: Decimal
    pool_apr: Decimal | None = None
    fees_24h_usd: Decimal | None = None
    current_price: Decimal | None = None
    sqrt_price_x96: int | str | None = None
    current_tick: int | None = None
    token0_decimals: int = 18
    token1_decimals: int = 18
    token0_usd: Decimal | None = None
    token1_usd: Decimal | None = None


@dataclass(frozen=True)
class SimulateReturnsOutput:
    valid: bool
    pool_apr: Decimal
    current_price: Decimal
    estimated_fees_usd: Decimal
    estimated_apr: Decimal
    impermanent_loss_usd: Decimal
    net_return_usd: Decimal
    token0_amount: Decimal
    token1_amount: Decimal
    in_range: bool
    time_in_range_fraction: Decimal
    concentration_factor: Decimal
    estimated_volatility: Decimal
    daily_fees: list[Decimal]
    warnings: list[str]
