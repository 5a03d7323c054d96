from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class SimulationPool:
    apr: Decimal
    volume_24h_usd: Decimal
    tvl_usd: Decimal
    current_price: Decimal
    token0_usd: Decimal | None = None
    token1_usd: Decimal | None = None


@dataclass(frozen=True)
class SimulationInput:
    deposit_usd: Decimal
    price_lower: Decimal
    price_upper: Decimal
    days: int


@dataclass(frozen=True)
class SimulationResult:
    valid: bool
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
    daily_fees: list[Decimal] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
