from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ValuationPolicy:
    apr_cap_percent: Decimal = Decimal("10000")
    default_position_age_days: Decimal = Decimal("30")
    min_position_age_days: Decimal = Decimal("1")
    deposit_floor_ratio: Decimal = Decimal("0.1")
    min_investment_usd: Decimal = Decimal("1")


@dataclass(frozen=True)
class SimulationPolicy:
    concentration_cap: float = 1000.0
    fee_concentration_cap: float = 20.0
    narrow_range_sqrt_ratio: float = 0.9999
    default_volatility: float = 0.5
    max_volatility: float = 1.0
    turnover_volatility_scale: float = 0.5
    time_in_range_floor: float = 0.05
    time_in_range_ceiling: float = 0.95
    max_boundary_probability: float = 0.4
    daily_fee_amplitude: float = 0.2
    daily_fee_period_days: float = 7.0
