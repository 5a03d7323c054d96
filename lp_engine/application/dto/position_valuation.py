from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from lp_engine.domain.entities.valuation import ValuationResult


Uint256Value = int | str


@dataclass(frozen=True)
class TickOutsideInput:
    fee_growth_outside0_x128: Uint256Value
    fee_growth_outside1_x128: Uint256Value


@dataclass(frozen=True)
class PositionHistoryInput:
    deposited_amount0: Decimal
    deposited_amount1: Decimal
    deposited_usd: Decimal
    claimed_fees0: Decimal
    claimed_fees1: Decimal
    created_at_ms: int | None


@dataclass(frozen=True)
class ValuatePositionInput:
    liquidity: Uint256Value
    token0_symbol: str
    token0_decimals: int
    token1_symbol: str
    token1_decimals: int
    fee_growth_inside0_last_x128: Uint256Value
    fee_growth_inside1_last_x128: Uint256Value
    sqrt_price_x96: Uint256Value
    current_tick: int
    token0_usd: Decimal
    token1_usd: Decimal
    tick_lower: int | None = None
    tick_upper: int | None = None
    position_info: Uint256Value | None = None
    tokens_owed0: Uint256Value = 0
    tokens_owed1: Uint256Value = 0
    fee_growth_global0_x128: Uint256Value | None = None
    fee_growth_global1_x128: Uint256Value | None = None
    tick_lower_outside: TickOutsideInput | None = None
    tick_upper_outside: TickOutsideInput | None = None
    fee_growth_inside0_x128: Uint256Value | None = None
    fee_growth_inside1_x128: Uint256Value | None = None
    history: PositionHistoryInput | None = None
    label: str | None = None


@dataclass(frozen=True)
class ValuatePositionOutput:
    label: str | None
    token0_symbol: str
    token1_symbol: str
    tick_lower: int
    tick_upper: int
    current_tick: int
    valuation: ValuationResult
