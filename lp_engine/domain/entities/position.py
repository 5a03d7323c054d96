from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TickRange:
    tick_lower: int
    tick_upper: int


@dataclass(frozen=True)
class TokenInfo:
    symbol: str
    decimals: int


@dataclass(frozen=True)
class PoolSlot0:
    sqrt_price_x96: int
    tick: int


@dataclass(frozen=True)
class FeeGrowthSnapshot:
    fee_growth_inside0_x128: int
    fee_growth_inside1_x128: int


@dataclass(frozen=True)
class TickFeeGrowthOutside:
    fee_growth_outside0_x128: int
    fee_growth_outside1_x128: int


@dataclass(frozen=True)
class PoolFeeGrowthState:
    """Current fee-growth reads for a pool.

    V3 pools supply the global accumulators plus the boundary ticks' outside
    values; V4 StateView supplies the inside values directly. Any field may be
    missing when the upstream read failed.
    """

    fee_growth_global0_x128: int | None = None
    fee_growth_global1_x128: int | None = None
    lower: TickFeeGrowthOutside | None = None
    upper: TickFeeGrowthOutside | None = None
    fee_growth_inside: FeeGrowthSnapshot | None = None


@dataclass(frozen=True)
class Position:
    liquidity: int
    tick_range: TickRange
    token0: TokenInfo
    token1: TokenInfo
    fee_growth_inside_last: FeeGrowthSnapshot
    tokens_owed0: int = 0
    tokens_owed1: int = 0


@dataclass(frozen=True)
class PositionHistory:
    deposited_amount0: Decimal
    deposited_amount1: Decimal
    deposited_usd: Decimal
    claimed_fees0: Decimal
    claimed_fees1: Decimal
    created_at_ms: int | None


@dataclass(frozen=True)
class TokenPrices:
    token0_usd: Decimal
    token1_usd: Decimal


@dataclass(frozen=True)
class TokenAmounts:
    amount0: Decimal
    amount1: Decimal
