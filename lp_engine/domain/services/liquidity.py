from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from lp_engine.domain.entities.position import TickRange, TokenAmounts
from lp_engine.domain.services.univ3_math import (
    Q96,
    is_valid_tick_range,
    tick_to_sqrt_price_x96,
    to_token_units,
)


@dataclass(frozen=True)
class RawAmounts:
    amount0: int
    amount1: int


ZERO_RAW = RawAmounts(amount0=0, amount1=0)


def compute_raw_amounts(
    *,
    liquidity: int,
    sqrt_price_current_x96: int,
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int,
) -> RawAmounts:
    """Token amounts in raw units for liquidity L across [lower, upper].

    Below the range the position is all token0, above it all token1; inside it
    holds both. Integer-only so Q96 products never lose precision.
    """
    if liquidity <= 0:
        return ZERO_RAW
    if sqrt_price_current_x96 <= 0 or sqrt_price_lower_x96 <= 0 or sqrt_price_upper_x96 <= 0:
        return ZERO_RAW

    sqrt_lower, sqrt_upper = sorted((sqrt_price_lower_x96, sqrt_price_upper_x96))
    if sqrt_lower == sqrt_upper:
        return ZERO_RAW
    sqrt_current = sqrt_price_current_x96

    if sqrt_current <= sqrt_lower:
        amount0 = (liquidity * Q96 * (sqrt_upper - sqrt_lower)) // (sqrt_lower * sqrt_upper)
        return RawAmounts(amount0=amount0, amount1=0)

    if sqrt_current >= sqrt_upper:
        amount1 = (liquidity * (sqrt_upper - sqrt_lower)) // Q96
        return RawAmounts(amount0=0, amount1=amount1)

    amount0 = (liquidity * Q96 * (sqrt_upper - sqrt_current)) // (sqrt_current * sqrt_upper)
    amount1 = (liquidity * (sqrt_current - sqrt_lower)) // Q96
    return RawAmounts(amount0=amount0, amount1=amount1)


def compute_amounts(
    *,
    liquidity: int,
    sqrt_price_current_x96: int,
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int,
    token0_decimals: int,
    token1_decimals: int,
) -> TokenAmounts:
    raw = compute_raw_amounts(
        liquidity=liquidity,
        sqrt_price_current_x96=sqrt_price_current_x96,
        sqrt_price_lower_x96=sqrt_price_lower_x96,
        sqrt_price_upper_x96=sqrt_price_upper_x96,
    )
    return TokenAmounts(
        amount0=to_token_units(raw.amount0, token0_decimals),
        amount1=to_token_units(raw.amount1, token1_decimals),
    )


def amounts_for_tick_range(
    *,
    liquidity: int,
    sqrt_price_current_x96: int,
    tick_range: TickRange,
    token0_decimals: int,
    token1_decimals: int,
) -> TokenAmounts:
    if not is_valid_tick_range(tick_range.tick_lower, tick_range.tick_upper):
        return TokenAmounts(amount0=Decimal("0"), amount1=Decimal("0"))
    return compute_amounts(
        liquidity=liquidity,
        sqrt_price_current_x96=sqrt_price_current_x96,
        sqrt_price_lower_x96=tick_to_sqrt_price_x96(tick_range.tick_lower),
        sqrt_price_upper_x96=tick_to_sqrt_price_x96(tick_range.tick_upper),
        token0_decimals=token0_decimals,
        token1_decimals=token1_decimals,
    )
