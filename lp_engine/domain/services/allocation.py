from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, getcontext


@dataclass(frozen=True)
class DepositAllocation:
    amount_token0: Decimal
    amount_token1: Decimal
    liquidity: Decimal
    valid: bool


INVALID_ALLOCATION = DepositAllocation(
    amount_token0=Decimal("0"),
    amount_token1=Decimal("0"),
    liquidity=Decimal("0"),
    valid=False,
)


def split_deposit_range(
    *,
    deposit_usd: Decimal,
    price_current: Decimal,
    price_lower: Decimal,
    price_upper: Decimal,
    price_token0_usd: Decimal,
    price_token1_usd: Decimal,
) -> DepositAllocation:
    """Token amounts for a fresh deposit of ``deposit_usd`` into [lower, upper].

    Prices are human prices of token0 in token1. The implied liquidity is the
    one whose amounts are worth exactly ``deposit_usd``. Invalid inputs give a
    zero allocation with ``valid=False``.
    """
    if deposit_usd <= 0:
        return INVALID_ALLOCATION
    if price_token0_usd <= 0 or price_token1_usd <= 0:
        return INVALID_ALLOCATION
    if price_current <= 0 or price_lower <= 0 or price_upper <= 0:
        return INVALID_ALLOCATION
    if price_lower >= price_upper:
        return INVALID_ALLOCATION

    ctx = getcontext()
    sa = price_lower.sqrt(ctx)
    sb = price_upper.sqrt(ctx)
    sp = price_current.sqrt(ctx)

    if sp <= sa:
        amount0 = deposit_usd / price_token0_usd
        return DepositAllocation(
            amount_token0=amount0,
            amount_token1=Decimal("0"),
            liquidity=amount0 * sa * sb / (sb - sa),
            valid=True,
        )
    if sp >= sb:
        amount1 = deposit_usd / price_token1_usd
        return DepositAllocation(
            amount_token0=Decimal("0"),
            amount_token1=amount1,
            liquidity=amount1 / (sb - sa),
            valid=True,
        )

    amount0_per_l = (Decimal("1") / sp) - (Decimal("1") / sb)
    amount1_per_l = sp - sa
    value_per_l = amount0_per_l * price_token0_usd + amount1_per_l * price_token1_usd
    if value_per_l <= 0:
        return INVALID_ALLOCATION
    liquidity = deposit_usd / value_per_l
    return DepositAllocation(
        amount_token0=liquidity * amount0_per_l,
        amount_token1=liquidity * amount1_per_l,
        liquidity=liquidity,
        valid=True,
    )
