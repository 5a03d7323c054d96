from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from lp_engine.domain.entities.position import (
    FeeGrowthSnapshot,
    PoolFeeGrowthState,
    TickRange,
    TokenAmounts,
)
from lp_engine.domain.services.univ3_math import to_token_units


Q128 = 2**128
UINT256_MOD = 2**256


@dataclass(frozen=True)
class UncollectedFees:
    amounts: TokenAmounts
    available: bool


def sub_uint256(a: int, b: int) -> int:
    return (a - b + UINT256_MOD) % UINT256_MOD


def delta_uint256(new_value: int, old_value: int) -> int:
    return (new_value - old_value + UINT256_MOD) % UINT256_MOD


def parse_uint256(value: int | str | Decimal | None) -> int:
    if value is None:
        raise ValueError("Missing uint256 value.")
    if isinstance(value, bool):
        raise ValueError("Unsupported uint256 value type.")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValueError("Empty uint256 string.")
        parsed = int(raw, 16) if raw.lower().startswith("0x") else int(raw)
    elif isinstance(value, Decimal):
        if value != value.to_integral_value():
            raise ValueError("Decimal uint256 value must be integral.")
        parsed = int(value)
    else:
        raise ValueError("Unsupported uint256 value type.")

    if parsed < 0:
        raise ValueError("uint256 value must be non-negative.")
    if parsed >= UINT256_MOD:
        raise ValueError("uint256 value overflows 256 bits.")
    return parsed


def fee_growth_inside(
    *,
    fee_growth_global: int,
    fee_growth_outside_lower: int,
    fee_growth_outside_upper: int,
    tick_current: int,
    tick_lower: int,
    tick_upper: int,
) -> int:
    fee_growth_below = (
        fee_growth_outside_lower
        if tick_current >= tick_lower
        else sub_uint256(fee_growth_global, fee_growth_outside_lower)
    )
    fee_growth_above = (
        fee_growth_outside_upper
        if tick_current < tick_upper
        else sub_uint256(fee_growth_global, fee_growth_outside_upper)
    )
    return sub_uint256(
        sub_uint256(fee_growth_global, fee_growth_below),
        fee_growth_above,
    )


def fee_growth_inside_pair(
    *,
    tick_range: TickRange,
    tick_current: int,
    state: PoolFeeGrowthState,
) -> FeeGrowthSnapshot | None:
    """Current inside growth for both tokens, or None when the reads are incomplete."""
    if state.fee_growth_inside is not None:
        return state.fee_growth_inside
    if (
        state.fee_growth_global0_x128 is None
        or state.fee_growth_global1_x128 is None
        or state.lower is None
        or state.upper is None
    ):
        return None

    inside0 = fee_growth_inside(
        fee_growth_global=state.fee_growth_global0_x128,
        fee_growth_outside_lower=state.lower.fee_growth_outside0_x128,
        fee_growth_outside_upper=state.upper.fee_growth_outside0_x128,
        tick_current=tick_current,
        tick_lower=tick_range.tick_lower,
        tick_upper=tick_range.tick_upper,
    )
    inside1 = fee_growth_inside(
        fee_growth_global=state.fee_growth_global1_x128,
        fee_growth_outside_lower=state.lower.fee_growth_outside1_x128,
        fee_growth_outside_upper=state.upper.fee_growth_outside1_x128,
        tick_current=tick_current,
        tick_lower=tick_range.tick_lower,
        tick_upper=tick_range.tick_upper,
    )
    return FeeGrowthSnapshot(fee_growth_inside0_x128=inside0, fee_growth_inside1_x128=inside1)


def raw_fees_from_growth(*, liquidity: int, last: int, current: int, tokens_owed: int) -> int:
    # liquidity * delta can reach ~2^384; Python ints hold it before the shift.
    return (liquidity * delta_uint256(current, last)) // Q128 + tokens_owed


def uncollected_fees(
    *,
    liquidity: int,
    last: FeeGrowthSnapshot,
    current: FeeGrowthSnapshot,
    tokens_owed0: int,
    tokens_owed1: int,
    token0_decimals: int,
    token1_decimals: int,
) -> TokenAmounts:
    raw0 = raw_fees_from_growth(
        liquidity=liquidity,
        last=last.fee_growth_inside0_x128,
        current=current.fee_growth_inside0_x128,
        tokens_owed=tokens_owed0,
    )
    raw1 = raw_fees_from_growth(
        liquidity=liquidity,
        last=last.fee_growth_inside1_x128,
        current=current.fee_growth_inside1_x128,
        tokens_owed=tokens_owed1,
    )
    return TokenAmounts(
        amount0=to_token_units(raw0, token0_decimals),
        amount1=to_token_units(raw1, token1_decimals),
    )


def uncollected_fees_for_state(
    *,
    liquidity: int,
    tick_range: TickRange,
    tick_current: int,
    last: FeeGrowthSnapshot,
    state: PoolFeeGrowthState | None,
    tokens_owed0: int,
    tokens_owed1: int,
    token0_decimals: int,
    token1_decimals: int,
) -> UncollectedFees:
    """Uncollected fees from whatever fee-growth reads are available.

    Fees are supplementary to the valuation, so incomplete reads give zero fees
    with ``available=False`` instead of an error.
    """
    current = (
        fee_growth_inside_pair(tick_range=tick_range, tick_current=tick_current, state=state)
        if state is not None
        else None
    )
    if current is None:
        return UncollectedFees(
            amounts=TokenAmounts(amount0=Decimal("0"), amount1=Decimal("0")),
            available=False,
        )
    return UncollectedFees(
        amounts=uncollected_fees(
            liquidity=liquidity,
            last=last,
            current=current,
            tokens_owed0=tokens_owed0,
            tokens_owed1=tokens_owed1,
            token0_decimals=token0_decimals,
            token1_decimals=token1_decimals,
        ),
        available=True,
    )
