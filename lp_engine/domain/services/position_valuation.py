from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from lp_engine.domain.entities.policy import ValuationPolicy
from lp_engine.domain.entities.position import (
    PoolFeeGrowthState,
    PoolSlot0,
    Position,
    PositionHistory,
    TickRange,
    TokenAmounts,
    TokenPrices,
)
from lp_engine.domain.entities.valuation import ValuationResult
from lp_engine.domain.services.liquidity import amounts_for_tick_range
from lp_engine.domain.services.univ3_fee_growth import uncollected_fees_for_state
from lp_engine.domain.services.univ3_math import is_valid_tick_range


MS_PER_DAY = Decimal("86400000")
DAYS_PER_YEAR = Decimal("365")
ZERO = Decimal("0")

DEFAULT_VALUATION_POLICY = ValuationPolicy()


@dataclass(frozen=True)
class AnnualizedApr:
    apr: Decimal
    capped: bool


def is_in_range(current_tick: int, tick_range: TickRange) -> bool:
    return tick_range.tick_lower <= current_tick < tick_range.tick_upper


def usd_value(amounts: TokenAmounts, prices: TokenPrices) -> Decimal:
    return amounts.amount0 * prices.token0_usd + amounts.amount1 * prices.token1_usd


def claimed_fees_usd(history: PositionHistory | None, prices: TokenPrices) -> Decimal:
    if history is None:
        return ZERO
    return history.claimed_fees0 * prices.token0_usd + history.claimed_fees1 * prices.token1_usd


def original_investment_usd(
    *,
    history: PositionHistory | None,
    current_usd_value: Decimal,
    policy: ValuationPolicy = DEFAULT_VALUATION_POLICY,
    warnings: list[str] | None = None,
) -> Decimal:
    """Deposit value used for P&L, falling back to the current value.

    A recorded deposit worth less than ``deposit_floor_ratio`` of the current
    value is treated as a partial or stale record and replaced by the current
    value.
    """
    if history is None:
        return current_usd_value
    deposited = history.deposited_usd
    if current_usd_value > 0 and deposited < current_usd_value * policy.deposit_floor_ratio:
        if warnings is not None:
            warnings.append(
                "Recorded deposit below "
                f"{policy.deposit_floor_ratio * 100}% of current value; using current value as deposit."
            )
        return current_usd_value
    return deposited


def safe_original_investment(
    *,
    original_investment: Decimal,
    current_usd_value: Decimal,
    policy: ValuationPolicy = DEFAULT_VALUATION_POLICY,
) -> Decimal:
    return max(original_investment, current_usd_value, policy.min_investment_usd)


def hodl_value_usd(
    *,
    history: PositionHistory | None,
    prices: TokenPrices,
    current_usd_value: Decimal,
) -> Decimal:
    """Deposited amounts revalued at current prices; the current value when unknown."""
    if history is None:
        return current_usd_value
    if history.deposited_amount0 <= 0 and history.deposited_amount1 <= 0:
        return current_usd_value
    return history.deposited_amount0 * prices.token0_usd + history.deposited_amount1 * prices.token1_usd


def impermanent_loss_usd(*, hodl_value: Decimal, current_usd_value: Decimal) -> Decimal:
    return max(ZERO, hodl_value - current_usd_value)


def position_age_days(
    *,
    created_at_ms: int | None,
    now_ms: int,
    policy: ValuationPolicy = DEFAULT_VALUATION_POLICY,
    warnings: list[str] | None = None,
) -> Decimal:
    if created_at_ms is not None and 0 < created_at_ms < now_ms:
        raw_days = Decimal(now_ms - created_at_ms) / MS_PER_DAY
    else:
        raw_days = policy.default_position_age_days
        if warnings is not None:
            warnings.append(
                f"No valid creation timestamp; assuming {policy.default_position_age_days} days of age."
            )
    return max(policy.min_position_age_days, raw_days)


def annualized_fee_apr(
    *,
    earnings_usd: Decimal,
    age_days: Decimal,
    current_usd_value: Decimal,
    policy: ValuationPolicy = DEFAULT_VALUATION_POLICY,
) -> AnnualizedApr:
    """Fee APR in percent on current capital, capped at the policy ceiling."""
    age = max(age_days, policy.min_position_age_days)
    base = max(current_usd_value, policy.min_investment_usd)
    raw_apr = (earnings_usd / age) * DAYS_PER_YEAR / base * Decimal("100")
    if raw_apr > policy.apr_cap_percent:
        return AnnualizedApr(apr=policy.apr_cap_percent, capped=True)
    return AnnualizedApr(apr=raw_apr, capped=False)


def invalid_valuation(reason: str) -> ValuationResult:
    return ValuationResult(
        valid=False,
        in_range=False,
        token0_amount=ZERO,
        token1_amount=ZERO,
        usd_value=ZERO,
        unclaimed_fees0=ZERO,
        unclaimed_fees1=ZERO,
        unclaimed_fees_usd=ZERO,
        claimed_fees_usd=ZERO,
        original_investment_usd=ZERO,
        safe_original_investment_usd=ZERO,
        profit_loss_usd=ZERO,
        hodl_value_usd=ZERO,
        impermanent_loss_usd=ZERO,
        vs_hodl_usd=ZERO,
        position_age_days=ZERO,
        apr=ZERO,
        apr_capped=False,
        warnings=[reason],
    )


def _validation_error(position: Position, slot0: PoolSlot0, prices: TokenPrices) -> str | None:
    tick_range = position.tick_range
    if not is_valid_tick_range(tick_range.tick_lower, tick_range.tick_upper):
        return f"Invalid tick range [{tick_range.tick_lower}, {tick_range.tick_upper}]."
    if position.liquidity < 0:
        return "Liquidity must be non-negative."
    if position.tokens_owed0 < 0 or position.tokens_owed1 < 0:
        return "tokensOwed must be non-negative."
    if position.token0.decimals < 0 or position.token1.decimals < 0:
        return "Token decimals must be non-negative."
    if slot0.sqrt_price_x96 <= 0:
        return "sqrtPriceX96 must be positive."
    if prices.token0_usd < 0 or prices.token1_usd < 0:
        return "Token USD prices must be non-negative."
    return None


def valuate_position(
    *,
    position: Position,
    slot0: PoolSlot0,
    prices: TokenPrices,
    now_ms: int,
    fee_growth: PoolFeeGrowthState | None = None,
    history: PositionHistory | None = None,
    policy: ValuationPolicy = DEFAULT_VALUATION_POLICY,
) -> ValuationResult:
    """USD valuation, fees, P&L, HODL comparison and APR for one position.

    Pure: every input including the clock is supplied by the caller. Invalid
    inputs give a neutral result with ``valid=False`` rather than raising.
    """
    error = _validation_error(position, slot0, prices)
    if error is not None:
        return invalid_valuation(error)

    warnings: list[str] = []
    if prices.token0_usd == 0 or prices.token1_usd == 0:
        warnings.append("Missing USD price for a token; its value is counted as zero.")

    tick_range = position.tick_range
    in_range = is_in_range(slot0.tick, tick_range)

    amounts = amounts_for_tick_range(
        liquidity=position.liquidity,
        sqrt_price_current_x96=slot0.sqrt_price_x96,
        tick_range=tick_range,
        token0_decimals=position.token0.decimals,
        token1_decimals=position.token1.decimals,
    )
    current_value = usd_value(amounts, prices)

    fees = uncollected_fees_for_state(
        liquidity=position.liquidity,
        tick_range=tick_range,
        tick_current=slot0.tick,
        last=position.fee_growth_inside_last,
        state=fee_growth,
        tokens_owed0=position.tokens_owed0,
        tokens_owed1=position.tokens_owed1,
        token0_decimals=position.token0.decimals,
        token1_decimals=position.token1.decimals,
    )
    if not fees.available:
        warnings.append("Fee growth data unavailable; uncollected fees reported as zero.")
    unclaimed_usd = usd_value(fees.amounts, prices)
    claimed_usd = claimed_fees_usd(history, prices)
    earnings = unclaimed_usd + claimed_usd

    original = original_investment_usd(
        history=history,
        current_usd_value=current_value,
        policy=policy,
        warnings=warnings,
    )
    safe_original = safe_original_investment(
        original_investment=original,
        current_usd_value=current_value,
        policy=policy,
    )
    profit_loss = (current_value + earnings) - safe_original

    hodl_value = hodl_value_usd(history=history, prices=prices, current_usd_value=current_value)
    il = impermanent_loss_usd(hodl_value=hodl_value, current_usd_value=current_value)
    vs_hodl = earnings - il

    age_days = position_age_days(
        created_at_ms=history.created_at_ms if history is not None else None,
        now_ms=now_ms,
        policy=policy,
        warnings=warnings,
    )
    annualized = annualized_fee_apr(
        earnings_usd=earnings,
        age_days=age_days,
        current_usd_value=current_value,
        policy=policy,
    )
    if annualized.capped:
        warnings.append(f"APR capped at {policy.apr_cap_percent}%; value is unreliable.")

    return ValuationResult(
        valid=True,
        in_range=in_range,
        token0_amount=amounts.amount0,
        token1_amount=amounts.amount1,
        usd_value=current_value,
        unclaimed_fees0=fees.amounts.amount0,
        unclaimed_fees1=fees.amounts.amount1,
        unclaimed_fees_usd=unclaimed_usd,
        claimed_fees_usd=claimed_usd,
        original_investment_usd=original,
        safe_original_investment_usd=safe_original,
        profit_loss_usd=profit_loss,
        hodl_value_usd=hodl_value,
        impermanent_loss_usd=il,
        vs_hodl_usd=vs_hodl,
        position_age_days=age_days,
        apr=annualized.apr,
        apr_capped=annualized.capped,
        warnings=warnings,
    )
