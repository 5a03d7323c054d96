from __future__ import annotations

from decimal import Decimal

from lp_engine.domain.entities.policy import ValuationPolicy
from lp_engine.domain.entities.portfolio import PortfolioProjection, PortfolioSummary
from lp_engine.domain.entities.valuation import ValuationResult
from lp_engine.domain.services.position_valuation import (
    DEFAULT_VALUATION_POLICY,
    annualized_fee_apr,
    impermanent_loss_usd,
)


ZERO = Decimal("0")


def summarize_portfolio(
    results: list[ValuationResult],
    *,
    policy: ValuationPolicy = DEFAULT_VALUATION_POLICY,
) -> PortfolioSummary:
    """Wallet totals over valid position valuations.

    Uses the same guardrails as a single position: the investment floor, the
    average position age as the APR window and the APR ceiling.
    """
    warnings: list[str] = []
    valid = [result for result in results if result.valid]
    skipped = len(results) - len(valid)
    if skipped:
        warnings.append(f"{skipped} invalid position(s) excluded from totals.")

    total_value = sum((r.usd_value for r in valid), ZERO)
    total_original = sum((r.original_investment_usd for r in valid), ZERO)
    total_unclaimed = sum((r.unclaimed_fees_usd for r in valid), ZERO)
    total_claimed = sum((r.claimed_fees_usd for r in valid), ZERO)
    total_hodl = sum((r.hodl_value_usd for r in valid), ZERO)
    total_earnings = total_unclaimed + total_claimed

    retention_rate = (total_unclaimed / total_earnings) * Decimal("100") if total_earnings > 0 else ZERO
    profit_loss = (total_value + total_earnings) - total_original
    asset_gain = total_value - total_original
    il = impermanent_loss_usd(hodl_value=total_hodl, current_usd_value=total_value)
    vs_hodl = total_earnings - il

    safe_original = max(total_original, total_value, policy.min_investment_usd)
    roi = (profit_loss / safe_original) * Decimal("100")

    if valid:
        avg_age = sum((r.position_age_days for r in valid), ZERO) / Decimal(len(valid))
    else:
        avg_age = policy.default_position_age_days
    avg_age = max(policy.min_position_age_days, avg_age)

    annualized = annualized_fee_apr(
        earnings_usd=total_earnings,
        age_days=avg_age,
        current_usd_value=total_value,
        policy=policy,
    )
    if annualized.capped:
        warnings.append(f"Portfolio APR capped at {policy.apr_cap_percent}%; value is unreliable.")

    daily_yield = annualized.apr / Decimal("100") / Decimal("365")
    projection = PortfolioProjection(
        next_24h_usd=total_value * daily_yield,
        next_7d_usd=total_value * daily_yield * Decimal("7"),
        next_30d_usd=total_value * daily_yield * Decimal("30"),
    )

    return PortfolioSummary(
        position_count=len(valid),
        in_range_count=sum(1 for r in valid if r.in_range),
        total_value_usd=total_value,
        total_original_investment_usd=total_original,
        total_unclaimed_fees_usd=total_unclaimed,
        total_claimed_fees_usd=total_claimed,
        total_earnings_usd=total_earnings,
        total_hodl_value_usd=total_hodl,
        retention_rate=retention_rate,
        profit_loss_usd=profit_loss,
        asset_gain_usd=asset_gain,
        impermanent_loss_usd=il,
        vs_hodl_usd=vs_hodl,
        roi=roi,
        avg_position_age_days=avg_age,
        apr=annualized.apr,
        apr_capped=annualized.capped,
        projection=projection,
        warnings=warnings,
    )
