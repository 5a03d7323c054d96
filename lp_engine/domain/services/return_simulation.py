from __future__ import annotations

import math
from decimal import Decimal

from lp_engine.domain.entities.policy import SimulationPolicy
from lp_engine.domain.entities.simulation import SimulationInput, SimulationPool, SimulationResult
from lp_engine.domain.services.allocation import split_deposit_range


DEFAULT_SIMULATION_POLICY = SimulationPolicy()

# Abramowitz and Stegun 7.1.26.
_ERF_P = 0.3275911
_ERF_A1 = 0.254829592
_ERF_A2 = -0.284496736
_ERF_A3 = 1.421413741
_ERF_A4 = -1.453152027
_ERF_A5 = 1.061405429


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(value))


def erf(x: float) -> float:
    sign = -1.0 if x < 0 else 1.0
    abs_x = abs(x)
    t = 1.0 / (1.0 + _ERF_P * abs_x)
    y = 1.0 - (((((_ERF_A5 * t + _ERF_A4) * t + _ERF_A3) * t + _ERF_A2) * t + _ERF_A1) * t) * math.exp(
        -abs_x * abs_x
    )
    return sign * y


def normal_cdf(x: float) -> float:
    return 0.5 * (1.0 + erf(x / math.sqrt(2.0)))


def impermanent_loss(price_ratio: float) -> float:
    """Full-range IL fraction (<= 0) for a price move of ``price_ratio``."""
    if price_ratio <= 0:
        return 0.0
    return 2.0 * math.sqrt(price_ratio) / (1.0 + price_ratio) - 1.0


def pool_fee_apr(*, fees_24h_usd: Decimal, tvl_usd: Decimal) -> Decimal:
    if tvl_usd <= 0:
        return Decimal("0")
    return fees_24h_usd * Decimal("365") / tvl_usd * Decimal("100")


def concentration_factor(
    *,
    price_lower: float,
    price_upper: float,
    policy: SimulationPolicy = DEFAULT_SIMULATION_POLICY,
) -> float:
    """Capital efficiency of [lower, upper] versus full range: 1 / (1 - sqrt(lower/upper))."""
    if price_lower <= 0 or price_upper <= 0 or price_lower >= price_upper:
        return 1.0
    sqrt_ratio = math.sqrt(price_lower / price_upper)
    if sqrt_ratio >= policy.narrow_range_sqrt_ratio:
        return policy.concentration_cap
    return min(1.0 / (1.0 - sqrt_ratio), policy.concentration_cap)


def estimate_volatility(
    *,
    volume_24h_usd: float,
    tvl_usd: float,
    policy: SimulationPolicy = DEFAULT_SIMULATION_POLICY,
) -> float:
    """Annualized volatility proxy from daily turnover."""
    if tvl_usd <= 0 or volume_24h_usd < 0:
        return policy.default_volatility
    turnover = volume_24h_usd / tvl_usd
    return min(policy.max_volatility, turnover * 365.0 * policy.turnover_volatility_scale)


def time_in_range_probability(
    *,
    current_price: float,
    price_lower: float,
    price_upper: float,
    days: int,
    volatility: float,
    policy: SimulationPolicy = DEFAULT_SIMULATION_POLICY,
) -> float:
    """P(lower < P_t < upper) under log-normal diffusion, clamped away from certainty."""
    if current_price <= 0 or price_lower <= 0 or price_upper <= 0 or days <= 0:
        return 0.5
    if price_lower >= price_upper:
        return 0.0

    sigma = volatility * math.sqrt(days / 365.0)
    if sigma <= 0:
        in_range = price_lower <= current_price <= price_upper
        probability = 1.0 if in_range else 0.0
    else:
        drift = -0.5 * sigma * sigma
        z_lower = (math.log(price_lower / current_price) - drift) / sigma
        z_upper = (math.log(price_upper / current_price) - drift) / sigma
        probability = normal_cdf(z_upper) - normal_cdf(z_lower)
    return max(policy.time_in_range_floor, min(policy.time_in_range_ceiling, probability))


def expected_impermanent_loss(
    *,
    current_price: float,
    price_lower: float,
    price_upper: float,
    volatility: float,
    policy: SimulationPolicy = DEFAULT_SIMULATION_POLICY,
) -> float:
    """Probability-weighted IL fraction over the boundaries and the two midpoints."""
    if current_price <= 0 or price_lower <= 0 or price_upper <= 0:
        return 0.0
    if price_lower >= price_upper:
        return 0.0

    il_lower = abs(impermanent_loss(price_lower / current_price))
    il_upper = abs(impermanent_loss(price_upper / current_price))
    il_mid_lower = abs(impermanent_loss((price_lower + current_price) / 2.0 / current_price))
    il_mid_upper = abs(impermanent_loss((price_upper + current_price) / 2.0 / current_price))

    volatility_factor = min(volatility, policy.max_volatility)
    boundary_prob = min(policy.max_boundary_probability, volatility_factor * 0.5)
    middle_prob = 1.0 - 2.0 * boundary_prob
    weighted = (
        boundary_prob * il_lower
        + middle_prob * 0.5 * (il_mid_lower + il_mid_upper)
        + boundary_prob * il_upper
    )

    range_width = math.log(price_upper / price_lower)
    return weighted * min(1.0, range_width * volatility_factor)


def daily_fee_series(
    *,
    total_fees: float,
    days: int,
    policy: SimulationPolicy = DEFAULT_SIMULATION_POLICY,
) -> list[float]:
    """Deterministic sinusoidal spread of ``total_fees`` over ``days``; sums to the total."""
    if days <= 0:
        return []
    weights = [
        1.0 + policy.daily_fee_amplitude * math.sin(2.0 * math.pi * day / policy.daily_fee_period_days)
        for day in range(days)
    ]
    weight_sum = sum(weights)
    if weight_sum <= 0:
        return [total_fees / days] * days
    return [total_fees * weight / weight_sum for weight in weights]


def empty_simulation(reason: str) -> SimulationResult:
    return SimulationResult(
        valid=False,
        estimated_fees_usd=Decimal("0"),
        estimated_apr=Decimal("0"),
        impermanent_loss_usd=Decimal("0"),
        net_return_usd=Decimal("0"),
        token0_amount=Decimal("0"),
        token1_amount=Decimal("0"),
        in_range=False,
        time_in_range_fraction=Decimal("0"),
        concentration_factor=Decimal("0"),
        estimated_volatility=Decimal("0"),
        daily_fees=[],
        warnings=[reason],
    )


def simulate_returns(
    *,
    pool: SimulationPool,
    simulation: SimulationInput,
    policy: SimulationPolicy = DEFAULT_SIMULATION_POLICY,
) -> SimulationResult:
    if simulation.price_lower <= 0 or simulation.price_upper <= 0:
        return empty_simulation("Price range bounds must be positive.")
    if simulation.price_lower >= simulation.price_upper:
        return empty_simulation("Lower price must be below upper price.")
    if simulation.days <= 0:
        return empty_simulation("days must be a positive integer.")
    if simulation.deposit_usd <= 0:
        return empty_simulation("deposit_usd must be positive.")
    if pool.current_price <= 0:
        return empty_simulation("Pool current price must be positive.")

    deposit = float(simulation.deposit_usd)
    lower = float(simulation.price_lower)
    upper = float(simulation.price_upper)
    current = float(pool.current_price)
    pool_apr = float(pool.apr)
    days = simulation.days
    if not all(math.isfinite(value) for value in (deposit, lower, upper, current, pool_apr)):
        return empty_simulation("Simulation inputs must be finite numbers.")
    if min(deposit, lower, upper, current) <= 0 or lower >= upper:
        return empty_simulation("Simulation inputs are outside the representable range.")

    warnings: list[str] = []

    concentration = concentration_factor(price_lower=lower, price_upper=upper, policy=policy)
    if concentration >= policy.concentration_cap:
        warnings.append(f"Concentration factor capped at {policy.concentration_cap}.")
    if pool.tvl_usd <= 0:
        warnings.append(f"Pool TVL unavailable; assuming {policy.default_volatility} volatility.")
    volatility = estimate_volatility(
        volume_24h_usd=float(pool.volume_24h_usd),
        tvl_usd=float(pool.tvl_usd),
        policy=policy,
    )
    time_in_range = time_in_range_probability(
        current_price=current,
        price_lower=lower,
        price_upper=upper,
        days=days,
        volatility=volatility,
        policy=policy,
    )

    fee_boost = min(concentration, policy.fee_concentration_cap)
    daily_rate = pool_apr / 365.0 / 100.0
    estimated_fees = deposit * daily_rate * days * fee_boost * time_in_range

    il_fraction = expected_impermanent_loss(
        current_price=current,
        price_lower=lower,
        price_upper=upper,
        volatility=volatility,
        policy=policy,
    )
    il_usd = deposit * il_fraction
    estimated_apr = (estimated_fees / deposit) * (365.0 / days) * 100.0

    token0_usd = pool.token0_usd
    token1_usd = pool.token1_usd
    if token0_usd is None or token1_usd is None or token0_usd <= 0 or token1_usd <= 0:
        token0_usd = pool.current_price
        token1_usd = Decimal("1")
        warnings.append("Token USD prices unavailable; valuing token1 at 1 USD.")
    allocation = split_deposit_range(
        deposit_usd=simulation.deposit_usd,
        price_current=pool.current_price,
        price_lower=simulation.price_lower,
        price_upper=simulation.price_upper,
        price_token0_usd=token0_usd,
        price_token1_usd=token1_usd,
    )

    return SimulationResult(
        valid=True,
        estimated_fees_usd=_to_decimal(estimated_fees),
        estimated_apr=_to_decimal(estimated_apr),
        impermanent_loss_usd=_to_decimal(il_usd),
        net_return_usd=_to_decimal(estimated_fees - il_usd),
        token0_amount=allocation.amount_token0,
        token1_amount=allocation.amount_token1,
        in_range=simulation.price_lower <= pool.current_price <= simulation.price_upper,
        time_in_range_fraction=_to_decimal(time_in_range),
        concentration_factor=_to_decimal(concentration),
        estimated_volatility=_to_decimal(volatility),
        daily_fees=[
            _to_decimal(fee)
            for fee in daily_fee_series(total_fees=estimated_fees, days=days, policy=policy)
        ],
        warnings=warnings,
    )
