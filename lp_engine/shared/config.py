from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv

from lp_engine.domain.entities.policy import SimulationPolicy, ValuationPolicy


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    log_level: str
    valuation_policy: ValuationPolicy
    simulation_policy: SimulationPolicy


def get_settings() -> Settings:
    valuation_policy = ValuationPolicy(
        apr_cap_percent=Decimal(_env("LP_APR_CAP_PERCENT", "10000")),
        default_position_age_days=Decimal(_env("LP_DEFAULT_POSITION_AGE_DAYS", "30")),
        min_position_age_days=Decimal(_env("LP_MIN_POSITION_AGE_DAYS", "1")),
        deposit_floor_ratio=Decimal(_env("LP_DEPOSIT_FLOOR_RATIO", "0.1")),
        min_investment_usd=Decimal(_env("LP_MIN_INVESTMENT_USD", "1")),
    )
    simulation_policy = SimulationPolicy(
        concentration_cap=float(_env("LP_CONCENTRATION_CAP", "1000")),
        fee_concentration_cap=float(_env("LP_FEE_CONCENTRATION_CAP", "20")),
        default_volatility=float(_env("LP_DEFAULT_VOLATILITY", "0.5")),
        time_in_range_floor=float(_env("LP_TIME_IN_RANGE_FLOOR", "0.05")),
        time_in_range_ceiling=float(_env("LP_TIME_IN_RANGE_CEILING", "0.95")),
        daily_fee_amplitude=float(_env("LP_DAILY_FEE_AMPLITUDE", "0.2")),
        daily_fee_period_days=float(_env("LP_DAILY_FEE_PERIOD_DAYS", "7")),
    )
    return Settings(
        log_level=_env("LOG_LEVEL", "INFO"),
        valuation_policy=valuation_policy,
        simulation_policy=simulation_policy,
    )
