from __future__ import annotations

from functools import lru_cache

from lp_engine.application.use_cases.convert_tick import ConvertTickUseCase
from lp_engine.application.use_cases.simulate_returns import SimulateReturnsUseCase
from lp_engine.application.use_cases.summarize_portfolio import SummarizePortfolioUseCase
from lp_engine.application.use_cases.valuate_position import ValuatePositionUseCase
from lp_engine.infrastructure.clock import SystemClock
from lp_engine.shared.config import Settings, get_settings


@lru_cache(maxsize=1)
def _get_settings() -> Settings:
    return get_settings()


def get_valuate_position_use_case() -> ValuatePositionUseCase:
    settings = _get_settings()
    return ValuatePositionUseCase(clock=SystemClock(), policy=settings.valuation_policy)


def get_summarize_portfolio_use_case() -> SummarizePortfolioUseCase:
    settings = _get_settings()
    return SummarizePortfolioUseCase(
        valuate_position=get_valuate_position_use_case(),
        policy=settings.valuation_policy,
    )


def get_simulate_returns_use_case() -> SimulateReturnsUseCase:
    return SimulateReturnsUseCase(policy=_get_settings().simulation_policy)


def get_convert_tick_use_case() -> ConvertTickUseCase:
    return ConvertTickUseCase()
