from __future__ import annotations

from dataclasses import dataclass, field

from lp_engine.application.dto.position_valuation import ValuatePositionInput, ValuatePositionOutput
from lp_engine.domain.entities.portfolio import PortfolioSummary


@dataclass(frozen=True)
class SummarizePortfolioInput:
    positions: list[ValuatePositionInput] = field(default_factory=list)


@dataclass(frozen=True)
class SummarizePortfolioOutput:
    positions: list[ValuatePositionOutput]
    summary: PortfolioSummary
