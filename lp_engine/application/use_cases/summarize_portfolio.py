from __future__ import annotations

import logging

from lp_engine.application.dto.portfolio import SummarizePortfolioInput, SummarizePortfolioOutput
from lp_engine.application.use_cases.valuate_position import ValuatePositionUseCase
from lp_engine.domain.entities.policy import ValuationPolicy
from lp_engine.domain.exceptions import InvalidPortfolioInputError, InvalidPositionInputError
from lp_engine.domain.services.portfolio import summarize_portfolio


logger = logging.getLogger(__name__)


class SummarizePortfolioUseCase:
    def __init__(self, *, valuate_position: ValuatePositionUseCase, policy: ValuationPolicy):
        self._valuate_position = valuate_position
        self._policy = policy

    def execute(self, command: SummarizePortfolioInput) -> SummarizePortfolioOutput:
        positions = []
        for index, item in enumerate(command.positions):
            try:
                positions.append(self._valuate_position.execute(item))
            except InvalidPositionInputError as exc:
                raise InvalidPortfolioInputError(f"positions[{index}]: {exc}") from exc

        summary = summarize_portfolio([row.valuation for row in positions], policy=self._policy)
        for warning in summary.warnings:
            logger.warning("summarize_portfolio: %s", warning)
        logger.info(
            "summarize_portfolio: positions=%s in_range=%s total_value=%s apr=%s",
            summary.position_count,
            summary.in_range_count,
            summary.total_value_usd,
            summary.apr,
        )
        return SummarizePortfolioOutput(positions=positions, summary=summary)
