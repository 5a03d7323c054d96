from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from lp_engine.api.deps import get_summarize_portfolio_use_case
from lp_engine.api.routers.position_valuation import (
    to_position_valuation_response,
    to_valuate_position_input,
)
from lp_engine.api.schemas.portfolio import (
    PortfolioProjectionResponse,
    PortfolioRequest,
    PortfolioResponse,
    PortfolioSummaryResponse,
)
from lp_engine.application.dto.portfolio import SummarizePortfolioInput
from lp_engine.application.use_cases.summarize_portfolio import SummarizePortfolioUseCase
from lp_engine.domain.exceptions import InvalidPortfolioInputError

router = APIRouter()


@router.post("/v1/positions/portfolio", response_model=PortfolioResponse)
def summarize_portfolio(
    req: PortfolioRequest,
    use_case: SummarizePortfolioUseCase = Depends(get_summarize_portfolio_use_case),
):
    try:
        result = use_case.execute(
            SummarizePortfolioInput(positions=[to_valuate_position_input(row) for row in req.positions])
        )
    except InvalidPortfolioInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    summary = result.summary
    return PortfolioResponse(
        positions=[to_position_valuation_response(row) for row in result.positions],
        summary=PortfolioSummaryResponse(
            position_count=summary.position_count,
            in_range_count=summary.in_range_count,
            total_value_usd=summary.total_value_usd,
            total_original_investment_usd=summary.total_original_investment_usd,
            total_unclaimed_fees_usd=summary.total_unclaimed_fees_usd,
            total_claimed_fees_usd=summary.total_claimed_fees_usd,
            total_earnings_usd=summary.total_earnings_usd,
            total_hodl_value_usd=summary.total_hodl_value_usd,
            retention_rate=summary.retention_rate,
            profit_loss_usd=summary.profit_loss_usd,
            asset_gain_usd=summary.asset_gain_usd,
            impermanent_loss_usd=summary.impermanent_loss_usd,
            vs_hodl_usd=summary.vs_hodl_usd,
            roi=summary.roi,
            avg_position_age_days=summary.avg_position_age_days,
            apr=summary.apr,
            apr_capped=summary.apr_capped,
            projection=PortfolioProjectionResponse(
                next_24h_usd=summary.projection.next_24h_usd,
                next_7d_usd=summary.projection.next_7d_usd,
                next_30d_usd=summary.projection.next_30d_usd,
            ),
            warnings=summary.warnings,
        ),
    )
