from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from lp_engine.api.schemas.position_valuation import PositionValuationRequest, PositionValuationResponse


class PortfolioRequest(BaseModel):
    positions: list[PositionValuationRequest] = Field(..., description="Positions to valuate and aggregate.")


class PortfolioProjectionResponse(BaseModel):
    next_24h_usd: Decimal
    next_7d_usd: Decimal
    next_30d_usd: Decimal


class PortfolioSummaryResponse(BaseModel):
    position_count: int
    in_range_count: int
    total_value_usd: Decimal
    total_original_investment_usd: Decimal
    total_unclaimed_fees_usd: Decimal
    total_claimed_fees_usd: Decimal
    total_earnings_usd: Decimal
    total_hodl_value_usd: Decimal
    retention_rate: Decimal
    profit_loss_usd: Decimal
    asset_gain_usd: Decimal
    impermanent_loss_usd: Decimal
    vs_hodl_usd: Decimal
    roi: Decimal
    avg_position_age_days: Decimal
    apr: Decimal
    apr_capped: bool
    projection: PortfolioProjectionResponse
    warnings: list[str]


class PortfolioResponse(BaseModel):
    positions: list[PositionValuationResponse]
    summary: PortfolioSummaryResponse
