from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class SimulateReturnsRequest(BaseModel):
    deposit_usd: Decimal = Field(..., description="Hypothetical deposit in USD.")
    price_lower: Decimal = Field(..., description="Range lower price (token1 per token0).")
    price_upper: Decimal = Field(..., description="Range upper price (token1 per token0).")
    days: int = Field(..., ge=1, le=3650, description="Holding period in days.")
    pool_apr: Decimal | None = Field(None, description="Pool fee APR in percent. Derived from fees_24h_usd when absent.")
    fees_24h_usd: Decimal | None = Field(None, description="Pool fees over the last 24h in USD.")
    volume_24h_usd: Decimal = Field(Decimal("0"), ge=0, description="Pool volume over the last 24h in USD.")
    tvl_usd: Decimal = Field(Decimal("0"), ge=0, description="Pool TVL in USD.")
    current_price: Decimal | None = Field(None, description="Current price (token1 per token0).")
    sqrt_price_x96: int | str | None = Field(None, description="Pool sqrtPriceX96, used when current_price is absent.")
    current_tick: int | None = Field(None, description="Pool tick, used when price and sqrtPriceX96 are absent.")
    token0_decimals: int = Field(18, ge=0, le=255, description="Token0 decimals.")
    token1_decimals: int = Field(18, ge=0, le=255, description="Token1 decimals.")
    token0_usd: Decimal | None = Field(None, description="Token0 spot price in USD.")
    token1_usd: Decimal | None = Field(None, description="Token1 spot price in USD.")


class SimulateReturnsResponse(BaseModel):
    valid: bool
    pool_apr: Decimal
    current_price: Decimal
    estimated_fees_usd: Decimal
    estimated_apr: Decimal
    impermanent_loss_usd: Decimal
    net_return_usd: Decimal
    token0_amount: Decimal
    token1_amount: Decimal
    in_range: bool
    time_in_range_fraction: Decimal
    concentration_factor: Decimal
    estimated_volatility: Decimal
    daily_fees: list[Decimal]
    warnings: list[str]
