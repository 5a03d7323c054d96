from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


Uint256 = int | str


class TickOutsideRequest(BaseModel):
    fee_growth_outside0_x128: Uint256 = Field(..., description="Tick feeGrowthOutside0X128.")
    fee_growth_outside1_x128: Uint256 = Field(..., description="Tick feeGrowthOutside1X128.")


class PositionHistoryRequest(BaseModel):
    deposited_amount0: Decimal = Field(Decimal("0"), ge=0, description="Token0 deposited over the position life.")
    deposited_amount1: Decimal = Field(Decimal("0"), ge=0, description="Token1 deposited over the position life.")
    deposited_usd: Decimal = Field(Decimal("0"), ge=0, description="USD value of the deposits at deposit time.")
    claimed_fees0: Decimal = Field(Decimal("0"), ge=0, description="Token0 fees already collected.")
    claimed_fees1: Decimal = Field(Decimal("0"), ge=0, description="Token1 fees already collected.")
    created_at_ms: int | None = Field(None, description="Position creation time, epoch milliseconds.")


class PositionValuationRequest(BaseModel):
    label: str | None = Field(None, description="Caller reference echoed back (e.g. token id).")
    liquidity: Uint256 = Field(..., description="Position liquidity (uint128).")
    tick_lower: int | None = Field(None, description="Lower tick. Required unless position_info is sent.")
    tick_upper: int | None = Field(None, description="Upper tick. Required unless position_info is sent.")
    position_info: Uint256 | None = Field(None, description="V4 packed PositionInfo word.")
    token0_symbol: str = Field(..., description="Token0 symbol.")
    token0_decimals: int = Field(..., ge=0, le=255, description="Token0 decimals.")
    token1_symbol: str = Field(..., description="Token1 symbol.")
    token1_decimals: int = Field(..., ge=0, le=255, description="Token1 decimals.")
    fee_growth_inside0_last_x128: Uint256 = Field(..., description="Position feeGrowthInside0LastX128.")
    fee_growth_inside1_last_x128: Uint256 = Field(..., description="Position feeGrowthInside1LastX128.")
    tokens_owed0: Uint256 = Field(0, description="Position tokensOwed0 (V3 only).")
    tokens_owed1: Uint256 = Field(0, description="Position tokensOwed1 (V3 only).")
    sqrt_price_x96: Uint256 = Field(..., description="Pool slot0 sqrtPriceX96.")
    current_tick: int = Field(..., description="Pool slot0 tick.")
    token0_usd: Decimal = Field(..., description="Token0 spot price in USD.")
    token1_usd: Decimal = Field(..., description="Token1 spot price in USD.")
    fee_growth_global0_x128: Uint256 | None = Field(None, description="Pool feeGrowthGlobal0X128.")
    fee_growth_global1_x128: Uint256 | None = Field(None, description="Pool feeGrowthGlobal1X128.")
    tick_lower_outside: TickOutsideRequest | None = Field(None, description="Lower tick fee growth outside.")
    tick_upper_outside: TickOutsideRequest | None = Field(None, description="Upper tick fee growth outside.")
    fee_growth_inside0_x128: Uint256 | None = Field(None, description="Current feeGrowthInside0X128 (V4 StateView).")
    fee_growth_inside1_x128: Uint256 | None = Field(None, description="Current feeGrowthInside1X128 (V4 StateView).")
    history: PositionHistoryRequest | None = Field(None, description="Deposit and claim history, when known.")


class PositionValuationResponse(BaseModel):
    label: str | None
    token0_symbol: str
    token1_symbol: str
    tick_lower: int
    tick_upper: int
    current_tick: int
    valid: bool
    in_range: bool
    token0_amount: Decimal
    token1_amount: Decimal
    usd_value: Decimal
    unclaimed_fees0: Decimal
    unclaimed_fees1: Decimal
    unclaimed_fees_usd: Decimal
    claimed_fees_usd: Decimal
    original_investment_usd: Decimal
    safe_original_investment_usd: Decimal
    profit_loss_usd: Decimal
    hodl_value_usd: Decimal
    impermanent_loss_usd: Decimal
    vs_hodl_usd: Decimal
    position_age_days: Decimal
    apr: Decimal
    apr_capped: bool
    warnings: list[str]
