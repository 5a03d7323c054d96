from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from lp_engine.api.deps import get_valuate_position_use_case
from lp_engine.api.schemas.position_valuation import PositionValuationRequest, PositionValuationResponse
from lp_engine.application.dto.position_valuation import (
    PositionHistoryInput,
    TickOutsideInput,
    ValuatePositionInput,
    ValuatePositionOutput,
)
from lp_engine.application.use_cases.valuate_position import ValuatePositionUseCase
from lp_engine.domain.exceptions import InvalidPositionInputError

router = APIRouter()


def to_valuate_position_input(req: PositionValuationRequest) -> ValuatePositionInput:
    history = None
    if req.history is not None:
        history = PositionHistoryInput(
            deposited_amount0=req.history.deposited_amount0,
            deposited_amount1=req.history.deposited_amount1,
            deposited_usd=req.history.deposited_usd,
            claimed_fees0=req.history.claimed_fees0,
            claimed_fees1=req.history.claimed_fees1,
            created_at_ms=req.history.created_at_ms,
        )
    return ValuatePositionInput(
        label=req.label,
        liquidity=req.liquidity,
        tick_lower=req.tick_lower,
        tick_upper=req.tick_upper,
        position_info=req.position_info,
        token0_symbol=req.token0_symbol,
        token0_decimals=req.token0_decimals,
        token1_symbol=req.token1_symbol,
        token1_decimals=req.token1_decimals,
        fee_growth_inside0_last_x128=req.fee_growth_inside0_last_x128,
        fee_growth_inside1_last_x128=req.fee_growth_inside1_last_x128,
        tokens_owed0=req.tokens_owed0,
        tokens_owed1=req.tokens_owed1,
        sqrt_price_x96=req.sqrt_price_x96,
        current_tick=req.current_tick,
        token0_usd=req.token0_usd,
        token1_usd=req.token1_usd,
        fee_growth_global0_x128=req.fee_growth_global0_x128,
        fee_growth_global1_x128=req.fee_growth_global1_x128,
        tick_lower_outside=(
            TickOutsideInput(
                fee_growth_outside0_x128=req.tick_lower_outside.fee_growth_outside0_x128,
                fee_growth_outside1_x128=req.tick_lower_outside.fee_growth_outside1_x128,
            )
            if req.tick_lower_outside is not None
            else None
        ),
        tick_upper_outside=(
            TickOutsideInput(
                fee_growth_outside0_x128=req.tick_upper_outside.fee_growth_outside0_x128,
                fee_growth_outside1_x128=req.tick_upper_outside.fee_growth_outside1_x128,
            )
            if req.tick_upper_outside is not None
            else None
        ),
        fee_growth_inside0_x128=req.fee_growth_inside0_x128,
        fee_growth_inside1_x128=req.fee_growth_inside1_x128,
        history=history,
    )


def to_position_valuation_response(result: ValuatePositionOutput) -> PositionValuationResponse:
    valuation = result.valuation
    return PositionValuationResponse(
        label=result.label,
        token0_symbol=result.token0_symbol,
        token1_symbol=result.token1_symbol,
        tick_lower=result.tick_lower,
        tick_upper=result.tick_upper,
        current_tick=result.current_tick,
        valid=valuation.valid,
        in_range=valuation.in_range,
        token0_amount=valuation.token0_amount,
        token1_amount=valuation.token1_amount,
        usd_value=valuation.usd_value,
        unclaimed_fees0=valuation.unclaimed_fees0,
        unclaimed_fees1=valuation.unclaimed_fees1,
        unclaimed_fees_usd=valuation.unclaimed_fees_usd,
        claimed_fees_usd=valuation.claimed_fees_usd,
        original_investment_usd=valuation.original_investment_usd,
        safe_original_investment_usd=valuation.safe_original_investment_usd,
        profit_loss_usd=valuation.profit_loss_usd,
        hodl_value_usd=valuation.hodl_value_usd,
        impermanent_loss_usd=valuation.impermanent_loss_usd,
        vs_hodl_usd=valuation.vs_hodl_usd,
        position_age_days=valuation.position_age_days,
        apr=valuation.apr,
        apr_capped=valuation.apr_capped,
        warnings=valuation.warnings,
    )


@router.post("/v1/positions/valuate", response_model=PositionValuationResponse)
def valuate_position(
    req: PositionValuationRequest,
    use_case: ValuatePositionUseCase = Depends(get_valuate_position_use_case),
):
    try:
        result = use_case.execute(to_valuate_position_input(req))
    except InvalidPositionInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return to_position_valuation_response(result)
