from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from lp_engine.api.deps import get_simulate_returns_use_case
from lp_engine.api.schemas.return_simulation import SimulateReturnsRequest, SimulateReturnsResponse
from lp_engine.application.dto.return_simulation import SimulateReturnsInput
from lp_engine.application.use_cases.simulate_returns import SimulateReturnsUseCase
from lp_engine.domain.exceptions import InvalidSimulationInputError

router = APIRouter()


@router.post("/v1/simulate/returns", response_model=SimulateReturnsResponse)
def simulate_returns(
    req: SimulateReturnsRequest,
    use_case: SimulateReturnsUseCase = Depends(get_simulate_returns_use_case),
):
    try:
        result = use_case.execute(
            SimulateReturnsInput(
                deposit_usd=req.deposit_usd,
                price_lower=req.price_lower,
                price_upper=req.price_upper,
                days=req.days,
                pool_apr=req.pool_apr,
                fees_24h_usd=req.fees_24h_usd,
                volume_24h_usd=req.volume_24h_usd,
                tvl_usd=req.tvl_usd,
                current_price=req.current_price,
                sqrt_price_x96=req.sqrt_price_x96,
                current_tick=req.current_tick,
                token0_decimals=req.token0_decimals,
                token1_decimals=req.token1_decimals,
                token0_usd=req.token0_usd,
                token1_usd=req.token1_usd,
            )
        )
    except InvalidSimulationInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return SimulateReturnsResponse(
        valid=result.valid,
        pool_apr=result.pool_apr,
        current_price=result.current_price,
        estimated_fees_usd=result.estimated_fees_usd,
        estimated_apr=result.estimated_apr,
        impermanent_loss_usd=result.impermanent_loss_usd,
        net_return_usd=result.net_return_usd,
        token0_amount=result.token0_amount,
        token1_amount=result.token1_amount,
        in_range=result.in_range,
        time_in_range_fraction=result.time_in_range_fraction,
        concentration_factor=result.concentration_factor,
        estimated_volatility=result.estimated_volatility,
        daily_fees=result.daily_fees,
        warnings=result.warnings,
    )
