from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query

from lp_engine.api.deps import get_convert_tick_use_case
from lp_engine.api.schemas.tick_conversion import TickPriceResponse
from lp_engine.application.dto.tick_conversion import TickPriceOutput
from lp_engine.application.use_cases.convert_tick import ConvertTickUseCase
from lp_engine.domain.exceptions import InvalidTickError

router = APIRouter()


def _to_response(result: TickPriceOutput) -> TickPriceResponse:
    return TickPriceResponse(
        tick=result.tick,
        price=result.price,
        sqrt_price_x96=str(result.sqrt_price_x96),
    )


@router.get("/v1/ticks/price", response_model=TickPriceResponse)
def tick_price(
    tick: int = Query(..., description="Tick index."),
    token0_decimals: int = Query(18, ge=0, le=255),
    token1_decimals: int = Query(18, ge=0, le=255),
    use_case: ConvertTickUseCase = Depends(get_convert_tick_use_case),
):
    try:
        result = use_case.tick_to_price(
            tick=tick,
            token0_decimals=token0_decimals,
            token1_decimals=token1_decimals,
        )
    except InvalidTickError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _to_response(result)


@router.get("/v1/ticks/tick", response_model=TickPriceResponse)
def price_tick(
    price: Decimal = Query(..., description="Price of token0 in token1."),
    token0_decimals: int = Query(18, ge=0, le=255),
    token1_decimals: int = Query(18, ge=0, le=255),
    use_case: ConvertTickUseCase = Depends(get_convert_tick_use_case),
):
    try:
        result = use_case.price_to_tick(
            price=price,
            token0_decimals=token0_decimals,
            token1_decimals=token1_decimals,
        )
    except InvalidTickError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _to_response(result)
