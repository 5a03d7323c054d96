from __future__ import annotations

from decimal import Decimal

from lp_engine.application.dto.tick_conversion import TickPriceOutput
from lp_engine.domain.exceptions import InvalidTickError
from lp_engine.domain.services.univ3_math import (
    is_valid_tick,
    price_to_tick,
    tick_to_price,
    tick_to_sqrt_price_x96,
)


class ConvertTickUseCase:
    def tick_to_price(self, *, tick: int, token0_decimals: int, token1_decimals: int) -> TickPriceOutput:
        if not is_valid_tick(tick):
            raise InvalidTickError(f"tick {tick} is outside the valid range.")
        return TickPriceOutput(
            tick=tick,
            price=tick_to_price(tick, token0_decimals, token1_decimals),
            sqrt_price_x96=tick_to_sqrt_price_x96(tick),
        )

    def price_to_tick(self, *, price: Decimal, token0_decimals: int, token1_decimals: int) -> TickPriceOutput:
        if price <= 0:
            raise InvalidTickError("price must be positive.")
        tick = price_to_tick(price, token0_decimals, token1_decimals)
        return self.tick_to_price(tick=tick, token0_decimals=token0_decimals, token1_decimals=token1_decimals)
