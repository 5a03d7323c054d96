from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class TickPriceResponse(BaseModel):
    tick: int
    price: Decimal
    sqrt_price_x96: str
