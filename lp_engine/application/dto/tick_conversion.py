from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TickPriceOutput:
    tick: int
    price: Decimal
    sqrt_price_x96: int
