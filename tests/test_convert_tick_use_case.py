from __future__ import annotations

from decimal import Decimal

import pytest

from lp_engine.application.use_cases.convert_tick import ConvertTickUseCase
from lp_engine.domain.exceptions import InvalidTickError


def test_tick_to_price_returns_price_and_sqrt_price():
    result = ConvertTickUseCase().tick_to_price(tick=0, token0_decimals=18, token1_decimals=18)

    assert result.tick == 0
    assert result.price == Decimal("1")
    assert result.sqrt_price_x96 == 2**96


def test_price_to_tick_snaps_to_floor_tick():
    result = ConvertTickUseCase().price_to_tick(
        price=Decimal("1.00015"),
        token0_decimals=18,
        token1_decimals=18,
    )

    assert result.tick == 1
    assert abs(result.price - Decimal("1.0001")) < Decimal("1e-12")


def test_price_to_tick_with_decimal_gap():
    use_case = ConvertTickUseCase()
    price = use_case.tick_to_price(tick=-200000, token0_decimals=18, token1_decimals=6).price

    result = use_case.price_to_tick(price=price, token0_decimals=18, token1_decimals=6)

    assert abs(result.tick - (-200000)) <= 1


def test_rejects_invalid_inputs():
    use_case = ConvertTickUseCase()
    with pytest.raises(InvalidTickError):
        use_case.tick_to_price(tick=887273, token0_decimals=18, token1_decimals=18)
    with pytest.raises(InvalidTickError):
        use_case.price_to_tick(price=Decimal("0"), token0_decimals=18, token1_decimals=18)
