from __future__ import annotations

from decimal import Decimal
import unittest

from lp_engine.application.dto.position_valuation import (
    PositionHistoryInput,
    TickOutsideInput,
    ValuatePositionInput,
)
from lp_engine.application.use_cases.valuate_position import ValuatePositionUseCase
from lp_engine.domain.entities.policy import ValuationPolicy
from lp_engine.domain.exceptions import InvalidPositionInputError


NOW_MS = 1_700_000_000_000
Q128 = 2**128


class FakeClock:
    def now_ms(self) -> int:
        return NOW_MS


class ValuatePositionUseCaseTests(unittest.TestCase):
    def _use_case(self) -> ValuatePositionUseCase:
        return ValuatePositionUseCase(clock=FakeClock(), policy=ValuationPolicy())

    def _base_input(self, **overrides) -> ValuatePositionInput:
        payload = {
            "label": "1234",
            "liquidity": str(10**21),
            "tick_lower": -600,
            "tick_upper": 600,
            "token0_symbol": "WETH",
            "token0_decimals": 18,
            "token1_symbol": "DAI",
            "token1_decimals": 18,
            "fee_growth_inside0_last_x128": "0",
            "fee_growth_inside1_last_x128": "0",
            "tokens_owed0": 0,
            "tokens_owed1": 0,
            "sqrt_price_x96": str(2**96),
            "current_tick": 0,
            "token0_usd": Decimal("1"),
            "token1_usd": Decimal("1"),
            "fee_growth_global0_x128": str(1000 * Q128),
            "fee_growth_global1_x128": "0",
            "tick_lower_outside": TickOutsideInput(
                fee_growth_outside0_x128=str(100 * Q128),
                fee_growth_outside1_x128="0",
            ),
            "tick_upper_outside": TickOutsideInput(
                fee_growth_outside0_x128=hex(200 * Q128),
                fee_growth_outside1_x128="0",
            ),
            "history": PositionHistoryInput(
                deposited_amount0=Decimal("0"),
                deposited_amount1=Decimal("0"),
                deposited_usd=Decimal("0"),
                claimed_fees0=Decimal("0"),
                claimed_fees1=Decimal("0"),
                created_at_ms=NOW_MS - 5 * 86_400_000,
            ),
        }
        payload.update(overrides)
        return ValuatePositionInput(**payload)

    def test_execute_valuates_from_string_uints(self):
        result = self._use_case().execute(self._base_input())

        self.assertEqual(result.label, "1234")
        self.assertEqual((result.tick_lower, result.tick_upper), (-600, 600))
        self.assertTrue(result.valuation.valid)
        self.assertTrue(result.valuation.in_range)
        self.assertEqual(result.valuation.unclaimed_fees0, Decimal("700000"))
        self.assertEqual(result.valuation.position_age_days, Decimal("5"))

    def test_execute_decodes_v4_position_info(self):
        packed = (12345 << 56) | ((240 & 0xFFFFFF) << 32) | ((-120 & 0xFFFFFF) << 8)
        result = self._use_case().execute(
            self._base_input(tick_lower=None, tick_upper=None, position_info=str(packed))
        )

        self.assertEqual((result.tick_lower, result.tick_upper), (-120, 240))

    def test_execute_uses_direct_inside_growth(self):
        result = self._use_case().execute(
            self._base_input(
                fee_growth_global0_x128=None,
                fee_growth_global1_x128=None,
                tick_lower_outside=None,
                tick_upper_outside=None,
                fee_growth_inside0_x128=str(Q128 // 2**70),
                fee_growth_inside1_x128="0",
            )
        )

        self.assertEqual(result.valuation.unclaimed_fees0, Decimal(10**21 // 2**70).scaleb(-18))
        self.assertFalse(any("Fee growth" in warning for warning in result.valuation.warnings))

    def test_execute_without_fee_reads_flags_warning(self):
        result = self._use_case().execute(
            self._base_input(fee_growth_global0_x128=None, tick_lower_outside=None)
        )

        self.assertEqual(result.valuation.unclaimed_fees_usd, Decimal("0"))
        self.assertTrue(any("Fee growth" in warning for warning in result.valuation.warnings))

    def test_execute_requires_ticks(self):
        with self.assertRaises(InvalidPositionInputError):
            self._use_case().execute(self._base_input(tick_lower=None))

    def test_execute_rejects_bad_uint(self):
        with self.assertRaisesRegex(InvalidPositionInputError, "liquidity"):
            self._use_case().execute(self._base_input(liquidity="not-a-number"))

        with self.assertRaisesRegex(InvalidPositionInputError, "tick_lower_outside"):
            self._use_case().execute(
                self._base_input(
                    tick_lower_outside=TickOutsideInput(
                        fee_growth_outside0_x128="-5",
                        fee_growth_outside1_x128="0",
                    )
                )
            )

    def test_execute_returns_invalid_result_for_bad_range(self):
        result = self._use_case().execute(self._base_input(tick_lower=600, tick_upper=-600))

        self.assertFalse(result.valuation.valid)
        self.assertEqual(result.valuation.usd_value, Decimal("0"))
