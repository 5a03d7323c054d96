from __future__ import annotations

from decimal import Decimal
import unittest

from lp_engine.application.dto.return_simulation import SimulateReturnsInput
from lp_engine.application.use_cases.simulate_returns import SimulateReturnsUseCase
from lp_engine.domain.entities.policy import SimulationPolicy
from lp_engine.domain.exceptions import InvalidSimulationInputError


class SimulateReturnsUseCaseTests(unittest.TestCase):
    def _use_case(self, **policy_overrides) -> SimulateReturnsUseCase:
        return SimulateReturnsUseCase(policy=SimulationPolicy(**policy_overrides))

    def _base_input(self, **overrides) -> SimulateReturnsInput:
        payload = {
            "deposit_usd": Decimal("1000"),
            "price_lower": Decimal("0.9"),
            "price_upper": Decimal("1.1"),
            "days": 30,
            "pool_apr": Decimal("20"),
            "volume_24h_usd": Decimal("50000"),
            "tvl_usd": Decimal("1000000"),
            "current_price": Decimal("1"),
            "token0_usd": Decimal("1"),
            "token1_usd": Decimal("1"),
        }
        payload.update(overrides)
        return SimulateReturnsInput(**payload)

    def test_execute_returns_simulation(self):
        result = self._use_case().execute(self._base_input())

        self.assertTrue(result.valid)
        self.assertEqual(result.pool_apr, Decimal("20"))
        self.assertEqual(result.current_price, Decimal("1"))
        self.assertGreater(result.estimated_fees_usd, 0)
        self.assertEqual(len(result.daily_fees), 30)

    def test_execute_derives_apr_from_fees(self):
        result = self._use_case().execute(
            self._base_input(pool_apr=None, fees_24h_usd=Decimal("100"), tvl_usd=Decimal("365000"))
        )

        self.assertEqual(result.pool_apr, Decimal("10"))

    def test_execute_requires_fee_rate(self):
        with self.assertRaises(InvalidSimulationInputError):
            self._use_case().execute(self._base_input(pool_apr=None))

    def test_execute_resolves_price_from_sqrt_price(self):
        result = self._use_case().execute(
            self._base_input(current_price=None, sqrt_price_x96=str(2**96))
        )

        self.assertEqual(result.current_price, Decimal("1"))
        self.assertTrue(result.in_range)

    def test_execute_resolves_price_from_tick(self):
        result = self._use_case().execute(self._base_input(current_price=None, current_tick=0))

        self.assertEqual(result.current_price, Decimal("1"))

    def test_execute_rejects_bad_sqrt_price(self):
        with self.assertRaisesRegex(InvalidSimulationInputError, "sqrt_price_x96"):
            self._use_case().execute(self._base_input(current_price=None, sqrt_price_x96="xyz"))

    def test_execute_without_price_returns_invalid_result(self):
        result = self._use_case().execute(
            self._base_input(current_price=None, token0_usd=None, token1_usd=None)
        )

        self.assertFalse(result.valid)
        self.assertEqual(result.current_price, Decimal("0"))

    def test_execute_honours_policy(self):
        default = self._use_case().execute(self._base_input())
        capped = self._use_case(fee_concentration_cap=1.0).execute(self._base_input())

        self.assertLess(capped.estimated_fees_usd, default.estimated_fees_usd)
