from __future__ import annotations

from decimal import Decimal
import unittest

from lp_engine.application.dto.portfolio import SummarizePortfolioInput
from lp_engine.application.dto.position_valuation import ValuatePositionInput
from lp_engine.application.use_cases.summarize_portfolio import SummarizePortfolioUseCase
from lp_engine.application.use_cases.valuate_position import ValuatePositionUseCase
from lp_engine.domain.entities.policy import ValuationPolicy
from lp_engine.domain.exceptions import InvalidPortfolioInputError


class FakeClock:
    def now_ms(self) -> int:
        return 1_700_000_000_000


def _position(**overrides) -> ValuatePositionInput:
    payload = {
        "liquidity": 10**21,
        "tick_lower": -600,
        "tick_upper": 600,
        "token0_symbol": "WETH",
        "token0_decimals": 18,
        "token1_symbol": "DAI",
        "token1_decimals": 18,
        "fee_growth_inside0_last_x128": 0,
        "fee_growth_inside1_last_x128": 0,
        "fee_growth_inside0_x128": 0,
        "fee_growth_inside1_x128": 0,
        "tokens_owed0": 10**18,
        "sqrt_price_x96": 2**96,
        "current_tick": 0,
        "token0_usd": Decimal("1"),
        "token1_usd": Decimal("1"),
    }
    payload.update(overrides)
    return ValuatePositionInput(**payload)


class SummarizePortfolioUseCaseTests(unittest.TestCase):
    def _use_case(self) -> SummarizePortfolioUseCase:
        policy = ValuationPolicy()
        return SummarizePortfolioUseCase(
            valuate_position=ValuatePositionUseCase(clock=FakeClock(), policy=policy),
            policy=policy,
        )

    def test_execute_aggregates_positions(self):
        result = self._use_case().execute(
            SummarizePortfolioInput(positions=[_position(label="a"), _position(label="b", current_tick=900)])
        )

        self.assertEqual([row.label for row in result.positions], ["a", "b"])
        self.assertEqual(result.summary.position_count, 2)
        self.assertEqual(result.summary.in_range_count, 1)
        self.assertEqual(result.summary.total_unclaimed_fees_usd, Decimal("2"))
        self.assertEqual(
            result.summary.total_value_usd,
            result.positions[0].valuation.usd_value + result.positions[1].valuation.usd_value,
        )

    def test_execute_counts_invalid_positions_out(self):
        result = self._use_case().execute(
            SummarizePortfolioInput(positions=[_position(), _position(sqrt_price_x96=0)])
        )

        self.assertEqual(result.summary.position_count, 1)
        self.assertEqual(len(result.positions), 2)
        self.assertTrue(result.summary.warnings)

    def test_execute_reports_failing_position_index(self):
        with self.assertRaisesRegex(InvalidPortfolioInputError, r"positions\[1\]"):
            self._use_case().execute(
                SummarizePortfolioInput(positions=[_position(), _position(liquidity="oops")])
            )
