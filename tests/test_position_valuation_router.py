from __future__ import annotations

from decimal import Decimal

from fastapi.testclient import TestClient

from lp_engine.api.deps import get_summarize_portfolio_use_case, get_valuate_position_use_case
from lp_engine.application.dto.portfolio import SummarizePortfolioOutput
from lp_engine.application.dto.position_valuation import ValuatePositionOutput
from lp_engine.domain.entities.portfolio import PortfolioProjection, PortfolioSummary
from lp_engine.domain.entities.valuation import ValuationResult
from lp_engine.domain.exceptions import InvalidPortfolioInputError, InvalidPositionInputError
from lp_engine.main import app


REQUEST = {
    "label": "42",
    "liquidity": "1000000000000000000000",
    "tick_lower": -600,
    "tick_upper": 600,
    "token0_symbol": "WETH",
    "token0_decimals": 18,
    "token1_symbol": "USDC",
    "token1_decimals": 6,
    "fee_growth_inside0_last_x128": "0",
    "fee_growth_inside1_last_x128": "0",
    "sqrt_price_x96": "79228162514264337593543950336",
    "current_tick": 0,
    "token0_usd": "2000",
    "token1_usd": "1",
    "tick_lower_outside": {"fee_growth_outside0_x128": "1", "fee_growth_outside1_x128": "2"},
    "history": {"deposited_usd": "150", "created_at_ms": 1700000000000},
}


def _valuation() -> ValuationResult:
    return ValuationResult(
        valid=True,
        in_range=True,
        token0_amount=Decimal("1.5"),
        token1_amount=Decimal("3000"),
        usd_value=Decimal("6000"),
        unclaimed_fees0=Decimal("0.01"),
        unclaimed_fees1=Decimal("20"),
        unclaimed_fees_usd=Decimal("40"),
        claimed_fees_usd=Decimal("10"),
        original_investment_usd=Decimal("5000"),
        safe_original_investment_usd=Decimal("6000"),
        profit_loss_usd=Decimal("50"),
        hodl_value_usd=Decimal("6100"),
        impermanent_loss_usd=Decimal("100"),
        vs_hodl_usd=Decimal("-50"),
        position_age_days=Decimal("30"),
        apr=Decimal("10.14"),
        apr_capped=False,
        warnings=["warn"],
    )


def _output() -> ValuatePositionOutput:
    return ValuatePositionOutput(
        label="42",
        token0_symbol="WETH",
        token1_symbol="USDC",
        tick_lower=-600,
        tick_upper=600,
        current_tick=0,
        valuation=_valuation(),
    )


class FakeValuatePositionUseCase:
    def __init__(self):
        self.commands = []

    def execute(self, command):
        self.commands.append(command)
        return _output()


class FailingValuatePositionUseCase:
    def execute(self, _command):
        raise InvalidPositionInputError("tick_lower and tick_upper (or position_info) are required.")


class FakeSummarizePortfolioUseCase:
    def execute(self, command):
        assert len(command.positions) == 2
        return SummarizePortfolioOutput(
            positions=[_output(), _output()],
            summary=PortfolioSummary(
                position_count=2,
                in_range_count=2,
                total_value_usd=Decimal("12000"),
                total_original_investment_usd=Decimal("10000"),
                total_unclaimed_fees_usd=Decimal("80"),
                total_claimed_fees_usd=Decimal("20"),
                total_earnings_usd=Decimal("100"),
                total_hodl_value_usd=Decimal("12200"),
                retention_rate=Decimal("80"),
                profit_loss_usd=Decimal("2100"),
                asset_gain_usd=Decimal("2000"),
                impermanent_loss_usd=Decimal("200"),
                vs_hodl_usd=Decimal("-100"),
                roi=Decimal("17.5"),
                avg_position_age_days=Decimal("30"),
                apr=Decimal("10.14"),
                apr_capped=False,
                projection=PortfolioProjection(
                    next_24h_usd=Decimal("3.33"),
                    next_7d_usd=Decimal("23.33"),
                    next_30d_usd=Decimal("100"),
                ),
                warnings=[],
            ),
        )


class FailingSummarizePortfolioUseCase:
    def execute(self, _command):
        raise InvalidPortfolioInputError("positions[1]: liquidity: Empty uint256 string.")


def test_valuate_router_returns_flattened_valuation():
    fake = FakeValuatePositionUseCase()
    app.dependency_overrides[get_valuate_position_use_case] = lambda: fake

    client = TestClient(app)
    response = client.post("/v1/positions/valuate", json=REQUEST)

    assert response.status_code == 200
    payload = response.json()
    assert payload["label"] == "42"
    assert payload["usd_value"] == "6000"
    assert payload["vs_hodl_usd"] == "-50"
    assert payload["apr_capped"] is False
    assert payload["warnings"] == ["warn"]

    command = fake.commands[0]
    assert command.liquidity == "1000000000000000000000"
    assert command.token0_usd == Decimal("2000")
    assert command.tick_lower_outside.fee_growth_outside1_x128 == "2"
    assert command.tick_upper_outside is None
    assert command.history.deposited_usd == Decimal("150")
    assert command.history.claimed_fees0 == Decimal("0")

    app.dependency_overrides.clear()


def test_valuate_router_maps_domain_error_to_400():
    app.dependency_overrides[get_valuate_position_use_case] = lambda: FailingValuatePositionUseCase()

    client = TestClient(app)
    response = client.post("/v1/positions/valuate", json={**REQUEST, "tick_lower": None})

    assert response.status_code == 400
    assert "tick_lower" in response.json()["detail"]

    app.dependency_overrides.clear()


def test_valuate_router_validates_decimals():
    app.dependency_overrides[get_valuate_position_use_case] = lambda: FakeValuatePositionUseCase()

    client = TestClient(app)
    response = client.post("/v1/positions/valuate", json={**REQUEST, "token0_decimals": -1})

    assert response.status_code == 422

    app.dependency_overrides.clear()


def test_portfolio_router_returns_positions_and_summary():
    app.dependency_overrides[get_summarize_portfolio_use_case] = lambda: FakeSummarizePortfolioUseCase()

    client = TestClient(app)
    response = client.post("/v1/positions/portfolio", json={"positions": [REQUEST, REQUEST]})

    assert response.status_code == 200
    payload = response.json()
    assert len(payload["positions"]) == 2
    assert payload["summary"]["roi"] == "17.5"
    assert payload["summary"]["projection"]["next_30d_usd"] == "100"

    app.dependency_overrides.clear()


def test_portfolio_router_maps_domain_error_to_400():
    app.dependency_overrides[get_summarize_portfolio_use_case] = lambda: FailingSummarizePortfolioUseCase()

    client = TestClient(app)
    response = client.post("/v1/positions/portfolio", json={"positions": [REQUEST]})

    assert response.status_code == 400
    assert response.json()["detail"].startswith("positions[1]")

    app.dependency_overrides.clear()
