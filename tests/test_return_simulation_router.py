from __future__ import annotations

from decimal import Decimal

from fastapi.testclient import TestClient

from lp_engine.api.deps import get_simulate_returns_use_case
from lp_engine.application.dto.return_simulation import SimulateReturnsOutput
from lp_engine.domain.exceptions import InvalidSimulationInputError
from lp_engine.main import app


class FakeSimulateReturnsUseCase:
    def __init__(self):
        self.commands = []

    def execute(self, command):
        self.commands.append(command)
        return SimulateReturnsOutput(
            valid=True,
            pool_apr=Decimal("20"),
            current_price=Decimal("2000"),
            estimated_fees_usd=Decimal("12.5"),
            estimated_apr=Decimal("152.08"),
            impermanent_loss_usd=Decimal("3.2"),
            net_return_usd=Decimal("9.3"),
            token0_amount=Decimal("0.25"),
            token1_amount=Decimal("500"),
            in_range=True,
            time_in_range_fraction=Decimal("0.72"),
            concentration_factor=Decimal("10.47"),
            estimated_volatility=Decimal("0.5"),
            daily_fees=[Decimal("6.2"), Decimal("6.3")],
            warnings=[],
        )


class FailingSimulateReturnsUseCase:
    def execute(self, _command):
        raise InvalidSimulationInputError("pool_apr or fees_24h_usd is required.")


def test_simulate_router_returns_result():
    fake = FakeSimulateReturnsUseCase()
    app.dependency_overrides[get_simulate_returns_use_case] = lambda: fake

    client = TestClient(app)
    response = client.post(
        "/v1/simulate/returns",
        json={
            "deposit_usd": "1000",
            "price_lower": "1800",
            "price_upper": "2200",
            "days": 2,
            "pool_apr": "20",
            "volume_24h_usd": "50000",
            "tvl_usd": "1000000",
            "current_price": "2000",
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["estimated_fees_usd"] == "12.5"
    assert payload["daily_fees"] == ["6.2", "6.3"]
    assert payload["concentration_factor"] == "10.47"

    command = fake.commands[0]
    assert command.days == 2
    assert command.token0_decimals == 18
    assert command.sqrt_price_x96 is None

    app.dependency_overrides.clear()


def test_simulate_router_maps_domain_error_to_400():
    app.dependency_overrides[get_simulate_returns_use_case] = lambda: FailingSimulateReturnsUseCase()

    client = TestClient(app)
    response = client.post(
        "/v1/simulate/returns",
        json={"deposit_usd": "1000", "price_lower": "1", "price_upper": "2", "days": 7},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "pool_apr or fees_24h_usd is required."

    app.dependency_overrides.clear()


def test_simulate_router_rejects_zero_days():
    app.dependency_overrides[get_simulate_returns_use_case] = lambda: FakeSimulateReturnsUseCase()

    client = TestClient(app)
    response = client.post(
        "/v1/simulate/returns",
        json={"deposit_usd": "1000", "price_lower": "1", "price_upper": "2", "days": 0, "pool_apr": "5"},
    )

    assert response.status_code == 422

    app.dependency_overrides.clear()
