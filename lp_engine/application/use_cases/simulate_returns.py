from __future__ import annotations

import logging

from lp_engine.application.dto.return_simulation import SimulateReturnsInput, SimulateReturnsOutput
from lp_engine.domain.entities.policy import SimulationPolicy
from lp_engine.domain.entities.simulation import SimulationInput, SimulationPool
from lp_engine.domain.exceptions import InvalidSimulationInputError
from lp_engine.domain.services.return_simulation import pool_fee_apr, simulate_returns
from lp_engine.domain.services.univ3_fee_growth import parse_uint256
from lp_engine.domain.services.univ3_math import resolve_pool_price


logger = logging.getLogger(__name__)


class SimulateReturnsUseCase:
    def __init__(self, *, policy: SimulationPolicy):
        self._policy = policy

    def execute(self, command: SimulateReturnsInput) -> SimulateReturnsOutput:
        if command.pool_apr is not None:
            pool_apr = command.pool_apr
        elif command.fees_24h_usd is not None:
            pool_apr = pool_fee_apr(fees_24h_usd=command.fees_24h_usd, tvl_usd=command.tvl_usd)
        else:
            raise InvalidSimulationInputError("pool_apr or fees_24h_usd is required.")

        current_price = command.current_price
        if current_price is None:
            sqrt_price_x96 = None
            if command.sqrt_price_x96 is not None:
                try:
                    sqrt_price_x96 = parse_uint256(command.sqrt_price_x96)
                except ValueError as exc:
                    raise InvalidSimulationInputError(f"sqrt_price_x96: {exc}") from exc
            current_price = resolve_pool_price(
                sqrt_price_x96=sqrt_price_x96,
                current_tick=command.current_tick,
                token0_decimals=command.token0_decimals,
                token1_decimals=command.token1_decimals,
                token0_usd=command.token0_usd,
                token1_usd=command.token1_usd,
            )

        result = simulate_returns(
            pool=SimulationPool(
                apr=pool_apr,
                volume_24h_usd=command.volume_24h_usd,
                tvl_usd=command.tvl_usd,
                current_price=current_price,
                token0_usd=command.token0_usd,
                token1_usd=command.token1_usd,
            ),
            simulation=SimulationInput(
                deposit_usd=command.deposit_usd,
                price_lower=command.price_lower,
                price_upper=command.price_upper,
                days=command.days,
            ),
            policy=self._policy,
        )

        for warning in result.warnings:
            logger.warning("simulate_returns: %s", warning)
        logger.debug(
            "simulate_returns: valid=%s fees=%s apr=%s time_in_range=%s",
            result.valid,
            result.estimated_fees_usd,
            result.estimated_apr,
            result.time_in_range_fraction,
        )

        return SimulateReturnsOutput(
            valid=result.valid,
            pool_apr=pool_apr,
            current_price=current_price,
            estimated_fees_usd=result.estimated_fees_usd,
            estimated_apr=result.estimated_apr,
            impermanent_loss_usd=result.impermanent_loss_usd,
            net_return_usd=result.net_return_usd,
            token0_amount=result.token0_amount,
            token1_amount=result.token1_amount,
            in_range=result.in_range,
            time_in_range_fraction=result.time_in_range_fraction,
            concentration_factor=result.concentration_factor,
            estimated_volatility=result.estimated_volatility,
            daily_fees=result.daily_fees,
            warnings=result.warnings,
        )
