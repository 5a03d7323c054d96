from __future__ import annotations

import logging

from lp_engine.application.dto.position_valuation import (
    TickOutsideInput,
    Uint256Value,
    ValuatePositionInput,
    ValuatePositionOutput,
)
from lp_engine.application.ports.clock_port import ClockPort
from lp_engine.domain.entities.policy import ValuationPolicy
from lp_engine.domain.entities.position import (
    FeeGrowthSnapshot,
    PoolFeeGrowthState,
    PoolSlot0,
    Position,
    PositionHistory,
    TickFeeGrowthOutside,
    TickRange,
    TokenInfo,
    TokenPrices,
)
from lp_engine.domain.exceptions import InvalidPositionInputError
from lp_engine.domain.services.position_valuation import valuate_position
from lp_engine.domain.services.univ3_fee_growth import parse_uint256
from lp_engine.domain.services.v4_position_info import decode_v4_position_info


logger = logging.getLogger(__name__)


def _uint(value: Uint256Value, *, field_name: str) -> int:
    try:
        return parse_uint256(value)
    except ValueError as exc:
        raise InvalidPositionInputError(f"{field_name}: {exc}") from exc


def _optional_uint(value: Uint256Value | None, *, field_name: str) -> int | None:
    if value is None:
        return None
    return _uint(value, field_name=field_name)


def _tick_outside(value: TickOutsideInput | None, *, field_name: str) -> TickFeeGrowthOutside | None:
    if value is None:
        return None
    return TickFeeGrowthOutside(
        fee_growth_outside0_x128=_uint(value.fee_growth_outside0_x128, field_name=f"{field_name}.0"),
        fee_growth_outside1_x128=_uint(value.fee_growth_outside1_x128, field_name=f"{field_name}.1"),
    )


def _resolve_tick_range(command: ValuatePositionInput) -> TickRange:
    if command.tick_lower is not None and command.tick_upper is not None:
        return TickRange(tick_lower=command.tick_lower, tick_upper=command.tick_upper)
    if command.position_info is not None:
        packed = _uint(command.position_info, field_name="position_info")
        return decode_v4_position_info(packed)
    raise InvalidPositionInputError("tick_lower and tick_upper (or position_info) are required.")


def _fee_growth_state(command: ValuatePositionInput) -> PoolFeeGrowthState:
    inside0 = _optional_uint(command.fee_growth_inside0_x128, field_name="fee_growth_inside0_x128")
    inside1 = _optional_uint(command.fee_growth_inside1_x128, field_name="fee_growth_inside1_x128")
    inside = (
        FeeGrowthSnapshot(fee_growth_inside0_x128=inside0, fee_growth_inside1_x128=inside1)
        if inside0 is not None and inside1 is not None
        else None
    )
    return PoolFeeGrowthState(
        fee_growth_global0_x128=_optional_uint(
            command.fee_growth_global0_x128, field_name="fee_growth_global0_x128"
        ),
        fee_growth_global1_x128=_optional_uint(
            command.fee_growth_global1_x128, field_name="fee_growth_global1_x128"
        ),
        lower=_tick_outside(command.tick_lower_outside, field_name="tick_lower_outside"),
        upper=_tick_outside(command.tick_upper_outside, field_name="tick_upper_outside"),
        fee_growth_inside=inside,
    )


class ValuatePositionUseCase:
    def __init__(self, *, clock: ClockPort, policy: ValuationPolicy):
        self._clock = clock
        self._policy = policy

    def execute(self, command: ValuatePositionInput) -> ValuatePositionOutput:
        tick_range = _resolve_tick_range(command)
        position = Position(
            liquidity=_uint(command.liquidity, field_name="liquidity"),
            tick_range=tick_range,
            token0=TokenInfo(symbol=command.token0_symbol, decimals=command.token0_decimals),
            token1=TokenInfo(symbol=command.token1_symbol, decimals=command.token1_decimals),
            fee_growth_inside_last=FeeGrowthSnapshot(
                fee_growth_inside0_x128=_uint(
                    command.fee_growth_inside0_last_x128, field_name="fee_growth_inside0_last_x128"
                ),
                fee_growth_inside1_x128=_uint(
                    command.fee_growth_inside1_last_x128, field_name="fee_growth_inside1_last_x128"
                ),
            ),
            tokens_owed0=_uint(command.tokens_owed0, field_name="tokens_owed0"),
            tokens_owed1=_uint(command.tokens_owed1, field_name="tokens_owed1"),
        )
        slot0 = PoolSlot0(
            sqrt_price_x96=_uint(command.sqrt_price_x96, field_name="sqrt_price_x96"),
            tick=command.current_tick,
        )
        history = None
        if command.history is not None:
            history = PositionHistory(
                deposited_amount0=command.history.deposited_amount0,
                deposited_amount1=command.history.deposited_amount1,
                deposited_usd=command.history.deposited_usd,
                claimed_fees0=command.history.claimed_fees0,
                claimed_fees1=command.history.claimed_fees1,
                created_at_ms=command.history.created_at_ms,
            )

        result = valuate_position(
            position=position,
            slot0=slot0,
            prices=TokenPrices(token0_usd=command.token0_usd, token1_usd=command.token1_usd),
            now_ms=self._clock.now_ms(),
            fee_growth=_fee_growth_state(command),
            history=history,
            policy=self._policy,
        )

        pair = f"{command.token0_symbol}/{command.token1_symbol}"
        for warning in result.warnings:
            logger.warning("valuate_position: pair=%s label=%s %s", pair, command.label, warning)
        logger.debug(
            "valuate_position: pair=%s valid=%s in_range=%s usd_value=%s apr=%s",
            pair,
            result.valid,
            result.in_range,
            result.usd_value,
            result.apr,
        )

        return ValuatePositionOutput(
            label=command.label,
            token0_symbol=command.token0_symbol,
            token1_symbol=command.token1_symbol,
            tick_lower=tick_range.tick_lower,
            tick_upper=tick_range.tick_upper,
            current_tick=command.current_tick,
            valuation=result,
        )
