from __future__ import annotations

from lp_engine.domain.entities.position import TickRange


_INT24_MASK = 0xFFFFFF
_INT24_SIGN_BIT = 0x800000


def _sign_extend_int24(raw: int) -> int:
    return raw - (1 << 24) if raw & _INT24_SIGN_BIT else raw


def decode_v4_position_info(packed: int) -> TickRange:
    """Ticks from a V4 PositionManager PositionInfo word.

    Layout: bits 0-7 hasSubscriber, 8-31 tickLower, 32-55 tickUpper, 56-255
    truncated poolId.
    """
    if packed < 0:
        raise ValueError("PositionInfo must be non-negative.")
    tick_lower = _sign_extend_int24((packed >> 8) & _INT24_MASK)
    tick_upper = _sign_extend_int24((packed >> 32) & _INT24_MASK)
    return TickRange(tick_lower=tick_lower, tick_upper=tick_upper)

