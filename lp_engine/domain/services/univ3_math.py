from __future__ import annotations

import math
from decimal import Decimal

from lp_engine.domain.exceptions import InvalidSqrtPriceError, InvalidTickError


LOG_BASE = math.log(1.0001)
MIN_TICK = -887272
MAX_TICK = 887272
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342
Q96 = 2**96
Q192 = Q96 * Q96
PRICE_PRECISION = 10**36
MAX_UINT256 = 2**256 - 1

# 1/sqrt(1.0001)^(2^i) in Q128, for i = 1..19 (bit 0 seeds the ratio).
_TICK_LADDER = (
    (0x2, 0xFFF97272373D413259A46990580E213A),
    (0x4, 0xFFF2E50F5F656932EF12357CF3C7FDCC),
    (0x8, 0xFFE5CACA7E10E4E61C3624EAA0941CD0),
    (0x10, 0xFFCB9843D60F6159C9DB58835C926644),
    (0x20, 0xFF973B41FA98C081472E6896DFB254C0),
    (0x40, 0xFF2EA16466C96A3843EC78B326B52861),
    (0x80, 0xFE5DEE046A99A2A811C461F1969C3053),
    (0x100, 0xFCBE86C7900A88AEDCFFC83B479AA3A4),
    (0x200, 0xF987A7253AC413176F2B074CF7815E54),
    (0x400, 0xF3392B0822B70005940C7A398E4B70F3),
    (0x800, 0xE7159475A2C29B7443B29C7FA6E889D9),
    (0x1000, 0xD097F3BDFD2022B8845AD8F792AA5825),
    (0x2000, 0xA9F746462D870FDF8A65DC1F90E061E5),
    (0x4000, 0x70D869A156D2A1B890BB3DF62BAF32F7),
    (0x8000, 0x31BE135F97D08FD981231505542FCFA6),
    (0x10000, 0x9AA508B5B7A84E1C677DE54F3E99BC9),
    (0x20000, 0x5D6AF8DEDB81196699C329225EE604),
    (0x40000, 0x2216E584F5FA1EA926041BEDFE98),
    (0x80000, 0x48A170391F7DC42444E8FA2),
)

_LOG_SQRT10001_FACTOR = 255738958999603826347141
_TICK_LOW_OFFSET = 3402992956809132418596140100660247210
_TICK_HIGH_OFFSET = 291339464771989622907027621153398088495


def is_valid_tick(tick: int) -> bool:
    return MIN_TICK <= tick <= MAX_TICK


def is_valid_tick_range(tick_lower: int, tick_upper: int) -> bool:
    return is_valid_tick(tick_lower) and is_valid_tick(tick_upper) and tick_lower < tick_upper


def tick_to_sqrt_price_x96(tick: int) -> int:
    """Exact sqrt(1.0001^tick) in Q64.96, as computed by TickMath.getSqrtRatioAtTick."""
    if not is_valid_tick(tick):
        raise InvalidTickError(f"tick {tick} outside [{MIN_TICK}, {MAX_TICK}].")

    abs_tick = abs(tick)
    ratio = 0xFFFCB933BD6FAD37AA2D162D1A594001 if abs_tick & 0x1 else 1 << 128
    for mask, multiplier in _TICK_LADDER:
        if abs_tick & mask:
            ratio = (ratio * multiplier) >> 128

    if tick > 0:
        ratio = MAX_UINT256 // ratio

    # Q128 -> Q96, rounding up so the inverse lands back on the same tick.
    return (ratio >> 32) + (0 if ratio % (1 << 32) == 0 else 1)


def sqrt_price_x96_to_tick(sqrt_price_x96: int) -> int:
    """Greatest tick whose sqrt ratio is <= sqrt_price_x96 (TickMath.getTickAtSqrtRatio)."""
    if not MIN_SQRT_RATIO <= sqrt_price_x96 < MAX_SQRT_RATIO:
        raise InvalidSqrtPriceError(f"sqrt_price_x96 {sqrt_price_x96} outside ratio bounds.")

    ratio = sqrt_price_x96 << 32
    msb = ratio.bit_length() - 1
    r = ratio >> (msb - 127) if msb >= 128 else ratio << (127 - msb)

    log_2 = (msb - 128) << 64
    for shift in range(63, 49, -1):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << shift
        r >>= f

    log_sqrt10001 = log_2 * _LOG_SQRT10001_FACTOR
    tick_low = (log_sqrt10001 - _TICK_LOW_OFFSET) >> 128
    tick_high = (log_sqrt10001 + _TICK_HIGH_OFFSET) >> 128
    if tick_low == tick_high:
        return tick_low
    return tick_high if tick_to_sqrt_price_x96(tick_high) <= sqrt_price_x96 else tick_low


def sqrt_price_x96_to_price(
    sqrt_price_x96: int,
    token0_decimals: int,
    token1_decimals: int,
) -> Decimal:
    """Human price of token0 in token1, squaring in integers before scaling down."""
    if sqrt_price_x96 <= 0:
        return Decimal("0")
    scaled = (sqrt_price_x96 * sqrt_price_x96 * PRICE_PRECISION) // Q192
    raw_price = Decimal(scaled) / Decimal(PRICE_PRECISION)
    decimal_adjust = Decimal(10) ** (token0_decimals - token1_decimals)
    return raw_price * decimal_adjust


def tick_to_price(tick: int | float, token0_decimals: int, token1_decimals: int) -> Decimal:
    if not MIN_TICK <= tick <= MAX_TICK:
        return Decimal("0")
    decimal_adjust = 10.0 ** (token0_decimals - token1_decimals)
    value = math.exp(float(tick) * LOG_BASE) * decimal_adjust
    if not math.isfinite(value) or value <= 0:
        return Decimal("0")
    return Decimal(str(value))


def price_to_tick(price: Decimal | float, token0_decimals: int, token1_decimals: int) -> int:
    """Floor tick for a human price, clamped to the valid bound.

    Non-positive prices map to tick 0; callers that need to tell that apart from
    a real price of 1.0 must check the price first.
    """
    if price <= 0:
        return 0
    decimal_adjust = Decimal(10) ** (token0_decimals - token1_decimals)
    raw_price = Decimal(str(price)) / decimal_adjust
    if raw_price <= 0:
        return 0
    if raw_price.is_infinite():
        return MAX_TICK
    # ln in Decimal: the raw price may be outside the float range.
    log_price = float(raw_price.ln())
    # Nudge by a tiny epsilon so exact tick prices that round just under
    # the boundary in float do not drop a tick.
    tick = math.floor(log_price / LOG_BASE + 1e-9)
    return max(MIN_TICK, min(MAX_TICK, tick))


def resolve_pool_price(
    *,
    sqrt_price_x96: int | None,
    current_tick: int | None,
    token0_decimals: int,
    token1_decimals: int,
    token0_usd: Decimal | None = None,
    token1_usd: Decimal | None = None,
) -> Decimal:
    if sqrt_price_x96 is not None and sqrt_price_x96 > 0:
        price = sqrt_price_x96_to_price(sqrt_price_x96, token0_decimals, token1_decimals)
        if price > 0:
            return price

    if current_tick is not None:
        price = tick_to_price(current_tick, token0_decimals, token1_decimals)
        if price > 0:
            return price

    if token0_usd is not None and token1_usd is not None and token0_usd > 0 and token1_usd > 0:
        return token0_usd / token1_usd

    return Decimal("0")


def to_token_units(raw_amount: int, decimals: int) -> Decimal:
    return Decimal(raw_amount).scaleb(-decimals)
