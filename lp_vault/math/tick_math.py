"""
Tick Math - Tick ↔ sqrtPriceX96 변환

Uniswap V3 TickMath와 동일한 정밀도로 구현한 틱 수학 함수들과
포지션 범위를 틱 그리드에 맞추는 헬퍼.

References:
- Uniswap V3 Core: contracts/libraries/TickMath.sol

핵심 공식:
    price = 1.0001^tick
    sqrtPriceX96 = sqrt(price) * 2^96
"""

from typing import Tuple

from ..constants import (
    MIN_TICK,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MAX_SQRT_RATIO,
    UINT256_MAX,
    TICK_SPACINGS,
)
from ..errors import DomainRangeError


# |tick|의 각 비트에 대응하는 1/sqrt(1.0001)^(2^i) (Q128.128)
_TICK_BIT_RATIOS: Tuple[Tuple[int, int], ...] = (
    (0x2, 0xfff97272373d413259a46990580e213a),
    (0x4, 0xfff2e50f5f656932ef12357cf3c7fdcc),
    (0x8, 0xffe5caca7e10e4e61c3624eaa0941cd0),
    (0x10, 0xffcb9843d60f6159c9db58835c926644),
    (0x20, 0xff973b41fa98c081472e6896dfb254c0),
    (0x40, 0xff2ea16466c96a3843ec78b326b52861),
    (0x80, 0xfe5dee046a99a2a811c461f1969c3053),
    (0x100, 0xfcbe86c7900a88aedcffc83b479aa3a4),
    (0x200, 0xf987a7253ac413176f2b074cf7815e54),
    (0x400, 0xf3392b0822b70005940c7a398e4b70f3),
    (0x800, 0xe7159475a2c29b7443b29c7fa6e889d9),
    (0x1000, 0xd097f3bdfd2022b8845ad8f792aa5825),
    (0x2000, 0xa9f746462d870fdf8a65dc1f90e061e5),
    (0x4000, 0x70d869a156d2a1b890bb3df62baf32f7),
    (0x8000, 0x31be135f97d08fd981231505542fcfa6),
    (0x10000, 0x9aa508b5b7a84e1c677de54f3e99bc9),
    (0x20000, 0x5d6af8dedb81196699c329225ee604),
    (0x40000, 0x2216e584f5fa1ea926041bedfe98),
    (0x80000, 0x48a170391f7dc42444e8fa2),
)

# log_2(sqrt(1.0001))의 역수 (Q64.64 -> Q128.128 스케일)
_LOG_SQRT10001_MULTIPLIER: int = 255738958999603826347141
_TICK_LOW_OFFSET: int = 3402992956809132418596140100660247210
_TICK_HIGH_OFFSET: int = 291339464771989622907027621153398088495


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """틱에서 sqrtPriceX96 계산

    1.0001^(tick/2)를 |tick|의 비트별 상수 곱으로 계산하고,
    양수 틱이면 역수를 취한 뒤 Q128.128 -> Q64.96으로 올림 시프트합니다.

    Args:
        tick: 틱 인덱스 (-887272 ~ 887272)

    Returns:
        sqrtPriceX96 (Q64.96 형식)

    Raises:
        DomainRangeError: 틱이 유효 범위를 벗어난 경우
    """
    if tick < MIN_TICK or tick > MAX_TICK:
        raise DomainRangeError(f"틱이 유효 범위를 벗어났습니다: {tick} (범위: {MIN_TICK} ~ {MAX_TICK})")

    abs_tick = abs(tick)

    ratio = 0xfffcb933bd6fad37aa2d162d1a594001 if abs_tick & 0x1 \
        else 0x100000000000000000000000000000000

    for bit, multiplier in _TICK_BIT_RATIOS:
        if abs_tick & bit:
            ratio = (ratio * multiplier) >> 128

    if tick > 0:
        ratio = UINT256_MAX // ratio

    # Q128.128 -> Q64.96, 잘린 비트가 있으면 올림
    return (ratio >> 32) + (1 if ratio % (1 << 32) else 0)


def get_tick_at_sqrt_ratio(sqrt_price_x96: int) -> int:
    """sqrtPriceX96에서 틱 계산 (내림)

    sqrt_ratio(tick) <= sqrt_price_x96 을 만족하는 가장 큰 틱을 반환합니다.

    Args:
        sqrt_price_x96: sqrtPriceX96 (Q64.96 형식)

    Returns:
        틱 인덱스

    Raises:
        DomainRangeError: sqrtPriceX96이 [MIN_SQRT_RATIO, MAX_SQRT_RATIO) 밖인 경우
    """
    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise DomainRangeError(
            f"sqrtPriceX96이 유효 범위를 벗어났습니다: {sqrt_price_x96}"
        )

    ratio = sqrt_price_x96 << 32

    # 최상위 비트
    msb = ratio.bit_length() - 1

    if msb >= 128:
        r = ratio >> (msb - 127)
    else:
        r = ratio << (127 - msb)

    log_2 = (msb - 128) << 64

    # 제곱을 반복하며 소수부 14비트 계산
    for i in range(14):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << (63 - i)
        r >>= f

    log_sqrt10001 = log_2 * _LOG_SQRT10001_MULTIPLIER

    tick_low = (log_sqrt10001 - _TICK_LOW_OFFSET) >> 128
    tick_high = (log_sqrt10001 + _TICK_HIGH_OFFSET) >> 128

    if tick_low == tick_high:
        return tick_low

    if get_sqrt_ratio_at_tick(tick_high) <= sqrt_price_x96:
        return tick_high
    return tick_low


def floor_to_spacing(tick: int, tick_spacing: int) -> int:
    """틱 그리드로 내림 (음수 틱은 -무한대 방향)"""
    if tick_spacing <= 0:
        raise DomainRangeError(f"틱 간격은 양수여야 합니다: {tick_spacing}")
    return (tick // tick_spacing) * tick_spacing


def ceil_to_spacing(tick: int, tick_spacing: int) -> int:
    """틱 그리드로 올림"""
    if tick_spacing <= 0:
        raise DomainRangeError(f"틱 간격은 양수여야 합니다: {tick_spacing}")
    return -((-tick) // tick_spacing) * tick_spacing


def usable_tick_bounds(tick_spacing: int) -> Tuple[int, int]:
    """해당 틱 간격에서 사용 가능한 (최소, 최대) 틱"""
    return (
        ceil_to_spacing(MIN_TICK, tick_spacing),
        floor_to_spacing(MAX_TICK, tick_spacing),
    )


def range_delta_for_bps(range_width_bps: int) -> int:
    """범위 폭(bps)을 틱 거리로 환산

    1틱 = 가격 0.01% (1.0001배) 이므로 1 bps ≈ 1틱으로 근사합니다.
    틱 0 근처에서만 정확하며, 틱이 멀어질수록 실제 가격 폭과 차이가 납니다.

    Args:
        range_width_bps: 현재 가격에서 양쪽으로 벌릴 폭 (basis points)

    Returns:
        현재 틱에서 양쪽으로 벌릴 틱 거리
    """
    if range_width_bps <= 0:
        raise DomainRangeError(f"범위 폭은 양수여야 합니다: {range_width_bps}")
    return range_width_bps


def ticks_for_range(current_tick: int, tick_spacing: int, range_width_bps: int) -> Tuple[int, int]:
    """현재 틱 주변의 포지션 범위 계산

    tick_lower = floor(current - delta), tick_upper = ceil(current + delta)
    를 사용 가능한 틱 범위로 제한합니다.

    Args:
        current_tick: 현재 풀 틱
        tick_spacing: 풀 틱 간격
        range_width_bps: 범위 폭 (basis points)

    Returns:
        (tick_lower, tick_upper) 튜플

    Example:
        >>> ticks_for_range(0, 60, 1000)
        (-1020, 1020)
    """
    delta = range_delta_for_bps(range_width_bps)
    min_usable, max_usable = usable_tick_bounds(tick_spacing)

    tick_lower = max(floor_to_spacing(current_tick - delta, tick_spacing), min_usable)
    tick_upper = min(ceil_to_spacing(current_tick + delta, tick_spacing), max_usable)

    if tick_lower >= tick_upper:
        raise DomainRangeError(
            f"유효한 틱 범위를 만들 수 없습니다: [{tick_lower}, {tick_upper}]"
        )
    return tick_lower, tick_upper


def get_tick_spacing_for_fee(fee_tier: int) -> int:
    """수수료 티어에 해당하는 틱 간격 반환"""
    if fee_tier not in TICK_SPACINGS:
        raise DomainRangeError(f"지원하지 않는 수수료 티어: {fee_tier}")
    return TICK_SPACINGS[fee_tier]
