"""
Liquidity Math - 유동성 평가

특정 가격 범위에서의 토큰 수량과 유동성 간의 변환.
볼트 평가에는 항상 내림을 사용하여 보유량을 과대평가하지 않습니다.

References:
- Uniswap V3 Core: contracts/libraries/SqrtPriceMath.sol
- Uniswap V3 Periphery: contracts/libraries/LiquidityAmounts.sol

핵심 공식:
    Δy = L * (√P_b - √P_a)
    Δx = L * (1/√P_a - 1/√P_b)
"""

from typing import Tuple

from ..constants import Q96
from .full_math import mul_div, mul_div_rounding_up, div_rounding_up


def _sorted(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int) -> Tuple[int, int]:
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        return sqrt_ratio_b_x96, sqrt_ratio_a_x96
    return sqrt_ratio_a_x96, sqrt_ratio_b_x96


def get_amount0_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = False
) -> int:
    """두 가격 사이에서 유동성이 대표하는 token0 양

    공식: Δx = L * (√P_b - √P_a) / (√P_a * √P_b)

    Args:
        sqrt_ratio_a_x96: 한쪽 경계 sqrtPriceX96
        sqrt_ratio_b_x96: 다른쪽 경계 sqrtPriceX96
        liquidity: 유동성
        round_up: True면 올림 (민트 시 풀이 받는 양), False면 내림

    Returns:
        amount0 (최소 단위)
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    numerator1 = liquidity << 96
    numerator2 = sqrt_ratio_b_x96 - sqrt_ratio_a_x96

    if round_up:
        return div_rounding_up(
            mul_div_rounding_up(numerator1, numerator2, sqrt_ratio_b_x96),
            sqrt_ratio_a_x96
        )
    return mul_div(numerator1, numerator2, sqrt_ratio_b_x96) // sqrt_ratio_a_x96


def get_amount1_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = False
) -> int:
    """두 가격 사이에서 유동성이 대표하는 token1 양

    공식: Δy = L * (√P_b - √P_a)
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    if round_up:
        return mul_div_rounding_up(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96)
    return mul_div(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96)


def get_liquidity_for_amount0(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int
) -> int:
    """amount0로 얻을 수 있는 최대 유동성

    공식: L = Δx * √P_a * √P_b / (√P_b - √P_a)
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    if sqrt_ratio_b_x96 == sqrt_ratio_a_x96:
        return 0

    intermediate = mul_div(sqrt_ratio_a_x96, sqrt_ratio_b_x96, Q96)
    return mul_div(amount0, intermediate, sqrt_ratio_b_x96 - sqrt_ratio_a_x96)


def get_liquidity_for_amount1(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount1: int
) -> int:
    """amount1로 얻을 수 있는 최대 유동성

    공식: L = Δy / (√P_b - √P_a)
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    if sqrt_ratio_b_x96 == sqrt_ratio_a_x96:
        return 0

    return mul_div(amount1, Q96, sqrt_ratio_b_x96 - sqrt_ratio_a_x96)


def get_liquidity_for_amounts(
    sqrt_ratio_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    amount0: int,
    amount1: int
) -> int:
    """토큰 수량에서 민트 가능한 최대 유동성

    Args:
        sqrt_ratio_x96: 현재 sqrtPriceX96
        sqrt_ratio_a_x96: 하한 sqrtPriceX96
        sqrt_ratio_b_x96: 상한 sqrtPriceX96
        amount0: token0 수량
        amount1: token1 수량

    Returns:
        유동성 (두 제약 조건 중 작은 값)
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    if sqrt_ratio_x96 <= sqrt_ratio_a_x96:
        return get_liquidity_for_amount0(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount0)

    if sqrt_ratio_x96 < sqrt_ratio_b_x96:
        liquidity0 = get_liquidity_for_amount0(sqrt_ratio_x96, sqrt_ratio_b_x96, amount0)
        liquidity1 = get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_x96, amount1)
        return min(liquidity0, liquidity1)

    return get_liquidity_for_amount1(sqrt_ratio_a_x96, sqrt_ratio_b_x96, amount1)


def get_amounts_for_liquidity(
    sqrt_ratio_x96: int,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int
) -> Tuple[int, int]:
    """유동성에서 토큰 수량 계산 (내림)

    현재 가격이 범위 아래면 전부 token0, 위면 전부 token1,
    범위 안이면 현재 가격을 경계로 양쪽으로 나눕니다.

    Args:
        sqrt_ratio_x96: 현재 sqrtPriceX96
        sqrt_ratio_a_x96: 하한 sqrtPriceX96 (순서가 바뀌어도 됨)
        sqrt_ratio_b_x96: 상한 sqrtPriceX96
        liquidity: 유동성

    Returns:
        (amount0, amount1) 튜플
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _sorted(sqrt_ratio_a_x96, sqrt_ratio_b_x96)

    if sqrt_ratio_x96 <= sqrt_ratio_a_x96:
        return get_amount0_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity), 0

    if sqrt_ratio_x96 < sqrt_ratio_b_x96:
        amount0 = get_amount0_delta(sqrt_ratio_x96, sqrt_ratio_b_x96, liquidity)
        amount1 = get_amount1_delta(sqrt_ratio_a_x96, sqrt_ratio_x96, liquidity)
        return amount0, amount1

    return 0, get_amount1_delta(sqrt_ratio_a_x96, sqrt_ratio_b_x96, liquidity)
