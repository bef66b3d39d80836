"""
Sqrt Price Math - sqrtPriceX96 ↔ 가격 비율

sqrtPriceX96 = sqrt(price) * 2^96
priceX96 = sqrtPriceX96^2 / 2^96  (token1 per token0, Q96)
"""

from ..constants import Q96
from .full_math import mul_div


def sqrt_price_to_price_x96(sqrt_price_x96: int) -> int:
    """sqrtPriceX96을 Q96 가격 비율(token1/token0)로 변환 (내림)"""
    return mul_div(sqrt_price_x96, sqrt_price_x96, Q96)


def quote_token0_in_token1(amount0: int, price_x96: int) -> int:
    """token0 수량을 token1 단위로 환산 (내림)"""
    return mul_div(amount0, price_x96, Q96)


def quote_token1_in_token0(amount1: int, price_x96: int) -> int:
    """token1 수량을 token0 단위로 환산 (내림)

    가격이 0이면 환산할 수 없으므로 0을 반환합니다.
    """
    if price_x96 == 0:
        return 0
    return mul_div(amount1, Q96, price_x96)
