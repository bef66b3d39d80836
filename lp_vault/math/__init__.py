"""
Math layer for LP Vault

온체인 수준 정밀도의 수학 함수들:
- tick_math: Tick ↔ sqrtPriceX96 변환, 틱 그리드
- liquidity_math: 유동성 ↔ 토큰 수량
- sqrt_price_math: sqrtPriceX96 ↔ 가격 비율
- oracle_math: TWAP 평균 틱
"""

from .tick_math import (
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    floor_to_spacing,
    ceil_to_spacing,
    ticks_for_range,
)
from .liquidity_math import (
    get_amount0_delta,
    get_amount1_delta,
    get_liquidity_for_amounts,
    get_amounts_for_liquidity,
)
from .sqrt_price_math import (
    sqrt_price_to_price_x96,
    quote_token0_in_token1,
    quote_token1_in_token0,
)
from .oracle_math import mean_tick_from_cumulatives
