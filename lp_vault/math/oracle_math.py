"""
Oracle Math - TWAP 평균 틱 계산

누적 틱(tickCumulative) 관측값 두 개로 윈도우 W 동안의
산술 평균 틱을 구합니다.

References:
- Uniswap V3 Periphery: contracts/libraries/OracleLibrary.sol (consult)
"""

from typing import Sequence

from ..errors import PreconditionError


def mean_tick_from_cumulatives(tick_cumulatives: Sequence[int], window: int) -> int:
    """누적 틱 관측값에서 평균 틱 계산

    observe([W, 0])의 결과를 받아 (cum[1] - cum[0]) / W 를 -무한대 방향으로
    내림합니다. 음수 델타가 나누어떨어지지 않으면 0 방향 절사보다 1 작습니다.

    Args:
        tick_cumulatives: [W초 전 누적 틱, 현재 누적 틱]
        window: 관측 윈도우 (초)

    Returns:
        평균 틱

    Raises:
        PreconditionError: 윈도우가 0 이하이거나 관측값이 2개가 아닌 경우
    """
    if window <= 0:
        raise PreconditionError(f"TWAP 윈도우는 양수여야 합니다: {window}")
    if len(tick_cumulatives) != 2:
        raise PreconditionError(f"관측값 2개가 필요합니다: {len(tick_cumulatives)}개")

    delta = tick_cumulatives[1] - tick_cumulatives[0]
    # Python의 // 는 이미 floor
    return delta // window
