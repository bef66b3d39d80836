"""
NAV Accountant - 단위 자산 기준 총 가치 계산

총 가치 = 유휴 잔고 + 포지션 토큰 수량, 단위 자산이 아닌 쪽은
TWAP 가격으로 환산합니다.

포지션 분할(유동성 -> 토큰 수량)과 유휴 잔고 환산 모두 같은 TWAP 가격을 씁니다.
포지션 분할에 현물 가격을 쓰면 한 블록 안의 가격 조작으로 평가액을 움직일 수 있습니다.
"""

import logging
from typing import Tuple

from ..config import VaultConfig
from ..data.interfaces import PriceOracle
from ..data.types import ValuationSnapshot
from ..errors import PreconditionError
from ..math.liquidity_math import get_amounts_for_liquidity
from ..math.oracle_math import mean_tick_from_cumulatives
from ..math.sqrt_price_math import (
    quote_token0_in_token1,
    quote_token1_in_token0,
    sqrt_price_to_price_x96,
)
from ..math.tick_math import get_sqrt_ratio_at_tick
from .balances import IdleBalances
from .ledger import PositionLedger

logger = logging.getLogger(__name__)


class NAVAccountant:
    """볼트 순자산 평가기"""

    def __init__(
        self,
        config: VaultConfig,
        ledger: PositionLedger,
        balances: IdleBalances,
        oracle: PriceOracle,
    ):
        self.config = config
        self.ledger = ledger
        self.balances = balances
        self.oracle = oracle
        self.twap_period = config.twap_period

    def set_twap_period(self, seconds: int) -> None:
        if seconds <= 0:
            raise PreconditionError(f"TWAP 윈도우는 양수여야 합니다: {seconds}")
        self.twap_period = seconds

    def twap_tick(self) -> int:
        """twap_period 동안의 평균 틱

        Raises:
            PreconditionError: 오라클에 윈도우를 덮는 관측 이력이 없는 경우
        """
        tick_cumulatives = self.oracle.observe([self.twap_period, 0])
        return mean_tick_from_cumulatives(tick_cumulatives, self.twap_period)

    def twap_price(self) -> Tuple[int, int, int]:
        """(평균 틱, sqrtPriceX96, priceX96) 반환"""
        mean_tick = self.twap_tick()
        sqrt_price_x96 = get_sqrt_ratio_at_tick(mean_tick)
        return mean_tick, sqrt_price_x96, sqrt_price_to_price_x96(sqrt_price_x96)

    def valuate(self) -> int:
        """단위 자산 기준 총 가치"""
        return self.valuation().total

    def valuation(self) -> ValuationSnapshot:
        """NAV 구성 요소 계산

        단위 자산이 아닌 토큰의 노출이 전혀 없으면 (유휴 잔고 0, 유동성 0)
        가격이 필요 없으므로 오라클을 조회하지 않습니다.
        """
        idle0, idle1 = self.balances.amount0, self.balances.amount1
        position = self.ledger.position
        other_idle = idle1 if self.config.asset_is_token0 else idle0

        if position.liquidity == 0 and other_idle == 0:
            total = idle0 if self.config.asset_is_token0 else idle1
            return ValuationSnapshot(idle0, idle1, 0, 0, None, None, total)

        mean_tick, sqrt_price_x96, price_x96 = self.twap_price()

        position0, position1 = 0, 0
        if position.liquidity > 0:
            position0, position1 = get_amounts_for_liquidity(
                sqrt_price_x96,
                get_sqrt_ratio_at_tick(position.tick_lower),
                get_sqrt_ratio_at_tick(position.tick_upper),
                position.liquidity,
            )

        total = self._in_asset(idle0 + position0, idle1 + position1, price_x96)
        logger.debug(
            "NAV: idle=(%d, %d) position=(%d, %d) twap_tick=%d total=%d",
            idle0, idle1, position0, position1, mean_tick, total,
        )
        return ValuationSnapshot(idle0, idle1, position0, position1, mean_tick, price_x96, total)

    def _in_asset(self, amount0: int, amount1: int, price_x96: int) -> int:
        if self.config.asset_is_token0:
            return amount0 + quote_token1_in_token0(amount1, price_x96)
        return amount1 + quote_token0_in_token1(amount0, price_x96)

    def snapshot(self) -> int:
        return self.twap_period

    def restore(self, state: int) -> None:
        self.twap_period = state
