"""
Position Ledger - 단일 포지션 상태 머신

상태: EMPTY (포지션 식별자 없음) -> ACTIVE (식별자 존재)

- create: EMPTY -> ACTIVE
- increase / decrease / collect_fees: ACTIVE에서만 가능
- 유동성이 0이 되어도 식별자는 지우지 않으므로 ACTIVE로 남고,
  이후 create는 AlreadyActive로 실패합니다.
"""

import logging
from typing import Tuple

from ..config import VaultConfig
from ..data.interfaces import PositionManager
from ..data.types import LedgerState, PositionState, TokenAmounts
from ..errors import AlreadyActive, InsufficientLiquidity, NoActivePosition
from ..math.tick_math import ticks_for_range
from .balances import IdleBalances

logger = logging.getLogger(__name__)


class PositionLedger:
    """볼트의 단일 집중화 유동성 포지션 원장"""

    def __init__(
        self,
        config: VaultConfig,
        position_manager: PositionManager,
        balances: IdleBalances,
    ):
        self.config = config
        self.position_manager = position_manager
        self.balances = balances
        self._position = PositionState()

    @property
    def position(self) -> PositionState:
        return self._position

    @property
    def state(self) -> LedgerState:
        return LedgerState.ACTIVE if self._position.exists else LedgerState.EMPTY

    @property
    def is_active(self) -> bool:
        return self.state is LedgerState.ACTIVE

    @property
    def liquidity(self) -> int:
        return self._position.liquidity

    def in_range(self, current_tick: int) -> bool:
        """현재 틱이 포지션 범위 안에 있는지 (경계 제외)"""
        if not self.is_active:
            return False
        return self._position.tick_lower < current_tick < self._position.tick_upper

    def create(
        self,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
        range_width_bps: int,
        current_tick: int,
        tick_spacing: int,
        deadline: int,
    ) -> Tuple[int, int]:
        """새 포지션 민트

        현재 틱 주변 ±delta (delta ≈ range_width_bps 틱)를 그리드에 맞춘
        범위로 민트하고, 사용된 토큰을 유휴 잔고에서 차감합니다.

        Args:
            amount0_desired: 투입할 최대 token0
            amount1_desired: 투입할 최대 token1
            amount0_min: 최소 token0 (슬리피지 보호)
            amount1_min: 최소 token1 (슬리피지 보호)
            range_width_bps: 범위 폭 (basis points)
            current_tick: 현재 풀 틱
            tick_spacing: 풀 틱 간격
            deadline: 협력자에 전달할 deadline

        Returns:
            (token_id, liquidity) 튜플

        Raises:
            AlreadyActive: 포지션 식별자가 이미 존재하는 경우 (유동성 0 포함)
        """
        if self.is_active:
            raise AlreadyActive(
                f"포지션 #{self._position.token_id}이 이미 존재합니다 (유동성 {self._position.liquidity})"
            )

        tick_lower, tick_upper = ticks_for_range(current_tick, tick_spacing, range_width_bps)

        # 민트 전에 desired 전량을 차감하고 남은 수량은 되돌림
        self.balances.debit(amount0_desired, amount1_desired)
        result = self.position_manager.mint(
            self.config.token0,
            self.config.token1,
            self.config.fee,
            tick_lower,
            tick_upper,
            amount0_desired,
            amount1_desired,
            amount0_min,
            amount1_min,
            self.config.vault_address,
            deadline,
        )
        self.balances.credit(amount0_desired - result.amount0, amount1_desired - result.amount1)

        self._position = PositionState(
            token_id=result.token_id,
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            liquidity=result.liquidity,
        )
        logger.info(
            "포지션 #%d 생성: [%d, %d] L=%d used=(%d, %d)",
            result.token_id, tick_lower, tick_upper, result.liquidity, result.amount0, result.amount1,
        )
        return result.token_id, result.liquidity

    def increase(
        self,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
        deadline: int,
    ) -> Tuple[int, int, int]:
        """기존 포지션에 유동성 추가

        Returns:
            (추가된 liquidity, used0, used1) 튜플

        Raises:
            NoActivePosition: 포지션이 없는 경우
        """
        self._require_active()

        self.balances.debit(amount0_desired, amount1_desired)
        result = self.position_manager.increase_liquidity(
            self._position.token_id,
            amount0_desired,
            amount1_desired,
            amount0_min,
            amount1_min,
            deadline,
        )
        self.balances.credit(amount0_desired - result.amount0, amount1_desired - result.amount1)

        self._set_liquidity(self._position.liquidity + result.liquidity)
        logger.info("포지션 #%d 유동성 +%d -> %d", self._position.token_id,
                    result.liquidity, self._position.liquidity)
        return result.liquidity, result.amount0, result.amount1

    def decrease(
        self,
        liquidity: int,
        amount0_min: int,
        amount1_min: int,
        deadline: int,
    ) -> TokenAmounts:
        """유동성 제거 후 원금과 수수료를 즉시 수령

        유동성이 0이 되어도 포지션 식별자는 유지됩니다.

        Returns:
            수령한 (amount0, amount1). 원금과 누적 수수료 합계

        Raises:
            NoActivePosition: 포지션이 없는 경우
            InsufficientLiquidity: 보유 유동성보다 많이 제거하려는 경우
            ValueError: 유동성이 0 이하인 경우
        """
        self._require_active()
        if liquidity <= 0:
            raise ValueError(f"제거할 유동성은 양수여야 합니다: {liquidity}")
        if liquidity > self._position.liquidity:
            raise InsufficientLiquidity(
                f"유동성 부족: 요청 {liquidity}, 보유 {self._position.liquidity}"
            )

        self.position_manager.decrease_liquidity(
            self._position.token_id, liquidity, amount0_min, amount1_min, deadline
        )
        collected = self.position_manager.collect(self._position.token_id, self.config.vault_address)
        self.balances.credit(collected.amount0, collected.amount1)

        self._set_liquidity(self._position.liquidity - liquidity)
        logger.info(
            "포지션 #%d 유동성 -%d -> %d, 수령 (%d, %d)",
            self._position.token_id, liquidity, self._position.liquidity,
            collected.amount0, collected.amount1,
        )
        return TokenAmounts(collected.amount0, collected.amount1)

    def collect_fees(self) -> TokenAmounts:
        """누적 거래 수수료를 유휴 잔고로 수령

        Raises:
            NoActivePosition: 포지션이 없는 경우
        """
        self._require_active()
        collected = self.position_manager.collect(self._position.token_id, self.config.vault_address)
        self.balances.credit(collected.amount0, collected.amount1)
        logger.info("포지션 #%d 수수료 수령 (%d, %d)", self._position.token_id,
                    collected.amount0, collected.amount1)
        return TokenAmounts(collected.amount0, collected.amount1)

    def snapshot(self) -> PositionState:
        return self._position

    def restore(self, state: PositionState) -> None:
        self._position = state

    def _require_active(self) -> None:
        if not self.is_active:
            raise NoActivePosition("생성된 포지션이 없습니다")

    def _set_liquidity(self, liquidity: int) -> None:
        p = self._position
        self._position = PositionState(p.token_id, p.tick_lower, p.tick_upper, liquidity)
