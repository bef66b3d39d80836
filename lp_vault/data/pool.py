"""
Simulated Pool - 인메모리 풀 / 포지션 매니저 / 스왑 라우터

체인 없이 볼트를 구동하기 위한 결정론적 협력자 구현.
하나의 객체가 PriceOracle, PositionManager, SwapRouter 프로토콜을 모두 만족하며
snapshot/restore를 지원하므로 볼트의 작업 단위 롤백에 참여합니다.

단순화:
- 스왑은 현재 가격에서 무한 유동성으로 체결되며 가격을 움직이지 않습니다
- 거래 수수료 적립은 accrue_fees()로 직접 주입합니다
"""

import copy
import logging
from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..constants import FEE_DENOMINATOR, Q192, Q96
from ..errors import (
    CollaboratorError,
    DeadlineExpired,
    DomainRangeError,
    InsufficientHistory,
    PreconditionError,
    SlippageExceeded,
)
from ..math.full_math import mul_div
from ..math.liquidity_math import (
    get_amount0_delta,
    get_amount1_delta,
    get_amounts_for_liquidity,
    get_liquidity_for_amounts,
)
from ..math.tick_math import (
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    get_tick_spacing_for_fee,
)
from .types import IncreaseResult, MintResult, Observation, PriceState, TokenAmounts

logger = logging.getLogger(__name__)


@dataclass
class SimulatedPosition:
    """풀이 기록하는 포지션 상태"""
    owner: str
    tick_lower: int
    tick_upper: int
    liquidity: int
    tokens_owed_0: int = 0
    tokens_owed_1: int = 0


class SimulatedPool:
    """단일 풀 시뮬레이터

    사용법:
        pool = SimulatedPool("0xwbtc", "0xusdc", fee=3000)
        pool.advance_time(3600)
        vault = LpProviderVault(config, pool, pool, pool, clock=lambda: pool.now)
    """

    def __init__(
        self,
        token0: str,
        token1: str,
        fee: int = 3000,
        sqrt_price_x96: int = Q96,
        tick_spacing: Optional[int] = None,
        now: int = 0,
    ):
        """
        Args:
            token0: token0 주소
            token1: token1 주소
            fee: 수수료 티어 (백만분율)
            sqrt_price_x96: 초기 sqrtPriceX96
            tick_spacing: 틱 간격. None이면 수수료 티어에서 결정
            now: 초기 타임스탬프 (초)
        """
        self.token0 = token0.lower()
        self.token1 = token1.lower()
        self.fee = fee
        self.tick_spacing = tick_spacing if tick_spacing is not None else get_tick_spacing_for_fee(fee)
        self.now = now

        self._sqrt_price_x96 = sqrt_price_x96
        self._tick = get_tick_at_sqrt_ratio(sqrt_price_x96)
        self._observations: List[Observation] = [Observation(timestamp=now, tick_cumulative=0)]
        self._positions: Dict[int, SimulatedPosition] = {}
        self._next_token_id = 1

    # ------------------------------------------------------------------
    # PriceOracle
    # ------------------------------------------------------------------

    def slot0(self) -> PriceState:
        return PriceState(sqrt_price_x96=self._sqrt_price_x96, tick=self._tick)

    def observe(self, seconds_agos: Sequence[int]) -> List[int]:
        """각 시점의 누적 틱 반환

        Raises:
            InsufficientHistory: 가장 오래된 관측값보다 이전 시점을 요청한 경우
        """
        return [self._cumulative_at(self.now - seconds_ago) for seconds_ago in seconds_agos]

    def _cumulative_at(self, target: int) -> int:
        if target > self.now:
            raise PreconditionError(f"미래 시점은 관측할 수 없습니다: {target} > {self.now}")

        oldest = self._observations[0]
        if target < oldest.timestamp:
            raise InsufficientHistory(
                f"관측 이력이 부족합니다: 요청 {target}, 가장 오래된 관측 {oldest.timestamp}"
            )

        last = self._observations[-1]
        if target >= last.timestamp:
            return last.tick_cumulative + self._tick * (target - last.timestamp)

        # 두 관측값 사이에서 틱은 일정하므로 선형 보간이 정확함
        timestamps = [o.timestamp for o in self._observations]
        i = bisect_right(timestamps, target) - 1
        before, after = self._observations[i], self._observations[i + 1]
        if target == before.timestamp:
            return before.tick_cumulative
        tick = (after.tick_cumulative - before.tick_cumulative) // (after.timestamp - before.timestamp)
        return before.tick_cumulative + tick * (target - before.timestamp)

    # ------------------------------------------------------------------
    # 시뮬레이션 제어
    # ------------------------------------------------------------------

    def advance_time(self, seconds: int) -> None:
        """시간을 진행 (현재 틱이 누적됨)"""
        if seconds < 0:
            raise ValueError(f"시간은 되돌릴 수 없습니다: {seconds}")
        self.now += seconds

    def set_sqrt_price(self, sqrt_price_x96: int) -> None:
        """현재 가격 변경. 변경 전 틱으로 관측값을 먼저 기록합니다."""
        self._write_observation()
        self._sqrt_price_x96 = sqrt_price_x96
        self._tick = get_tick_at_sqrt_ratio(sqrt_price_x96)

    def set_tick(self, tick: int) -> None:
        """현재 가격을 해당 틱의 경계 가격으로 변경"""
        self.set_sqrt_price(get_sqrt_ratio_at_tick(tick))

    def _write_observation(self) -> None:
        last = self._observations[-1]
        if self.now == last.timestamp:
            return
        self._observations.append(
            Observation(timestamp=self.now, tick_cumulative=self._cumulative_at(self.now))
        )

    def accrue_fees(self, token_id: int, amount0: int, amount1: int) -> None:
        """포지션에 거래 수수료 적립"""
        position = self._position(token_id)
        position.tokens_owed_0 += amount0
        position.tokens_owed_1 += amount1

    def position(self, token_id: int) -> SimulatedPosition:
        """포지션 상태 사본"""
        return copy.copy(self._position(token_id))

    # ------------------------------------------------------------------
    # PositionManager
    # ------------------------------------------------------------------

    def mint(
        self,
        token0: str,
        token1: str,
        fee: int,
        tick_lower: int,
        tick_upper: int,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
        recipient: str,
        deadline: int,
    ) -> MintResult:
        self._check_deadline(deadline)
        self._check_pair(token0, token1, fee)
        self._check_ticks(tick_lower, tick_upper)

        liquidity, amount0, amount1 = self._add_liquidity(
            tick_lower, tick_upper, amount0_desired, amount1_desired, amount0_min, amount1_min
        )

        token_id = self._next_token_id
        self._next_token_id += 1
        self._positions[token_id] = SimulatedPosition(
            owner=recipient.lower(),
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            liquidity=liquidity,
        )
        logger.debug("mint #%d [%d, %d] L=%d (%d, %d)", token_id, tick_lower, tick_upper,
                     liquidity, amount0, amount1)
        return MintResult(token_id, liquidity, amount0, amount1)

    def increase_liquidity(
        self,
        token_id: int,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
        deadline: int,
    ) -> IncreaseResult:
        self._check_deadline(deadline)
        position = self._position(token_id)

        liquidity, amount0, amount1 = self._add_liquidity(
            position.tick_lower, position.tick_upper,
            amount0_desired, amount1_desired, amount0_min, amount1_min
        )
        position.liquidity += liquidity
        return IncreaseResult(liquidity, amount0, amount1)

    def decrease_liquidity(
        self,
        token_id: int,
        liquidity: int,
        amount0_min: int,
        amount1_min: int,
        deadline: int,
    ) -> TokenAmounts:
        self._check_deadline(deadline)
        position = self._position(token_id)
        if liquidity <= 0 or liquidity > position.liquidity:
            raise CollaboratorError(
                f"제거할 유동성이 유효하지 않습니다: {liquidity} (보유 {position.liquidity})"
            )

        amount0, amount1 = get_amounts_for_liquidity(
            self._sqrt_price_x96,
            get_sqrt_ratio_at_tick(position.tick_lower),
            get_sqrt_ratio_at_tick(position.tick_upper),
            liquidity,
        )
        if amount0 < amount0_min or amount1 < amount1_min:
            raise SlippageExceeded(
                f"최소 수량 미달: ({amount0}, {amount1}) < ({amount0_min}, {amount1_min})"
            )

        position.liquidity -= liquidity
        position.tokens_owed_0 += amount0
        position.tokens_owed_1 += amount1
        return TokenAmounts(amount0, amount1)

    def collect(self, token_id: int, recipient: str) -> TokenAmounts:
        position = self._position(token_id)
        amounts = TokenAmounts(position.tokens_owed_0, position.tokens_owed_1)
        position.tokens_owed_0 = 0
        position.tokens_owed_1 = 0
        return amounts

    def _add_liquidity(
        self,
        tick_lower: int,
        tick_upper: int,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
    ) -> Tuple[int, int, int]:
        sqrt_a = get_sqrt_ratio_at_tick(tick_lower)
        sqrt_b = get_sqrt_ratio_at_tick(tick_upper)

        liquidity = get_liquidity_for_amounts(
            self._sqrt_price_x96, sqrt_a, sqrt_b, amount0_desired, amount1_desired
        )
        if liquidity <= 0:
            raise CollaboratorError("민트할 유동성이 0입니다")

        # 풀은 유동성 추가 시 필요한 수량을 올림으로 받음
        if self._sqrt_price_x96 <= sqrt_a:
            amount0 = get_amount0_delta(sqrt_a, sqrt_b, liquidity, round_up=True)
            amount1 = 0
        elif self._sqrt_price_x96 < sqrt_b:
            amount0 = get_amount0_delta(self._sqrt_price_x96, sqrt_b, liquidity, round_up=True)
            amount1 = get_amount1_delta(sqrt_a, self._sqrt_price_x96, liquidity, round_up=True)
        else:
            amount0 = 0
            amount1 = get_amount1_delta(sqrt_a, sqrt_b, liquidity, round_up=True)

        if amount0 < amount0_min or amount1 < amount1_min:
            raise SlippageExceeded(
                f"최소 수량 미달: ({amount0}, {amount1}) < ({amount0_min}, {amount1_min})"
            )
        return liquidity, amount0, amount1

    # ------------------------------------------------------------------
    # SwapRouter
    # ------------------------------------------------------------------

    def swap_exact_in(
        self,
        token_in: str,
        token_out: str,
        fee: int,
        amount_in: int,
        min_out: int,
        recipient: str,
        sqrt_price_limit_x96: Optional[int] = None,
    ) -> int:
        token_in, token_out = token_in.lower(), token_out.lower()
        if {token_in, token_out} != {self.token0, self.token1}:
            raise CollaboratorError(f"풀에 없는 토큰 쌍입니다: {token_in} -> {token_out}")
        if fee != self.fee:
            raise CollaboratorError(f"수수료 티어가 다릅니다: {fee} != {self.fee}")
        if amount_in <= 0:
            raise CollaboratorError(f"스왑 수량은 양수여야 합니다: {amount_in}")

        zero_for_one = token_in == self.token0
        if sqrt_price_limit_x96:
            if zero_for_one and sqrt_price_limit_x96 >= self._sqrt_price_x96:
                raise SlippageExceeded(f"가격 한도가 현재 가격 이상입니다: {sqrt_price_limit_x96}")
            if not zero_for_one and sqrt_price_limit_x96 <= self._sqrt_price_x96:
                raise SlippageExceeded(f"가격 한도가 현재 가격 이하입니다: {sqrt_price_limit_x96}")

        amount_after_fee = amount_in * (FEE_DENOMINATOR - self.fee) // FEE_DENOMINATOR
        price_q192 = self._sqrt_price_x96 * self._sqrt_price_x96
        if zero_for_one:
            amount_out = mul_div(amount_after_fee, price_q192, Q192)
        else:
            amount_out = mul_div(amount_after_fee, Q192, price_q192)

        if amount_out < min_out:
            raise SlippageExceeded(f"최소 출력 미달: {amount_out} < {min_out}")
        return amount_out

    # ------------------------------------------------------------------
    # Journaled
    # ------------------------------------------------------------------

    def snapshot(self) -> dict:
        return copy.deepcopy({
            "now": self.now,
            "sqrt_price_x96": self._sqrt_price_x96,
            "tick": self._tick,
            "observations": self._observations,
            "positions": self._positions,
            "next_token_id": self._next_token_id,
        })

    def restore(self, state: dict) -> None:
        state = copy.deepcopy(state)
        self.now = state["now"]
        self._sqrt_price_x96 = state["sqrt_price_x96"]
        self._tick = state["tick"]
        self._observations = state["observations"]
        self._positions = state["positions"]
        self._next_token_id = state["next_token_id"]

    # ------------------------------------------------------------------

    def _position(self, token_id: int) -> SimulatedPosition:
        if token_id not in self._positions:
            raise CollaboratorError(f"존재하지 않는 포지션입니다: {token_id}")
        return self._positions[token_id]

    def _check_deadline(self, deadline: int) -> None:
        if deadline < self.now:
            raise DeadlineExpired(f"deadline이 지났습니다: {deadline} < {self.now}")

    def _check_pair(self, token0: str, token1: str, fee: int) -> None:
        if (token0.lower(), token1.lower(), fee) != (self.token0, self.token1, self.fee):
            raise CollaboratorError(f"풀과 맞지 않는 토큰/수수료입니다: {token0}/{token1} {fee}")

    def _check_ticks(self, tick_lower: int, tick_upper: int) -> None:
        if tick_lower >= tick_upper:
            raise DomainRangeError(f"tick_lower < tick_upper 이어야 합니다: [{tick_lower}, {tick_upper}]")
        if tick_lower % self.tick_spacing or tick_upper % self.tick_spacing:
            raise DomainRangeError(
                f"틱이 간격 {self.tick_spacing}에 맞지 않습니다: [{tick_lower}, {tick_upper}]"
            )
