"""
볼트 데이터 타입 정의

협력자(오라클, 포지션 매니저, 스왑 라우터)와 주고받는 값과
볼트가 계산하는 스냅샷을 dataclass / NamedTuple로 정의.
모든 수량 필드는 온체인 정밀도를 위해 int 타입 사용.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional


class LedgerState(str, Enum):
    """포지션 원장 상태"""
    EMPTY = "empty"
    ACTIVE = "active"


@dataclass(frozen=True)
class PriceState:
    """풀 현재 가격 (slot0)

    sqrt_ratio(tick) <= sqrt_price_x96 < sqrt_ratio(tick + 1)
    """
    sqrt_price_x96: int
    tick: int


@dataclass(frozen=True)
class PositionState:
    """볼트 포지션 (읽기 전용 뷰)

    - token_id: 포지션 식별자. None이면 한 번도 생성되지 않음
    - tick_lower / tick_upper: 실현된 범위
    - liquidity: 현재 유동성 (l)
    """
    token_id: Optional[int] = None
    tick_lower: int = 0
    tick_upper: int = 0
    liquidity: int = 0

    @property
    def exists(self) -> bool:
        return self.token_id is not None


@dataclass(frozen=True)
class Observation:
    """누적 틱 관측값"""
    timestamp: int
    tick_cumulative: int


@dataclass(frozen=True)
class ValuationSnapshot:
    """NAV 계산 결과

    저장하지 않고 읽을 때마다 새로 계산합니다.
    """
    idle0: int
    idle1: int
    position0: int
    position1: int
    mean_tick: Optional[int]  # 가격이 필요 없으면 None
    price_x96: Optional[int]  # token1 per token0 (Q96)
    total: int  # 단위 자산 기준 총 가치


@dataclass
class FulfillmentReport:
    """인출 조달 과정 기록"""
    assets: int
    satisfied_from_idle: bool = False
    liquidity_removed: int = 0
    collected0: int = 0
    collected1: int = 0
    swapped_in: int = 0
    swapped_out: int = 0


class MintResult(NamedTuple):
    """포지션 민트 결과"""
    token_id: int
    liquidity: int
    amount0: int
    amount1: int


class IncreaseResult(NamedTuple):
    """유동성 추가 결과"""
    liquidity: int
    amount0: int
    amount1: int


class TokenAmounts(NamedTuple):
    """token0 / token1 수량 쌍"""
    amount0: int
    amount1: int
