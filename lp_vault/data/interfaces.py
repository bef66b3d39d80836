"""
외부 협력자 인터페이스

볼트 코어는 아래 프로토콜만 알고 있으며, 모든 호출은 동기적입니다.
최소 수량 미달이나 deadline 초과 시 협력자가 예외를 발생시킵니다.
"""

from typing import List, Optional, Protocol, Sequence, runtime_checkable

from .types import IncreaseResult, MintResult, PriceState, TokenAmounts


class PositionManager(Protocol):
    """포지션 민트/증감/수령 서비스 (NonfungiblePositionManager)"""

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
        ...

    def increase_liquidity(
        self,
        token_id: int,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
        deadline: int,
    ) -> IncreaseResult:
        ...

    def decrease_liquidity(
        self,
        token_id: int,
        liquidity: int,
        amount0_min: int,
        amount1_min: int,
        deadline: int,
    ) -> TokenAmounts:
        ...

    def collect(self, token_id: int, recipient: str) -> TokenAmounts:
        ...


class SwapRouter(Protocol):
    """단일 홉 exact-in 스왑 서비스"""

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
        ...


class PriceOracle(Protocol):
    """풀 가격 및 누적 틱 관측 서비스"""

    tick_spacing: int

    def slot0(self) -> PriceState:
        ...

    def observe(self, seconds_agos: Sequence[int]) -> List[int]:
        ...


@runtime_checkable
class Journaled(Protocol):
    """작업 단위 롤백에 참여할 수 있는 상태 보유자"""

    def snapshot(self) -> object:
        ...

    def restore(self, state: object) -> None:
        ...
