"""
Idle Balances - 포지션 밖에 있는 볼트 보유 토큰

포지션에 들어가지 않아 수수료를 벌지 않는 token0/token1 잔고.
"""

from typing import Tuple

from ..errors import InsufficientAssets


class IdleBalances:
    """볼트의 유휴 잔고"""

    def __init__(self, amount0: int = 0, amount1: int = 0):
        self.amount0 = amount0
        self.amount1 = amount1

    def of(self, is_token0: bool) -> int:
        return self.amount0 if is_token0 else self.amount1

    def credit(self, amount0: int = 0, amount1: int = 0) -> None:
        if amount0 < 0 or amount1 < 0:
            raise ValueError(f"입금 수량은 음수일 수 없습니다: ({amount0}, {amount1})")
        self.amount0 += amount0
        self.amount1 += amount1

    def debit(self, amount0: int = 0, amount1: int = 0) -> None:
        """잔고 차감

        Raises:
            InsufficientAssets: 보유량보다 많이 차감하려는 경우
        """
        if amount0 < 0 or amount1 < 0:
            raise ValueError(f"출금 수량은 음수일 수 없습니다: ({amount0}, {amount1})")
        if amount0 > self.amount0 or amount1 > self.amount1:
            raise InsufficientAssets(
                f"유휴 잔고 부족: 요청 ({amount0}, {amount1}), 보유 ({self.amount0}, {self.amount1})"
            )
        self.amount0 -= amount0
        self.amount1 -= amount1

    def credit_token(self, is_token0: bool, amount: int) -> None:
        if is_token0:
            self.credit(amount0=amount)
        else:
            self.credit(amount1=amount)

    def debit_token(self, is_token0: bool, amount: int) -> None:
        if is_token0:
            self.debit(amount0=amount)
        else:
            self.debit(amount1=amount)

    def snapshot(self) -> Tuple[int, int]:
        return self.amount0, self.amount1

    def restore(self, state: Tuple[int, int]) -> None:
        self.amount0, self.amount1 = state

    def __repr__(self) -> str:
        return f"IdleBalances(amount0={self.amount0}, amount1={self.amount1})"
