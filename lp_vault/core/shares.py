"""
Share Accounting - 지분 ⇄ 자산 비율

ERC-4626 방식의 변환. 가상 지분/자산 1을 더해 (OpenZeppelin, offset 0)
빈 볼트의 첫 예치는 1:1로 발행되고, 반올림은 항상 볼트에 유리하게 합니다:

    shares = assets × (supply + 1) / (total_assets + 1)
    assets = shares × (total_assets + 1) / (supply + 1)

- deposit / redeem: 내림
- mint / withdraw: 올림
"""

from typing import Callable, Dict

from ..errors import InsufficientShares
from ..math.full_math import mul_div, mul_div_rounding_up


class ShareLedger:
    """지분 잔고. 모든 잔고의 합 == total_supply"""

    def __init__(self):
        self.total_supply = 0
        self._balances: Dict[str, int] = {}

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder.lower(), 0)

    def mint(self, to: str, shares: int) -> None:
        if shares < 0:
            raise ValueError(f"발행 지분은 음수일 수 없습니다: {shares}")
        to = to.lower()
        self._balances[to] = self._balances.get(to, 0) + shares
        self.total_supply += shares

    def burn(self, holder: str, shares: int) -> None:
        """지분 소각

        Raises:
            InsufficientShares: 보유 지분보다 많이 소각하려는 경우
        """
        if shares < 0:
            raise ValueError(f"소각 지분은 음수일 수 없습니다: {shares}")
        holder = holder.lower()
        balance = self._balances.get(holder, 0)
        if shares > balance:
            raise InsufficientShares(f"지분 부족: 요청 {shares}, 보유 {balance} ({holder})")
        remaining = balance - shares
        if remaining:
            self._balances[holder] = remaining
        else:
            self._balances.pop(holder, None)
        self.total_supply -= shares

    def snapshot(self):
        return self.total_supply, dict(self._balances)

    def restore(self, state) -> None:
        self.total_supply, balances = state
        self._balances = dict(balances)


class ShareAccounting:
    """지분 ⇄ 자산 변환

    total_assets는 NAVAccountant.valuate 처럼 호출 시점의 가치를 돌려주는 함수입니다.
    """

    def __init__(self, shares: ShareLedger, total_assets: Callable[[], int]):
        self.shares = shares
        self.total_assets = total_assets

    def convert_to_shares(self, assets: int, round_up: bool = False) -> int:
        supply = self.shares.total_supply + 1
        total = self.total_assets() + 1
        if round_up:
            return mul_div_rounding_up(assets, supply, total)
        return mul_div(assets, supply, total)

    def convert_to_assets(self, shares: int, round_up: bool = False) -> int:
        supply = self.shares.total_supply + 1
        total = self.total_assets() + 1
        if round_up:
            return mul_div_rounding_up(shares, total, supply)
        return mul_div(shares, total, supply)

    def preview_deposit(self, assets: int) -> int:
        return self.convert_to_shares(assets)

    def preview_mint(self, shares: int) -> int:
        return self.convert_to_assets(shares, round_up=True)

    def preview_withdraw(self, assets: int) -> int:
        return self.convert_to_shares(assets, round_up=True)

    def preview_redeem(self, shares: int) -> int:
        return self.convert_to_assets(shares)

    def max_withdraw(self, holder: str) -> int:
        return self.convert_to_assets(self.shares.balance_of(holder))

    def max_redeem(self, holder: str) -> int:
        return self.shares.balance_of(holder)
