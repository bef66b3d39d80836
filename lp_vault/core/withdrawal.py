"""
Withdrawal Fulfillment - 인출 자산 조달

지분 소각과 자산 지급 전에, 아래 순서로 단위 자산을 확보합니다:

1. 유휴 단위 자산이 충분하면 종료
2. 포지션에서 liquidity × shares / total_shares 만큼 유동성 제거 (원금+수수료 수령)
3. 그래도 부족하면 다른 토큰 유휴 잔고 전부를 단위 자산으로 스왑
4. 그래도 부족하면 InsufficientAssets

3단계 스왑에는 최소 출력 조건이 없습니다 (슬리피지 위험, 경고 로그만 남김).
전체 과정의 원자성은 볼트의 작업 단위(atomic)가 보장합니다.
"""

import logging

from ..config import VaultConfig
from ..data.interfaces import SwapRouter
from ..data.types import FulfillmentReport
from ..errors import InsufficientAssets
from ..math.full_math import mul_div
from .balances import IdleBalances
from .ledger import PositionLedger

logger = logging.getLogger(__name__)


class WithdrawalFulfillment:
    """인출 요청에 필요한 단위 자산을 유휴 잔고로 모으는 알고리즘"""

    def __init__(
        self,
        config: VaultConfig,
        ledger: PositionLedger,
        balances: IdleBalances,
        swap_router: SwapRouter,
    ):
        self.config = config
        self.ledger = ledger
        self.balances = balances
        self.swap_router = swap_router

    @property
    def idle_asset(self) -> int:
        return self.balances.of(self.config.asset_is_token0)

    def ensure(self, assets: int, shares: int, total_shares: int, deadline: int) -> FulfillmentReport:
        """유휴 단위 자산이 assets 이상이 되도록 조달

        Args:
            assets: 지급할 단위 자산 수량
            shares: 소각할 지분
            total_shares: 소각 전 총 지분
            deadline: 유동성 제거에 전달할 deadline

        Returns:
            FulfillmentReport

        Raises:
            InsufficientAssets: 모든 단계를 거쳐도 부족한 경우
        """
        report = FulfillmentReport(assets=assets)

        if self.idle_asset >= assets:
            report.satisfied_from_idle = True
            return report

        liquidity = self.ledger.liquidity
        if self.ledger.is_active and liquidity > 0 and total_shares > 0:
            to_remove = mul_div(liquidity, shares, total_shares)
            if to_remove > 0:
                collected = self.ledger.decrease(to_remove, 0, 0, deadline)
                report.liquidity_removed = to_remove
                report.collected0, report.collected1 = collected

        if self.idle_asset < assets:
            self._swap_all_other_into_asset(report)

        if self.idle_asset < assets:
            raise InsufficientAssets(
                f"인출 자산 부족: 요청 {assets}, 조달 가능 {self.idle_asset}"
            )
        return report

    def _swap_all_other_into_asset(self, report: FulfillmentReport) -> None:
        other_is_token0 = not self.config.asset_is_token0
        amount_in = self.balances.of(other_is_token0)
        if amount_in == 0:
            return

        logger.warning(
            "인출 조달 스왑: %d %s -> %s, 최소 출력 조건 없음",
            amount_in, self.config.other_token, self.config.asset,
        )
        self.balances.debit_token(other_is_token0, amount_in)
        amount_out = self.swap_router.swap_exact_in(
            self.config.other_token,
            self.config.asset,
            self.config.fee,
            amount_in,
            0,
            self.config.vault_address,
        )
        self.balances.credit_token(self.config.asset_is_token0, amount_out)
        report.swapped_in = amount_in
        report.swapped_out = amount_out
