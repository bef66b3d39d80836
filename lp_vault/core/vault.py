"""
LP Provider Vault

예치자 풀의 단위 자산으로 단일 집중화 유동성 포지션을 운용하는 볼트.

모든 상태 변경 진입점은 하나의 작업 단위로 실행됩니다:
    역할 검사 -> 재진입 가드 획득 -> 참여자 스냅샷 -> 본문
    -> (예외 시) 모든 참여자 복원 후 예외 재발생 -> 가드 해제

사용법:
    pool = SimulatedPool(token0, token1, fee=3000)
    vault = LpProviderVault(config, pool, pool, pool, clock=lambda: pool.now)
    vault.deposit(1_000_000, "0xuser", caller="0xuser")
"""

import functools
import logging
import time
from typing import Callable, List, Optional, Tuple

from ..config import VaultConfig
from ..data.interfaces import Journaled, PositionManager, PriceOracle, SwapRouter
from ..data.types import (
    FulfillmentReport,
    LedgerState,
    PositionState,
    TokenAmounts,
    ValuationSnapshot,
)
from ..errors import AuthorizationError, InsufficientShares, PreconditionError
from .atomic import atomic
from .balances import IdleBalances
from .guards import AccessControl, ReentrancyGuard, Role
from .ledger import PositionLedger
from .nav import NAVAccountant
from .shares import ShareAccounting, ShareLedger
from .withdrawal import WithdrawalFulfillment

logger = logging.getLogger(__name__)


def entrypoint(role: Optional[Role] = None):
    """상태 변경 진입점 데코레이터

    Args:
        role: 필요한 역할. None이면 누구나 호출 가능
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, caller: str, **kwargs):
            if role is not None:
                self.access.require(caller, role)
            with self._guard, atomic(self._participants):
                return func(self, *args, caller=caller, **kwargs)
        return wrapper
    return decorator


class LpProviderVault:
    """단일 포지션 LP 볼트"""

    def __init__(
        self,
        config: VaultConfig,
        position_manager: PositionManager,
        swap_router: SwapRouter,
        oracle: PriceOracle,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            config: 불변 볼트 설정
            position_manager: 포지션 민트/증감/수령 협력자
            swap_router: 스왑 협력자
            oracle: 가격/누적 틱 협력자
            clock: 현재 시각 (초). 인출 중 deadline 계산에 사용

        Raises:
            PreconditionError: position_manager 또는 swap_router가 snapshot/restore를 구현하지 않은 경우
        """
        self.config = config
        self.position_manager = position_manager
        self.swap_router = swap_router
        self.oracle = oracle
        self.clock = clock

        self.access = AccessControl(config.owner, config.initial_manager)
        self.balances = IdleBalances()
        self.ledger = PositionLedger(config, position_manager, self.balances)
        self.nav = NAVAccountant(config, self.ledger, self.balances, oracle)
        self.shares = ShareLedger()
        self.accounting = ShareAccounting(self.shares, self.nav.valuate)
        self.fulfillment = WithdrawalFulfillment(config, self.ledger, self.balances, swap_router)
        self.last_fulfillment: Optional[FulfillmentReport] = None

        self._guard = ReentrancyGuard()
        self._participants: List[Journaled] = self._collect_participants()

    def _collect_participants(self) -> List[Journaled]:
        """작업 단위 참여자 목록

        상태를 바꾸는 협력자(포지션 매니저, 스왑 라우터)는 snapshot/restore를
        구현해야 합니다. 읽기 전용인 오라클은 구현한 경우에만 참여합니다.

        Raises:
            PreconditionError: 상태를 바꾸는 협력자가 롤백을 지원하지 않는 경우
        """
        for role, collaborator in (
            ("position_manager", self.position_manager),
            ("swap_router", self.swap_router),
        ):
            if not isinstance(collaborator, Journaled):
                raise PreconditionError(
                    f"{role}({type(collaborator).__name__})는 snapshot()/restore()를 구현해야 합니다"
                )

        participants: List[Journaled] = [self.access, self.nav, self.balances, self.ledger, self.shares]
        seen = set()
        for collaborator in (self.position_manager, self.swap_router, self.oracle):
            if id(collaborator) in seen or not isinstance(collaborator, Journaled):
                continue
            seen.add(id(collaborator))
            participants.append(collaborator)
        return participants

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self.access.owner

    @property
    def manager(self) -> str:
        return self.access.manager

    @property
    def twap_period(self) -> int:
        return self.nav.twap_period

    @property
    def position(self) -> PositionState:
        return self.ledger.position

    @property
    def state(self) -> LedgerState:
        return self.ledger.state

    @property
    def idle_balances(self) -> TokenAmounts:
        return TokenAmounts(self.balances.amount0, self.balances.amount1)

    @property
    def total_supply(self) -> int:
        return self.shares.total_supply

    def balance_of(self, holder: str) -> int:
        return self.shares.balance_of(holder)

    def valuate(self) -> int:
        return self.nav.valuate()

    def total_assets(self) -> int:
        return self.nav.valuate()

    def valuation(self) -> ValuationSnapshot:
        return self.nav.valuation()

    def convert_to_shares(self, assets: int) -> int:
        return self.accounting.convert_to_shares(assets)

    def convert_to_assets(self, shares: int) -> int:
        return self.accounting.convert_to_assets(shares)

    def preview_deposit(self, assets: int) -> int:
        return self.accounting.preview_deposit(assets)

    def preview_mint(self, shares: int) -> int:
        return self.accounting.preview_mint(shares)

    def preview_withdraw(self, assets: int) -> int:
        return self.accounting.preview_withdraw(assets)

    def preview_redeem(self, shares: int) -> int:
        return self.accounting.preview_redeem(shares)

    def max_withdraw(self, holder: str) -> int:
        return self.accounting.max_withdraw(holder)

    def max_redeem(self, holder: str) -> int:
        return self.accounting.max_redeem(holder)

    # ------------------------------------------------------------------
    # owner
    # ------------------------------------------------------------------

    @entrypoint(Role.OWNER)
    def set_manager(self, manager: str, *, caller: str) -> None:
        self.access.set_manager(manager)
        logger.info("manager 변경: %s", self.access.manager)

    @entrypoint(Role.OWNER)
    def set_twap_period(self, seconds: int, *, caller: str) -> None:
        self.nav.set_twap_period(seconds)
        logger.info("TWAP 윈도우 변경: %ds", seconds)

    @entrypoint(Role.OWNER)
    def swap_tokens_exact_in(
        self,
        zero_for_one: bool,
        amount_in: int,
        amount_out_minimum: int,
        sqrt_price_limit_x96: Optional[int] = None,
        *,
        caller: str,
    ) -> int:
        """유휴 잔고 리밸런싱 스왑

        Args:
            zero_for_one: True면 token0 -> token1
            amount_in: 투입 수량
            amount_out_minimum: 최소 출력 (슬리피지 보호)
            sqrt_price_limit_x96: 가격 한도 (선택)

        Returns:
            출력 수량
        """
        token_in, token_out = self.config.token0, self.config.token1
        if not zero_for_one:
            token_in, token_out = token_out, token_in

        self.balances.debit_token(zero_for_one, amount_in)
        amount_out = self.swap_router.swap_exact_in(
            token_in,
            token_out,
            self.config.fee,
            amount_in,
            amount_out_minimum,
            self.config.vault_address,
            sqrt_price_limit_x96,
        )
        self.balances.credit_token(not zero_for_one, amount_out)
        logger.info("스왑 %d %s -> %d %s", amount_in, token_in, amount_out, token_out)
        return amount_out

    # ------------------------------------------------------------------
    # manager: 포지션 수명주기
    # ------------------------------------------------------------------

    @entrypoint(Role.MANAGER)
    def create_position(
        self,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
        deadline: int,
        range_width_bps: Optional[int] = None,
        *,
        caller: str,
    ) -> Tuple[int, int]:
        """현재 가격 주변에 새 포지션 생성

        Returns:
            (token_id, liquidity) 튜플
        """
        price = self.oracle.slot0()
        return self.ledger.create(
            amount0_desired,
            amount1_desired,
            amount0_min,
            amount1_min,
            range_width_bps if range_width_bps is not None else self.config.range_width_bps,
            price.tick,
            self.oracle.tick_spacing,
            deadline,
        )

    @entrypoint(Role.MANAGER)
    def increase_position(
        self,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
        deadline: int,
        *,
        caller: str,
    ) -> Tuple[int, int, int]:
        return self.ledger.increase(amount0_desired, amount1_desired, amount0_min, amount1_min, deadline)

    @entrypoint(Role.MANAGER)
    def decrease_position(
        self,
        liquidity: int,
        amount0_min: int,
        amount1_min: int,
        deadline: int,
        *,
        caller: str,
    ) -> TokenAmounts:
        return self.ledger.decrease(liquidity, amount0_min, amount1_min, deadline)

    @entrypoint(Role.MANAGER)
    def collect_fees(self, *, caller: str) -> TokenAmounts:
        return self.ledger.collect_fees()

    # ------------------------------------------------------------------
    # 예치 / 인출
    # ------------------------------------------------------------------

    @entrypoint()
    def deposit(self, assets: int, receiver: str, *, caller: str) -> int:
        """단위 자산 예치 후 지분 발행

        Returns:
            발행된 지분
        """
        shares = self.accounting.preview_deposit(assets)
        self._receive(caller, receiver, assets, shares)
        return shares

    @entrypoint()
    def mint(self, shares: int, receiver: str, *, caller: str) -> int:
        """지정한 지분만큼 발행 (필요 자산 올림)

        Returns:
            예치된 자산
        """
        assets = self.accounting.preview_mint(shares)
        self._receive(caller, receiver, assets, shares)
        return assets

    @entrypoint()
    def withdraw(self, assets: int, receiver: str, owner: str, *, caller: str) -> int:
        """단위 자산 인출 (필요 지분 올림)

        Returns:
            소각된 지분

        Raises:
            InsufficientShares: owner의 지분이 부족한 경우
            InsufficientAssets: 자산을 조달할 수 없는 경우
        """
        shares = self.accounting.preview_withdraw(assets)
        self._pay_out(caller, receiver, owner, assets, shares)
        return shares

    @entrypoint()
    def redeem(self, shares: int, receiver: str, owner: str, *, caller: str) -> int:
        """지분 상환 (지급 자산 내림)

        Returns:
            지급된 자산
        """
        assets = self.accounting.preview_redeem(shares)
        self._pay_out(caller, receiver, owner, assets, shares)
        return assets

    def _receive(self, caller: str, receiver: str, assets: int, shares: int) -> None:
        if assets < 0 or shares < 0:
            raise ValueError(f"수량은 음수일 수 없습니다: assets={assets}, shares={shares}")
        self.balances.credit_token(self.config.asset_is_token0, assets)
        self.shares.mint(receiver, shares)
        logger.info("예치: %s -> %s assets=%d shares=%d", caller, receiver, assets, shares)

    def _pay_out(self, caller: str, receiver: str, owner: str, assets: int, shares: int) -> None:
        if caller.lower() != owner.lower():
            raise AuthorizationError(f"지분 소유자만 인출할 수 있습니다: {caller} != {owner}")
        if assets < 0 or shares < 0:
            raise ValueError(f"수량은 음수일 수 없습니다: assets={assets}, shares={shares}")

        balance = self.shares.balance_of(owner)
        if shares > balance:
            raise InsufficientShares(f"지분 부족: 요청 {shares}, 보유 {balance} ({owner})")

        deadline = int(self.clock()) + self.config.deadline_buffer
        report = self.fulfillment.ensure(assets, shares, self.shares.total_supply, deadline)

        self.shares.burn(owner, shares)
        self.balances.debit_token(self.config.asset_is_token0, assets)
        self.last_fulfillment = report
        logger.info(
            "인출: %s -> %s assets=%d shares=%d (유동성 -%d, 스왑 %d -> %d)",
            owner, receiver, assets, shares,
            report.liquidity_removed, report.swapped_in, report.swapped_out,
        )
