"""
Core layer for LP Vault

- ledger: 단일 포지션 상태 머신
- nav: TWAP 기반 순자산 평가
- withdrawal: 인출 자산 조달 알고리즘
- shares: 지분 원장과 지분 ⇄ 자산 변환
- vault: 역할/재진입 가드/원자성을 묶은 진입점
"""

from .atomic import atomic
from .balances import IdleBalances
from .guards import AccessControl, ReentrancyGuard, Role
from .ledger import PositionLedger
from .nav import NAVAccountant
from .shares import ShareAccounting, ShareLedger
from .withdrawal import WithdrawalFulfillment
from .vault import LpProviderVault, entrypoint
