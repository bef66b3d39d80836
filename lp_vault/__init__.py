"""
Concentrated Liquidity LP Vault

예치자 풀의 자금으로 단일 집중화 유동성 포지션을 운용하는 볼트 라이브러리.
틱 수학, 유동성 평가, 포지션 원장, TWAP 기반 NAV 계산,
인출 시 자산 조달 알고리즘을 온체인 수준 정밀도로 구현.
"""

__version__ = "0.1.0"

from .constants import Q96, Q192, MIN_TICK, MAX_TICK, FEE_TIERS, TICK_SPACINGS
from .config import VaultConfig, load_config
from .core.vault import LpProviderVault
