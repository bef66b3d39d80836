"""
Data layer for LP Vault

협력자 인터페이스, 데이터 타입, 인메모리 풀 시뮬레이터
"""

from .types import (
    LedgerState,
    PriceState,
    PositionState,
    Observation,
    ValuationSnapshot,
    FulfillmentReport,
    MintResult,
    IncreaseResult,
    TokenAmounts,
)
from .interfaces import PositionManager, SwapRouter, PriceOracle, Journaled
from .pool import SimulatedPool
