"""
공용 fixture

SimulatedPool 하나가 오라클/포지션 매니저/스왑 라우터 역할을 모두 맡고,
볼트의 시계는 풀 시간을 따릅니다.
"""

import pytest

from ..config import VaultConfig
from ..constants import Q96
from ..core.vault import LpProviderVault
from ..data.pool import SimulatedPool

TOKEN0 = "0x0555e30da8f98308edb960aa94c0db47230d2b9c"  # WBTC
TOKEN1 = "0xe15fc38f6d8c56af07bbcbe3baf5708a2bf42392"  # USDC (단위 자산)
POOL = "0xe62fd4661c85e126744cc335e9bca8ae3d5d19d1"
VAULT = "0x8afa38dcbdff84bc4f2a30d3c6248f2fc5799902"
OWNER = "0xb7b1de26b87bde4bbf9087806542da879ebda403"
MANAGER = "0x00000000000000000000000000000000000000aa"
USER = "0x00000000000000000000000000000000000000bb"
OTHER = "0x00000000000000000000000000000000000000cc"

START_TIME = 1_757_000_000


def make_config(**overrides) -> VaultConfig:
    values = dict(
        vault_address=VAULT,
        pool=POOL,
        token0=TOKEN0,
        token1=TOKEN1,
        asset=TOKEN1,
        position_manager="0xa7fdcbe645d6b2b98639ebacbc347e2b575f6f70",
        swap_router="0x11da6463d6cb5a03411dbf5ab6f6bc3997ac7428",
        fee=3000,
        owner=OWNER,
        manager=MANAGER,
    )
    values.update(overrides)
    return VaultConfig(**values)


def make_pool(history: int = 3600, sqrt_price_x96: int = Q96) -> SimulatedPool:
    pool = SimulatedPool(TOKEN0, TOKEN1, fee=3000, sqrt_price_x96=sqrt_price_x96, now=START_TIME)
    pool.advance_time(history)
    return pool


@pytest.fixture
def config() -> VaultConfig:
    return make_config()


@pytest.fixture
def pool() -> SimulatedPool:
    """틱 0 (가격 1), 1시간 관측 이력"""
    return make_pool()


@pytest.fixture
def vault(config, pool) -> LpProviderVault:
    return LpProviderVault(config, pool, pool, pool, clock=lambda: pool.now)


@pytest.fixture
def funded_vault(vault, pool) -> LpProviderVault:
    """USER가 1,000,000 예치, 절반을 token0으로 스왑, 200,000씩 포지션 생성"""
    vault.deposit(1_000_000, USER, caller=USER)
    vault.swap_tokens_exact_in(False, 500_000, 0, caller=OWNER)
    vault.create_position(200_000, 200_000, 0, 0, pool.now + 600, caller=MANAGER)
    return vault
