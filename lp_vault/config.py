"""
Vault configuration

초기화 시 한 번 생성하는 불변 설정 값.
환경 변수 또는 .env 파일에서 로드할 수 있습니다.
"""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .constants import FEE_TIERS
from .errors import InvalidConfiguration


class VaultConfig(BaseModel):
    """볼트 설정

    - asset: 단위 자산 (token0 또는 token1). 예치/인출/NAV 모두 이 토큰 기준
    - twap_period: NAV 평가용 TWAP 윈도우 초기값 (초)
    - range_width_bps: 포지션 생성 시 기본 범위 폭
    - deadline_buffer: 인출 중 유동성 제거에 쓰는 deadline 여유 (초)
    """
    model_config = ConfigDict(frozen=True)

    name: str = "LP Provider Vault"
    symbol: str = "LPV"

    vault_address: str
    pool: str
    token0: str
    token1: str
    asset: str
    position_manager: str
    swap_router: str
    fee: int = 3000

    owner: str
    manager: Optional[str] = None

    twap_period: int = Field(default=1800, gt=0)
    range_width_bps: int = Field(default=1000, gt=0)
    deadline_buffer: int = Field(default=600, ge=0)

    @field_validator(
        "vault_address", "pool", "token0", "token1", "asset",
        "position_manager", "swap_router", "owner", "manager",
    )
    @classmethod
    def normalize_address(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip().lower()
        if not value:
            raise ValueError("주소가 비어 있습니다")
        return value

    @field_validator("fee")
    @classmethod
    def check_fee_tier(cls, value: int) -> int:
        if value not in FEE_TIERS:
            raise ValueError(f"지원하지 않는 수수료 티어: {value}")
        return value

    @model_validator(mode="after")
    def check_tokens(self) -> "VaultConfig":
        if self.token0 == self.token1:
            raise ValueError("token0과 token1이 같습니다")
        if self.asset not in (self.token0, self.token1):
            raise ValueError(f"단위 자산은 token0 또는 token1이어야 합니다: {self.asset}")
        return self

    @property
    def asset_is_token0(self) -> bool:
        return self.asset == self.token0

    @property
    def other_token(self) -> str:
        """단위 자산이 아닌 쪽 토큰"""
        return self.token1 if self.asset_is_token0 else self.token0

    @property
    def initial_manager(self) -> str:
        return self.manager or self.owner


# 환경 변수 이름 -> 설정 필드
_ENV_FIELDS = {
    "VAULT_NAME": "name",
    "VAULT_SYMBOL": "symbol",
    "VAULT_ADDRESS": "vault_address",
    "POOL_ADDRESS": "pool",
    "TOKEN0_ADDRESS": "token0",
    "TOKEN1_ADDRESS": "token1",
    "ASSET_ADDRESS": "asset",
    "POSITION_MANAGER_ADDRESS": "position_manager",
    "SWAP_ROUTER_ADDRESS": "swap_router",
    "POOL_FEE": "fee",
    "VAULT_OWNER": "owner",
    "VAULT_MANAGER": "manager",
    "TWAP_PERIOD": "twap_period",
    "RANGE_WIDTH_BPS": "range_width_bps",
    "DEADLINE_BUFFER": "deadline_buffer",
}

_REQUIRED_ENV = (
    "VAULT_ADDRESS",
    "POOL_ADDRESS",
    "TOKEN0_ADDRESS",
    "TOKEN1_ADDRESS",
    "POSITION_MANAGER_ADDRESS",
    "SWAP_ROUTER_ADDRESS",
    "VAULT_OWNER",
)


def load_config(env_file: Optional[str] = None) -> VaultConfig:
    """환경 변수에서 볼트 설정 로드

    .env 파일이 있으면 먼저 읽습니다 (이미 설정된 환경 변수가 우선).
    ASSET_ADDRESS가 없으면 token1을 단위 자산으로 사용합니다.

    Args:
        env_file: .env 파일 경로. None이면 현재 디렉토리부터 탐색

    Returns:
        VaultConfig

    Raises:
        InvalidConfiguration: 필수 값이 없거나 검증에 실패한 경우
    """
    load_dotenv(env_file)

    missing = [name for name in _REQUIRED_ENV if not os.getenv(name, "").strip()]
    if missing:
        raise InvalidConfiguration(f"필수 환경 변수가 없습니다: {', '.join(missing)}")

    values = {}
    for env_name, field in _ENV_FIELDS.items():
        raw = os.getenv(env_name, "").strip()
        if raw:
            values[field] = raw
    values.setdefault("asset", values["token1"])

    try:
        return VaultConfig(**values)
    except ValidationError as exc:
        raise InvalidConfiguration(f"볼트 설정이 유효하지 않습니다: {exc}") from exc
