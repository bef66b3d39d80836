"""
Guards - 재진입 방지와 역할 권한

- ReentrancyGuard: 상태 변경 작업이 진행 중일 때 재진입을 막는 플래그
- AccessControl: owner / manager 역할 검사
"""

from enum import Enum
from typing import Dict

from ..errors import AuthorizationError, ReentrantCall


class Role(str, Enum):
    """볼트 역할"""
    OWNER = "owner"
    MANAGER = "manager"


class ReentrancyGuard:
    """상호 배제 플래그

    with 블록 진입 시 획득하고, 성공/실패와 관계없이 블록을 빠져나가면 해제합니다.
    """

    def __init__(self):
        self._entered = False

    @property
    def locked(self) -> bool:
        return self._entered

    def __enter__(self) -> "ReentrancyGuard":
        if self._entered:
            raise ReentrantCall("상태 변경 작업이 이미 진행 중입니다")
        self._entered = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._entered = False


class AccessControl:
    """owner / manager 권한 보유자

    역할마다 주소 하나를 가지며, 주소는 소문자로 비교합니다.
    """

    def __init__(self, owner: str, manager: str):
        self._holders: Dict[Role, str] = {
            Role.OWNER: owner.lower(),
            Role.MANAGER: manager.lower(),
        }

    @property
    def owner(self) -> str:
        return self._holders[Role.OWNER]

    @property
    def manager(self) -> str:
        return self._holders[Role.MANAGER]

    def has_role(self, caller: str, role: Role) -> bool:
        return caller.lower() == self._holders[role]

    def require(self, caller: str, role: Role) -> None:
        """권한 검사

        Raises:
            AuthorizationError: caller가 해당 역할이 아닌 경우
        """
        if not self.has_role(caller, role):
            raise AuthorizationError(f"{role.value} 권한이 필요합니다: {caller}")

    def set_manager(self, manager: str) -> None:
        if not manager or not manager.strip():
            raise AuthorizationError("manager 주소가 비어 있습니다")
        self._holders[Role.MANAGER] = manager.strip().lower()

    def snapshot(self) -> Dict[Role, str]:
        return dict(self._holders)

    def restore(self, state: Dict[Role, str]) -> None:
        self._holders = dict(state)
