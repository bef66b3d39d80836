"""
볼트 오류 계층

모든 오류는 현재 작업 전체를 중단시키며 (부분 반영 없음),
재시도 정책은 호출자에게 맡깁니다.
"""


class VaultError(Exception):
    """볼트 오류 최상위 클래스"""
    pass


class DomainRangeError(VaultError, ValueError):
    """틱 또는 sqrtPriceX96이 표현 가능한 범위를 벗어남"""
    pass


class StateError(VaultError):
    """포지션/지분 원장의 상태와 맞지 않는 요청"""
    pass


class AlreadyActive(StateError):
    """이미 포지션 식별자가 존재함"""
    pass


class NoActivePosition(StateError):
    """포지션이 생성된 적 없음"""
    pass


class InsufficientLiquidity(StateError):
    """보유 유동성보다 많은 양을 제거하려 함"""
    pass


class InsufficientShares(StateError):
    """보유 지분보다 많은 양을 소각하려 함"""
    pass


class ReentrantCall(StateError):
    """상태 변경 작업 도중 재진입 시도"""
    pass


class PreconditionError(VaultError):
    """오라클 이력 부족, 잘못된 설정 등 사전조건 위반"""
    pass


class InsufficientHistory(PreconditionError):
    """TWAP 윈도우를 덮을 만큼 오래된 관측값이 없음"""
    pass


class InvalidConfiguration(PreconditionError):
    """볼트 설정 값이 유효하지 않음"""
    pass


class InsufficientAssets(VaultError):
    """요청한 자산을 조달할 수 없음"""
    pass


class AuthorizationError(VaultError):
    """호출자에게 필요한 권한이 없음"""
    pass


class CollaboratorError(VaultError):
    """외부 협력자(포지션 매니저, 스왑 라우터) 실패"""
    pass


class DeadlineExpired(CollaboratorError):
    """deadline이 지난 요청"""
    pass


class SlippageExceeded(CollaboratorError):
    """최소 수량 조건을 만족하지 못함"""
    pass
