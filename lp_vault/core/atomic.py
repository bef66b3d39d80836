"""
Atomic unit of work

상태 변경 작업 하나를 분할 불가능한 단위로 실행합니다.
진입 시 모든 참여자의 스냅샷을 찍고, 예외가 발생하면 역순으로 복원한 뒤
예외를 다시 발생시킵니다.
"""

from contextlib import contextmanager
from typing import Iterator, List, Sequence, Tuple

from ..data.interfaces import Journaled


@contextmanager
def atomic(participants: Sequence[Journaled]) -> Iterator[None]:
    """작업 단위 컨텍스트

    Args:
        participants: snapshot()/restore()를 구현한 상태 보유자들

    사용법:
        with atomic([ledger, balances, shares]):
            ledger.decrease(...)
            shares.burn(...)
    """
    saved: List[Tuple[Journaled, object]] = [(p, p.snapshot()) for p in participants]
    try:
        yield
    except BaseException:
        for participant, state in reversed(saved):
            participant.restore(state)
        raise
