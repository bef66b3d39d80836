"""
Oracle Math 테스트

누적 틱에서 TWAP 평균 틱을 구하는 함수를 테스트합니다.
"""

import pytest

from ..errors import PreconditionError
from ..math.oracle_math import mean_tick_from_cumulatives


class TestMeanTick:
    """mean_tick_from_cumulatives 테스트"""

    def test_exact_division(self):
        assert mean_tick_from_cumulatives([1000, 1000 + 60 * 1800], 1800) == 60

    def test_positive_truncates_down(self):
        assert mean_tick_from_cumulatives([0, 7], 2) == 3

    def test_negative_rounds_toward_negative_infinity(self):
        """음수 델타가 나누어떨어지지 않으면 0 방향 절사보다 1 작음"""
        assert mean_tick_from_cumulatives([0, -7], 2) == -4

    def test_negative_exact_division(self):
        assert mean_tick_from_cumulatives([500, 500 - 1800 * 25], 1800) == -25

    def test_zero_window(self):
        """윈도우 0은 설정 오류"""
        with pytest.raises(PreconditionError):
            mean_tick_from_cumulatives([0, 0], 0)

    def test_wrong_observation_count(self):
        with pytest.raises(PreconditionError):
            mean_tick_from_cumulatives([0], 60)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
