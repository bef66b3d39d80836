"""
Tick Math 테스트

tick_math.py의 함수들을 테스트합니다.
경계값과 1.0001^(tick/2) 공식으로 정확도를 검증합니다.
"""

import pytest

from ..constants import Q96, MIN_TICK, MAX_TICK, MIN_SQRT_RATIO, MAX_SQRT_RATIO
from ..errors import DomainRangeError
from ..math.tick_math import (
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    floor_to_spacing,
    ceil_to_spacing,
    usable_tick_bounds,
    range_delta_for_bps,
    ticks_for_range,
)


ROUNDTRIP_TICKS = sorted(
    set(range(MIN_TICK, MAX_TICK, 7919)) | {MIN_TICK, MIN_TICK + 1, -1, 0, 1, MAX_TICK - 1}
)


class TestGetSqrtRatioAtTick:
    """get_sqrt_ratio_at_tick 테스트"""

    def test_min_tick(self):
        """최소 틱에서의 sqrtPrice"""
        assert get_sqrt_ratio_at_tick(MIN_TICK) == MIN_SQRT_RATIO

    def test_max_tick(self):
        """최대 틱에서의 sqrtPrice"""
        assert get_sqrt_ratio_at_tick(MAX_TICK) == MAX_SQRT_RATIO

    def test_tick_0(self):
        """틱 0은 정확히 2^96 (가격 1)"""
        assert get_sqrt_ratio_at_tick(0) == Q96

    @pytest.mark.parametrize("tick", [-50000, -1, 1, 1000, 50000])
    def test_matches_float_formula(self, tick):
        """sqrt(1.0001^tick) * 2^96 와 비교"""
        result = get_sqrt_ratio_at_tick(tick) / Q96
        expected = 1.0001 ** (tick / 2)
        assert abs(result - expected) / expected < 1e-12

    def test_monotonic(self):
        """틱이 커지면 sqrtPrice도 커짐"""
        assert get_sqrt_ratio_at_tick(-100) < Q96 < get_sqrt_ratio_at_tick(100)

    def test_invalid_tick_too_low(self):
        """유효 범위를 벗어난 틱 (너무 낮음)"""
        with pytest.raises(DomainRangeError):
            get_sqrt_ratio_at_tick(MIN_TICK - 1)

    def test_invalid_tick_too_high(self):
        """유효 범위를 벗어난 틱은 ValueError로도 잡힘"""
        with pytest.raises(ValueError):
            get_sqrt_ratio_at_tick(MAX_TICK + 1)


class TestGetTickAtSqrtRatio:
    """get_tick_at_sqrt_ratio 테스트"""

    def test_min_sqrt_ratio(self):
        """최소 sqrtRatio에서의 틱"""
        assert get_tick_at_sqrt_ratio(MIN_SQRT_RATIO) == MIN_TICK

    def test_max_sqrt_ratio_minus_one(self):
        """최대 sqrtRatio 직전은 MAX_TICK - 1"""
        assert get_tick_at_sqrt_ratio(MAX_SQRT_RATIO - 1) == MAX_TICK - 1

    def test_sqrt_ratio_at_tick_0(self):
        """sqrtPrice 2^96에서의 틱"""
        assert get_tick_at_sqrt_ratio(Q96) == 0

    @pytest.mark.parametrize("tick", ROUNDTRIP_TICKS)
    def test_roundtrip(self, tick):
        """틱 -> sqrtPrice -> 틱 왕복"""
        assert get_tick_at_sqrt_ratio(get_sqrt_ratio_at_tick(tick)) == tick

    @pytest.mark.parametrize("tick", [-50000, -1001, -1, 0, 59, 1000, 50000])
    def test_floor_semantics(self, tick):
        """두 틱 경계 사이의 가격은 아래 틱으로 내림"""
        lower = get_sqrt_ratio_at_tick(tick)
        upper = get_sqrt_ratio_at_tick(tick + 1)
        assert get_tick_at_sqrt_ratio(lower + 1) == tick
        assert get_tick_at_sqrt_ratio(upper - 1) == tick

    def test_invalid_sqrt_ratio_too_low(self):
        """유효 범위를 벗어난 sqrtRatio (너무 낮음)"""
        with pytest.raises(DomainRangeError):
            get_tick_at_sqrt_ratio(MIN_SQRT_RATIO - 1)

    def test_invalid_sqrt_ratio_max(self):
        """MAX_SQRT_RATIO 자체는 범위 밖"""
        with pytest.raises(DomainRangeError):
            get_tick_at_sqrt_ratio(MAX_SQRT_RATIO)


class TestTickGrid:
    """틱 그리드 헬퍼 테스트"""

    def test_floor_to_spacing(self):
        assert floor_to_spacing(-1000, 60) == -1020
        assert floor_to_spacing(1000, 60) == 960
        assert floor_to_spacing(-60, 60) == -60
        assert floor_to_spacing(0, 60) == 0

    def test_ceil_to_spacing(self):
        assert ceil_to_spacing(1000, 60) == 1020
        assert ceil_to_spacing(-1000, 60) == -960
        assert ceil_to_spacing(120, 60) == 120

    def test_invalid_spacing(self):
        with pytest.raises(DomainRangeError):
            floor_to_spacing(10, 0)

    def test_usable_tick_bounds(self):
        assert usable_tick_bounds(60) == (-887220, 887220)
        assert usable_tick_bounds(1) == (MIN_TICK, MAX_TICK)


class TestTicksForRange:
    """ticks_for_range 테스트 (tick ≈ bps 근사)"""

    def test_delta_is_bps(self):
        """1 bps ≈ 1 틱"""
        assert range_delta_for_bps(1000) == 1000

    def test_invalid_width(self):
        with pytest.raises(DomainRangeError):
            range_delta_for_bps(0)

    def test_centered_at_tick_0(self):
        """틱 0, 간격 60, delta 1000 -> [-1020, 1020]"""
        assert ticks_for_range(0, 60, 1000) == (-1020, 1020)

    def test_off_grid_current_tick(self):
        """현재 틱이 그리드 밖이어도 바깥쪽으로 맞춤"""
        assert ticks_for_range(-70013, 60, 500) == (-70560, -69480)

    def test_clamped_to_usable_ticks(self):
        """범위가 최소 틱을 넘으면 사용 가능한 틱으로 제한"""
        tick_lower, tick_upper = ticks_for_range(-887000, 60, 1000)
        assert tick_lower == -887220
        assert tick_upper == -885960


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
