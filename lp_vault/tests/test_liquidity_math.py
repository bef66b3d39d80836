"""
Liquidity Math 테스트

유동성 계산 함수들을 테스트합니다.
"""

import pytest

from ..constants import Q96
from ..math.liquidity_math import (
    get_amount0_delta,
    get_amount1_delta,
    get_liquidity_for_amount0,
    get_liquidity_for_amount1,
    get_liquidity_for_amounts,
    get_amounts_for_liquidity,
)
from ..math.tick_math import get_sqrt_ratio_at_tick


RANGES = [(-1020, 1020), (0, 100), (-70560, -69480), (-887220, 887220)]


class TestGetAmountDeltas:
    """get_amount0_delta, get_amount1_delta 테스트"""

    def test_amount_deltas_basic(self):
        sqrt_a = get_sqrt_ratio_at_tick(-600)
        sqrt_b = get_sqrt_ratio_at_tick(600)
        assert get_amount0_delta(sqrt_a, sqrt_b, 10**18) > 0
        assert get_amount1_delta(sqrt_a, sqrt_b, 10**18) > 0

    def test_amount_deltas_swap_order(self):
        """sqrt 순서가 바뀌어도 결과 동일"""
        sqrt_a = get_sqrt_ratio_at_tick(-600)
        sqrt_b = get_sqrt_ratio_at_tick(600)
        assert get_amount0_delta(sqrt_a, sqrt_b, 10**18) == get_amount0_delta(sqrt_b, sqrt_a, 10**18)
        assert get_amount1_delta(sqrt_a, sqrt_b, 10**18) == get_amount1_delta(sqrt_b, sqrt_a, 10**18)

    def test_round_up_not_below_round_down(self):
        """올림 결과는 내림 결과보다 최대 1 큼"""
        sqrt_a = get_sqrt_ratio_at_tick(-17)
        sqrt_b = get_sqrt_ratio_at_tick(333)
        down = get_amount0_delta(sqrt_a, sqrt_b, 123456789)
        up = get_amount0_delta(sqrt_a, sqrt_b, 123456789, round_up=True)
        assert down <= up <= down + 1

    def test_amount_deltas_zero_liquidity(self):
        sqrt_a = get_sqrt_ratio_at_tick(-600)
        sqrt_b = get_sqrt_ratio_at_tick(600)
        assert get_amount0_delta(sqrt_a, sqrt_b, 0) == 0
        assert get_amount1_delta(sqrt_a, sqrt_b, 0) == 0


class TestGetLiquidityForAmounts:
    """get_liquidity_for_amounts 테스트"""

    def test_below_range(self):
        """가격이 범위 아래일 때: token0만 사용"""
        sqrt_current = get_sqrt_ratio_at_tick(-900)
        sqrt_a = get_sqrt_ratio_at_tick(-600)
        sqrt_b = get_sqrt_ratio_at_tick(600)

        liquidity = get_liquidity_for_amounts(sqrt_current, sqrt_a, sqrt_b, 10**18, 10**18)
        assert liquidity == get_liquidity_for_amount0(sqrt_a, sqrt_b, 10**18)

    def test_above_range(self):
        """가격이 범위 위일 때: token1만 사용"""
        sqrt_current = get_sqrt_ratio_at_tick(900)
        sqrt_a = get_sqrt_ratio_at_tick(-600)
        sqrt_b = get_sqrt_ratio_at_tick(600)

        liquidity = get_liquidity_for_amounts(sqrt_current, sqrt_a, sqrt_b, 10**18, 10**18)
        assert liquidity == get_liquidity_for_amount1(sqrt_a, sqrt_b, 10**18)

    def test_in_range(self):
        """가격이 범위 내일 때: 작은 쪽 제약"""
        sqrt_current = get_sqrt_ratio_at_tick(120)
        sqrt_a = get_sqrt_ratio_at_tick(-600)
        sqrt_b = get_sqrt_ratio_at_tick(600)

        liquidity = get_liquidity_for_amounts(sqrt_current, sqrt_a, sqrt_b, 10**18, 10**18)
        expected = min(
            get_liquidity_for_amount0(sqrt_current, sqrt_b, 10**18),
            get_liquidity_for_amount1(sqrt_a, sqrt_current, 10**18),
        )
        assert liquidity == expected

    def test_identical_bounds(self):
        """경계가 같으면 유동성 0"""
        sqrt_a = get_sqrt_ratio_at_tick(10)
        assert get_liquidity_for_amount0(sqrt_a, sqrt_a, 10**18) == 0
        assert get_liquidity_for_amount1(sqrt_a, sqrt_a, 10**18) == 0


class TestGetAmountsForLiquidity:
    """get_amounts_for_liquidity 테스트"""

    @pytest.mark.parametrize("tick_lower,tick_upper", RANGES)
    def test_below_range_all_token0(self, tick_lower, tick_upper):
        """현재 가격 <= 하한: (X, 0)"""
        sqrt_a = get_sqrt_ratio_at_tick(tick_lower)
        sqrt_b = get_sqrt_ratio_at_tick(tick_upper)

        for sqrt_current in (sqrt_a, sqrt_a - 1):
            amount0, amount1 = get_amounts_for_liquidity(sqrt_current, sqrt_a, sqrt_b, 10**18)
            assert amount0 > 0
            assert amount1 == 0

    @pytest.mark.parametrize("tick_lower,tick_upper", RANGES)
    def test_above_range_all_token1(self, tick_lower, tick_upper):
        """현재 가격 >= 상한: (0, Y)"""
        sqrt_a = get_sqrt_ratio_at_tick(tick_lower)
        sqrt_b = get_sqrt_ratio_at_tick(tick_upper)

        for sqrt_current in (sqrt_b, sqrt_b + 1):
            amount0, amount1 = get_amounts_for_liquidity(sqrt_current, sqrt_a, sqrt_b, 10**18)
            assert amount0 == 0
            assert amount1 > 0

    def test_in_range(self):
        """가격이 범위 내일 때: 둘 다 반환"""
        sqrt_current = get_sqrt_ratio_at_tick(120)
        sqrt_a = get_sqrt_ratio_at_tick(-600)
        sqrt_b = get_sqrt_ratio_at_tick(600)

        amount0, amount1 = get_amounts_for_liquidity(sqrt_current, sqrt_a, sqrt_b, 10**18)
        assert amount0 > 0
        assert amount1 > 0

    def test_reversed_bounds(self):
        """경계 순서가 바뀌어도 결과 동일"""
        sqrt_current = get_sqrt_ratio_at_tick(120)
        sqrt_a = get_sqrt_ratio_at_tick(-600)
        sqrt_b = get_sqrt_ratio_at_tick(600)
        assert get_amounts_for_liquidity(sqrt_current, sqrt_a, sqrt_b, 10**18) == \
            get_amounts_for_liquidity(sqrt_current, sqrt_b, sqrt_a, 10**18)

    @pytest.mark.parametrize("tick_current", [-2000, -500, 0, 700, 2000])
    def test_linear_in_liquidity(self, tick_current):
        """유동성을 두 배로 하면 수량도 두 배 (내림 오차 1 이내)"""
        sqrt_current = get_sqrt_ratio_at_tick(tick_current)
        sqrt_a = get_sqrt_ratio_at_tick(-1020)
        sqrt_b = get_sqrt_ratio_at_tick(1020)
        liquidity = 10**15 + 12345

        single = get_amounts_for_liquidity(sqrt_current, sqrt_a, sqrt_b, liquidity)
        double = get_amounts_for_liquidity(sqrt_current, sqrt_a, sqrt_b, 2 * liquidity)
        for one, two in zip(single, double):
            assert 0 <= two - 2 * one <= 1

    def test_never_overstates(self):
        """평가 수량은 민트에 필요한 수량(올림)을 넘지 않음"""
        sqrt_current = get_sqrt_ratio_at_tick(37)
        sqrt_a = get_sqrt_ratio_at_tick(-1020)
        sqrt_b = get_sqrt_ratio_at_tick(1020)
        liquidity = 987654321

        amount0, amount1 = get_amounts_for_liquidity(sqrt_current, sqrt_a, sqrt_b, liquidity)
        assert amount0 <= get_amount0_delta(sqrt_current, sqrt_b, liquidity, round_up=True)
        assert amount1 <= get_amount1_delta(sqrt_a, sqrt_current, liquidity, round_up=True)

    def test_scenario_tick_0_small_liquidity(self):
        """틱 0, 범위 [-1020, 1020], L = 1000 이면 양쪽 모두 양수"""
        amount0, amount1 = get_amounts_for_liquidity(
            Q96, get_sqrt_ratio_at_tick(-1020), get_sqrt_ratio_at_tick(1020), 1000
        )
        assert amount0 > 0
        assert amount1 > 0

    def test_roundtrip(self):
        """유동성 -> 토큰 -> 유동성 왕복"""
        sqrt_current = get_sqrt_ratio_at_tick(120)
        sqrt_a = get_sqrt_ratio_at_tick(-600)
        sqrt_b = get_sqrt_ratio_at_tick(600)
        liquidity_in = 10**18

        amount0, amount1 = get_amounts_for_liquidity(sqrt_current, sqrt_a, sqrt_b, liquidity_in)
        result_liquidity = get_liquidity_for_amounts(sqrt_current, sqrt_a, sqrt_b, amount0, amount1)

        assert abs(result_liquidity - liquidity_in) < liquidity_in * 0.01


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
