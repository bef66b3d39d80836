"""
Full Math - 정수 곱셈/나눗셈 헬퍼

Solidity FullMath의 mulDiv 계열. Python 정수는 오버플로우가 없으므로
반올림 방향만 명시적으로 다룹니다.
"""


def mul_div(a: int, b: int, denominator: int) -> int:
    """(a * b) / denominator 내림"""
    return (a * b) // denominator


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """(a * b) / denominator 올림"""
    result = (a * b) // denominator
    if (a * b) % denominator > 0:
        result += 1
    return result


def div_rounding_up(numerator: int, denominator: int) -> int:
    """numerator / denominator 올림"""
    result = numerator // denominator
    if numerator % denominator > 0:
        result += 1
    return result
