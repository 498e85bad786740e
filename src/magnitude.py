import math


def order_of_magnitude(number: float) -> float:
    """絶対値の桁(10のべき乗)を返す

    例: 2145 -> 1000, 0.0045 -> 0.001

    0の対数は定義できないため、0は1として扱う。
    """
    if not math.isfinite(number):
        raise ValueError(f"Cannot take the order of magnitude of {number}.")
    if number == 0:
        return 1.0
    return 10.0 ** math.floor(math.log10(abs(number)))


def compensation_factor(*values: float) -> float:
    """浮動小数点の誤差を抑えるための倍率

    最も小さい桁の値が整数になるように全体を10のべき乗倍する。
    """
    return 1 / min(order_of_magnitude(v) for v in values)


def compensated_divide(dividend: float, divisor: float) -> float:
    """桁を揃えてから割り算する

    0.3 / 0.1 == 2.9999999999999996 のような誤差を避ける。
    """
    factor = compensation_factor(dividend, divisor)
    return (dividend * factor) / (divisor * factor)
