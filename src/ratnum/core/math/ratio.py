"""
Ratio — точные операции над парами (numerator, denominator)

Чистые функции без состояния. Вход может быть несокращённым и со
знаменателем любого знака; результат — новая пара, сокращение и
нормализацию знака выполняет фабрика Rat.

Операции, которые в общем случае иррациональны (дробная степень, корень,
ln, exp, log), сначала пытаются получить точный результат и только затем
используют приближение высокоточного движка (bigdecimal), переводя его
обратно в дробь.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. add/subtract/multiply/divide никогда не сокращают результат
2. Целая степень вычисляется точно (целые Python произвольной длины)
3. log рационален ровно тогда, когда это выдаёт int_log (малые значения)
"""

import math
from decimal import Decimal
from typing import Final, Optional, Tuple

from ratnum.core.config import SETTINGS
from ratnum.core.contracts import require_instance, require_not_equal, require_true
from ratnum.core.errors import DomainViolation, describe_int, describe_ratio
from ratnum.core.math import bigdecimal
from ratnum.core.math.primes import int_log

Ratio = Tuple[int, int]

MAX_INT_TO_FACTOR: Final[int] = SETTINGS.max_int_to_factor

ZERO: Final[Ratio] = (0, 1)
ONE: Final[Ratio] = (1, 1)


# =============================================================================
# СОКРАЩЕНИЕ
# =============================================================================


def reduce(numerator: int, denominator: int) -> Ratio:
    """
    Делит числитель и знаменатель на их НОД. Знак не меняется.

    Examples:
        >>> reduce(6, 8)
        (3, 4)
        >>> reduce(6, -8)
        (3, -4)
        >>> reduce(0, 5)
        (0, 1)
    """
    require_not_equal(denominator, 0, "denominator")
    divisor = math.gcd(numerator, denominator)
    return numerator // divisor, denominator // divisor


def canonical(numerator: int, denominator: int) -> Ratio:
    """Сокращённая пара со знаком в числителе (denominator > 0)"""
    numerator, denominator = reduce(numerator, denominator)
    if denominator < 0:
        return -numerator, -denominator
    return numerator, denominator


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


def add(a_numerator: int, a_denominator: int, b_numerator: int, b_denominator: int) -> Ratio:
    """a/b + c/d = (a*d + c*b) / (b*d)"""
    return (
        a_numerator * b_denominator + b_numerator * a_denominator,
        a_denominator * b_denominator,
    )


def subtract(
    a_numerator: int, a_denominator: int, b_numerator: int, b_denominator: int
) -> Ratio:
    """a/b - c/d = (a*d - c*b) / (b*d)"""
    return (
        a_numerator * b_denominator - b_numerator * a_denominator,
        a_denominator * b_denominator,
    )


def multiply(
    a_numerator: int, a_denominator: int, b_numerator: int, b_denominator: int
) -> Ratio:
    """a/b * c/d = (a*c) / (b*d)"""
    return a_numerator * b_numerator, a_denominator * b_denominator


def divide(a_numerator: int, a_denominator: int, b_numerator: int, b_denominator: int) -> Ratio:
    """
    a/b / c/d = (a*d) / (b*c).

    Raises:
        DomainViolation: Если c == 0
    """
    if b_numerator == 0:
        raise DomainViolation(
            f"Cannot divide {describe_ratio(a_numerator, a_denominator)} by zero "
            f"({describe_ratio(b_numerator, b_denominator)})"
        )
    return a_numerator * b_denominator, a_denominator * b_numerator


# =============================================================================
# СТЕПЕНИ И КОРНИ
# =============================================================================


def _from_decimal(value: Decimal) -> Ratio:
    return bigdecimal.fraction(value)


def _exact_int_root(value: int, n: int) -> Optional[int]:
    # Целочисленный корень методом Ньютона; None если корень не целый
    if value < 0 and n % 2 == 0:
        return None
    magnitude = abs(value)
    if magnitude <= 1:
        return value
    if n == 2:
        root = math.isqrt(magnitude)
    else:
        root = 1 << -(-magnitude.bit_length() // n)
        while True:
            next_root = ((n - 1) * root + magnitude // root ** (n - 1)) // n
            if next_root >= root:
                break
            root = next_root
    if root**n != magnitude:
        return None
    return -root if value < 0 else root


def _root(value: int, n: int) -> Ratio:
    exact = _exact_int_root(value, n)
    if exact is not None:
        return exact, 1
    return _from_decimal(bigdecimal.nth_root(value, n))


def _root_quotient(numerator: int, denominator: int, n: int) -> Ratio:
    # n-й корень числителя и знаменателя по отдельности, затем сборка дроби
    num_root_numerator, num_root_denominator = _root(numerator, n)
    den_root_numerator, den_root_denominator = _root(denominator, n)
    return (
        num_root_numerator * den_root_denominator,
        num_root_denominator * den_root_numerator,
    )


def pow(
    base_numerator: int,
    base_denominator: int,
    exponent_numerator: int,
    exponent_denominator: int,
) -> Ratio:
    """
    (a/b)^(c/d).

    Целый показатель вычисляется точно. Дробный: числитель и знаменатель
    возводятся в степень |c| точно, затем из каждого извлекается корень
    степени d (точно, если корень целый или конечная дробь; иначе
    приближение со 100 значащими цифрами). Отрицательный показатель
    переворачивает дробь.

    Args:
        base_numerator, base_denominator: Основание
        exponent_numerator, exponent_denominator: Показатель

    Returns:
        Несокращённая пара

    Raises:
        DomainViolation: 0^0; отрицательное основание при чётном
            знаменателе показателя (в несократимом виде)
        MagnitudeOverflow: Показатель слишком велик

    Examples:
        >>> pow(-8, 27, -2, 3)
        (9, 4)
        >>> pow(0, 1, -1, 1)
        (0, 1)
    """
    base_numerator, base_denominator = canonical(base_numerator, base_denominator)
    exponent_numerator, exponent_denominator = canonical(exponent_numerator, exponent_denominator)
    if base_numerator == 0 and exponent_numerator == 0:
        raise DomainViolation("Either the base or exponent must be nonzero")
    if base_numerator == 0:
        return ZERO
    if exponent_numerator == 0:
        return ONE
    if base_numerator == base_denominator:
        return ONE
    if base_numerator < 0 and exponent_denominator % 2 == 0:
        raise DomainViolation(
            f"Base {describe_ratio(base_numerator, base_denominator)} is negative, but exponent "
            f"{describe_ratio(exponent_numerator, exponent_denominator)} has an even denominator"
        )
    negative_exponent = exponent_numerator < 0
    magnitude = abs(exponent_numerator)
    numerator_to_power = bigdecimal.exact_int_pow(base_numerator, magnitude)
    denominator_to_power = bigdecimal.exact_int_pow(base_denominator, magnitude)
    if exponent_denominator == 1:
        result = (numerator_to_power, denominator_to_power)
    else:
        result = _root_quotient(numerator_to_power, denominator_to_power, exponent_denominator)
    if negative_exponent:
        return result[1], result[0]
    return result


def nth_root(numerator: int, denominator: int, n: int) -> Ratio:
    """
    n-й корень дроби: корни числителя и знаменателя по отдельности.

    Raises:
        PreconditionViolation: n <= 0
        DomainViolation: Отрицательное значение при чётном n
    """
    require_instance(n, int, "n")
    require_true(n > 0, "n must be positive. Was %s", n)
    numerator, denominator = canonical(numerator, denominator)
    if numerator < 0 and n % 2 == 0:
        raise DomainViolation(
            f"{describe_ratio(numerator, denominator)} is negative, but n {describe_int(n)} is even"
        )
    if n == 1:
        return numerator, denominator
    return _root_quotient(numerator, denominator, n)


def sqrt(numerator: int, denominator: int) -> Ratio:
    """Квадратный корень дроби"""
    return nth_root(numerator, denominator, 2)


def exp(numerator: int, denominator: int) -> Ratio:
    """e^(a/b) (e^0 == 1 точно, иначе приближение)"""
    if numerator == 0:
        return ONE
    return _from_decimal(bigdecimal.exp(bigdecimal.divide(numerator, denominator)))


# =============================================================================
# ЛОГАРИФМЫ
# =============================================================================

E_RATIO: Final[Ratio] = canonical(*bigdecimal.fraction(Decimal(bigdecimal.E_STRING)))


def ln(numerator: int, denominator: int) -> Ratio:
    """
    Натуральный логарифм дроби.

    ln(1) == 0 и ln(E) == 1 точно (E — константа Rat.E), иначе приближение.

    Raises:
        DomainViolation: Значение <= 0
    """
    numerator, denominator = canonical(numerator, denominator)
    if numerator <= 0:
        raise DomainViolation(f"numerator must be greater than 0. Was {describe_int(numerator)}")
    if numerator == denominator:
        return ZERO
    if (numerator, denominator) == E_RATIO:
        return ONE
    return _from_decimal(bigdecimal.ln(bigdecimal.divide(numerator, denominator)))


def _exact_log(
    base_numerator: int, base_denominator: int, val_numerator: int, val_denominator: int
) -> Optional[Ratio]:
    # Точный log через разложения на простые; все части < MAX_INT_TO_FACTOR
    base_numerator_one = base_numerator == 1
    base_denominator_one = base_denominator == 1
    val_numerator_one = val_numerator == 1
    val_denominator_one = val_denominator == 1

    if base_denominator_one and val_denominator_one:
        return int_log(base_numerator, val_numerator)
    if base_numerator_one and val_denominator_one:
        return _negated(int_log(base_denominator, val_numerator))
    if base_denominator_one and val_numerator_one:
        return _negated(int_log(base_numerator, val_denominator))
    if base_numerator_one and val_numerator_one:
        return int_log(base_denominator, val_denominator)
    if base_numerator_one or base_denominator_one or val_numerator_one or val_denominator_one:
        return None

    numerators_result = int_log(base_numerator, val_numerator)
    if numerators_result is not None:
        denominators_result = int_log(base_denominator, val_denominator)
        if denominators_result == numerators_result:
            return numerators_result
        return None
    inverted_numerators_result = int_log(base_denominator, val_numerator)
    if inverted_numerators_result is not None:
        inverted_denominators_result = int_log(base_numerator, val_denominator)
        if inverted_denominators_result == inverted_numerators_result:
            return _negated(inverted_numerators_result)
    return None


def _negated(ratio: Optional[Ratio]) -> Optional[Ratio]:
    if ratio is None:
        return None
    return -ratio[0], ratio[1]


def log(
    base_numerator: int, base_denominator: int, val_numerator: int, val_denominator: int
) -> Ratio:
    """
    Логарифм val по основанию base.

    Для значений, все части которых меньше MAX_INT_TO_FACTOR, сначала
    ищется точный рациональный результат (log_8(4) == 2/3), затем —
    приближение ln(val) / ln(base).

    Raises:
        DomainViolation: base <= 0, base == 1 или val <= 0

    Examples:
        >>> log(8, 1, 4, 1)
        (2, 3)
        >>> log(10, 1, 1, 100)
        (-2, 1)
    """
    base_numerator, base_denominator = canonical(base_numerator, base_denominator)
    val_numerator, val_denominator = canonical(val_numerator, val_denominator)
    if base_numerator <= 0:
        raise DomainViolation(
            f"base must be greater than 0. Was {describe_ratio(base_numerator, base_denominator)}"
        )
    if base_numerator == 1 and base_denominator == 1:
        raise DomainViolation("base cannot be 1")
    if val_numerator <= 0:
        raise DomainViolation(
            f"val must be greater than 0. Was {describe_ratio(val_numerator, val_denominator)}"
        )
    if val_numerator == 1 and val_denominator == 1:
        return ZERO
    if (base_numerator, base_denominator) == (val_numerator, val_denominator):
        return ONE
    if max(base_numerator, base_denominator, val_numerator, val_denominator) < MAX_INT_TO_FACTOR:
        exact = _exact_log(base_numerator, base_denominator, val_numerator, val_denominator)
        if exact is not None:
            return exact
    base = bigdecimal.divide(base_numerator, base_denominator)
    val = bigdecimal.divide(val_numerator, val_denominator)
    return _from_decimal(bigdecimal.log(base, val))
