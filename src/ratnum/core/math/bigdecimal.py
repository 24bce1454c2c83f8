"""
BigDecimal — высокоточный десятичный движок

Обёртка над decimal.Decimal с явным управлением точностью и алгоритмами
аппроксимации для иррациональных результатов:
- Сравнения без учёта scale (2.0 == 2.00)
- Округление и разбор значения на части (whole/decimal/digits/fraction)
- Арифметика на рабочей точности (110 значащих цифр)
- pow: целая степень (с разбиением больших показателей) и дробная
- nth_root через обратную степень, exp через ряд Тейлора с редукцией
  аргумента, ln методом Ньютона, log как отношение ln

Все операции используют явные decimal.Context и никогда не читают и не
меняют thread-local контекст decimal.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Промежуточные операции: не менее 110 значащих цифр
2. Публичные приближённые результаты проходят finalize:
   округление до 100 значащих цифр и удаление хвостовых нулей
3. Итерационные циклы exp/ln всегда конечны (сходимость или лимит)
4. Кэши ln/sqrt строятся один раз под блокировкой и далее неизменны
"""

import logging
import math
import threading
from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    ROUND_HALF_UP,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from typing import Callable, Final, Iterable, Optional, Tuple, Union

from ratnum.core.config import SETTINGS
from ratnum.core.contracts import require_instance, require_true
from ratnum.core.errors import (
    DomainViolation,
    MagnitudeOverflow,
    PreconditionViolation,
    describe,
    describe_int,
)

logger = logging.getLogger(__name__)

Number = Union[int, Decimal]

# =============================================================================
# ПАРАМЕТРЫ ТОЧНОСТИ
# =============================================================================

WORKING_PRECISION: Final[int] = SETTINGS.working_precision
NEWTON_PRECISION: Final[int] = SETTINGS.newton_precision
OUTPUT_PRECISION: Final[int] = SETTINGS.output_precision

EXP_DIVISION: Final[int] = SETTINGS.exp_division
EXP_MAX_ORDER: Final[int] = SETTINGS.exp_max_order
LN_MAX_ITERATIONS: Final[int] = SETTINGS.ln_max_iterations
MAX_CACHED_LN: Final[int] = SETTINGS.max_cached_ln
MAX_CACHED_SQRT: Final[int] = SETTINGS.max_cached_sqrt
MAX_SAFE_POWER: Final[int] = SETTINGS.max_safe_power
MAX_SAFE_POWER_SQUARED: Final[int] = SETTINGS.max_safe_power_squared
MAX_EXACT_BITS: Final[int] = SETTINGS.max_exact_bits

INVERSE_LOG10_E: Final[float] = 1.0 / math.log10(math.e)


def _context(precision: int) -> Context:
    return Context(
        prec=precision,
        rounding=ROUND_HALF_UP,
        Emax=MAX_EMAX,
        Emin=MIN_EMIN,
        traps=[InvalidOperation, DivisionByZero, Overflow],
    )


MC_WORKING: Final[Context] = _context(WORKING_PRECISION)
MC_NEWTON: Final[Context] = _context(NEWTON_PRECISION)
MC_OUTPUT: Final[Context] = _context(OUTPUT_PRECISION)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# 100 знаков после запятой (для точных констант Rat)
E_STRING: Final[str] = (
    "2.7182818284590452353602874713526624977572470936999595749669676277240766303535475945713821785251664274"
)
PI_STRING: Final[str] = (
    "3.1415926535897932384626433832795028841971693993751058209749445923078164062862089986280348253421170680"
)

# 110 знаков после запятой (рабочая точность)
BD_E: Final[Decimal] = Decimal(
    "2.71828182845904523536028747135266249775724709369995957496696762772407663035354759457138217852516642742746639193"
)
BD_PI: Final[Decimal] = Decimal(
    "3.14159265358979323846264338327950288419716939937510582097494459230781640628620899862803482534211706798214808651"
)

BD_ZERO: Final[Decimal] = Decimal(0)
BD_ONE: Final[Decimal] = Decimal(1)

FACTORIALS: Final[Tuple[Decimal, ...]] = tuple(
    Decimal(math.factorial(i)) for i in range(EXP_MAX_ORDER + 1)
)


# =============================================================================
# КОНСТРУКТОРЫ
# =============================================================================


def bd(value: Union[Number, float, str]) -> Decimal:
    """
    Преобразует значение в Decimal без потери точности.

    - int: точно
    - float: через кратчайшее repr (bd(0.1) == Decimal("0.1"))
    - str: десятичная запись (пробелы по краям игнорируются)

    Raises:
        PreconditionViolation: None, bool, NaN/Inf или нечисловая строка
    """
    require_instance(value, (Decimal, int, float, str), "value")
    if isinstance(value, Decimal):
        require_true(value.is_finite(), "value must be finite. Was %s", value)
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        require_true(math.isfinite(value), "value must be finite. Was %s", value)
        return Decimal(repr(value))
    try:
        result = Decimal(value.strip())
    except InvalidOperation as e:
        raise PreconditionViolation(f"value is not a decimal number: {value!r}") from e
    require_true(result.is_finite(), "value must be finite. Was %s", value)
    return result


# =============================================================================
# ПРЕДИКАТЫ И СРАВНЕНИЯ (без учёта scale)
# =============================================================================


def is_pos(val: Number) -> bool:
    """val > 0"""
    return val > 0


def is_neg(val: Number) -> bool:
    """val < 0"""
    return val < 0


def is_zero(val: Number) -> bool:
    """val == 0 (0.000 тоже ноль)"""
    return val == 0


def is_one(val: Number) -> bool:
    """val == 1 (1.000 тоже единица)"""
    return val == 1


def is_int(val: Number) -> bool:
    """
    True если у val нет ненулевых дробных цифр.

    Examples:
        >>> is_int(Decimal("1000000000000000000000000000.000000"))
        True
        >>> is_int(Decimal("-0.000001"))
        False
    """
    if isinstance(val, int):
        return True
    if val.as_tuple().exponent >= 0:
        return True
    return val == val.to_integral_value()


def equal(a: Number, b: Number) -> bool:
    """a == b численно (Decimal("2.3") равно Decimal("2.300"))"""
    return a == b


def not_equal(a: Number, b: Number) -> bool:
    return a != b


def greater(a: Number, b: Number) -> bool:
    return a > b


def less(a: Number, b: Number) -> bool:
    return a < b


def greater_or_equal(a: Number, b: Number) -> bool:
    return a >= b


def less_or_equal(a: Number, b: Number) -> bool:
    return a <= b


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def strip_decimal_zeros(val: Decimal) -> Decimal:
    """
    Удаляет хвостовые нули дробной части; положительная экспонента
    раскрывается в целое со scale 0 (1E+2 -> 100).
    """
    sign, digits, exponent = val.as_tuple()
    if not any(digits):
        return BD_ZERO
    if exponent > 0:
        return Decimal((sign, digits + (0,) * exponent, 0))
    if exponent == 0:
        return val
    trailing = 0
    while trailing < len(digits) and digits[-1 - trailing] == 0:
        trailing += 1
    removed = min(trailing, -exponent)
    if removed == 0:
        return val
    return Decimal((sign, digits[: len(digits) - removed], exponent + removed))


def round_int(val: Number, rounding: str = ROUND_HALF_UP) -> int:
    """
    Округляет до целого (по умолчанию HALF_UP).

    Examples:
        >>> round_int(Decimal("1.5"))
        2
        >>> round_int(Decimal("-1.5"))
        -2
        >>> round_int(Decimal("-0.2"))
        0
    """
    if isinstance(val, int):
        return val
    return int(val.to_integral_value(rounding=rounding))


def round_places(val: Number, places: int, rounding: str = ROUND_HALF_UP) -> Decimal:
    """
    Округляет до places знаков после запятой и удаляет хвостовые нули.

    Args:
        val: Значение
        places: Число знаков (>= 0)
        rounding: Режим округления decimal (default: ROUND_HALF_UP)

    Examples:
        >>> round_places(Decimal("1.9803"), 2)
        Decimal('1.98')
        >>> round_places(Decimal("-1.55"), 1)
        Decimal('-1.6')
        >>> round_places(Decimal("10.01"), 1)
        Decimal('10')
    """
    require_true(places >= 0, "places must be at least 0. Was %s", places)
    val = bd(val)
    # Точность с запасом, чтобы quantize не упирался в лимит цифр
    precision = max(val.adjusted(), 0) + places + 2
    quantum = Decimal((0, (1,), -places))
    result = val.quantize(quantum, rounding=rounding, context=_context(precision))
    return strip_decimal_zeros(result)


# =============================================================================
# РАЗБОР НА ЧАСТИ (точно, без аппроксимации)
# =============================================================================


def _split(val: Decimal) -> Tuple[int, int, int]:
    # (целая часть, дробная часть как целое, число дробных цифр), со знаком
    sign, digits, exponent = strip_decimal_zeros(val).as_tuple()
    factor = -1 if sign else 1
    coefficient = int(Decimal((0, digits, 0)))
    if exponent >= 0:
        return factor * coefficient, 0, 0
    scale = -exponent
    whole, rest = divmod(coefficient, 10**scale)
    return factor * whole, factor * rest, scale


def whole_part(val: Number) -> int:
    """
    Целая часть с усечением к нулю.

    Examples:
        >>> whole_part(Decimal("-3.80"))
        -3
        >>> whole_part(Decimal("-0.5"))
        0
    """
    return int(val)


def decimal_part(val: Number) -> Decimal:
    """
    Дробная часть со знаком val, без хвостовых нулей.

    Examples:
        >>> decimal_part(Decimal("3.80"))
        Decimal('0.8')
        >>> decimal_part(Decimal("-0.5"))
        Decimal('-0.5')
        >>> decimal_part(Decimal("3.0"))
        Decimal('0')
    """
    _, rest, scale = _split(bd(val))
    if rest == 0:
        return BD_ZERO
    rest_digits = Decimal(abs(rest)).as_tuple().digits
    padded = (0,) * (scale - len(rest_digits)) + rest_digits
    return Decimal((1 if rest < 0 else 0, padded, -scale))


def whole_and_decimal_parts(val: Number) -> Tuple[int, int]:
    """
    (целая часть, дробная часть как целое).

    Examples:
        >>> whole_and_decimal_parts(Decimal("3.80"))
        (3, 8)
        >>> whole_and_decimal_parts(Decimal("-0.5"))
        (0, -5)
    """
    whole, rest, _ = _split(bd(val))
    return whole, rest


def mixed_number(val: Number) -> Tuple[int, int, int]:
    """
    Смешанное число a + b/c, где c = 10^(число дробных цифр).

    Дробь b/c не сокращается.

    Examples:
        >>> mixed_number(Decimal("3.80"))
        (3, 8, 10)
        >>> mixed_number(Decimal("-3.80"))
        (-3, -8, 10)
        >>> mixed_number(Decimal("3"))
        (3, 0, 1)
    """
    whole, rest, scale = _split(bd(val))
    return whole, rest, 10**scale


def fraction(val: Number) -> Tuple[int, int]:
    """
    Представление val в виде несокращённой дроби (numerator, 10^k).

    Examples:
        >>> fraction(Decimal("3.80"))
        (38, 10)
        >>> fraction(Decimal("-0.5"))
        (-5, 10)
        >>> fraction(Decimal("3.0"))
        (3, 1)
    """
    whole, rest, denominator = mixed_number(val)
    return whole * denominator + rest, denominator


def int_digits(val: int) -> Tuple[int, ...]:
    """Цифры |val| (int_digits(-123) == (1, 2, 3), int_digits(0) == (0,))"""
    return Decimal(abs(val)).as_tuple().digits


def digits(val: Number) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
    """
    Цифры до и после запятой (без знака, без хвостовых нулей).

    Ведущие нули дробной части сохраняются: 3.05 -> ((3,), (0, 5)).

    Examples:
        >>> digits(Decimal("-123.45600"))
        ((1, 2, 3), (4, 5, 6))
        >>> digits(Decimal("3.0"))
        ((3,), ())
    """
    whole, rest, scale = _split(bd(val))
    if rest == 0:
        return int_digits(whole), ()
    rest_digits = int_digits(rest)
    return int_digits(whole), (0,) * (scale - len(rest_digits)) + rest_digits


def digit_count(val: int) -> int:
    """Число цифр |val|; digit_count(0) == 1"""
    return len(int_digits(val))


# =============================================================================
# АРИФМЕТИКА (рабочая точность)
# =============================================================================


def add(a: Number, b: Number, *others: Number) -> Decimal:
    """Сумма на рабочей точности"""
    result = MC_WORKING.add(bd(a), bd(b))
    for other in others:
        result = MC_WORKING.add(result, bd(other))
    return result


def subtract(a: Number, b: Number) -> Decimal:
    """Разность на рабочей точности"""
    return MC_WORKING.subtract(bd(a), bd(b))


def multiply(a: Number, b: Number, *others: Number) -> Decimal:
    """Произведение на рабочей точности (хвостовые нули удаляются)"""
    result = MC_WORKING.multiply(bd(a), bd(b))
    for other in others:
        result = MC_WORKING.multiply(result, bd(other))
    return strip_decimal_zeros(result)


def divide(a: Number, b: Number) -> Decimal:
    """
    Частное на рабочей точности (хвостовые нули удаляются).

    Examples:
        >>> divide(1, 4)
        Decimal('0.25')

    Raises:
        DomainViolation: Если b == 0
    """
    if is_zero(b):
        raise DomainViolation(f"Cannot divide {describe(a)} by zero")
    return strip_decimal_zeros(MC_WORKING.divide(bd(a), bd(b)))


def invert(val: Number) -> Decimal:
    """1 / val"""
    return divide(BD_ONE, val)


# =============================================================================
# FINALIZE
# =============================================================================


def finalize(val: Decimal) -> Decimal:
    """
    Финальная обработка приближённого результата.

    Целые значения возвращаются как есть (scale 0). Дробные округляются до
    OUTPUT_PRECISION значащих цифр; если после этого значение целое,
    возвращается целое, иначе значение без хвостовых нулей. Так шум
    цепочки приближений (1.99999...9 или 2.000...01) схлопывается в 2.
    """
    exponent = val.as_tuple().exponent
    if exponent == 0:
        return val
    if exponent > 0:
        return strip_decimal_zeros(val)
    rounded = MC_OUTPUT.plus(val)
    rounded_to_int = rounded.to_integral_value(rounding=ROUND_HALF_UP)
    if rounded == rounded_to_int:
        return strip_decimal_zeros(rounded_to_int)
    return strip_decimal_zeros(rounded)


# =============================================================================
# ЛЕНИВЫЕ КЭШИ
# =============================================================================


class _LazyTable:
    """
    Неизменяемая таблица, вычисляемая при первом обращении.

    Double-checked locking: конкурентный первый доступ строит таблицу
    ровно один раз; после построения чтение идёт без блокировки.
    """

    def __init__(self, name: str, builder: Callable[[], Iterable[Optional[Decimal]]]):
        self._name = name
        self._builder = builder
        self._values: Optional[Tuple[Optional[Decimal], ...]] = None
        self._lock = threading.Lock()

    def get(self, index: int) -> Decimal:
        values = self._values
        if values is None:
            with self._lock:
                if self._values is None:
                    logger.debug("Building %s cache", self._name)
                    self._values = tuple(self._builder())
                values = self._values
        value = values[index]
        if value is None:
            raise KeyError(f"{self._name} cache has no entry for {index}")
        return value


def _build_ln_cache() -> Iterable[Optional[Decimal]]:
    yield None
    yield None
    for i in range(2, MAX_CACHED_LN + 1):
        yield _calc_ln(Decimal(i))


def _build_sqrt_cache() -> Iterable[Optional[Decimal]]:
    for i in range(MAX_CACHED_SQRT + 1):
        yield _calc_nth_root(Decimal(i), 2)


_LN_CACHE: Final[_LazyTable] = _LazyTable("ln", _build_ln_cache)
_SQRT_CACHE: Final[_LazyTable] = _LazyTable("sqrt", _build_sqrt_cache)


# =============================================================================
# СТЕПЕНИ
# =============================================================================


def _pow_int(base: Decimal, power: int) -> Decimal:
    # base^power; большие показатели: power = a*LIMIT + b,
    # base^power = (base^LIMIT)^a * base^b
    if is_zero(base) and power == 0:
        raise DomainViolation("0^0 undefined")
    if power == 0:
        return BD_ONE
    if power == 1:
        return base
    if abs(power) >= MAX_SAFE_POWER_SQUARED:
        raise MagnitudeOverflow(
            f"Power {describe_int(power)} too large", {"base": describe(base)}
        )
    if is_zero(base) and power < 0:
        raise DomainViolation(f"0 cannot be raised to negative power {describe_int(power)}")
    try:
        if abs(power) <= MAX_SAFE_POWER:
            return MC_WORKING.power(base, power)
        sign = -1 if power < 0 else 1
        a, b = divmod(abs(power), MAX_SAFE_POWER)
        chunk = MC_WORKING.power(base, sign * MAX_SAFE_POWER)
        return MC_WORKING.multiply(
            MC_WORKING.power(chunk, a),
            MC_WORKING.power(base, sign * b),
        )
    except Overflow as e:
        raise MagnitudeOverflow(
            f"{base}^{describe_int(power)} exceeds the decimal exponent range",
            {"power": describe_int(power)},
        ) from e


def _pow_fractional(base: Decimal, power: Decimal) -> Decimal:
    # base^power = e^(ln(base) * power)
    if is_int(power):
        return _pow_int(base, int(power))
    if is_zero(base):
        return BD_ZERO
    negative_base = is_neg(base)
    if negative_base:
        _, numerator, denominator = mixed_number(power)
        reduced_denominator = denominator // math.gcd(numerator, denominator)
        if reduced_denominator % 2 == 0:
            raise DomainViolation(
                f"Base {base} is negative, but power {power} has an even denominator"
            )
        base = base.copy_negate()
    result = _exp(multiply(_ln(base), power))
    return result.copy_negate() if negative_base else result


def pow(base: Union[Number, str], power: Union[Number, str]) -> Decimal:
    """
    base^power с финализацией результата.

    Целый показатель считается напрямую; дробный — как e^(ln(base)*power).
    Отрицательное основание допустимо только если знаменатель дробной
    части показателя (в несократимом виде) нечётный.

    Args:
        base: Основание
        power: Показатель (int или Decimal)

    Returns:
        Финализированный результат

    Raises:
        DomainViolation: 0^0; 0^(-n); отрицательное основание с чётным
            знаменателем показателя
        MagnitudeOverflow: |power| >= LIMIT^2 или выход за диапазон экспоненты

    Examples:
        >>> pow(2, 10)
        Decimal('1024')
        >>> pow(Decimal("-32"), Decimal("0.2"))
        Decimal('-2')
    """
    base = bd(base)
    if isinstance(power, int) and not isinstance(power, bool):
        return finalize(_pow_int(base, power))
    return finalize(_pow_fractional(base, bd(power)))


def exact_int_pow(base: int, power: int) -> int:
    """
    Точная целая степень base^power для power >= 0.

    Raises:
        PreconditionViolation: power < 0
        DomainViolation: 0^0
        MagnitudeOverflow: показатель >= LIMIT^2 или результат длиннее
            MAX_EXACT_BITS бит
    """
    require_true(power >= 0, "power must be at least 0. Was %s", power)
    if base == 0 and power == 0:
        raise DomainViolation("0^0 undefined")
    if power >= MAX_SAFE_POWER_SQUARED:
        raise MagnitudeOverflow(
            f"Power {describe_int(power)} too large", {"base": describe(base)}
        )
    if abs(base) > 1 and power * math.log2(abs(base)) > MAX_EXACT_BITS:
        raise MagnitudeOverflow(
            f"{describe_int(base)}^{describe_int(power)} is too large to compute exactly",
            {"max_bits": MAX_EXACT_BITS},
        )
    return base**power


# =============================================================================
# КОРНИ
# =============================================================================


def _calc_nth_root(base: Decimal, n: int) -> Decimal:
    if is_neg(base):
        if n % 2 == 0:
            raise DomainViolation(f"Base {base} is negative, but n {describe_int(n)} is even")
        negative_result = _pow_fractional(base.copy_negate(), invert(n))
        return finalize(negative_result.copy_negate())
    return finalize(_pow_fractional(base, invert(n)))


def nth_root(base: Union[Number, str], n: int) -> Decimal:
    """
    Корень степени n: base^(1/n).

    В отличие от pow(base, invert(n)) корректно обрабатывает отрицательное
    основание при нечётном n (1/3 не представима конечной десятичной дробью).

    Examples:
        >>> nth_root(-8, 3)
        Decimal('-2')
        >>> nth_root(8, 3)
        Decimal('2')

    Raises:
        PreconditionViolation: n <= 0
        DomainViolation: отрицательное основание при чётном n
    """
    require_instance(n, int, "n")
    require_true(n > 0, "n must be positive. Was %s", n)
    base = bd(base)
    if n == 2 and is_int(base) and 0 < base <= MAX_CACHED_SQRT:
        return _SQRT_CACHE.get(int(base))
    return _calc_nth_root(base, n)


def sqrt(val: Union[Number, str]) -> Decimal:
    """Квадратный корень (val >= 0)"""
    return nth_root(val, 2)


# =============================================================================
# EXP
# =============================================================================


def _exp(power: Decimal) -> Decimal:
    # Ряд Тейлора e^x = sum(x^i / i!), по два члена за шаг. Аргумент
    # приближается к нулю: e^(a.b) = e^a * (e^(0.b / d))^d
    if is_int(power):
        return _pow_int(BD_E, int(power))
    negative = is_neg(power)
    if negative:
        power = power.copy_negate()
    whole_contribution = _pow_int(BD_E, whole_part(power))
    remainder = divide(decimal_part(power), EXP_DIVISION)

    previous_result: Optional[Decimal] = None
    current_result = BD_ZERO
    power_to_the_i_minus_one = BD_ONE
    for i in range(1, EXP_MAX_ORDER + 1, 2):
        power_to_the_i = multiply(power_to_the_i_minus_one, remainder)
        term = divide(add(multiply(power_to_the_i_minus_one, i), power_to_the_i), FACTORIALS[i])
        next_result = add(current_result, term)
        power_to_the_i_minus_one = multiply(power_to_the_i, remainder)
        if next_result == current_result or (
            previous_result is not None and next_result == previous_result
        ):
            current_result = next_result
            break
        previous_result = current_result
        current_result = next_result

    result = multiply(whole_contribution, _pow_int(current_result, EXP_DIVISION))
    return invert(result) if negative else result


def exp(power: Union[Number, str]) -> Decimal:
    """
    e^power с финализацией.

    Examples:
        >>> exp(0)
        Decimal('1')

    Raises:
        MagnitudeOverflow: |power| слишком велик
    """
    return finalize(_exp(bd(power)))


# =============================================================================
# LN / LOG
# =============================================================================


def _ln_estimate(val: Decimal) -> float:
    # Для 0 < val < 1: по числу ведущих нулей после запятой
    # log10(val) ~ -zeros - 0.5
    leading_zeros = -val.adjusted() - 1
    log10_estimate = -leading_zeros - 0.5
    return log10_estimate * INVERSE_LOG10_E


def _calc_ln(val: Decimal) -> Decimal:
    # Метод Ньютона для f(x) = e^x - v:  x1 = x0 - 1 + v / e^x0.
    # Для val > 1 решаем для 1/val и меняем знак.
    greater_than_one = val > 1
    target = invert(val) if greater_than_one else val
    current_result = Decimal(repr(_ln_estimate(target)))
    previous_difference: Optional[Decimal] = None
    reason = "iteration cap"
    iterations = 0
    for iterations in range(1, LN_MAX_ITERATIONS + 1):
        check = _exp(current_result)
        # Приближение грубее проверки, иначе сходимость не наступает
        next_result = MC_NEWTON.plus(
            add(subtract(current_result, BD_ONE), divide(target, check))
        )
        difference = MC_WORKING.subtract(next_result, current_result).copy_abs()
        current_result = next_result
        if is_zero(difference):
            reason = "fixed point"
            break
        if previous_difference is not None and difference >= previous_difference:
            reason = "non-improving difference"
            break
        previous_difference = difference
    logger.debug("ln(%s) stopped after %d iterations: %s", val, iterations, reason)
    return current_result.copy_negate() if greater_than_one else current_result


def _ln(val: Decimal) -> Decimal:
    if not is_pos(val):
        raise DomainViolation(f"Val must be greater than 0. Was {val}")
    if is_one(val):
        return BD_ZERO
    if is_int(val) and val <= MAX_CACHED_LN:
        return _LN_CACHE.get(int(val))
    return _calc_ln(val)


def ln(val: Union[Number, str]) -> Decimal:
    """
    Натуральный логарифм с финализацией.

    Raises:
        DomainViolation: val <= 0

    Examples:
        >>> ln(1)
        Decimal('0')
    """
    return finalize(_ln(bd(val)))


def log(base: Union[Number, str], val: Union[Number, str]) -> Decimal:
    """
    Логарифм val по основанию base: ln(val) / ln(base).

    Examples:
        >>> log(10, 1)
        Decimal('0')
        >>> log(7, 7)
        Decimal('1')

    Raises:
        DomainViolation: base <= 0, base == 1 или val <= 0
    """
    base = bd(base)
    val = bd(val)
    if not is_pos(base):
        raise DomainViolation(f"Base must be greater than 0. Was {base}")
    if is_one(base):
        raise DomainViolation("Base cannot be 1")
    if not is_pos(val):
        raise DomainViolation(f"Val must be greater than 0. Was {val}")
    if is_one(val):
        return BD_ZERO
    if base == val:
        return BD_ONE
    return finalize(divide(_ln(val), _ln(base)))
