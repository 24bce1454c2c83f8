"""
Rat — точное рациональное число

Публичный неизменяемый тип значения поверх сокращённой пары
(numerator, denominator). Арифметика делегируется точным операциям
ratio и (для иррациональных результатов) высокоточному движку bigdecimal;
каждый результат заново проходит через канонизирующую фабрику.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. denominator > 0 всегда; знак хранится только в числителе
2. gcd(|numerator|, denominator) == 1
3. Экземпляры неизменяемы; операции всегда возвращают новый Rat
4. Малые значения отдаются из предвычисленного кэша (семантически
   незаметно: равенство и хэш определяются значением)
"""

import math
from decimal import Decimal
from typing import Final, List, Optional, Tuple, Union

from ratnum.core.config import SETTINGS
from ratnum.core.contracts import require_instance, require_not_equal, require_true
from ratnum.core.errors import MagnitudeOverflow, describe_ratio
from ratnum.core.math import bigdecimal, ratio

MAX_CACHED_WHOLE: Final[int] = SETTINGS.max_cached_whole
MAX_CACHED_FRACTION: Final[int] = SETTINGS.max_cached_fraction

RatLike = Union["Rat", int]


class Rat:
    """
    Рациональное число произвольной точности.

    Создаётся только фабриками: Rat.of, Rat.of_decimal, Rat.of_float,
    Rat.parse. Поддерживает операторы Python (+ - * / ** unary -, abs,
    сравнения) наравне с именованными методами; int принимается как
    второй операнд.

    Examples:
        >>> Rat.of(6, -8)
        Rat(-3, 4)
        >>> str(Rat.of(1, 2) + Rat.of(1, 3))
        '5/6'
    """

    __slots__ = ("_numerator", "_denominator")

    ZERO: "Rat"
    ONE: "Rat"
    E: "Rat"
    PI: "Rat"

    def __init__(self) -> None:
        raise TypeError("Rat instances are created with Rat.of(...) and related factories")

    @classmethod
    def _raw(cls, numerator: int, denominator: int) -> "Rat":
        instance = object.__new__(cls)
        object.__setattr__(instance, "_numerator", numerator)
        object.__setattr__(instance, "_denominator", denominator)
        return instance

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"Rat is immutable, cannot set {name}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Rat is immutable, cannot delete {name}")

    # =========================================================================
    # ФАБРИКИ
    # =========================================================================

    @classmethod
    def of(cls, numerator: int, denominator: int = 1) -> "Rat":
        """
        Канонический Rat для numerator/denominator.

        Raises:
            PreconditionViolation: не int или denominator == 0
        """
        require_instance(numerator, int, "numerator")
        require_instance(denominator, int, "denominator")
        require_not_equal(denominator, 0, "denominator")
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        cached = _cached(numerator, denominator)
        if cached is not None:
            return cached
        numerator, denominator = ratio.reduce(numerator, denominator)
        cached = _cached(numerator, denominator)
        if cached is not None:
            return cached
        return cls._raw(numerator, denominator)

    @classmethod
    def of_decimal(cls, value: Decimal) -> "Rat":
        """Точное значение конечной десятичной дроби (Decimal("3.80") -> 19/5)"""
        require_instance(value, Decimal, "value")
        return cls.of(*bigdecimal.fraction(bigdecimal.bd(value)))

    @classmethod
    def of_float(cls, value: float) -> "Rat":
        """
        Rat из float через кратчайшее десятичное repr.

        Rat.of_float(0.1) == 1/10, а не двоичное приближение.

        Raises:
            PreconditionViolation: NaN или бесконечность
        """
        require_instance(value, float, "value")
        require_true(math.isfinite(value), "value must be finite. Was %s", value)
        return cls.of_decimal(bigdecimal.bd(value))

    @classmethod
    def parse(cls, expression: str) -> "Rat":
        """Значение арифметического выражения ("2(3+4)/5" -> 14/5)"""
        # Import here to avoid circular dependency
        from ratnum.expression.evaluator import evaluate

        return evaluate(expression)

    # =========================================================================
    # АТРИБУТЫ
    # =========================================================================

    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    def is_integer(self) -> bool:
        return self._denominator == 1

    def is_positive(self) -> bool:
        return self._numerator > 0

    def is_negative(self) -> bool:
        return self._numerator < 0

    def is_zero(self) -> bool:
        return self._numerator == 0

    # =========================================================================
    # АРИФМЕТИКА
    # =========================================================================

    def negate(self) -> "Rat":
        return Rat.of(-self._numerator, self._denominator)

    def abs(self) -> "Rat":
        return self.negate() if self.is_negative() else self

    def invert(self) -> "Rat":
        """
        1 / self.

        Raises:
            DomainViolation: self == 0
        """
        return Rat.of(*ratio.divide(1, 1, self._numerator, self._denominator))

    def plus(self, other: RatLike) -> "Rat":
        other = _coerce(other)
        return Rat.of(
            *ratio.add(self._numerator, self._denominator, other._numerator, other._denominator)
        )

    def minus(self, other: RatLike) -> "Rat":
        other = _coerce(other)
        return Rat.of(
            *ratio.subtract(self._numerator, self._denominator, other._numerator, other._denominator)
        )

    def times(self, other: RatLike) -> "Rat":
        other = _coerce(other)
        return Rat.of(
            *ratio.multiply(self._numerator, self._denominator, other._numerator, other._denominator)
        )

    def divided_by(self, other: RatLike) -> "Rat":
        """
        self / other.

        Raises:
            DomainViolation: other == 0
        """
        other = _coerce(other)
        return Rat.of(
            *ratio.divide(self._numerator, self._denominator, other._numerator, other._denominator)
        )

    def pow(self, exponent: RatLike) -> "Rat":
        """
        self^exponent; точный результат, если он рационален и
        вычислим точно, иначе приближение со 100 значащими цифрами.

        Examples:
            >>> str(Rat.of(-8, 27).pow(Rat.of(-2, 3)))
            '9/4'

        Raises:
            DomainViolation: 0^0, отрицательное основание при чётном
                знаменателе показателя
            MagnitudeOverflow: показатель слишком велик
        """
        exponent = _coerce(exponent)
        return Rat.of(
            *ratio.pow(self._numerator, self._denominator, exponent._numerator, exponent._denominator)
        )

    def nth_root(self, n: int) -> "Rat":
        """
        Корень степени n (n > 0).

        Raises:
            PreconditionViolation: n <= 0
            DomainViolation: self < 0 при чётном n
        """
        return Rat.of(*ratio.nth_root(self._numerator, self._denominator, n))

    def sqrt(self) -> "Rat":
        return self.nth_root(2)

    def exp(self) -> "Rat":
        """e^self (приближение, кроме e^0)"""
        return Rat.of(*ratio.exp(self._numerator, self._denominator))

    def ln(self) -> "Rat":
        """
        Натуральный логарифм; ln(1) == 0 и ln(Rat.E) == 1 точно.

        Raises:
            DomainViolation: self <= 0
        """
        return Rat.of(*ratio.ln(self._numerator, self._denominator))

    def log(self, base: RatLike) -> "Rat":
        """
        Логарифм self по основанию base; рациональные случаи точны.

        Examples:
            >>> str(Rat.of(4).log(Rat.of(8)))
            '2/3'

        Raises:
            DomainViolation: base <= 0, base == 1 или self <= 0
        """
        base = _coerce(base)
        return Rat.of(
            *ratio.log(base._numerator, base._denominator, self._numerator, self._denominator)
        )

    # =========================================================================
    # СРАВНЕНИЯ
    # =========================================================================

    def compare_to(self, other: RatLike) -> int:
        """-1, 0 или 1; перекрёстное умножение, если знаменатели различны"""
        other = _coerce(other)
        if self._denominator == other._denominator:
            left, right = self._numerator, other._numerator
        else:
            left = self._numerator * other._denominator
            right = other._numerator * self._denominator
        return (left > right) - (left < right)

    def equal(self, other: RatLike) -> bool:
        other = _coerce(other)
        return self._numerator == other._numerator and self._denominator == other._denominator

    def not_equal(self, other: RatLike) -> bool:
        return not self.equal(other)

    def greater(self, other: RatLike) -> bool:
        return self.compare_to(other) > 0

    def less(self, other: RatLike) -> bool:
        return self.compare_to(other) < 0

    def greater_or_equal(self, other: RatLike) -> bool:
        return self.compare_to(other) >= 0

    def less_or_equal(self, other: RatLike) -> bool:
        return self.compare_to(other) <= 0

    # =========================================================================
    # ПРЕОБРАЗОВАНИЯ
    # =========================================================================

    def reduce_precision(self, max_digits: int) -> "Rat":
        """
        Укорачивает длинную дробь для отображения.

        Если меньшая из длин (в цифрах) числителя и знаменателя больше
        max_digits, обе части делятся на 10^(длина - max_digits) с
        округлением HALF_UP, результат заново сокращается.

        Examples:
            >>> str(Rat.of(1234, 2345).reduce_precision(3))
            '123/235'
            >>> str(Rat.of(123, 4561).reduce_precision(2))
            '1/38'
        """
        require_instance(max_digits, int, "max_digits")
        require_true(max_digits >= 1, "max_digits must be at least 1. Was %s", max_digits)
        least_digits = min(
            bigdecimal.digit_count(self._numerator), bigdecimal.digit_count(self._denominator)
        )
        if least_digits <= max_digits:
            return self
        divisor = 10 ** (least_digits - max_digits)
        return Rat.of(
            _divide_half_up(self._numerator, divisor), _divide_half_up(self._denominator, divisor)
        )

    def to_decimal(self) -> Decimal:
        """Decimal со 110 значащими цифрами (1/3 -> 0.333...)"""
        return bigdecimal.divide(self._numerator, self._denominator)

    def to_float(self) -> float:
        """
        Ближайший float.

        Raises:
            MagnitudeOverflow: значение вне диапазона float
        """
        result = float(self.to_decimal())
        if math.isinf(result):
            raise MagnitudeOverflow(
                "Rat is too large to represent as a float",
                {"value": describe_ratio(self._numerator, self._denominator)},
            )
        return result

    def as_integer_ratio(self) -> Tuple[int, int]:
        return self._numerator, self._denominator

    # =========================================================================
    # PYTHON PROTOCOL
    # =========================================================================

    def __add__(self, other: RatLike) -> "Rat":
        if not _is_rat_like(other):
            return NotImplemented
        return self.plus(other)

    __radd__ = __add__

    def __sub__(self, other: RatLike) -> "Rat":
        if not _is_rat_like(other):
            return NotImplemented
        return self.minus(other)

    def __rsub__(self, other: RatLike) -> "Rat":
        if not _is_rat_like(other):
            return NotImplemented
        return _coerce(other).minus(self)

    def __mul__(self, other: RatLike) -> "Rat":
        if not _is_rat_like(other):
            return NotImplemented
        return self.times(other)

    __rmul__ = __mul__

    def __truediv__(self, other: RatLike) -> "Rat":
        if not _is_rat_like(other):
            return NotImplemented
        return self.divided_by(other)

    def __rtruediv__(self, other: RatLike) -> "Rat":
        if not _is_rat_like(other):
            return NotImplemented
        return _coerce(other).divided_by(self)

    def __pow__(self, exponent: RatLike) -> "Rat":
        if not _is_rat_like(exponent):
            return NotImplemented
        return self.pow(exponent)

    def __rpow__(self, base: RatLike) -> "Rat":
        if not _is_rat_like(base):
            return NotImplemented
        return _coerce(base).pow(self)

    def __neg__(self) -> "Rat":
        return self.negate()

    def __pos__(self) -> "Rat":
        return self

    def __abs__(self) -> "Rat":
        return self.abs()

    def __bool__(self) -> bool:
        return self._numerator != 0

    def __float__(self) -> float:
        return self.to_float()

    def __eq__(self, other: object) -> bool:
        if not _is_rat_like(other):
            return NotImplemented
        return self.equal(other)  # type: ignore[arg-type]

    def __lt__(self, other: RatLike) -> bool:
        if not _is_rat_like(other):
            return NotImplemented
        return self.less(other)

    def __le__(self, other: RatLike) -> bool:
        if not _is_rat_like(other):
            return NotImplemented
        return self.less_or_equal(other)

    def __gt__(self, other: RatLike) -> bool:
        if not _is_rat_like(other):
            return NotImplemented
        return self.greater(other)

    def __ge__(self, other: RatLike) -> bool:
        if not _is_rat_like(other):
            return NotImplemented
        return self.greater_or_equal(other)

    def __hash__(self) -> int:
        # Целые хэшируются как int, чтобы Rat.of(2) и 2 были взаимозаменяемы в dict
        if self._denominator == 1:
            return hash(self._numerator)
        return hash((self._numerator, self._denominator))

    def __str__(self) -> str:
        if self._denominator == 1:
            return str(self._numerator)
        return f"{self._numerator}/{self._denominator}"

    def __repr__(self) -> str:
        return f"Rat({self._numerator}, {self._denominator})"

    def __reduce__(self) -> Tuple[object, Tuple[int, int]]:
        return Rat.of, (self._numerator, self._denominator)


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ
# =============================================================================


def _is_rat_like(value: object) -> bool:
    return isinstance(value, Rat) or (isinstance(value, int) and not isinstance(value, bool))


def _coerce(value: RatLike) -> Rat:
    if isinstance(value, Rat):
        return value
    require_instance(value, int, "other")
    return Rat.of(value)


def _divide_half_up(value: int, divisor: int) -> int:
    quotient, remainder = divmod(abs(value), divisor)
    if 2 * remainder >= divisor:
        quotient += 1
    return -quotient if value < 0 else quotient


# =============================================================================
# КЭШ МАЛЫХ ЗНАЧЕНИЙ
# =============================================================================

_WHOLE_CACHE: Final[Tuple[Rat, ...]] = tuple(
    Rat._raw(i, 1) for i in range(MAX_CACHED_WHOLE + 1)
)
_NEGATIVE_WHOLE_CACHE: Final[Tuple[Rat, ...]] = tuple(
    Rat._raw(-i, 1) if i else _WHOLE_CACHE[0] for i in range(MAX_CACHED_WHOLE + 1)
)


def _build_fraction_cache(sign: int) -> Tuple[Tuple[Rat, ...], ...]:
    # Несокращённые ячейки ссылаются на экземпляр сокращённой дроби
    whole_cache = _WHOLE_CACHE if sign > 0 else _NEGATIVE_WHOLE_CACHE
    rows: List[Tuple[Rat, ...]] = []
    for numerator in range(MAX_CACHED_FRACTION + 1):
        row = []
        for denominator in range(1, MAX_CACHED_FRACTION + 1):
            reduced_numerator, reduced_denominator = ratio.reduce(numerator, denominator)
            if reduced_denominator == 1:
                row.append(whole_cache[reduced_numerator])
            elif reduced_numerator < numerator:
                row.append(rows[reduced_numerator][reduced_denominator - 1])
            else:
                row.append(Rat._raw(sign * reduced_numerator, reduced_denominator))
        rows.append(tuple(row))
    return tuple(rows)


_FRACTION_CACHE: Final[Tuple[Tuple[Rat, ...], ...]] = _build_fraction_cache(1)
_NEGATIVE_FRACTION_CACHE: Final[Tuple[Tuple[Rat, ...], ...]] = _build_fraction_cache(-1)


def _cached(numerator: int, denominator: int) -> Optional[Rat]:
    # denominator уже положителен
    magnitude = abs(numerator)
    if denominator == 1 and magnitude <= MAX_CACHED_WHOLE:
        return _WHOLE_CACHE[magnitude] if numerator >= 0 else _NEGATIVE_WHOLE_CACHE[magnitude]
    if magnitude <= MAX_CACHED_FRACTION and denominator <= MAX_CACHED_FRACTION:
        cache = _FRACTION_CACHE if numerator >= 0 else _NEGATIVE_FRACTION_CACHE
        return cache[magnitude][denominator - 1]
    return None


Rat.ZERO = Rat.of(0)
Rat.ONE = Rat.of(1)
Rat.E = Rat.of_decimal(Decimal(bigdecimal.E_STRING))
Rat.PI = Rat.of_decimal(Decimal(bigdecimal.PI_STRING))
