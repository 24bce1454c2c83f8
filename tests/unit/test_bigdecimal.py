"""
Тесты для BigDecimal — высокоточный десятичный движок

Проверяемые инварианты:
1. Сравнения не зависят от scale (2.3 == 2.300)
2. Разбор на части точен (whole/decimal/digits/fraction)
3. Промежуточная арифметика — 110 значащих цифр
4. finalize схлопывает шум приближений в целое
5. Целая степень с большим показателем разбивается на части
6. exp/ln/log сходятся и согласованы друг с другом
7. Доменные ошибки: 0^0, ln(<=0), чётный корень из отрицательного
"""

import threading
from decimal import ROUND_DOWN, Decimal

import pytest

from ratnum.core.errors import DomainViolation, MagnitudeOverflow, PreconditionViolation
from ratnum.core.math import bigdecimal
from ratnum.core.math.bigdecimal import (
    BD_E,
    E_STRING,
    MC_WORKING,
    add,
    bd,
    decimal_part,
    digit_count,
    digits,
    divide,
    equal,
    exact_int_pow,
    exp,
    finalize,
    fraction,
    greater,
    invert,
    is_int,
    is_one,
    is_zero,
    less_or_equal,
    ln,
    log,
    mixed_number,
    multiply,
    nth_root,
    round_int,
    round_places,
    sqrt,
    strip_decimal_zeros,
    subtract,
    whole_and_decimal_parts,
    whole_part,
)


def _close(a: Decimal, b: Decimal, tolerance: str = "1e-95") -> bool:
    return abs(MC_WORKING.subtract(a, b)) <= Decimal(tolerance) * max(abs(b), Decimal(1))


# =============================================================================
# ТЕСТЫ: Конструктор и сравнения
# =============================================================================


class TestConstruction:
    """Тесты bd()."""

    def test_int_is_exact(self) -> None:
        assert bd(10**120) == Decimal(10**120)

    def test_float_uses_shortest_repr(self) -> None:
        """bd(0.1) — десятичная 0.1, а не двоичное приближение."""
        assert bd(0.1) == Decimal("0.1")
        assert bd(2.5) == Decimal("2.5")

    def test_string_is_stripped(self) -> None:
        assert bd("  3.80 ") == Decimal("3.8")

    def test_decimal_passthrough(self) -> None:
        value = Decimal("1.50")
        assert bd(value) is value

    @pytest.mark.parametrize("value", [None, True, float("nan"), float("inf"), "abc", "NaN"])
    def test_rejects_invalid(self, value: object) -> None:
        with pytest.raises(PreconditionViolation):
            bd(value)  # type: ignore[arg-type]


class TestComparisons:
    """Сравнения без учёта scale."""

    def test_scale_is_ignored(self) -> None:
        assert equal(bd("2.3"), bd("2.300"))
        assert is_zero(Decimal("0.000"))
        assert is_one(Decimal("1.000"))
        assert greater(Decimal("2.31"), Decimal("2.300"))
        assert less_or_equal(Decimal("2.30"), Decimal("2.3"))

    def test_is_int(self) -> None:
        assert is_int(Decimal("1000000000000000000000000000.000000"))
        assert is_int(Decimal("1E+5"))
        assert is_int(7)
        assert not is_int(Decimal("-0.000001"))


# =============================================================================
# ТЕСТЫ: Округление и разбор
# =============================================================================


class TestRounding:
    """Тесты round_int / round_places / strip_decimal_zeros."""

    def test_round_int_half_up(self) -> None:
        assert round_int(Decimal("1.5")) == 2
        assert round_int(Decimal("-1.55")) == -2
        assert round_int(Decimal("-0.2")) == 0
        assert round_int(Decimal("2.4999")) == 2

    def test_round_int_custom_mode(self) -> None:
        assert round_int(Decimal("1.9"), ROUND_DOWN) == 1

    def test_round_places(self) -> None:
        assert round_places(Decimal("1.9803"), 2) == Decimal("1.98")
        assert round_places(Decimal("-1.55"), 1) == Decimal("-1.6")
        assert str(round_places(Decimal("10.01"), 1)) == "10"
        assert str(round_places(Decimal("0.00"), 4)) == "0"

    def test_round_places_rejects_negative_places(self) -> None:
        with pytest.raises(PreconditionViolation):
            round_places(Decimal("1.5"), -1)

    def test_strip_decimal_zeros(self) -> None:
        assert str(strip_decimal_zeros(Decimal("1.500"))) == "1.5"
        assert str(strip_decimal_zeros(Decimal("1E+2"))) == "100"
        assert str(strip_decimal_zeros(Decimal("0.000"))) == "0"
        assert str(strip_decimal_zeros(Decimal("120"))) == "120"


class TestDecomposition:
    """Точный разбор значения на части."""

    def test_whole_and_decimal_parts(self) -> None:
        assert whole_part(Decimal("-3.80")) == -3
        assert decimal_part(Decimal("3.80")) == Decimal("0.8")
        assert decimal_part(Decimal("-0.5")) == Decimal("-0.5")
        assert decimal_part(Decimal("3.05")) == Decimal("0.05")
        assert whole_and_decimal_parts(Decimal("3.80")) == (3, 8)
        assert whole_and_decimal_parts(Decimal("-0.5")) == (0, -5)

    def test_mixed_number(self) -> None:
        assert mixed_number(Decimal("3.80")) == (3, 8, 10)
        assert mixed_number(Decimal("-3.80")) == (-3, -8, 10)
        assert mixed_number(Decimal("3")) == (3, 0, 1)
        assert mixed_number(Decimal("1E+2")) == (100, 0, 1)

    def test_fraction(self) -> None:
        assert fraction(Decimal("3.80")) == (38, 10)
        assert fraction(Decimal("-0.05")) == (-5, 100)
        assert fraction(Decimal("3.0")) == (3, 1)

    def test_digits_keep_leading_fractional_zeros(self) -> None:
        assert digits(Decimal("-123.45600")) == ((1, 2, 3), (4, 5, 6))
        assert digits(Decimal("3.05")) == ((3,), (0, 5))
        assert digits(Decimal("0.5")) == ((0,), (5,))
        assert digits(Decimal("3.0")) == ((3,), ())

    def test_digit_count(self) -> None:
        assert digit_count(0) == 1
        assert digit_count(-12345) == 5
        assert digit_count(10**5000) == 5001


# =============================================================================
# ТЕСТЫ: Арифметика и finalize
# =============================================================================


class TestArithmetic:
    """Арифметика на рабочей точности."""

    def test_add_subtract(self) -> None:
        assert add(1, 2, 3) == 6
        assert subtract(Decimal("0.3"), Decimal("0.1")) == Decimal("0.2")

    def test_multiply_strips_zeros(self) -> None:
        assert str(multiply(Decimal("1.50"), 2)) == "3"

    def test_divide_has_working_precision(self) -> None:
        """1/3 — 110 значащих цифр."""
        assert divide(1, 3) == Decimal("0." + "3" * 110)
        assert divide(2, 3) == Decimal("0." + "6" * 109 + "7")
        assert divide(100, 3) == Decimal("33." + "3" * 108)

    def test_divide_by_zero(self) -> None:
        with pytest.raises(DomainViolation):
            divide(1, 0)
        with pytest.raises(DomainViolation):
            invert(Decimal("0.000"))

    def test_invert(self) -> None:
        assert invert(4) == Decimal("0.25")


class TestFinalize:
    """Финальная обработка приближений."""

    def test_noise_collapses_to_integer(self) -> None:
        assert str(finalize(Decimal("1." + "9" * 105))) == "2"
        assert str(finalize(Decimal("2." + "0" * 104 + "1"))) == "2"

    def test_rounds_to_output_precision(self) -> None:
        value = finalize(divide(1, 3))
        assert value == Decimal("0." + "3" * 100)

    def test_strips_trailing_zeros(self) -> None:
        assert str(finalize(Decimal("0.1230"))) == "0.123"
        assert str(finalize(Decimal("5E+2"))) == "500"

    def test_integers_unchanged(self) -> None:
        assert finalize(Decimal(7)) == 7


# =============================================================================
# ТЕСТЫ: Степени и корни
# =============================================================================


class TestPow:
    """Тесты pow / exact_int_pow."""

    def test_integer_powers(self) -> None:
        assert bigdecimal.pow(2, 10) == 1024
        assert bigdecimal.pow(Decimal("1.5"), 2) == Decimal("2.25")
        assert bigdecimal.pow(2, -2) == Decimal("0.25")
        assert bigdecimal.pow(5, 0) == 1

    def test_fractional_power_of_negative_base(self) -> None:
        """(-32)^0.2 == -2: знаменатель 5 нечётный."""
        assert bigdecimal.pow(Decimal("-32"), Decimal("0.2")) == -2

    def test_fractional_power_even_denominator(self) -> None:
        with pytest.raises(DomainViolation):
            bigdecimal.pow(Decimal("-8"), Decimal("0.5"))

    def test_zero_cases(self) -> None:
        with pytest.raises(DomainViolation):
            bigdecimal.pow(0, 0)
        with pytest.raises(DomainViolation):
            bigdecimal.pow(0, -1)
        assert bigdecimal.pow(0, Decimal("0.5")) == 0

    def test_large_exponent_is_split(self) -> None:
        """Показатель больше LIMIT вычисляется частями."""
        assert bigdecimal.pow(-1, 3 * 10**8 + 1) == -1
        assert bigdecimal.pow(-1, -(3 * 10**8)) == 1
        assert bigdecimal.pow(1, 10**9) == 1

    def test_exponent_limit(self) -> None:
        with pytest.raises(MagnitudeOverflow):
            bigdecimal.pow(2, 10**16)

    def test_exponent_range_overflow(self) -> None:
        with pytest.raises(MagnitudeOverflow):
            bigdecimal.pow(Decimal("1E+1000"), 10**15)

    def test_exact_int_pow(self) -> None:
        assert exact_int_pow(3, 4) == 81
        assert exact_int_pow(-2, 3) == -8
        assert exact_int_pow(1, 10**12) == 1
        assert exact_int_pow(0, 5) == 0

    def test_exact_int_pow_errors(self) -> None:
        with pytest.raises(DomainViolation):
            exact_int_pow(0, 0)
        with pytest.raises(PreconditionViolation):
            exact_int_pow(2, -1)
        with pytest.raises(MagnitudeOverflow):
            exact_int_pow(2, 10**16)
        with pytest.raises(MagnitudeOverflow):
            exact_int_pow(2, 2**31)

    def test_exact_int_pow_bit_limit(self) -> None:
        """Результат длиннее max_exact_bits отклоняется до вычисления."""
        assert exact_int_pow(2, 9_999_000).bit_length() == 9_999_001
        with pytest.raises(MagnitudeOverflow):
            exact_int_pow(3, 10**9)
        with pytest.raises(MagnitudeOverflow):
            exact_int_pow(3, 7_000_000)
        with pytest.raises(MagnitudeOverflow, match=r"<int with ~\d+ digits>"):
            exact_int_pow(10**5000, 10**6)

    def test_long_int_in_error_message(self) -> None:
        with pytest.raises(MagnitudeOverflow, match="Power <int with ~5001 digits> too large"):
            exact_int_pow(7, 10**5000)
        with pytest.raises(DomainViolation, match="Cannot divide <int with ~5001 digits> by zero"):
            bigdecimal.divide(10**5000, 0)


class TestRoots:
    """Тесты nth_root / sqrt."""

    def test_exact_roots(self) -> None:
        assert nth_root(8, 3) == 2
        assert nth_root(-8, 3) == -2
        assert sqrt(16) == 4
        assert sqrt(Decimal("2.25")) == Decimal("1.5")

    def test_sqrt_two(self) -> None:
        """sqrt(2)^2 == 2 с точностью результата."""
        root = sqrt(2)
        assert str(root).startswith("1.41421356237309504880168872420969807856967187537694")
        assert _close(MC_WORKING.multiply(root, root), Decimal(2), "1e-98")

    def test_sqrt_outside_cache(self) -> None:
        assert sqrt(10**6) == 1000
        assert sqrt(Decimal("0.01")) == Decimal("0.1")

    def test_even_root_of_negative(self) -> None:
        with pytest.raises(DomainViolation):
            nth_root(-4, 2)

    def test_invalid_n(self) -> None:
        with pytest.raises(PreconditionViolation):
            nth_root(4, 0)
        with pytest.raises(PreconditionViolation):
            nth_root(4, 1.5)  # type: ignore[arg-type]


# =============================================================================
# ТЕСТЫ: exp / ln / log
# =============================================================================


class TestExpLn:
    """Тесты трансцендентных функций."""

    def test_exp_of_integers(self) -> None:
        assert exp(0) == 1
        assert exp(1) == Decimal(E_STRING[:-1])

    def test_exp_of_fraction(self) -> None:
        half = exp(Decimal("0.5"))
        assert _close(MC_WORKING.multiply(half, half), BD_E)

    def test_exp_of_negative(self) -> None:
        assert _close(MC_WORKING.multiply(exp(Decimal("-1.25")), exp(Decimal("1.25"))), Decimal(1))

    def test_ln_known_values(self) -> None:
        assert ln(1) == 0
        assert str(ln(2)).startswith("0.693147180559945309417232121458176568")
        assert str(ln(10)).startswith("2.302585092994045684017991454684364207")

    @pytest.mark.parametrize("value", ["2", "10", "0.5", "123.456", "0.0003", "1000000"])
    def test_exp_inverts_ln(self, value: str) -> None:
        """exp(ln(x)) == x в пределах точности результата."""
        x = Decimal(value)
        assert _close(exp(ln(x)), x, "1e-94")

    def test_ln_domain(self) -> None:
        with pytest.raises(DomainViolation):
            ln(0)
        with pytest.raises(DomainViolation):
            ln(-1)

    def test_log(self) -> None:
        assert log(2, 1024) == 10
        assert log(Decimal("0.5"), 8) == -3
        assert log(10, 1) == 0
        assert log(7, 7) == 1

    def test_log_domain(self) -> None:
        with pytest.raises(DomainViolation):
            log(1, 5)
        with pytest.raises(DomainViolation):
            log(0, 5)
        with pytest.raises(DomainViolation):
            log(5, 0)


# =============================================================================
# ТЕСТЫ: Ленивые кэши
# =============================================================================


class TestLazyTable:
    """Кэш строится ровно один раз, в том числе при конкурентном доступе."""

    def test_built_once(self) -> None:
        calls = []

        def builder():
            calls.append(1)
            return [None, Decimal(1), Decimal(2)]

        table = bigdecimal._LazyTable("test", builder)
        assert table.get(2) == 2
        assert table.get(1) == 1
        assert len(calls) == 1

    def test_missing_entry(self) -> None:
        table = bigdecimal._LazyTable("test", lambda: [None])
        with pytest.raises(KeyError):
            table.get(0)

    def test_concurrent_first_access(self) -> None:
        calls = []
        barrier = threading.Barrier(8)

        def builder():
            calls.append(1)
            return [Decimal(i) for i in range(10)]

        table = bigdecimal._LazyTable("test", builder)
        results = []

        def worker() -> None:
            barrier.wait()
            results.append(table.get(5))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert results == [Decimal(5)] * 8
