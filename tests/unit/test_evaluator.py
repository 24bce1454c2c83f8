"""
Тесты для Evaluator — вычисление арифметических выражений

Проверяемые инварианты:
1. Приоритет: скобки > степени (справа налево) > унарный минус > * / > + -
2. Неявное умножение рядом со скобками
3. Серия минусов после '^' меняет знак показателя по чётности
4. Синтаксические ошибки — ExpressionParseError с позицией
5. Арифметические ошибки проходят насквозь без перехвата
6. try_evaluate возвращает категорию ошибки значением
7. Огромные показатели и значения дают ошибки библиотеки, а не ValueError
"""

import pytest

from ratnum import Rat, evaluate, try_evaluate
from ratnum.core.errors import (
    DomainViolation,
    ErrorKind,
    ExpressionParseError,
    MagnitudeOverflow,
    PreconditionViolation,
)
from ratnum.expression.evaluator import (
    eliminate_addition_subtraction,
    eliminate_exponents,
    eliminate_multiplication_division,
    eliminate_negatives,
    tokenize,
)
from ratnum.expression.tokens import Number, Symbol


def _n(numerator: int, denominator: int = 1) -> Number:
    return Number(Rat.of(numerator, denominator))


# =============================================================================
# ТЕСТЫ: Токенизация
# =============================================================================


class TestTokenize:
    """Тесты разбиения текста на токены."""

    def test_numbers_and_symbols(self) -> None:
        assert str(tokenize("2(3.5)")) == "[2]([7/2])"
        assert str(tokenize(".5+10")) == "[1/2]+[10]"

    def test_whitespace_is_removed(self) -> None:
        """Пробелы удаляются до разбора: '1 2' — это 12."""
        assert str(tokenize(" 1 2 *\t3\n")) == "[12]*[3]"

    def test_unknown_character(self) -> None:
        with pytest.raises(ExpressionParseError) as exc_info:
            tokenize("1 + a")
        assert exc_info.value.index == 2
        assert exc_info.value.expression == "1+a"

    def test_second_decimal_point(self) -> None:
        with pytest.raises(ExpressionParseError) as exc_info:
            tokenize("1.2.3")
        assert exc_info.value.index == 3

    def test_trailing_decimal_point(self) -> None:
        with pytest.raises(ExpressionParseError) as exc_info:
            tokenize("12.+1")
        assert exc_info.value.index == 2

    def test_empty_and_blank(self) -> None:
        """Пустая строка — нарушение предусловия, пробельная — ошибка разбора."""
        with pytest.raises(PreconditionViolation):
            tokenize("")
        with pytest.raises(PreconditionViolation):
            tokenize(None)  # type: ignore[arg-type]
        with pytest.raises(ExpressionParseError):
            tokenize("   ")


# =============================================================================
# ТЕСТЫ: Проходы
# =============================================================================


class TestPasses:
    """Каждый проход — чистая функция над кортежем токенов."""

    def test_eliminate_exponents(self) -> None:
        tokens = (_n(2), Symbol("^"), Symbol("-"), _n(2))
        assert eliminate_exponents(tokens) == (_n(1, 4),)

    def test_exponents_right_to_left(self) -> None:
        tokens = (_n(2), Symbol("^"), _n(3), Symbol("^"), _n(2))
        assert eliminate_exponents(tokens) == (_n(512),)

    def test_double_minus_in_exponent(self) -> None:
        tokens = (_n(2), Symbol("^"), Symbol("-"), Symbol("-"), _n(2))
        assert eliminate_exponents(tokens) == (_n(4),)

    def test_exponents_leave_other_tokens(self) -> None:
        tokens = (Symbol("-"), _n(3), Symbol("^"), _n(2), Symbol("+"), _n(1))
        assert eliminate_exponents(tokens) == (Symbol("-"), _n(9), Symbol("+"), _n(1))

    def test_eliminate_negatives(self) -> None:
        tokens = (Symbol("-"), Symbol("-"), _n(3), Symbol("*"), Symbol("-"), _n(2))
        assert eliminate_negatives(tokens) == (_n(3), Symbol("*"), _n(-2))

    def test_eliminate_multiplication_division(self) -> None:
        tokens = (_n(2), Symbol("*"), _n(3), Symbol("+"), _n(4), Symbol("/"), _n(2))
        assert eliminate_multiplication_division(tokens) == (_n(6), Symbol("+"), _n(2))

    def test_eliminate_addition_subtraction(self) -> None:
        tokens = (_n(1), Symbol("-"), _n(2), Symbol("+"), _n(4))
        assert eliminate_addition_subtraction(tokens) == Rat.of(3)

    def test_even_token_count(self) -> None:
        with pytest.raises(ExpressionParseError):
            eliminate_addition_subtraction((_n(1), Symbol("+")))


# =============================================================================
# ТЕСТЫ: Вычисление
# =============================================================================


class TestEvaluate:
    """Сквозные примеры."""

    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("1-2/3+4", Rat.of(13, 3)),
            ("2^2^3-2^-2/3^2+4+5^2-3*2^2*5", Rat.of(8099, 36)),
            ("2(3*4)", Rat.of(24)),
            ("(3*4)2", Rat.of(24)),
            ("(1)(2)3(4)5(((6)7)8)", Rat.of(40320)),
            ("(-32)^(2/5)", Rat.of(4)),
            ("3^--2^3", Rat.of(6561)),
            ("-2^(-2)^2", Rat.of(-16)),
            ("-4^-2^-1", Rat.of(-1, 2)),
            ("-2.0^-2.0(4.0^-2.0^-1.0)^(2.2-.2)", Rat.of(-1, 16)),
            ("0^-1", Rat.of(0)),
            ("0.000^-43.1234", Rat.of(0)),
            ("--1", Rat.of(1)),
            ("0.1+0.2", Rat.of(3, 10)),
            ("  3 / 4 ", Rat.of(3, 4)),
            ("1 2", Rat.of(12)),
            ("((((7))))", Rat.of(7)),
            ("2*-3", Rat.of(-6)),
            ("(2/3)^-2", Rat.of(9, 4)),
        ],
    )
    def test_expressions(self, expression: str, expected: Rat) -> None:
        assert evaluate(expression) == expected

    def test_negative_exponent_sign_binds_before_power(self) -> None:
        """-2^2 — это -(2^2)."""
        assert evaluate("-2^2") == -4
        assert evaluate("(-2)^2") == 4

    @pytest.mark.parametrize(
        "expression",
        ["(1+2", "1+2)", ")(", "()", "2^", "^2", "*2", "2*", "2**3", "-", "1+", "2(^3)"],
    )
    def test_parse_errors(self, expression: str) -> None:
        with pytest.raises(ExpressionParseError):
            evaluate(expression)

    def test_mismatched_parenthesis_position(self) -> None:
        with pytest.raises(ExpressionParseError) as exc_info:
            evaluate("1+2)")
        assert exc_info.value.index == 3
        assert exc_info.value.expression == "[1]+[2])"

    @pytest.mark.parametrize("expression", ["1/0", "0^0", "(-1)^(1/2)", "(2-2)^(1-1)"])
    def test_domain_errors(self, expression: str) -> None:
        with pytest.raises(DomainViolation):
            evaluate(expression)

    def test_overflow(self) -> None:
        with pytest.raises(MagnitudeOverflow):
            evaluate("2^(10^17)")

    def test_precondition(self) -> None:
        with pytest.raises(PreconditionViolation):
            evaluate("")

    def test_empty_parentheses_position(self) -> None:
        """Пустые скобки — ошибка разбора с позицией и полным выражением."""
        with pytest.raises(ExpressionParseError) as exc_info:
            evaluate("1+()")
        assert exc_info.value.index == 2
        assert exc_info.value.expression == "[1]+()"

    def test_huge_exponent_fails_fast(self) -> None:
        """Показатель, результат которого длиннее max_exact_bits, отклоняется сразу."""
        with pytest.raises(MagnitudeOverflow):
            evaluate("3^1000000000")
        with pytest.raises(MagnitudeOverflow):
            evaluate("7^7^7^7")

    def test_huge_values_in_error_messages(self) -> None:
        """Числа длиннее 4300 цифр не ломают текст ошибки."""
        with pytest.raises(DomainViolation, match="<int with ~5001 digits>"):
            evaluate("10^5000/0")
        with pytest.raises(ExpressionParseError) as exc_info:
            evaluate("(10^5000)^")
        assert exc_info.value.expression == "[<int with ~5001 digits>]^"


class TestTryEvaluate:
    """Результат вместо исключения."""

    def test_success(self) -> None:
        result = try_evaluate("1-2/3+4")
        assert result.ok
        assert result.value == Rat.of(13, 3)
        assert result.error_kind is None
        assert result.message is None

    @pytest.mark.parametrize(
        "expression,kind",
        [
            ("(1+2", ErrorKind.PARSE),
            ("1/0", ErrorKind.DOMAIN),
            ("2^(10^17)", ErrorKind.OVERFLOW),
            ("", ErrorKind.PRECONDITION),
        ],
    )
    def test_error_kinds(self, expression: str, kind: ErrorKind) -> None:
        result = try_evaluate(expression)
        assert not result.ok
        assert result.value is None
        assert result.error_kind is kind
        assert result.message

    def test_huge_division_by_zero(self) -> None:
        result = try_evaluate("10^5000/0")
        assert result.error_kind is ErrorKind.DOMAIN
        assert "<int with ~5001 digits>" in result.message

    def test_non_string_input(self) -> None:
        result = try_evaluate(12)  # type: ignore[arg-type]
        assert result.error_kind is ErrorKind.PRECONDITION
