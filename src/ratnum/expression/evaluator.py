"""
Evaluator — вычисление арифметических выражений в Rat

Поддерживаемый синтаксис: цифры, десятичная точка, ( ) + - * / ^,
пробелы (игнорируются), неявное умножение рядом со скобками: 2(3+4),
(1)(2), (3*4)2.

Порядок обработки:
1. Токенизация
2. Скобки: самая правая '(' перед первой ')' вычисляется первой,
   результат подставляется обратно (с неявным '*')
3. Для каждого сегмента без скобок — чистые проходы над кортежем токенов:
   a. Степени справа налево; серия унарных '-' после '^' меняет знак
      показателя по чётности
   b. Унарные минусы
   c. Умножение/деление слева направо
   d. Сложение/вычитание слева направо

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Каждый проход — чистая функция: tuple токенов -> новый tuple
2. Любая синтаксическая ошибка — ExpressionParseError с индексом
3. Ошибки не перехватываются внутри; try_evaluate лишь переводит их
   в значение Evaluation
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Final, List, Optional

from ratnum.core.contracts import require_non_empty_string, require_not_null
from ratnum.core.domain.rat import Rat
from ratnum.core.errors import ErrorKind, ExpressionParseError, RatnumError
from ratnum.expression.tokens import (
    SYMBOLS,
    Number,
    Symbol,
    Token,
    TokenList,
    Tokens,
    is_symbol,
    render,
)

DIGITS: Final[str] = "0123456789"


# =============================================================================
# RESULT TYPE
# =============================================================================


@dataclass(frozen=True)
class Evaluation:
    """Результат try_evaluate: значение либо категория ошибки."""

    value: Optional[Rat]
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None


# =============================================================================
# ТОЧКИ ВХОДА
# =============================================================================


def evaluate(expression: str) -> Rat:
    """
    Вычисляет выражение.

    Args:
        expression: Текст выражения

    Returns:
        Значение в виде Rat

    Raises:
        PreconditionViolation: None или пустая строка
        ExpressionParseError: Некорректное выражение
        DomainViolation: Неопределённая операция (1/0, 0^0, (-1)^(1/2))
        MagnitudeOverflow: Слишком большой показатель степени

    Examples:
        >>> str(evaluate("2^2^3-2^-2/3^2+4+5^2-3*2^2*5"))
        '8099/36'
        >>> str(evaluate("2(3*4)"))
        '24'
    """
    return resolve_parentheses(tokenize(expression).freeze())


def try_evaluate(expression: str) -> Evaluation:
    """
    Как evaluate, но ошибки библиотеки возвращаются значением.

    Examples:
        >>> try_evaluate("(1+2").error_kind
        <ErrorKind.PARSE: 'parse'>
    """
    try:
        return Evaluation(value=evaluate(expression))
    except RatnumError as e:
        return Evaluation(value=None, error_kind=e.kind, message=str(e))


# =============================================================================
# ТОКЕНИЗАЦИЯ
# =============================================================================


def tokenize(expression: str) -> TokenList:
    """
    Разбивает текст на токены после удаления всех пробельных символов.

    Серия цифр и точек — одно число; любой другой символ должен быть
    одним из ( ) + - * / ^.

    Raises:
        PreconditionViolation: None или пустая строка
        ExpressionParseError: Только пробелы, неизвестный символ,
            некорректная запись числа
    """
    require_not_null(expression, "expression")
    require_non_empty_string(expression, "expression")
    text = "".join(expression.split())
    if not text:
        raise ExpressionParseError("Expression contains only whitespace", None, expression)
    tokens = TokenList()
    index = 0
    while index < len(text):
        char = text[index]
        if char in DIGITS or char == ".":
            end = index
            while end < len(text) and (text[end] in DIGITS or text[end] == "."):
                end += 1
            tokens.add_number(_parse_number(text, index, end))
            index = end
        elif char in SYMBOLS:
            tokens.add_symbol(char)
            index += 1
        else:
            raise ExpressionParseError(f"Unexpected character {char!r} at index {index}", index, text)
    return tokens


def _parse_number(text: str, start: int, end: int) -> Rat:
    literal = text[start:end]
    whole, point, fractional = literal.partition(".")
    if "." in fractional:
        second_point = start + len(whole) + 1 + fractional.index(".")
        raise ExpressionParseError(
            f"Number {literal!r} has more than one decimal point", second_point, text
        )
    if point and not fractional:
        raise ExpressionParseError(
            f"Decimal point at index {start + len(whole)} is not followed by digits",
            start + len(whole),
            text,
        )
    return Rat.of_decimal(Decimal(f"{whole or '0'}.{fractional or '0'}"))


# =============================================================================
# СКОБКИ
# =============================================================================


def resolve_parentheses(tokens: Tokens) -> Rat:
    """
    Вычисляет скобки изнутри наружу, затем весь плоский сегмент.

    Самая правая '(' перед первой ')' образует самую внутреннюю пару.
    Результат подставляется вместо пары; '*' вставляется, если слева
    число или ')', либо если справа число.

    Raises:
        ExpressionParseError: Несбалансированные или пустые скобки
    """
    while True:
        latest_open = -1
        earliest_close = -1
        for index, token in enumerate(tokens):
            if is_symbol(token, "("):
                latest_open = index
            elif is_symbol(token, ")"):
                if latest_open == -1:
                    raise ExpressionParseError(
                        f"Mismatched ')' at index {index}", index, render(tokens)
                    )
                earliest_close = index
                break
        if latest_open == -1:
            return evaluate_flat(tokens)
        if earliest_close == -1:
            raise ExpressionParseError(
                f"Mismatched '(' at index {latest_open}", latest_open, render(tokens)
            )
        if earliest_close == latest_open + 1:
            raise ExpressionParseError(
                f"Empty parentheses at index {latest_open}", latest_open, render(tokens)
            )

        inner = evaluate_flat(tokens[latest_open + 1 : earliest_close])
        spliced = TokenList(tokens[:latest_open])
        if latest_open > 0:
            preceding = tokens[latest_open - 1]
            if isinstance(preceding, Number) or is_symbol(preceding, ")"):
                spliced.add_symbol("*")
        spliced.add_number(inner)
        following = earliest_close + 1
        if following < len(tokens) and isinstance(tokens[following], Number):
            spliced.add_symbol("*")
        spliced.extend(tokens[following:])
        tokens = spliced.freeze()


# =============================================================================
# ПРОХОДЫ ДЛЯ СЕГМЕНТА БЕЗ СКОБОК
# =============================================================================


def evaluate_flat(tokens: Tokens) -> Rat:
    """Степени -> унарные минусы -> * / -> + -"""
    if not tokens:
        raise ExpressionParseError("Expression is empty", 0, "")
    without_exponents = eliminate_exponents(tokens)
    without_negatives = eliminate_negatives(without_exponents)
    without_products = eliminate_multiplication_division(without_negatives)
    return eliminate_addition_subtraction(without_products)


def eliminate_exponents(tokens: Tokens) -> Tokens:
    """
    Вычисляет все '^' справа налево.

    Перед '^' должно стоять число; после — серия '-' и число. Нечётное
    число минусов делает показатель отрицательным: 2^--2 == 4, 2^-2 == 1/4.

    Raises:
        ExpressionParseError: '^' в начале или конце, не число у '^'
    """
    while True:
        size = len(tokens)
        if is_symbol(tokens[0], "^"):
            raise ExpressionParseError("Expression cannot begin with '^'", 0, render(tokens))
        if is_symbol(tokens[-1], "^"):
            raise ExpressionParseError(
                "Expression cannot end with '^'", size - 1, render(tokens)
            )
        caret = -1
        for index in range(size - 2, 0, -1):
            if is_symbol(tokens[index], "^"):
                caret = index
                break
        if caret == -1:
            return tokens

        base = tokens[caret - 1]
        if not isinstance(base, Number):
            raise ExpressionParseError(
                f"Expected a number before '^' at index {caret - 1}, but got {base}",
                caret - 1,
                render(tokens),
            )
        last_minus = caret
        factor = 1
        while last_minus < size - 2 and is_symbol(tokens[last_minus + 1], "-"):
            last_minus += 1
            factor = -factor
        power = tokens[last_minus + 1]
        if not isinstance(power, Number):
            raise ExpressionParseError(
                f"Expected a number after '^' at index {last_minus + 1}, but got {power}",
                last_minus + 1,
                render(tokens),
            )
        result = base.value.pow(power.value.times(factor))
        tokens = tokens[: caret - 1] + (Number(result),) + tokens[last_minus + 2 :]


def eliminate_negatives(tokens: Tokens) -> Tokens:
    """
    Сворачивает унарные минусы в числа.

    Ожидается чередование число/символ; на позиции числа серия '-'
    перед числом умножает его на (-1)^длина_серии.

    Raises:
        ExpressionParseError: Нарушено чередование число/символ
    """
    result: List[Token] = []
    size = len(tokens)
    expect_number = True
    index = 0
    while index < size:
        token = tokens[index]
        if expect_number:
            if isinstance(token, Number):
                result.append(token)
            elif is_symbol(token, "-"):
                factor = -1
                index += 1
                while index < size - 1 and is_symbol(tokens[index], "-"):
                    factor = -factor
                    index += 1
                operand = tokens[index] if index < size else None
                if not isinstance(operand, Number):
                    raise ExpressionParseError(
                        f"Expected a number at index {index}", index, render(tokens)
                    )
                result.append(Number(operand.value.times(factor)))
            else:
                raise ExpressionParseError(
                    f"Expected a number or '-' at index {index}, but got {token}",
                    index,
                    render(tokens),
                )
        else:
            if not isinstance(token, Symbol):
                raise ExpressionParseError(
                    f"Expected a symbol at index {index}, but got {token}", index, render(tokens)
                )
            result.append(token)
        expect_number = not expect_number
        index += 1
    return tuple(result)


def eliminate_multiplication_division(tokens: Tokens) -> Tokens:
    """
    Сворачивает '*' и '/' слева направо; остаются числа, '+' и '-'.

    Raises:
        ExpressionParseError: Чётное число токенов или нарушено чередование
        DomainViolation: Деление на ноль
    """
    _require_alternating(tokens)
    result: List[Token] = [tokens[0]]
    for index in range(1, len(tokens), 2):
        operator = tokens[index]
        operand = tokens[index + 1]
        char = operator.char  # type: ignore[union-attr]
        if char in "*/":
            accumulated = result[-1].value  # type: ignore[union-attr]
            result[-1] = Number(_apply(accumulated, operand.value, char))  # type: ignore[union-attr]
        elif char in "+-":
            result.extend((operator, operand))
        else:
            raise ExpressionParseError(
                f"Unexpected symbol {char!r} at index {index}", index, render(tokens)
            )
    return tuple(result)


def eliminate_addition_subtraction(tokens: Tokens) -> Rat:
    """
    Сворачивает '+' и '-' слева направо в одно значение.

    Raises:
        ExpressionParseError: Чётное число токенов, нарушено чередование
            или символ, отличный от '+'/'-'
    """
    _require_alternating(tokens)
    value: Rat = tokens[0].value  # type: ignore[union-attr]
    for index in range(1, len(tokens), 2):
        char = tokens[index].char  # type: ignore[union-attr]
        if char not in "+-":
            raise ExpressionParseError(
                f"Unexpected symbol {char!r} at index {index}", index, render(tokens)
            )
        value = _apply(value, tokens[index + 1].value, char)  # type: ignore[union-attr]
    return value


def _require_alternating(tokens: Tokens) -> None:
    # Нечётная длина, числа на чётных позициях, символы на нечётных
    size = len(tokens)
    if size % 2 == 0:
        raise ExpressionParseError(
            f"Expected an odd number of tokens, but got {size}", None, render(tokens)
        )
    for index, token in enumerate(tokens):
        expected = Number if index % 2 == 0 else Symbol
        if not isinstance(token, expected):
            raise ExpressionParseError(
                f"Expected a {expected.__name__.lower()} at index {index}, but got {token}",
                index,
                render(tokens),
            )


def _apply(left: Rat, right: Rat, char: str) -> Rat:
    if char == "+":
        return left.plus(right)
    if char == "-":
        return left.minus(right)
    if char == "*":
        return left.times(right)
    return left.divided_by(right)
