"""
Errors — Иерархия исключений ratnum

Все исключения библиотеки наследуются от RatnumError и одновременно от
подходящего встроенного исключения Python, поэтому вызывающий код может
ловить как `DomainViolation`, так и обычный `ArithmeticError`.

Иерархия:
    RatnumError (Exception)
    ├── PreconditionViolation (ValueError)    — null/пусто/вне диапазона
    ├── DomainViolation (ArithmeticError)     — результат не определён
    ├── MagnitudeOverflow (OverflowError)     — слишком велико для вычисления
    └── ExpressionParseError (ValueError)     — некорректный текст выражения

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ни одно исключение не перехватывается внутри библиотеки
2. Диагностика (имя, ожидаемое/фактическое значение) встроена в сообщение
3. Каждый класс несёт ErrorKind для маппинга в result-тип
4. Сообщения не форматируют неограниченные int напрямую (describe_int)
"""

import math
from enum import Enum
from typing import Any, Dict, Final, Optional


# =============================================================================
# ENUMS
# =============================================================================


class ErrorKind(str, Enum):
    """Категория ошибки (для result-типа без инспекции классов)"""

    PRECONDITION = "precondition"
    DOMAIN = "domain"
    OVERFLOW = "overflow"
    PARSE = "parse"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class RatnumError(Exception):
    """
    Базовое исключение ratnum.

    Поддерживает:
    - Текстовое сообщение
    - Контекст (dict) с участвующими значениями
    """

    kind: ErrorKind = ErrorKind.DOMAIN

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        context_str = ", ".join(f"{k}={describe(v)}" for k, v in self.context.items())
        return f"{self.message} | Context: {context_str}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class PreconditionViolation(RatnumError, ValueError):
    """Нарушено предусловие аргумента (None, пустая строка, вне диапазона)"""

    kind = ErrorKind.PRECONDITION


class DomainViolation(RatnumError, ArithmeticError):
    """
    Результат операции не определён.

    Примеры: ln(0), чётный корень из отрицательного, 0^0,
    деление на ноль, log по основанию 1.
    """

    kind = ErrorKind.DOMAIN


class MagnitudeOverflow(RatnumError, OverflowError):
    """Показатель или результат слишком велик для вычисления/представления"""

    kind = ErrorKind.OVERFLOW


class ExpressionParseError(RatnumError, ValueError):
    """
    Ошибка разбора арифметического выражения.

    Attributes:
        index: Позиция проблемного символа/токена (None если неприменимо)
        expression: Полный текст выражения (или его токенное представление)
    """

    kind = ErrorKind.PARSE

    def __init__(self, message: str, index: Optional[int] = None, expression: str = ""):
        context: Dict[str, Any] = {}
        if index is not None:
            context["index"] = index
        if expression:
            context["expression"] = expression
        super().__init__(message, context)
        self.index = index
        self.expression = expression


# =============================================================================
# ПРЕДСТАВЛЕНИЕ ЗНАЧЕНИЙ В СООБЩЕНИЯХ
# =============================================================================

# int длиннее этого числа цифр не переводится в строку (лимит CPython — 4300)
MAX_SHOWN_DIGITS: Final[int] = 1000

_LOG10_2: Final[float] = math.log10(2)


def _digit_estimate(value: int) -> int:
    return int(value.bit_length() * _LOG10_2) + 1


def is_long_int(value: Any) -> bool:
    """True для int, который describe_int заменит сводкой"""
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return _digit_estimate(value) > MAX_SHOWN_DIGITS


def describe_int(value: int) -> str:
    """
    Строка для int в сообщении об ошибке.

    Очень длинные значения заменяются сводкой `<int with ~N digits>`,
    потому что str() для int длиннее 4300 цифр поднимает ValueError.

    Examples:
        >>> describe_int(-42)
        '-42'
        >>> describe_int(10**5000)
        '<int with ~5001 digits>'
    """
    if not is_long_int(value):
        return str(value)
    digits = _digit_estimate(value)
    sign = "-" if value < 0 else ""
    return f"{sign}<int with ~{digits} digits>"


def describe_ratio(numerator: int, denominator: int) -> str:
    """Строка для дроби в сообщении: 'n/d' или 'n' при d == 1"""
    if denominator == 1:
        return describe_int(numerator)
    return f"{describe_int(numerator)}/{describe_int(denominator)}"


def describe(value: Any) -> str:
    """str(value), но int описывается через describe_int"""
    if isinstance(value, int) and not isinstance(value, bool):
        return describe_int(value)
    return str(value)
