"""
Preconditions — Fail-fast проверки аргументов

Набор guard-функций, которые вызываются на входе публичных операций.
Каждая функция либо возвращает проверенное значение, либо немедленно
поднимает исключение с описательным сообщением.

Сообщения формируются в printf-стиле (`message % args`), форматирование
выполняется только при нарушении условия; int-аргументы проходят через
describe_int, поэтому очень длинные значения не ломают форматирование.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Библиотека никогда не перехватывает эти исключения
2. По умолчанию поднимается PreconditionViolation (подкласс ValueError)
3. Параметр error позволяет поднять доменную ошибку той же проверкой
"""

from typing import Any, Tuple, Type, TypeVar, Union

from ratnum.core.errors import (
    PreconditionViolation,
    RatnumError,
    describe,
    describe_int,
    is_long_int,
)

T = TypeVar("T")


def _format(message: str, args: Tuple[Any, ...]) -> str:
    if not args:
        return message
    try:
        return message % tuple(describe_int(arg) if is_long_int(arg) else arg for arg in args)
    except (TypeError, ValueError) as e:
        raise PreconditionViolation(
            "Message and args are illegally formatted",
            {"message": message, "args": ", ".join(describe(arg) for arg in args)},
        ) from e


# =============================================================================
# УСЛОВИЯ
# =============================================================================


def require_true(
    condition: bool,
    message: str,
    *args: Any,
    error: Type[RatnumError] = PreconditionViolation,
) -> None:
    """
    Требует истинности условия.

    Args:
        condition: Проверяемое условие
        message: Сообщение (printf-шаблон)
        *args: Аргументы шаблона
        error: Класс поднимаемого исключения

    Raises:
        error: Если condition ложно

    Examples:
        >>> require_true(1 < 2, "never raised")
        >>> require_true(False, "n must be positive. Was %s", -1)
        Traceback (most recent call last):
        ...
        ratnum.core.errors.PreconditionViolation: n must be positive. Was -1
    """
    if not condition:
        raise error(_format(message, args))


def require_false(
    condition: bool,
    message: str,
    *args: Any,
    error: Type[RatnumError] = PreconditionViolation,
) -> None:
    """Требует ложности условия (зеркало require_true)"""
    if condition:
        raise error(_format(message, args))


# =============================================================================
# ЗНАЧЕНИЯ
# =============================================================================


def require_not_null(value: T, name: str) -> T:
    """
    Требует, чтобы значение не было None.

    Returns:
        value без изменений
    """
    if value is None:
        raise PreconditionViolation(f"{name} must not be None")
    return value


def require_instance(value: T, types: Union[type, Tuple[type, ...]], name: str) -> T:
    """
    Требует, чтобы значение было экземпляром types.

    bool отклоняется, если среди types явно нет bool (bool — подкласс int).
    """
    require_not_null(value, name)
    type_tuple = types if isinstance(types, tuple) else (types,)
    if isinstance(value, bool) and bool not in type_tuple:
        raise PreconditionViolation(f"{name} must not be a bool, got {value!r}")
    if not isinstance(value, type_tuple):
        expected = ", ".join(t.__name__ for t in type_tuple)
        raise PreconditionViolation(
            f"{name} must be of type {expected}, got {type(value).__name__}"
        )
    return value


def require_not_equal(value: T, other: Any, name: str) -> T:
    """Требует value != other"""
    if value == other:
        raise PreconditionViolation(
            f"{name} must not equal {describe(other)}, got {describe(value)}"
        )
    return value


def require_non_empty_string(value: str, name: str) -> str:
    """Требует непустую строку (пробельная строка считается непустой)"""
    require_instance(value, str, name)
    if not value:
        raise PreconditionViolation(f"{name} must be a non-empty string")
    return value


def require_in_range(value: T, low: Any, high: Any, name: str) -> T:
    """
    Требует low <= value <= high (обе границы включительно).

    Examples:
        >>> require_in_range(3, 0, 5, "index")
        3
    """
    require_not_null(value, name)
    if value < low or value > high:
        raise PreconditionViolation(
            f"{name} must be in [{describe(low)}, {describe(high)}], got {describe(value)}"
        )
    return value


def require_greater(value: T, bound: Any, name: str) -> T:
    """Требует value > bound"""
    require_not_null(value, name)
    if not value > bound:
        raise PreconditionViolation(f"{name} must be > {describe(bound)}, got {describe(value)}")
    return value
