"""
Tokens — токены арифметического выражения

Токен — tagged variant: Number(Rat) | Symbol(char), где char один из
( ) + - * / ^. TokenList — изменяемый построитель последовательности
токенов, используемый при токенизации и подстановке результатов скобок;
проходы вычислителя работают с неизменяемыми кортежами токенов.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Symbol невозможно создать с недопустимым символом
2. Типизированные аксессоры (number_at/symbol_at) проверяют тип позиции
3. Баланс скобок и чередование число/оператор НЕ проверяются при
   построении: промежуточные последовательности могут быть некорректны
4. Очень длинные числа отображаются сводкой (<int with ~N digits>)
"""

from dataclasses import dataclass
from typing import Final, FrozenSet, Iterable, Iterator, List, Tuple, Union

from ratnum.core.contracts import require_in_range, require_instance, require_true
from ratnum.core.domain.rat import Rat
from ratnum.core.errors import describe_ratio

SYMBOLS: Final[FrozenSet[str]] = frozenset("()+-*/^")


# =============================================================================
# ТОКЕНЫ
# =============================================================================


@dataclass(frozen=True)
class Number:
    """Числовой токен"""

    value: Rat

    def __post_init__(self) -> None:
        require_instance(self.value, Rat, "value")

    def __str__(self) -> str:
        return f"[{describe_ratio(self.value.numerator, self.value.denominator)}]"


@dataclass(frozen=True)
class Symbol:
    """Символьный токен: ( ) + - * / ^"""

    char: str

    def __post_init__(self) -> None:
        require_instance(self.char, str, "char")
        require_true(
            self.char in SYMBOLS and len(self.char) == 1,
            "Symbol must be (, ), +, -, *, /, or ^. Was %r",
            self.char,
        )

    def __str__(self) -> str:
        return self.char


Token = Union[Number, Symbol]

Tokens = Tuple[Token, ...]


def is_symbol(token: Token, char: str) -> bool:
    """True если token — Symbol(char)"""
    return isinstance(token, Symbol) and token.char == char


def render(tokens: Iterable[Token]) -> str:
    """Компактное представление: символы как есть, числа как [n/d]"""
    return "".join(str(token) for token in tokens)


def to_token(item: Union[Token, Rat, int, str]) -> Token:
    """
    Преобразует Rat/int/символ в токен (токены возвращаются как есть).

    Examples:
        >>> to_token("+")
        Symbol(char='+')
        >>> to_token(3)
        Number(value=Rat(3, 1))
    """
    if isinstance(item, (Number, Symbol)):
        return item
    if isinstance(item, Rat):
        return Number(item)
    if isinstance(item, int) and not isinstance(item, bool):
        return Number(Rat.of(item))
    require_instance(item, str, "token")
    return Symbol(item)


# =============================================================================
# TOKEN LIST
# =============================================================================


class TokenList:
    """
    Изменяемая упорядоченная последовательность токенов.

    Все мутирующие методы возвращают self для цепочек вызовов.
    Индексы проверяются: нарушение — PreconditionViolation.
    """

    def __init__(self, tokens: Iterable[Token] = ()):
        self._tokens: List[Token] = []
        for token in tokens:
            self.add(token)

    @classmethod
    def of(cls, *items: Union[Token, Rat, int, str]) -> "TokenList":
        """TokenList.of(Rat.of(2), "*", 3)"""
        return cls(to_token(item) for item in items)

    # -------------------------------------------------------------------------
    # Размер и итерация
    # -------------------------------------------------------------------------

    def size(self) -> int:
        return len(self._tokens)

    def is_empty(self) -> bool:
        return not self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenList):
            return NotImplemented
        return self._tokens == other._tokens

    __hash__ = None  # type: ignore[assignment]

    def freeze(self) -> Tokens:
        """Неизменяемый снимок токенов"""
        return tuple(self._tokens)

    # -------------------------------------------------------------------------
    # Мутации
    # -------------------------------------------------------------------------

    def add(self, token: Token) -> "TokenList":
        self._tokens.append(_checked(token))
        return self

    def add_number(self, number: Rat) -> "TokenList":
        return self.add(Number(number))

    def add_symbol(self, char: str) -> "TokenList":
        return self.add(Symbol(char))

    def extend(self, tokens: Iterable[Token]) -> "TokenList":
        for token in tokens:
            self.add(token)
        return self

    def insert(self, index: int, token: Token) -> "TokenList":
        require_in_range(index, 0, self.size(), "index")
        self._tokens.insert(index, _checked(token))
        return self

    def set(self, index: int, token: Token) -> "TokenList":
        self._check_index(index)
        self._tokens[index] = _checked(token)
        return self

    def remove(self, index: int) -> "TokenList":
        self._check_index(index)
        del self._tokens[index]
        return self

    # -------------------------------------------------------------------------
    # Доступ
    # -------------------------------------------------------------------------

    def token_at(self, index: int) -> Token:
        self._check_index(index)
        return self._tokens[index]

    def is_number(self, index: int) -> bool:
        return isinstance(self.token_at(index), Number)

    def is_symbol(self, index: int) -> bool:
        return isinstance(self.token_at(index), Symbol)

    def number_at(self, index: int) -> Rat:
        token = self.token_at(index)
        require_true(
            isinstance(token, Number),
            "Element at index %s was expected to be a number, but was %s instead",
            index,
            token,
        )
        return token.value  # type: ignore[union-attr]

    def symbol_at(self, index: int) -> str:
        token = self.token_at(index)
        require_true(
            isinstance(token, Symbol),
            "Element at index %s was expected to be a symbol, but was %s instead",
            index,
            token,
        )
        return token.char  # type: ignore[union-attr]

    def sublist(self, start: int, end: int) -> "TokenList":
        """Токены [start, end) как новый TokenList"""
        require_in_range(start, 0, self.size(), "start")
        require_in_range(end, start, self.size(), "end")
        return TokenList(self._tokens[start:end])

    def _check_index(self, index: int) -> None:
        require_true(
            0 <= index < len(self._tokens),
            "index must be at least 0 and less than %s. Was %s",
            len(self._tokens),
            index,
        )

    def __str__(self) -> str:
        return render(self._tokens)

    def __repr__(self) -> str:
        return f"TokenList({render(self._tokens)!r})"


def _checked(token: Token) -> Token:
    require_instance(token, (Number, Symbol), "token")
    return token
