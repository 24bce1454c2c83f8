"""
ratnum — точная рациональная арифметика с высокоточным приближением

Публичный API:
- Rat: неизменяемое рациональное число
- evaluate / try_evaluate: вычисление текстовых выражений
- Иерархия исключений RatnumError
"""

import logging

from ratnum.core.domain.rat import Rat
from ratnum.core.errors import (
    DomainViolation,
    ErrorKind,
    ExpressionParseError,
    MagnitudeOverflow,
    PreconditionViolation,
    RatnumError,
)
from ratnum.expression.evaluator import Evaluation, evaluate, try_evaluate

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Value type
    "Rat",
    # Expressions
    "Evaluation",
    "evaluate",
    "try_evaluate",
    # Errors
    "DomainViolation",
    "ErrorKind",
    "ExpressionParseError",
    "MagnitudeOverflow",
    "PreconditionViolation",
    "RatnumError",
]
