"""
Expression — токенизация и вычисление арифметических выражений.
"""

from ratnum.expression.evaluator import Evaluation, evaluate, tokenize, try_evaluate
from ratnum.expression.tokens import Number, Symbol, Token, TokenList

__all__ = [
    "Evaluation",
    "Number",
    "Symbol",
    "Token",
    "TokenList",
    "evaluate",
    "tokenize",
    "try_evaluate",
]
