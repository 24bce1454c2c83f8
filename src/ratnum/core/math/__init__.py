"""
Core math modules для ratnum

Точные операции над дробями, простые множители и высокоточный
десятичный движок.
"""

# Primes / integer log
from ratnum.core.math.primes import int_log, prime_factors

# High-precision decimal engine
from ratnum.core.math.bigdecimal import (
    BD_E,
    BD_PI,
    bd,
    digit_count,
    digits,
    finalize,
    fraction,
    mixed_number,
    round_int,
    round_places,
)

__all__ = [
    # Primes
    "int_log",
    "prime_factors",
    # Decimal engine
    "BD_E",
    "BD_PI",
    "bd",
    "digit_count",
    "digits",
    "finalize",
    "fraction",
    "mixed_number",
    "round_int",
    "round_places",
]
