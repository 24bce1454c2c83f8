"""
Primes — разложение на простые множители и точный целочисленный логарифм

Поддерживает shortcut точности для log: если log_base(val) рационален,
он вычисляется из разложений base и val на простые множители без
десятичной аппроксимации (log_8(4) = 2/3 ровно).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. prime_factors(n) определён только для n > 1
2. Разложения для n <= max_cached_prime_factors берутся из кэша
3. Кэш неизменяем; наружу отдаются копии
"""

import math
from types import MappingProxyType
from typing import Dict, Final, Mapping, Optional, Tuple

from ratnum.core.config import SETTINGS
from ratnum.core.contracts import require_true

MAX_CACHED_PRIME_FACTORS: Final[int] = SETTINGS.max_cached_prime_factors


# =============================================================================
# РАЗЛОЖЕНИЕ
# =============================================================================


def _calculate_prime_factors(val: int) -> Dict[int, int]:
    # Пробное деление до isqrt(остатка); остаток > 1 в конце — простой
    factors: Dict[int, int] = {}
    remaining = val
    candidate = 2
    while candidate <= math.isqrt(remaining):
        while remaining % candidate == 0:
            factors[candidate] = factors.get(candidate, 0) + 1
            remaining //= candidate
        candidate += 1 if candidate == 2 else 2
    if remaining > 1:
        factors[remaining] = factors.get(remaining, 0) + 1
    return factors


_PRIME_FACTOR_CACHE: Final[Tuple[Optional[Mapping[int, int]], ...]] = tuple(
    MappingProxyType(_calculate_prime_factors(i)) if i > 1 else None
    for i in range(MAX_CACHED_PRIME_FACTORS + 1)
)


def prime_factors(val: int) -> Dict[int, int]:
    """
    Разложение на простые множители {prime: exponent}.

    Args:
        val: Целое > 1

    Returns:
        Новый dict (мутация не влияет на кэш)

    Raises:
        PreconditionViolation: Если val <= 1

    Examples:
        >>> prime_factors(360)
        {2: 3, 3: 2, 5: 1}
        >>> prime_factors(97)
        {97: 1}
    """
    require_true(val > 1, "val must be greater than 1. Was %s", val)
    if val <= MAX_CACHED_PRIME_FACTORS:
        return dict(_PRIME_FACTOR_CACHE[val])
    return _calculate_prime_factors(val)


# =============================================================================
# ТОЧНЫЙ ЛОГАРИФМ
# =============================================================================


def int_log(base: int, val: int) -> Optional[Tuple[int, int]]:
    """
    Точный рациональный log_base(val) для целых base, val > 1.

    Если множества простых в разложениях совпадают и для каждого простого
    p отношение exp_val(p) / exp_base(p) (сокращённое) одно и то же,
    это отношение и есть логарифм. Иначе рационального логарифма нет.

    Args:
        base: Основание (> 1)
        val: Аргумент (> 1)

    Returns:
        (numerator, denominator) в сокращённой форме или None

    Examples:
        >>> int_log(8, 4)
        (2, 3)
        >>> int_log(9, 27)
        (3, 2)
        >>> int_log(6, 4) is None
        True
    """
    require_true(base > 1, "base must be greater than 1. Was %s", base)
    require_true(val > 1, "val must be greater than 1. Was %s", val)
    base_factors = prime_factors(base)
    val_factors = prime_factors(val)
    if base_factors.keys() != val_factors.keys():
        return None
    result: Optional[Tuple[int, int]] = None
    for prime, base_power in base_factors.items():
        val_power = val_factors[prime]
        divisor = math.gcd(val_power, base_power)
        ratio = (val_power // divisor, base_power // divisor)
        if result is None:
            result = ratio
        elif ratio != result:
            return None
    return result
