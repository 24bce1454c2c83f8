"""
Contracts — fail-fast предусловия для публичных операций ratnum.
"""

from ratnum.core.contracts.preconditions import (
    require_false,
    require_greater,
    require_in_range,
    require_instance,
    require_non_empty_string,
    require_not_equal,
    require_not_null,
    require_true,
)

__all__ = [
    "require_false",
    "require_greater",
    "require_in_range",
    "require_instance",
    "require_non_empty_string",
    "require_not_equal",
    "require_not_null",
    "require_true",
]
