"""
Domain models для ratnum
"""

from ratnum.core.domain.rat import Rat

__all__ = ["Rat"]
