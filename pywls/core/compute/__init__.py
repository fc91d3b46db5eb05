"""
Shared compute infrastructure: execution timing and tolerance tiers.
"""

from pywls.core.compute.timing import Timer, timed
from pywls.core.compute.tolerances import ToleranceTier, select_tolerance

__all__ = [
    "Timer",
    "timed",
    "ToleranceTier",
    "select_tolerance",
]
