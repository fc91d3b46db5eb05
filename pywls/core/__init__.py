"""
Core infrastructure for PyWLS.

Shared abstractions used by the regression package.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing and tolerance tiers
    backends: Hardware detection
"""

from pywls.core.result import Result
from pywls.core.exceptions import (
    PyWLSError,
    ValidationError,
    DimensionError,
    NumericalError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyWLSError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
]
