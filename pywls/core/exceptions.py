"""
Exception hierarchy for PyWLS.

All exceptions inherit from PyWLSError to allow catching any
library-specific error.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Degenerate numbers (NaN, inf) are values, not exceptions
"""


class PyWLSError(Exception):
    """Base exception for all PyWLS errors."""
    pass


class ValidationError(PyWLSError):
    """
    Input validation failed.

    Raised when user-provided inputs fail a precondition, e.g. a negative
    weight or a non-finite predictor.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when a Gram matrix is not square, or when beta, the
    cross-product vector and the Gram matrix disagree on k.

    Attributes:
        expected: Expected shape or length, if known
        actual: Actual shape or length, if known
    """

    def __init__(
        self,
        message: str,
        expected: tuple[int, ...] | int | None = None,
        actual: tuple[int, ...] | int | None = None,
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class NumericalError(PyWLSError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass
