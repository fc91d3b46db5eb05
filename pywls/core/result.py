"""
Generic result container for all PyWLS computations.

The Result class provides a standardized envelope that the row transform
and the fit diagnostics both use, so timing, backend identity and
non-fatal warnings travel the same way regardless of the payload.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (shapes, flags)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific payload (design matrix, diagnostics, etc.)
        info: Structured metadata (shapes, flags)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=TransformParams(X=X, y=y, yw=yw),
        ...     info={'n': 3, 'k': 2, 'should_intercept': True},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_numpy'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
