"""
User-facing wrappers around backend results.

WeightedDesign is what an external solver consumes; FitSolution is what a
reporting layer consumes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pywls.core.result import Result
from pywls.regression._common import TransformParams, FitStatisticsParams
from pywls.regression.sufficient import SufficientStatistics

if TYPE_CHECKING:
    from pywls.regression.design import RowBatch


@dataclass
class WeightedDesign:
    """
    Sqrt-weight scaled design matrix and response, ready for a solver.

    Rows are in the original input order. X has an intercept column of
    sqrt(w) first when the batch requested one.
    """
    _result: Result[TransformParams]
    _batch: 'RowBatch'

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Weighted design matrix (n x k)."""
        return self._result.params.X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Weighted response vector (n,)."""
        return self._result.params.y

    @property
    def yw(self) -> NDArray[np.floating[Any]]:
        """Unscaled (y, effective weight) pairs (n x 2)."""
        return self._result.params.yw

    @property
    def weights(self) -> NDArray[np.floating[Any]]:
        """Effective weights (n,)."""
        return self._result.params.yw[:, 1]

    @property
    def n(self) -> int:
        return self._batch.n

    @property
    def k(self) -> int:
        return self._batch.k

    @property
    def should_intercept(self) -> bool:
        return self._batch.should_intercept

    @property
    def is_weighted(self) -> bool:
        return self._batch.is_weighted

    @property
    def batch(self) -> 'RowBatch':
        """The raw batch this design was built from."""
        return self._batch

    def XtX(self) -> NDArray[np.floating[Any]]:
        """Gram matrix XᵀWX."""
        return self.X.T @ self.X

    def Xty(self) -> NDArray[np.floating[Any]]:
        """Cross-product vector XᵀWy."""
        return self.X.T @ self.y

    def sufficient_statistics(self) -> SufficientStatistics:
        """Additive summary of this batch."""
        return SufficientStatistics.from_design(self)

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def __repr__(self) -> str:
        return (
            f"WeightedDesign(n={self.n}, k={self.k}, "
            f"intercept={self.should_intercept}, weighted={self.is_weighted}, "
            f"backend={self.backend_name!r})"
        )


@dataclass
class FitSolution:
    """
    Goodness-of-fit diagnostics for an externally fitted beta.

    Values may be NaN or ±inf for degenerate inputs; each such value is
    also listed in `warnings`.
    """
    _result: Result[FitStatisticsParams]
    _beta: NDArray[np.floating[Any]]

    @property
    def beta(self) -> NDArray[np.floating[Any]]:
        return self._beta

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def r_squared(self) -> float:
        return self._result.params.r_squared

    @property
    def log_likelihood(self) -> float:
        return self._result.params.log_likelihood

    @property
    def aic(self) -> float:
        return self._result.params.aic

    @property
    def bic(self) -> float:
        return self._result.params.bic

    @property
    def k(self) -> int:
        return self._result.params.k

    @property
    def count(self) -> int:
        return self._result.params.count

    @property
    def is_finite(self) -> bool:
        """True if every diagnostic is a finite number."""
        p = self._result.params
        return bool(np.all(np.isfinite([p.rss, p.r_squared, p.log_likelihood, p.aic, p.bic])))

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Plain-text diagnostics table."""
        lines = [
            "Weighted Least Squares Fit Statistics",
            "=" * 48,
            f"Observations: {self.count}",
            f"Coefficients: {self.k}",
            f"Intercept: {self.info.get('should_intercept')}",
            "-" * 48,
            f"{'RSS':<20} {self.rss:>20.6g}",
            f"{'R-squared':<20} {self.r_squared:>20.6f}",
            f"{'Log-likelihood':<20} {self.log_likelihood:>20.6f}",
            f"{'AIC':<20} {self.aic:>20.6f}",
            f"{'BIC':<20} {self.bic:>20.6f}",
            "-" * 48,
        ]
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.6f}s")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"FitSolution(count={self.count}, k={self.k}, "
            f"rss={self.rss:.6g}, r_squared={self.r_squared:.4f})"
        )
