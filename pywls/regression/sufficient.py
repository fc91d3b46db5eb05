"""
Sufficient statistics for weighted least squares.

Every field is a plain sum over observations, so statistics from disjoint
partitions combine by element-wise addition. The reduction itself (which
partitions, in what order) belongs to the caller; this module only
guarantees that `a + b` describes the union of `a` and `b`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pywls.core.exceptions import ValidationError, DimensionError
from pywls.core.validation import check_array, check_1d, check_square, check_length

if TYPE_CHECKING:
    from pywls.regression.solution import WeightedDesign


@dataclass(frozen=True)
class SufficientStatistics:
    """
    Additive summary of a batch of weighted observations.

    Attributes:
        count: Number of observations n
        sum_of_y_squared: Σ w y²
        sum_of_weights: Σ w
        sum_of_y: Σ w y
        sum_of_log_weights: Σ ln w (-inf if any weight is zero)
        vector_of_xy: XᵀWy, shape (k,)
        matrix_of_xx: XᵀWX, shape (k, k)
        should_intercept: Whether column 0 of the design is the intercept;
            selects centred vs uncentred R²
    """
    count: int
    sum_of_y_squared: float
    sum_of_weights: float
    sum_of_y: float
    sum_of_log_weights: float
    vector_of_xy: NDArray[np.floating[Any]]
    matrix_of_xx: NDArray[np.floating[Any]]
    should_intercept: bool = True

    def __post_init__(self) -> None:
        xy = check_array(self.vector_of_xy, 'vector_of_xy')
        xx = check_array(self.matrix_of_xx, 'matrix_of_xx')
        check_1d(xy, 'vector_of_xy')
        check_square(xx, 'matrix_of_xx')
        check_length(xx, xy.shape[0], 'matrix_of_xx')
        object.__setattr__(self, 'vector_of_xy', xy)
        object.__setattr__(self, 'matrix_of_xx', xx)

    @property
    def k(self) -> int:
        """Number of design columns these statistics describe."""
        return int(self.vector_of_xy.shape[0])

    @classmethod
    def zeros(cls, k: int, should_intercept: bool = True) -> SufficientStatistics:
        """The additive identity for k columns."""
        return cls(
            count=0,
            sum_of_y_squared=0.0,
            sum_of_weights=0.0,
            sum_of_y=0.0,
            sum_of_log_weights=0.0,
            vector_of_xy=np.zeros(k, dtype=np.float64),
            matrix_of_xx=np.zeros((k, k), dtype=np.float64),
            should_intercept=bool(should_intercept),
        )

    @classmethod
    def from_design(cls, design: WeightedDesign) -> SufficientStatistics:
        """Summarize a transformed batch."""
        return cls.from_arrays(
            design.X, design.y, design.yw, should_intercept=design.should_intercept
        )

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        yw: ArrayLike,
        *,
        should_intercept: bool = True,
    ) -> SufficientStatistics:
        """
        Summarize sqrt-weighted X (n, k), sqrt-weighted y (n,) and the
        unscaled (y, weight) pairs (n, 2).

        X and y already carry sqrt(w), so XᵀX = XᵀWX, Xᵀy = XᵀWy and
        yᵀy = Σ w y².
        """
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')
        yw_arr = check_array(yw, 'yw')

        raw_y = yw_arr[:, 0]
        weights = yw_arr[:, 1]
        with np.errstate(divide='ignore'):
            sum_of_log_weights = float(np.sum(np.log(weights)))

        return cls(
            count=int(X_arr.shape[0]),
            sum_of_y_squared=float(y_arr @ y_arr),
            sum_of_weights=float(np.sum(weights)),
            sum_of_y=float(np.sum(weights * raw_y)),
            sum_of_log_weights=sum_of_log_weights,
            vector_of_xy=X_arr.T @ y_arr,
            matrix_of_xx=X_arr.T @ X_arr,
            should_intercept=bool(should_intercept),
        )

    def merge(self, other: SufficientStatistics) -> SufficientStatistics:
        """
        Combine with statistics from a disjoint batch.

        Raises:
            DimensionError: If the two summaries have different k
            ValidationError: If one summary has an intercept column and the other does not
        """
        if other.k != self.k:
            raise DimensionError(
                f"Cannot merge statistics with k={self.k} and k={other.k}",
                expected=self.k,
                actual=other.k,
            )
        if other.should_intercept != self.should_intercept:
            raise ValidationError(
                f"Cannot merge statistics with should_intercept={self.should_intercept} "
                f"and should_intercept={other.should_intercept}"
            )
        return SufficientStatistics(
            count=self.count + other.count,
            sum_of_y_squared=self.sum_of_y_squared + other.sum_of_y_squared,
            sum_of_weights=self.sum_of_weights + other.sum_of_weights,
            sum_of_y=self.sum_of_y + other.sum_of_y,
            sum_of_log_weights=self.sum_of_log_weights + other.sum_of_log_weights,
            vector_of_xy=self.vector_of_xy + other.vector_of_xy,
            matrix_of_xx=self.matrix_of_xx + other.matrix_of_xx,
            should_intercept=self.should_intercept,
        )

    def __add__(self, other: SufficientStatistics) -> SufficientStatistics:
        if not isinstance(other, SufficientStatistics):
            return NotImplemented
        return self.merge(other)
