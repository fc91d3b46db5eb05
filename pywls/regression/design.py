"""
Row batches and the sqrt-weight row transform.

A RowBatch holds raw observations as arrays and knows how they should be
transformed (intercept, weighting). Backends turn it into the weighted
design matrix; transform_row / transform_rows are the row-at-a-time
definitions the backends must agree with.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import math
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pywls.core.exceptions import ValidationError, DimensionError
from pywls.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_2d,
    check_consistent_length,
    check_nonnegative,
)
from pywls.regression._common import RegressionRow, TransformedRow


def transform_row(
    row: RegressionRow,
    should_intercept: bool,
    is_weighted: bool,
) -> TransformedRow:
    """
    Scale one observation by the square root of its effective weight.

    Args:
        row: The observation. Not modified.
        should_intercept: Prepend the constant 1.0 predictor (scaled to sqrt(w)).
        is_weighted: Use row.weight; otherwise the effective weight is 1.0.

    Returns:
        TransformedRow(weighted_x, weighted_y, (row.y, effective_weight))

    Raises:
        ValidationError: If the effective weight is negative
    """
    w = float(row.weight) if is_weighted else 1.0
    if w < 0:
        raise ValidationError(
            f"weight: row at time {row.time!r} has negative weight {w}; weights must be >= 0"
        )
    sqrt_w = math.sqrt(w)

    x = np.asarray(row.x, dtype=np.float64)
    if should_intercept:
        weighted_x = np.empty(x.shape[0] + 1, dtype=np.float64)
        weighted_x[0] = sqrt_w
        weighted_x[1:] = x * sqrt_w
    else:
        weighted_x = x * sqrt_w

    y = float(row.y)
    return TransformedRow(weighted_x, y * sqrt_w, (y, w))


def transform_rows(
    rows: Sequence[RegressionRow],
    should_intercept: bool,
    is_weighted: bool,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Apply transform_row to every row and stack the results.

    Returns:
        (X, y, yw): the (n, k) weighted design matrix, the (n,) weighted
        response and the (n, 2) unscaled (y, weight) pairs, all in input order.

    Raises:
        ValidationError: If rows is empty or a weight is negative
        DimensionError: If rows disagree on the number of predictors
    """
    _check_uniform_width(rows)

    transformed = [transform_row(r, should_intercept, is_weighted) for r in rows]
    X = np.vstack([t.weighted_x for t in transformed])
    y = np.array([t.weighted_y for t in transformed], dtype=np.float64)
    yw = np.array([t.yw for t in transformed], dtype=np.float64)
    return X, y, yw


@dataclass(frozen=True)
class RowBatch:
    """
    A batch of raw observations awaiting the row transform.

    Immutable after construction. Every row has the same number of
    predictors p; the transformed width is k = p + 1 with an intercept.

    Construction:
        RowBatch.from_rows(rows)                      # sequence of RegressionRow
        RowBatch.from_arrays(x, y, weight)            # raw (n, p), (n,), (n,)
    """
    _x: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _weight: NDArray[np.floating[Any]]
    _n: int
    _p: int
    should_intercept: bool = True
    is_weighted: bool = True
    _time: tuple[Any, ...] | None = None

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[RegressionRow],
        *,
        should_intercept: bool = True,
        is_weighted: bool = True,
    ) -> RowBatch:
        """
        Build a RowBatch from RegressionRow objects.

        Raises:
            ValidationError: If rows is empty, or values are non-finite / negative
            DimensionError: If rows disagree on the number of predictors
        """
        p = _check_uniform_width(rows)

        x = check_array([r.x for r in rows], 'x').reshape(len(rows), p)
        y = check_array([r.y for r in rows], 'y')
        weight = check_array([r.weight for r in rows], 'weight')
        time = tuple(r.time for r in rows)

        return cls._build(x, y, weight, should_intercept, is_weighted, time)

    @classmethod
    def from_arrays(
        cls,
        x: ArrayLike,
        y: ArrayLike,
        weight: ArrayLike | None = None,
        *,
        should_intercept: bool = True,
        is_weighted: bool = True,
    ) -> RowBatch:
        """
        Build a RowBatch directly from arrays.

        A 1D x is treated as a single predictor column. Missing weights
        mean every row weighs 1.0.
        """
        x_arr = check_array(x, 'x')
        y_arr = check_array(y, 'y')
        if x_arr.ndim == 1:
            x_arr = x_arr.reshape(-1, 1)
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()

        if weight is None:
            w_arr = np.ones(y_arr.shape[0], dtype=np.float64)
        else:
            w_arr = check_array(weight, 'weight')

        return cls._build(x_arr, y_arr, w_arr, should_intercept, is_weighted, None)

    @classmethod
    def _build(
        cls,
        x: NDArray,
        y: NDArray,
        weight: NDArray,
        should_intercept: bool,
        is_weighted: bool,
        time: tuple[Any, ...] | None,
    ) -> RowBatch:
        """Internal builder with validation."""
        check_2d(x, 'x')
        check_1d(y, 'y')
        check_1d(weight, 'weight')
        check_consistent_length(x, y, weight, names=('x', 'y', 'weight'))
        check_finite(x, 'x')
        check_finite(y, 'y')
        # Unweighted batches never read the weights
        if is_weighted:
            check_finite(weight, 'weight')
            check_nonnegative(weight, 'weight')

        n, p = x.shape
        return cls(
            _x=x,
            _y=y,
            _weight=weight,
            _n=n,
            _p=p,
            should_intercept=bool(should_intercept),
            is_weighted=bool(is_weighted),
            _time=time,
        )

    # === Properties ===

    @property
    def x(self) -> NDArray[np.floating[Any]]:
        """Raw predictors (n x p)."""
        return self._x

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Raw response (n,)."""
        return self._y

    @property
    def weight(self) -> NDArray[np.floating[Any]]:
        """Raw weights (n,), as supplied."""
        return self._weight

    @property
    def effective_weight(self) -> NDArray[np.floating[Any]]:
        """Weights actually used: the raw weights, or 1.0 when unweighted."""
        if self.is_weighted:
            return self._weight
        return np.ones(self._n, dtype=np.float64)

    @property
    def time(self) -> tuple[Any, ...] | None:
        """Row keys, when built from RegressionRow objects."""
        return self._time

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of raw predictors."""
        return self._p

    @property
    def k(self) -> int:
        """Columns of the weighted design matrix."""
        return self._p + 1 if self.should_intercept else self._p


def _check_uniform_width(rows: Sequence[RegressionRow]) -> int:
    """Return the common predictor count of `rows`."""
    if len(rows) == 0:
        raise ValidationError("rows: requires at least 1 row, got 0")

    widths = [len(r.x) for r in rows]
    p = widths[0]
    bad = [i for i, width in enumerate(widths) if width != p]
    if bad:
        i = bad[0]
        raise DimensionError(
            f"rows: all rows must have {p} predictors, "
            f"row {i} (time={rows[i].time!r}) has {widths[i]}",
            expected=p,
            actual=widths[i],
        )
    return p
