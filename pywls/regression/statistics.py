"""
Goodness-of-fit diagnostics from sufficient statistics.

Every function here is pure and works from additive summaries (sums,
cross-products, the Gram matrix) plus a coefficient vector computed
elsewhere, so the inputs can be reduced across partitions before any
diagnostic is taken.

Degenerate inputs are not errors. Zero RSS, zero count or zero variance
propagate as NaN / inf under IEEE semantics; callers check isfinite().
Shape disagreements are errors and raise DimensionError.
"""

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pywls.core.validation import (
    check_array,
    check_1d,
    check_square,
    check_length,
)


def compute_residual_sum_of_squares(
    beta: ArrayLike,
    sum_of_y_squared: float,
    vector_of_xy: ArrayLike,
    matrix_of_xx: ArrayLike,
) -> float:
    """
    Residual sum of squares without the residuals.

    Expands (y - Xβ)ᵀ(y - Xβ) = yᵀy - 2βᵀXᵀy + βᵀXᵀXβ using only
    sum_of_y_squared = yᵀy, vector_of_xy = Xᵀy and matrix_of_xx = XᵀX:

        RSS = yᵀy + Σ_i β_i (-2 (Xᵀy)_i + β_i (XᵀX)_ii + 2 Σ_{j<i} β_j (XᵀX)_ij)

    Only the lower triangle of XᵀX is read; the off-diagonal terms are
    doubled for symmetry. Summation runs in exactly this order, term by
    term, so results are reproducible for a given set of inputs.

    Args:
        beta: Fitted coefficients (k,)
        sum_of_y_squared: Σ w y²
        vector_of_xy: XᵀWy (k,)
        matrix_of_xx: XᵀWX (k, k)

    Returns:
        RSS. An all-zero beta returns sum_of_y_squared exactly.

    Raises:
        DimensionError: If matrix_of_xx is not square or k disagrees
    """
    beta_arr, xy, xx = _check_coefficient_shapes(beta, vector_of_xy, matrix_of_xx)

    residual_sum_of_squares = float(sum_of_y_squared)
    for i in range(beta_arr.shape[0]):
        b_i = float(beta_arr[i])
        term = -2.0 * float(xy[i])
        term += b_i * float(xx[i, i])
        for j in range(i):
            term += 2.0 * float(beta_arr[j]) * float(xx[i, j])
        residual_sum_of_squares += term * b_i
    return residual_sum_of_squares


def compute_r_squared(
    sum_of_y_squared: float,
    sum_of_weights: float,
    sum_of_y: float,
    residual_sum_of_squares: float,
    should_intercept: bool,
) -> float:
    """
    Coefficient of determination from weighted sums.

    With an intercept the total variance is centred on the weighted mean
    Σwy / Σw; without one it is the uncentred Σwy² / Σw, the usual
    convention for models forced through the origin.

    Returns NaN when sum_of_y_squared or sum_of_weights is zero. May be
    negative when the fit is worse than the baseline, and NaN or ±inf when
    the centred variance is exactly zero.
    """
    if sum_of_y_squared == 0.0 or sum_of_weights == 0.0:
        return float('nan')

    with np.errstate(divide='ignore', invalid='ignore'):
        sum_w = np.float64(sum_of_weights)
        mean_of_y = np.float64(sum_of_y) / sum_w
        variance_of_y = np.float64(sum_of_y_squared) / sum_w
        if should_intercept:
            variance_of_y -= mean_of_y * mean_of_y
        r_squared = (variance_of_y - np.float64(residual_sum_of_squares) / sum_w) / variance_of_y
    return float(r_squared)


def compute_log_likelihood(
    count: int,
    sum_of_log_weights: float,
    residual_sum_of_squares: float,
) -> float:
    """
    Gaussian log-likelihood of a weighted least-squares fit.

        n2 = count / 2
        loglike = -n2 ln(RSS) - n2 (1 + ln(π / n2)) + ½ Σ ln w

    Same formula as statsmodels' WLS.loglike with σ² profiled out.

    A perfect fit (RSS == 0) gives +inf. count == 0 gives NaN.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        n_over_2 = np.float64(count) / 2.0
        log_likelihood = -n_over_2 * np.log(np.float64(residual_sum_of_squares))
        log_likelihood += -n_over_2 * (1.0 + np.log(np.pi / n_over_2))
        log_likelihood += 0.5 * np.float64(sum_of_log_weights)
    return float(log_likelihood)


def compute_bayes_ic(
    beta: ArrayLike,
    log_likelihood: float,
    count: int,
    should_intercept: bool,
) -> float:
    """
    Bayesian information criterion: -2 loglike + k ln(count).

    k = len(beta). beta is the full coefficient vector, so an intercept is
    already counted; should_intercept does not change k.
    """
    k = _parameter_count(beta)
    with np.errstate(divide='ignore', invalid='ignore'):
        bic = -2.0 * np.float64(log_likelihood) + k * np.log(np.float64(count))
    return float(bic)


def compute_akaike_ic(
    beta: ArrayLike,
    log_likelihood: float,
    should_intercept: bool,
) -> float:
    """Akaike information criterion: -2 loglike + 2k, k = len(beta)."""
    k = _parameter_count(beta)
    return float(-2.0 * np.float64(log_likelihood) + 2.0 * k)


def _parameter_count(beta: ArrayLike) -> int:
    beta_arr = check_array(beta, 'beta')
    check_1d(beta_arr, 'beta')
    return int(beta_arr.shape[0])


def _check_coefficient_shapes(
    beta: ArrayLike,
    vector_of_xy: ArrayLike,
    matrix_of_xx: ArrayLike,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """Convert and require beta (k,), vector_of_xy (k,), matrix_of_xx (k, k)."""
    beta_arr = check_array(beta, 'beta')
    xy = check_array(vector_of_xy, 'vector_of_xy')
    xx = check_array(matrix_of_xx, 'matrix_of_xx')

    check_1d(beta_arr, 'beta')
    check_1d(xy, 'vector_of_xy')
    check_square(xx, 'matrix_of_xx')

    k = beta_arr.shape[0]
    check_length(xy, k, 'vector_of_xy')
    check_length(xx, k, 'matrix_of_xx')
    return beta_arr, xy, xx
