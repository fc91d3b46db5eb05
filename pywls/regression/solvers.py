"""
Public entry points for weighted least-squares summarization.

transform() turns raw observations into a weighted design for an external
solver. diagnose() turns the solver's beta plus sufficient statistics into
fit diagnostics. Nothing here solves the normal equations.
"""

from typing import Literal, Sequence
import numpy as np
from numpy.typing import ArrayLike

from pywls.core.result import Result
from pywls.core.compute.timing import Timer
from pywls.core.validation import check_array, check_1d, check_finite
from pywls.core.backends.device import select_device
from pywls.regression._common import RegressionRow, FitStatisticsParams
from pywls.regression.design import RowBatch
from pywls.regression.solution import WeightedDesign, FitSolution
from pywls.regression.sufficient import SufficientStatistics
from pywls.regression.statistics import (
    compute_residual_sum_of_squares,
    compute_r_squared,
    compute_log_likelihood,
    compute_bayes_ic,
    compute_akaike_ic,
)
from pywls.regression.backends.cpu import CPUTransformBackend


BackendChoice = Literal['auto', 'cpu', 'gpu']

# Below this many design-matrix entries the host-device copy costs more
# than the scaling, so 'auto' stays on the CPU.
GPU_MIN_ELEMENTS = 1_000_000


def transform(
    rows: Sequence[RegressionRow] | None = None,
    *,
    x: ArrayLike | None = None,
    y: ArrayLike | None = None,
    weight: ArrayLike | None = None,
    should_intercept: bool = True,
    is_weighted: bool = True,
    backend: BackendChoice = 'auto',
    use_fp64: bool = False,
) -> WeightedDesign:
    """
    Build the sqrt-weight scaled design matrix and response.

    Pass either `rows` (a sequence of RegressionRow) or the raw arrays
    `x`, `y` and optionally `weight`.

    Args:
        rows: Observations, transformed in order
        x: Raw predictors (n x p), alternative to rows
        y: Raw response (n,), required with x
        weight: Per-row weights (n,); None means 1.0 everywhere
        should_intercept: Prepend a constant column (scaled to sqrt(w))
        is_weighted: Use the per-row weights; otherwise every weight is 1.0
        backend: 'auto' (GPU only for large batches), 'cpu' or 'gpu'
        use_fp64: Double precision on the GPU backend

    Returns:
        WeightedDesign with X (n x k), y (n,) and the unscaled (y, w) pairs

    Raises:
        ValidationError: If inputs are invalid or a weight is negative
        DimensionError: If rows disagree on the number of predictors

    Example:
        >>> from pywls.regression import RegressionRow, transform
        >>> rows = [RegressionRow(time=t, x=[float(t)], y=2.0 * t, weight=1.0)
        ...         for t in range(5)]
        >>> design = transform(rows, should_intercept=True)
        >>> design.X.shape
        (5, 2)
    """
    if rows is not None:
        if x is not None or y is not None or weight is not None:
            raise ValueError("Pass either rows or x/y/weight arrays, not both")
        batch = RowBatch.from_rows(
            rows, should_intercept=should_intercept, is_weighted=is_weighted
        )
    else:
        if x is None or y is None:
            raise ValueError("x and y required when rows is not given")
        batch = RowBatch.from_arrays(
            x, y, weight, should_intercept=should_intercept, is_weighted=is_weighted
        )

    backend_impl = _get_backend(backend, batch, use_fp64)
    result = backend_impl.solve(batch)
    return WeightedDesign(_result=result, _batch=batch)


def diagnose(
    beta: ArrayLike,
    stats: SufficientStatistics,
    *,
    should_intercept: bool | None = None,
) -> FitSolution:
    """
    Compute RSS, R², log-likelihood, AIC and BIC for a fitted beta.

    Args:
        beta: Coefficients from an external solver (k,), intercept first
            when the design had one
        stats: Sufficient statistics of the data beta was fitted to
        should_intercept: Whether the design had an intercept column;
            selects centred vs uncentred R². None (default) uses
            stats.should_intercept

    Returns:
        FitSolution. Non-finite diagnostics are returned as-is and
        reported in FitSolution.warnings.

    Raises:
        ValidationError: If beta is not a finite 1D array
        DimensionError: If len(beta) != stats.k
    """
    beta_arr = check_array(beta, 'beta')
    check_1d(beta_arr, 'beta')
    check_finite(beta_arr, 'beta')

    if should_intercept is None:
        should_intercept = stats.should_intercept

    timer = Timer()
    timer.start()

    with timer.section('rss'):
        rss = compute_residual_sum_of_squares(
            beta_arr, stats.sum_of_y_squared, stats.vector_of_xy, stats.matrix_of_xx
        )

    with timer.section('r_squared'):
        r_squared = compute_r_squared(
            stats.sum_of_y_squared, stats.sum_of_weights, stats.sum_of_y,
            rss, should_intercept,
        )

    with timer.section('likelihood'):
        log_likelihood = compute_log_likelihood(
            stats.count, stats.sum_of_log_weights, rss
        )
        aic = compute_akaike_ic(beta_arr, log_likelihood, should_intercept)
        bic = compute_bayes_ic(beta_arr, log_likelihood, stats.count, should_intercept)

    timer.stop()

    params = FitStatisticsParams(
        rss=rss,
        r_squared=r_squared,
        log_likelihood=log_likelihood,
        aic=aic,
        bic=bic,
        k=int(beta_arr.shape[0]),
        count=int(stats.count),
    )

    warnings_list = [
        f"{name} is {value} (degenerate input)"
        for name, value in (
            ('rss', rss),
            ('r_squared', r_squared),
            ('log_likelihood', log_likelihood),
            ('aic', aic),
            ('bic', bic),
        )
        if not np.isfinite(value)
    ]
    if rss < 0:
        warnings_list.append(
            f"rss is negative ({rss:.3g}); sufficient statistics and beta are inconsistent "
            f"or cancellation dominated"
        )

    result = Result(
        params=params,
        info={'should_intercept': bool(should_intercept), 'method': 'sufficient_statistics'},
        timing=timer.result(),
        backend_name='cpu_sufficient_stats',
        warnings=tuple(warnings_list),
    )
    return FitSolution(_result=result, _beta=beta_arr)


def _get_backend(choice: BackendChoice, batch: RowBatch, use_fp64: bool):
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
        RuntimeError: If GPU requested but unavailable
    """
    if choice == 'auto':
        if batch.n * batch.k < GPU_MIN_ELEMENTS:
            return CPUTransformBackend()
        device = select_device('auto')
        if device.is_gpu:
            from pywls.regression.backends.gpu import GPUTransformBackend
            return GPUTransformBackend(use_fp64=use_fp64, device=device.torch_device)
        return CPUTransformBackend()

    elif choice == 'cpu':
        return CPUTransformBackend()

    elif choice == 'gpu':
        device = select_device('gpu')
        from pywls.regression.backends.gpu import GPUTransformBackend
        return GPUTransformBackend(use_fp64=use_fp64, device=device.torch_device)

    else:
        raise ValueError(f"Unknown backend: {choice!r}")
