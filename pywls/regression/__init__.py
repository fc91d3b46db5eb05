"""
Weighted least-squares preprocessing and fit diagnostics.

Public API:
    transform(rows, ...) -> WeightedDesign
    diagnose(beta, stats, ...) -> FitSolution

The pipeline is enforced by call order, not by state:

    rows --transform()--> WeightedDesign --(external solver)--> beta
    WeightedDesign.sufficient_statistics() --(+ across partitions)--> stats
    diagnose(beta, stats) --> RSS, R², log-likelihood, AIC, BIC

Example:
    >>> import numpy as np
    >>> from pywls.regression import transform, diagnose
    >>> design = transform(x=X, y=y, weight=w)
    >>> beta, *_ = np.linalg.lstsq(design.X, design.y, rcond=None)
    >>> result = diagnose(beta, design.sufficient_statistics())
    >>> print(result.summary())
"""

from pywls.regression._common import RegressionRow, TransformedRow
from pywls.regression.design import RowBatch, transform_row, transform_rows
from pywls.regression.solution import WeightedDesign, FitSolution
from pywls.regression.sufficient import SufficientStatistics
from pywls.regression.statistics import (
    compute_residual_sum_of_squares,
    compute_r_squared,
    compute_log_likelihood,
    compute_bayes_ic,
    compute_akaike_ic,
)
from pywls.regression.solvers import transform, diagnose

__all__ = [
    "transform",
    "diagnose",
    "RegressionRow",
    "TransformedRow",
    "RowBatch",
    "transform_row",
    "transform_rows",
    "WeightedDesign",
    "FitSolution",
    "SufficientStatistics",
    "compute_residual_sum_of_squares",
    "compute_r_squared",
    "compute_log_likelihood",
    "compute_bayes_ic",
    "compute_akaike_ic",
]
