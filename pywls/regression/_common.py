"""
Common types for weighted least-squares summarization.

RegressionRow is the raw observation. The remaining types are the frozen
payloads carried inside a Result[P] envelope.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple, Sequence

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class RegressionRow:
    """
    A single raw observation.

    `time` orders and identifies the row; it never enters the arithmetic.
    """
    time: Any
    x: Sequence[float]
    y: float
    weight: float = 1.0


class TransformedRow(NamedTuple):
    """Output of the per-row transform."""
    weighted_x: NDArray[np.floating[Any]]   # (k,): x * sqrt(w), intercept first
    weighted_y: float                       # y * sqrt(w)
    yw: tuple[float, float]                 # unscaled (y, effective weight)


@dataclass(frozen=True)
class TransformParams:
    """Parameter payload for the batch row transform."""
    X: NDArray[np.floating[Any]]            # (n, k): weighted design matrix
    y: NDArray[np.floating[Any]]            # (n,): weighted response
    yw: NDArray[np.floating[Any]]           # (n, 2): unscaled (y, effective weight)


@dataclass(frozen=True)
class FitStatisticsParams:
    """Parameter payload for goodness-of-fit diagnostics."""
    rss: float                   # residual sum of squares
    r_squared: float             # NaN when the weighted variance is undefined
    log_likelihood: float        # Gaussian WLS log-likelihood
    aic: float                   # Akaike information criterion
    bic: float                   # Bayesian information criterion
    k: int                       # number of fitted coefficients
    count: int                   # number of observations
