"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pywls.regression import RegressionRow


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def weighted_data(rng):
    """Weighted regression dataset: raw x (n, p), y (n,), weights (n,)."""
    n, p = 200, 3
    x = rng.standard_normal((n, p))
    beta_true = np.array([1.5, -2.0, 0.5])
    weight = rng.uniform(0.5, 3.0, size=n)
    y = 0.75 + x @ beta_true + rng.standard_normal(n) / np.sqrt(weight)
    return x, y, weight


@pytest.fixture
def weighted_rows(weighted_data):
    """Same dataset as a list of RegressionRow."""
    x, y, weight = weighted_data
    return [
        RegressionRow(time=i, x=list(x[i]), y=float(y[i]), weight=float(weight[i]))
        for i in range(len(y))
    ]
