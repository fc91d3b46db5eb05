"""
PyWLS: weighted least-squares summarization primitives.

Turns raw observations into a sqrt-weight scaled design for an external
solver, and turns a fitted coefficient vector plus additive sufficient
statistics into goodness-of-fit diagnostics (RSS, R², log-likelihood,
AIC, BIC).

Submodules:
    regression: Row transform, sufficient statistics, fit diagnostics
    core: Exceptions, validation, result envelope, timing
"""

__version__ = "0.1.0"

from pywls import regression

__all__ = [
    "__version__",
    "regression",
]
