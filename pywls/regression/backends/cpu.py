"""
CPU reference backend for the row transform.

Vectorized NumPy version of transform_row: scales every row of the batch
by sqrt(effective weight) in one pass. Element-wise products are the same
IEEE operations transform_row performs, so the output matches it exactly.
"""

from typing import Any
import numpy as np

from pywls.core.result import Result
from pywls.core.compute.timing import Timer
from pywls.regression.design import RowBatch
from pywls.regression._common import TransformParams


class CPUTransformBackend:
    """
    CPU backend for the sqrt-weight row transform.

    Implements the Backend protocol for RowBatch -> TransformParams.
    """

    @property
    def name(self) -> str:
        return 'cpu_numpy'

    def solve(self, batch: RowBatch) -> Result[TransformParams]:
        """
        Build the weighted design matrix and response.

        Algorithm:
            1. w = weight if weighted else 1; s = sqrt(w)
            2. X = [s | x * s] with intercept, else x * s
            3. y_w = y * s; yw = [y, w]
        """
        timer = Timer()
        timer.start()

        n, k = batch.n, batch.k

        with timer.section('sqrt_weights'):
            w = batch.effective_weight
            sqrt_w = np.sqrt(w)

        with timer.section('scale_rows'):
            X = np.empty((n, k), dtype=np.float64)
            if batch.should_intercept:
                X[:, 0] = sqrt_w
                X[:, 1:] = batch.x * sqrt_w[:, None]
            else:
                X[:, :] = batch.x * sqrt_w[:, None]
            y = batch.y * sqrt_w
            yw = np.column_stack([batch.y, w])

        timer.stop()

        info: dict[str, Any] = {
            'n': n,
            'k': k,
            'should_intercept': batch.should_intercept,
            'is_weighted': batch.is_weighted,
        }

        return Result(
            params=TransformParams(X=X, y=y, yw=yw),
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
