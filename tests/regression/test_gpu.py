"""
GPU backend tests for the row transform.

Validates GPU results against the CPU reference backend.
Skipped if no GPU is available.
"""

from __future__ import annotations

import numpy as np
import pytest

try:
    import torch
    HAS_GPU = torch.cuda.is_available() or (
        hasattr(torch.backends, 'mps') and torch.backends.mps.is_available()
    )
    HAS_CUDA = torch.cuda.is_available()
except ImportError:
    HAS_GPU = False
    HAS_CUDA = False

pytestmark = pytest.mark.skipif(not HAS_GPU, reason="No GPU available")

from pywls.core.compute.tolerances import select_tolerance
from pywls.regression import diagnose, transform


class TestGPUvsCPU:

    @pytest.mark.parametrize("intercept", [True, False])
    @pytest.mark.parametrize("weighted", [True, False])
    def test_design_matches_cpu(self, weighted_data, intercept, weighted):
        x, y, w = weighted_data
        cpu = transform(x=x, y=y, weight=w, should_intercept=intercept,
                        is_weighted=weighted, backend='cpu')
        gpu = transform(x=x, y=y, weight=w, should_intercept=intercept,
                        is_weighted=weighted, backend='gpu')
        tol = select_tolerance(gpu.backend_name)
        assert gpu.X.shape == cpu.X.shape
        assert gpu.X.dtype == np.float64
        np.testing.assert_allclose(gpu.X, cpu.X, rtol=tol.rtol, atol=tol.atol)
        np.testing.assert_allclose(gpu.y, cpu.y, rtol=tol.rtol, atol=tol.atol)

    def test_yw_pairs_exact(self, weighted_data):
        x, y, w = weighted_data
        gpu = transform(x=x, y=y, weight=w, backend='gpu')
        np.testing.assert_array_equal(gpu.yw[:, 0], y)
        np.testing.assert_array_equal(gpu.yw[:, 1], w)

    def test_backend_name(self, weighted_rows):
        gpu = transform(weighted_rows, backend='gpu')
        assert gpu.backend_name.startswith('gpu_torch_')
        assert 'data_transfer_to_gpu' in gpu.timing

    def test_diagnostics_close_to_cpu(self, weighted_rows):
        cpu = transform(weighted_rows, backend='cpu')
        gpu = transform(weighted_rows, backend='gpu')
        beta, *_ = np.linalg.lstsq(cpu.X, cpu.y, rcond=None)
        r_cpu = diagnose(beta, cpu.sufficient_statistics())
        r_gpu = diagnose(beta, gpu.sufficient_statistics())
        assert r_gpu.r_squared == pytest.approx(r_cpu.r_squared, rel=1e-4)


@pytest.mark.skipif(not HAS_CUDA, reason="FP64 path needs CUDA")
class TestGPUFP64:

    def test_fp64_matches_cpu(self, weighted_data):
        x, y, w = weighted_data
        cpu = transform(x=x, y=y, weight=w, backend='cpu')
        gpu = transform(x=x, y=y, weight=w, backend='gpu', use_fp64=True)
        assert gpu.backend_name == 'gpu_torch_fp64'
        tol = select_tolerance(gpu.backend_name)
        np.testing.assert_allclose(gpu.X, cpu.X, rtol=tol.rtol, atol=tol.atol)


class TestGPUInputLayout:

    def test_reversed_views_match_cpu(self, weighted_data):
        x, y, w = weighted_data
        x_rev, y_rev, w_rev = x[::-1], y[::-1], w[::-1]
        assert not y_rev.flags['C_CONTIGUOUS']
        cpu = transform(x=x_rev, y=y_rev, weight=w_rev, backend='cpu')
        gpu = transform(x=x_rev, y=y_rev, weight=w_rev, backend='gpu')
        tol = select_tolerance(gpu.backend_name)
        np.testing.assert_allclose(gpu.X, cpu.X, rtol=tol.rtol, atol=tol.atol)
        np.testing.assert_allclose(gpu.y, cpu.y, rtol=tol.rtol, atol=tol.atol)

    def test_strided_columns_match_cpu(self, weighted_data):
        x, y, w = weighted_data
        wide = np.column_stack([x, x])
        x_strided = wide[:, ::2]
        cpu = transform(x=x_strided, y=y, weight=w, backend='cpu')
        gpu = transform(x=x_strided, y=y, weight=w, backend='gpu')
        tol = select_tolerance(gpu.backend_name)
        np.testing.assert_allclose(gpu.X, cpu.X, rtol=tol.rtol, atol=tol.atol)


class TestGPUDeviceInfo:

    def test_device_info_matches_backend(self):
        from pywls.core.backends.device import select_device
        from pywls.regression.backends.gpu import GPUTransformBackend

        device = select_device('gpu')
        backend = GPUTransformBackend(device=device.torch_device)
        assert backend.device_info.device_type == device.device_type
        assert backend.device_name == backend.device_info.name
        assert backend.use_fp64 is False

    @pytest.mark.skipif(HAS_CUDA, reason="float64 fallback only on MPS")
    def test_fp64_request_falls_back_without_device_support(self):
        from pywls.regression.backends.gpu import GPUTransformBackend

        with pytest.warns(RuntimeWarning, match="does not support float64"):
            backend = GPUTransformBackend(use_fp64=True, device='mps')
        assert not backend.device_info.supports_fp64
        assert backend.use_fp64 is False
        assert backend.name == 'gpu_torch_fp32'
