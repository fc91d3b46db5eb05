"""
GPU backend for the row transform using PyTorch.

Performance path for large batches, validated against the CPU reference.
Supports CUDA (Linux/Windows) and MPS (macOS Apple Silicon).
"""

from typing import Any
import warnings
import numpy as np

from pywls.core.result import Result
from pywls.core.exceptions import NumericalError
from pywls.core.compute.timing import Timer
from pywls.core.backends.device import DeviceInfo
from pywls.regression.design import RowBatch
from pywls.regression._common import TransformParams


class GPUTransformBackend:
    """
    GPU backend for the sqrt-weight row transform.

    FP32 by default for throughput on consumer GPUs. Results come back as
    FP64 numpy arrays for consistency with the CPU backend; the unscaled
    (y, weight) pairs never leave the host and are exact.
    """

    def __init__(self, use_fp64: bool = False, device: str = 'cuda'):
        """
        Initialize GPU backend.

        Args:
            use_fp64: If True, scale in FP64 (slow on consumer GPUs). Ignored
                with a RuntimeWarning on devices without float64 support.
            device: GPU device type ('cuda', 'cuda:0', 'mps')
        """
        import torch

        if device.startswith('cuda'):
            if not torch.cuda.is_available():
                raise RuntimeError(
                    "CUDA not available. Install PyTorch with CUDA support, "
                    "or use backend='cpu'."
                )
            self.device = torch.device(device)
            index = self.device.index if self.device.index is not None else 0
            props = torch.cuda.get_device_properties(index)
            self.device_info = DeviceInfo(
                device_type='cuda',
                device_index=index,
                name=props.name,
                memory_bytes=props.total_memory,
            )

        elif device == 'mps':
            if not (hasattr(torch.backends, 'mps') and torch.backends.mps.is_available()):
                raise RuntimeError(
                    "MPS not available. Requires macOS with Apple Silicon "
                    "and PyTorch with MPS support."
                )
            self.device = torch.device('mps')
            self.device_info = DeviceInfo(
                device_type='mps',
                device_index=0,
                name='Apple Silicon GPU (MPS)',
                memory_bytes=None,
            )

        else:
            raise ValueError(
                f"Unknown GPU device: {device!r}. Use 'cuda' or 'mps'."
            )

        if use_fp64 and not self.device_info.supports_fp64:
            warnings.warn(
                f"{self.device_info.device_type.upper()} does not support float64; "
                f"transforming in float32",
                RuntimeWarning,
                stacklevel=2,
            )
            use_fp64 = False

        self.use_fp64 = use_fp64
        self.device_name = self.device_info.name
        self.dtype = torch.float64 if self.use_fp64 else torch.float32

    @property
    def name(self) -> str:
        precision = "fp64" if self.use_fp64 else "fp32"
        return f'gpu_torch_{precision}'

    def solve(self, batch: RowBatch) -> Result[TransformParams]:
        """
        Build the weighted design matrix and response on the GPU.

        Raises:
            NumericalError: If scaling overflowed the working precision
        """
        import torch

        timer = Timer(sync_cuda=self.device.type == 'cuda')
        timer.start()

        n, k = batch.n, batch.k
        w = batch.effective_weight

        with timer.section('data_transfer_to_gpu'):
            x_host = np.ascontiguousarray(batch.x)
            x_gpu = torch.from_numpy(x_host).to(device=self.device, dtype=self.dtype)
            y_gpu = torch.from_numpy(np.ascontiguousarray(batch.y)).to(device=self.device, dtype=self.dtype)
            w_gpu = torch.from_numpy(np.ascontiguousarray(w)).to(device=self.device, dtype=self.dtype)

        with timer.section('scale_rows'):
            sqrt_w = torch.sqrt(w_gpu)
            scaled = x_gpu * sqrt_w.unsqueeze(1)
            if batch.should_intercept:
                X_gpu = torch.cat([sqrt_w.unsqueeze(1), scaled], dim=1)
            else:
                X_gpu = scaled
            y_w_gpu = y_gpu * sqrt_w

        with timer.section('data_transfer_from_gpu'):
            X = X_gpu.cpu().numpy().astype(np.float64).reshape(n, k)
            y = y_w_gpu.cpu().numpy().astype(np.float64)
            yw = np.column_stack([batch.y, w])

        timer.stop()

        if not (np.all(np.isfinite(X)) and np.all(np.isfinite(y))):
            raise NumericalError(
                f"GPU transform produced non-finite values in {self.dtype}; "
                f"inputs are finite, so scaling overflowed. Use use_fp64=True "
                f"or backend='cpu'."
            )

        info: dict[str, Any] = {
            'n': n,
            'k': k,
            'should_intercept': batch.should_intercept,
            'is_weighted': batch.is_weighted,
            'device': self.device_name,
        }

        return Result(
            params=TransformParams(X=X, y=y, yw=yw),
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
