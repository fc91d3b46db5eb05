"""
Row transform backends.

Available backends:
    CPUTransformBackend: NumPy reference implementation
    GPUTransformBackend: PyTorch implementation (import on demand)
"""

from pywls.regression.backends.cpu import CPUTransformBackend

__all__ = [
    "CPUTransformBackend",
]
