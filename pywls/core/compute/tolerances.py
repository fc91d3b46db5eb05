"""
Tolerance tiers for numerical validation.

Defines precision expectations for different compute paths:
- CPU FP64 (reference): machine precision
- GPU FP64: same as CPU
- GPU FP32: relaxed for single-precision arithmetic

Used by the test suite to compare GPU transforms against the CPU reference.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


CPU_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-14,
    name='cpu_fp64',
    description='CPU double precision reference',
)

GPU_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-14,
    name='gpu_fp64',
    description='GPU double precision, matches CPU reference',
)

# Scaling by sqrt(w) is a single multiply per entry, so FP32 error stays
# at a few ulps of float32.
GPU_FP32 = ToleranceTier(
    rtol=1e-6,
    atol=1e-6,
    name='gpu_fp32',
    description='GPU single precision',
)


def select_tolerance(backend_name: str) -> ToleranceTier:
    """Select appropriate tolerance tier for a given backend."""
    if 'gpu' in backend_name:
        if 'fp64' in backend_name:
            return GPU_FP64
        return GPU_FP32
    return CPU_FP64
