"""
Hardware detection shared by the domain backends.
"""

from pywls.core.backends.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)

__all__ = [
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
]
