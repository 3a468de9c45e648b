"""
Domain models for cudaflags.

    from cudaflags.core.models import GpuDescriptor, CapabilityResult
"""

from cudaflags.core.models.config import FlagsConfig
from cudaflags.core.models.gpu import CapabilityResult, GpuDescriptor

__all__ = [
    "CapabilityResult",
    # config.py
    "FlagsConfig",
    # gpu.py
    "GpuDescriptor",
]
