"""
GPU models — hardware descriptors and formatted capability flags.

A GpuDescriptor is one row of the hardware table.  A CapabilityResult
is everything a build needs to hand to nvcc for one capability request.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel


class GpuDescriptor(BaseModel):
    """One GPU hardware generation and the toolkits that can target it.

    Both version bounds are inclusive.
    """

    model_config = {"frozen": True}

    arch_name: str            # architecture family, e.g. "Ampere"
    compute_capability: str   # e.g. "8.6"
    min_cuda_version: str     # e.g. "11.2"
    max_cuda_version: str     # e.g. "12.0"


@dataclass(frozen=True)
class CapabilityResult:
    """Architecture tokens and gencode flags for one capability request."""

    capabilities: list[str]
    enable_forward_compat: bool

    # e.g. "8.6+PTX"
    forward_capability: str
    # e.g. ["7.5", "8.6", "8.6+PTX"]
    capabilities_and_forward: list[str]
    # e.g. ["Turing", "Ampere"]
    arch_names: list[str]
    # e.g. ["sm_75", "sm_86"]
    real_arches: list[str]
    # e.g. ["compute_75", "compute_86"]
    virtual_arches: list[str]
    # e.g. ["sm_75", "sm_86", "compute_86"]
    arches: list[str]
    gencode: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "capabilities": list(self.capabilities),
            "enable_forward_compat": self.enable_forward_compat,
            "forward_capability": self.forward_capability,
            "capabilities_and_forward": list(self.capabilities_and_forward),
            "arch_names": list(self.arch_names),
            "real_arches": list(self.real_arches),
            "virtual_arches": list(self.virtual_arches),
            "arches": list(self.arches),
            "gencode": list(self.gencode),
        }
