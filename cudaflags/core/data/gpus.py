"""
L0 Data — NVIDIA GPU compute capabilities and their CUDA toolkit range.

Source: https://docs.nvidia.com/cuda/cuda-toolkit-release-notes/
        https://developer.nvidia.com/cuda-gpus

Each row is the range of toolkit versions whose nvcc can target the
capability.  Rows are ordered oldest hardware first; the order is
preserved by every derived list.
"""

from __future__ import annotations

_GPUS: list[tuple[str, str, str, str]] = [
    # (arch_name, compute_capability, min_cuda_version, max_cuda_version)
    ("Kepler", "3.0", "10.0", "10.2"),
    ("Kepler", "3.2", "10.0", "10.2"),
    ("Kepler", "3.5", "10.0", "11.8"),
    ("Kepler", "3.7", "10.0", "11.8"),
    ("Maxwell", "5.0", "10.0", "12.0"),
    ("Maxwell", "5.2", "10.0", "12.0"),
    ("Maxwell", "5.3", "10.0", "12.0"),
    ("Pascal", "6.0", "10.0", "12.0"),
    ("Pascal", "6.1", "10.0", "12.0"),
    ("Pascal", "6.2", "10.0", "12.0"),
    ("Volta", "7.0", "10.0", "12.0"),
    ("Volta", "7.2", "10.0", "12.0"),
    ("Turing", "7.5", "10.0", "12.0"),
    ("Ampere", "8.0", "11.2", "12.0"),
    ("Ampere", "8.6", "11.2", "12.0"),
    ("Ampere", "8.7", "11.5", "12.0"),
    ("Ada", "8.9", "11.8", "12.0"),
    ("Hopper", "9.0", "11.8", "12.0"),
]
