"""
Capability resolver — CUDA compute capabilities → nvcc architecture flags.

Given a toolkit version, the hardware table is filtered down to the
GPUs that toolkit can target, and lookup maps are built from that
subset.  A capability request is then expanded into:

    real_arches     ["sm_75", "sm_86"]
    virtual_arches  ["compute_75", "compute_86"]
    arches          ["sm_75", "sm_86", "compute_86"]
    gencode         ["-gencode=arch=compute_75,code=sm_75", ...]

The last requested capability is the "newest" one: with forward
compatibility enabled it also gets a virtual (PTX) target so the
binary can be JIT-compiled for hardware released after the build.

Everything here is pure.  Nothing is cached; callers own the results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from cudaflags.core.data.gpus import _GPUS
from cudaflags.core.domain.versions import (
    VersionError,
    parse_version,
    version_at_least,
    version_older,
)
from cudaflags.core.models.gpu import CapabilityResult, GpuDescriptor

logger = logging.getLogger(__name__)

# Suffix marking the forward-compatible (virtual) capability.
FORWARD_SUFFIX = "+PTX"

REAL_ARCH = "sm"
VIRTUAL_ARCH = "compute"

GPUS: tuple[GpuDescriptor, ...] = tuple(
    GpuDescriptor(
        arch_name=arch_name,
        compute_capability=capability,
        min_cuda_version=min_cuda,
        max_cuda_version=max_cuda,
    )
    for arch_name, capability, min_cuda, max_cuda in _GPUS
)


# ── Errors ──────────────────────────────────────────────────────


class CapabilityError(Exception):
    """Base class for capability resolution failures."""


class ConfigInvariantError(CapabilityError):
    """Raised when a hardware table lists the same capability twice."""


class InvalidArgumentError(CapabilityError, ValueError):
    """Raised for an empty capability request or a malformed version."""


class CapabilityNotFoundError(CapabilityError, LookupError):
    """Raised when a requested capability has no supported GPU entry."""

    def __init__(self, capability: str, cuda_version: str, message: str):
        super().__init__(message)
        self.capability = capability
        self.cuda_version = cuda_version


# ── Filtering ───────────────────────────────────────────────────


def _check_version(cuda_version: str) -> str:
    try:
        parse_version(cuda_version)
    except VersionError as e:
        raise InvalidArgumentError(f"Invalid CUDA version: {cuda_version!r}") from e
    return cuda_version


def is_supported(gpu: GpuDescriptor, cuda_version: str) -> bool:
    """True when ``cuda_version`` is within the GPU's inclusive bounds."""
    _check_version(cuda_version)
    lower_bound_satisfied = version_at_least(cuda_version, gpu.min_cuda_version)
    upper_bound_satisfied = not version_older(gpu.max_cuda_version, cuda_version)
    return lower_bound_satisfied and upper_bound_satisfied


def filter_supported(
    gpus: Iterable[GpuDescriptor],
    cuda_version: str,
) -> list[GpuDescriptor]:
    """Return the GPUs the given toolkit can target, in table order."""
    _check_version(cuda_version)
    return [gpu for gpu in gpus if is_supported(gpu, cuda_version)]


# ── Lookups ─────────────────────────────────────────────────────


def build_capability_to_name(gpus: Iterable[GpuDescriptor]) -> dict[str, str]:
    """Map each compute capability to its architecture family.

    For example, ``"8.0"`` maps to ``"Ampere"``.

    Raises:
        ConfigInvariantError: If two descriptors share a capability.
    """
    mapping: dict[str, str] = {}
    for gpu in gpus:
        cap = gpu.compute_capability
        if cap in mapping:
            raise ConfigInvariantError(
                f"Duplicate compute capability {cap} in GPU table "
                f"({mapping[cap]} and {gpu.arch_name})"
            )
        mapping[cap] = gpu.arch_name
    return mapping


def build_arch_name_to_capabilities(
    gpus: Iterable[GpuDescriptor],
) -> dict[str, list[str]]:
    """Group capabilities by architecture family, keeping table order.

    For example, ``"Ampere"`` maps to ``["8.0", "8.6", "8.7"]``.
    """
    grouped: dict[str, list[str]] = {}
    for gpu in gpus:
        grouped.setdefault(gpu.arch_name, []).append(gpu.compute_capability)
    return grouped


# ── Token formatting ────────────────────────────────────────────


def drop_dot(version: str) -> str:
    """``"8.6"`` → ``"86"``."""
    return version.replace(".", "")


def arch_mapper(feature: str, capabilities: Sequence[str]) -> list[str]:
    """Prefix each capability with an architecture feature.

    ``"sm"`` and ``["8.0", "8.6"]`` produce ``["sm_80", "sm_86"]``.
    """
    return [f"{feature}_{drop_dot(cap)}" for cap in capabilities]


def gencode_mapper(feature: str, capabilities: Sequence[str]) -> list[str]:
    """Build one nvcc ``-gencode`` argument per capability.

    ``"sm"`` and ``["8.0"]`` produce
    ``["-gencode=arch=compute_80,code=sm_80"]``.
    """
    return [
        f"-gencode=arch={VIRTUAL_ARCH}_{drop_dot(cap)},code={feature}_{drop_dot(cap)}"
        for cap in capabilities
    ]


# ── Environment ─────────────────────────────────────────────────


@dataclass(frozen=True)
class ResolvedEnvironment:
    """The GPU table as seen by one CUDA toolkit version."""

    cuda_version: str
    supported_gpus: list[GpuDescriptor]
    capability_to_name: dict[str, str]
    arch_name_to_capabilities: dict[str, list[str]]
    # Full table, only consulted to explain lookup failures.
    all_gpus: tuple[GpuDescriptor, ...] = field(default=(), repr=False)

    @property
    def supported_capabilities(self) -> list[str]:
        return [gpu.compute_capability for gpu in self.supported_gpus]

    def arch_name(self, capability: str) -> str:
        """Look up the family of a supported capability.

        Raises:
            CapabilityNotFoundError: If the capability is unknown or
                outside this toolkit's range.
        """
        try:
            return self.capability_to_name[capability]
        except KeyError:
            raise self._not_found(capability) from None

    def _not_found(self, capability: str) -> CapabilityNotFoundError:
        for gpu in self.all_gpus:
            if gpu.compute_capability == capability:
                return CapabilityNotFoundError(
                    capability,
                    self.cuda_version,
                    f"Compute capability {capability} ({gpu.arch_name}) is not "
                    f"supported by CUDA {self.cuda_version}; it requires CUDA "
                    f"{gpu.min_cuda_version} to {gpu.max_cuda_version}",
                )
        return CapabilityNotFoundError(
            capability,
            self.cuda_version,
            f"Unknown compute capability {capability} "
            f"(CUDA {self.cuda_version})",
        )

    def format_capabilities(
        self,
        capabilities: Sequence[str] | None = None,
        enable_forward_compat: bool = True,
    ) -> CapabilityResult:
        """Format a request; defaults to every supported capability."""
        if capabilities is None:
            capabilities = self.supported_capabilities
        return format_capabilities(self, capabilities, enable_forward_compat)


def resolve_environment(
    cuda_version: str,
    gpus: Sequence[GpuDescriptor] | None = None,
) -> ResolvedEnvironment:
    """Filter a GPU table for a toolkit version and build its lookups.

    Args:
        cuda_version: Toolkit version, e.g. ``"11.8"``.
        gpus: Hardware table (default: the built-in one).

    Raises:
        InvalidArgumentError: If ``cuda_version`` is malformed.
        ConfigInvariantError: If two supported GPUs share a capability.
    """
    table = tuple(GPUS if gpus is None else gpus)
    supported = filter_supported(table, cuda_version)

    logger.debug(
        "CUDA %s supports %d of %d GPU capabilities",
        cuda_version, len(supported), len(table),
    )

    return ResolvedEnvironment(
        cuda_version=cuda_version,
        supported_gpus=supported,
        capability_to_name=build_capability_to_name(supported),
        arch_name_to_capabilities=build_arch_name_to_capabilities(supported),
        all_gpus=table,
    )


# ── Expansion ───────────────────────────────────────────────────


def format_capabilities(
    env: ResolvedEnvironment,
    capabilities: Sequence[str],
    enable_forward_compat: bool = True,
) -> CapabilityResult:
    """Expand a capability request into architecture tokens and flags.

    The last capability is treated as the newest; no sorting is done.

    Raises:
        InvalidArgumentError: If ``capabilities`` is empty or a bare string.
        CapabilityNotFoundError: If a capability is not supported by
            ``env``'s toolkit version.
    """
    if isinstance(capabilities, str):
        raise InvalidArgumentError(
            f"Expected a list of compute capabilities, got the string {capabilities!r}"
        )
    caps = list(capabilities)
    if not caps:
        raise InvalidArgumentError(
            f"At least one compute capability is required (CUDA {env.cuda_version})"
        )

    newest = caps[-1]
    forward_capability = newest + FORWARD_SUFFIX

    capabilities_and_forward = caps + ([forward_capability] if enable_forward_compat else [])

    # Unique, first-occurrence order
    arch_names = list(dict.fromkeys(env.arch_name(cap) for cap in caps))

    real_arches = arch_mapper(REAL_ARCH, caps)
    virtual_arches = arch_mapper(VIRTUAL_ARCH, caps)

    arches = real_arches + (virtual_arches[-1:] if enable_forward_compat else [])

    gencode = gencode_mapper(REAL_ARCH, caps)
    if enable_forward_compat:
        gencode += gencode_mapper(VIRTUAL_ARCH, [newest])

    return CapabilityResult(
        capabilities=caps,
        enable_forward_compat=enable_forward_compat,
        forward_capability=forward_capability,
        capabilities_and_forward=capabilities_and_forward,
        arch_names=arch_names,
        real_arches=real_arches,
        virtual_arches=virtual_arches,
        arches=arches,
        gencode=gencode,
    )


# ── Bundle ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class CudaFlags:
    """Lookups for a toolkit plus the flags for the configured request."""

    environment: ResolvedEnvironment
    result: CapabilityResult

    @property
    def capability_to_name(self) -> dict[str, str]:
        return self.environment.capability_to_name

    @property
    def arch_name_to_capabilities(self) -> dict[str, list[str]]:
        return self.environment.arch_name_to_capabilities

    def format_capabilities(
        self,
        capabilities: Sequence[str],
        enable_forward_compat: bool = True,
    ) -> CapabilityResult:
        return format_capabilities(self.environment, capabilities, enable_forward_compat)

    def to_dict(self) -> dict:
        return {
            "cuda_version": self.environment.cuda_version,
            "capability_to_name": dict(self.capability_to_name),
            "arch_name_to_capabilities": {
                name: list(caps) for name, caps in self.arch_name_to_capabilities.items()
            },
            **self.result.to_dict(),
        }


def cuda_flags(
    cuda_version: str,
    capabilities: Sequence[str] | None = None,
    forward_compat: bool | None = None,
    gpus: Sequence[GpuDescriptor] | None = None,
) -> CudaFlags:
    """Resolve a toolkit version and format the requested capabilities.

    Args:
        cuda_version: Toolkit version, e.g. ``"12.0"``.
        capabilities: Capabilities to build for, newest last
            (default: everything the toolkit supports).
        forward_compat: Add the +PTX target (default: True).
        gpus: Hardware table (default: the built-in one).
    """
    env = resolve_environment(cuda_version, gpus)

    if capabilities is None:
        capabilities = env.supported_capabilities
        if not capabilities:
            raise InvalidArgumentError(
                f"CUDA {cuda_version} supports none of the known GPU capabilities"
            )
    if forward_compat is None:
        forward_compat = True

    return CudaFlags(
        environment=env,
        result=format_capabilities(env, capabilities, forward_compat),
    )
