"""
Resolve use case — merge config sources and format capabilities.

This is what the CLI commands call: it turns config file, environment
and command-line values into a ResolvedEnvironment and, when asked, a
CapabilityResult.  Failures are reported in ``error`` instead of raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from cudaflags.core.config.loader import ConfigError, resolve_config, resolve_gpus_file
from cudaflags.core.config.table_loader import load_gpu_table
from cudaflags.core.models.config import FlagsConfig
from cudaflags.core.models.gpu import CapabilityResult, GpuDescriptor
from cudaflags.core.services.capabilities import (
    GPUS,
    CapabilityError,
    CudaFlags,
    ResolvedEnvironment,
    cuda_flags,
    resolve_environment,
)

logger = logging.getLogger(__name__)


@dataclass
class ResolveResult:
    """Outcome of resolving a toolkit version (and optionally a request)."""

    config: FlagsConfig | None = None
    config_path: Path | None = None
    gpus: tuple[GpuDescriptor, ...] = field(default_factory=tuple)
    environment: ResolvedEnvironment | None = None
    flags: CudaFlags | None = None
    error: str | None = None

    @property
    def result(self) -> CapabilityResult | None:
        return self.flags.result if self.flags else None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        if self.error:
            return {"error": self.error}
        if self.flags:
            return self.flags.to_dict()
        env = self.environment
        return {
            "cuda_version": env.cuda_version if env else None,
            "supported_gpus": [g.model_dump() for g in env.supported_gpus] if env else [],
        }


def _load_context(
    config_path: Path | None,
    cuda_version: str | None,
) -> tuple[FlagsConfig, Path | None, tuple[GpuDescriptor, ...], str]:
    config, path = resolve_config(config_path)

    gpus_path = resolve_gpus_file(config, path)
    gpus = load_gpu_table(gpus_path) if gpus_path else GPUS

    version = cuda_version or config.cuda_version
    if not version:
        raise ConfigError(
            "No CUDA version given. Pass --cuda, set CUDAFLAGS_CUDA_VERSION, "
            "or add cuda_version to cudaflags.yml."
        )
    return config, path, gpus, version


def run_environment(
    config_path: Path | None = None,
    cuda_version: str | None = None,
) -> ResolveResult:
    """Resolve the supported GPUs and lookup maps for a toolkit version."""
    result = ResolveResult()
    try:
        config, path, gpus, version = _load_context(config_path, cuda_version)
        result.config, result.config_path, result.gpus = config, path, gpus
        result.environment = resolve_environment(version, gpus)
    except (ConfigError, CapabilityError) as e:
        result.error = str(e)
    return result


def run_resolve(
    config_path: Path | None = None,
    cuda_version: str | None = None,
    capabilities: Sequence[str] | None = None,
    forward_compat: bool | None = None,
) -> ResolveResult:
    """Resolve a toolkit version and format the effective capability request.

    Args:
        config_path: Explicit cudaflags.yml (default: search upward).
        cuda_version: Overrides env var and config file.
        capabilities: Overrides env var and config file; an empty
            sequence means "not given".
        forward_compat: Overrides env var and config file.
    """
    result = ResolveResult()
    try:
        config, path, gpus, version = _load_context(config_path, cuda_version)
        result.config, result.config_path, result.gpus = config, path, gpus

        caps = list(capabilities) if capabilities else config.cuda_capabilities
        if forward_compat is None:
            forward_compat = config.cuda_forward_compat

        flags = cuda_flags(version, caps, forward_compat, gpus)
        result.environment = flags.environment
        result.flags = flags
        logger.info(
            "CUDA %s: %s → %s",
            version, flags.result.capabilities, flags.result.arches,
        )
    except (ConfigError, CapabilityError) as e:
        result.error = str(e)
    return result
