"""
Config check use case — validate cudaflags.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from cudaflags.core.config.loader import ConfigError, find_config_file, load_config, resolve_gpus_file
from cudaflags.core.config.table_loader import load_gpu_table
from cudaflags.core.models.config import FlagsConfig
from cudaflags.core.services.capabilities import GPUS, CapabilityError, cuda_flags


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: FlagsConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "cuda_version": self.config.cuda_version if self.config else None,
            "cuda_capabilities": self.config.cuda_capabilities if self.config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate a config file and resolve it once to surface bad values.

    Args:
        config_path: Optional explicit path to cudaflags.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()

    if config_path is None:
        result.errors.append("No cudaflags.yml found.")
        return result

    result.config_path = config_path

    try:
        config = load_config(config_path)
        result.config = config
        gpus_path = resolve_gpus_file(config, config_path)
        gpus = load_gpu_table(gpus_path) if gpus_path else GPUS
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    # Semantic checks
    if not config.cuda_version:
        result.warnings.append(
            "No cuda_version set. It must then come from --cuda or CUDAFLAGS_CUDA_VERSION."
        )
    else:
        try:
            cuda_flags(config.cuda_version, config.cuda_capabilities, config.cuda_forward_compat, gpus)
        except CapabilityError as e:
            result.errors.append(str(e))

    caps = config.cuda_capabilities or []
    dupes = sorted({c for c in caps if caps.count(c) > 1})
    if dupes:
        result.warnings.append(f"Duplicate capabilities: {', '.join(dupes)}")

    result.valid = len(result.errors) == 0
    return result
