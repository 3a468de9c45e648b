"""
GPU table loader — loads a custom hardware table from YAML.

The built-in table covers released hardware.  A YAML table lets a
build pin or extend it without a new release::

    gpus:
      - arch_name: Ampere
        compute_capability: "8.6"
        min_cuda_version: "11.2"
        max_cuda_version: "12.0"

Quote the versions: unquoted YAML numbers lose trailing zeros ("12.10").
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from cudaflags.core.config.loader import ConfigError, version_from_yaml
from cudaflags.core.domain.versions import VersionError, parse_version
from cudaflags.core.models.gpu import GpuDescriptor

logger = logging.getLogger(__name__)

_VERSION_FIELDS = ("compute_capability", "min_cuda_version", "max_cuda_version")


def load_gpu_table(path: Path) -> tuple[GpuDescriptor, ...]:
    """Load and validate a hardware table.

    Args:
        path: Path to a YAML file with a top-level ``gpus`` list.

    Returns:
        Descriptors in file order.

    Raises:
        ConfigError: If the file is missing, malformed, lists a capability
            twice, or has a version that cannot be parsed.
    """
    if not path.is_file():
        raise ConfigError(f"GPU table not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("gpus"), list):
        raise ConfigError(f"Expected a 'gpus' list in {path}")

    gpus: list[GpuDescriptor] = []
    seen: dict[str, str] = {}

    for i, entry in enumerate(data["gpus"]):
        if not isinstance(entry, dict):
            raise ConfigError(f"GPU entry #{i} in {path} is not a mapping")

        entry = {k: version_from_yaml(v, f"gpus[{i}].{k}", path) for k, v in entry.items()}

        try:
            gpu = GpuDescriptor.model_validate(entry)
        except Exception as e:
            raise ConfigError(f"Invalid GPU entry #{i} in {path}: {e}") from e

        for name in _VERSION_FIELDS:
            try:
                parse_version(getattr(gpu, name))
            except VersionError as e:
                raise ConfigError(f"GPU entry #{i} in {path}: {e}") from e

        if gpu.compute_capability in seen:
            raise ConfigError(
                f"Duplicate compute capability {gpu.compute_capability} in {path} "
                f"({seen[gpu.compute_capability]} and {gpu.arch_name})"
            )
        seen[gpu.compute_capability] = gpu.arch_name
        gpus.append(gpu)

    logger.info("Loaded %d GPUs from %s", len(gpus), path)
    return tuple(gpus)
