"""
Configuration loader — reads cudaflags.yml and environment overrides.

Values are resolved in precedence order:
    CLI option  >  CUDAFLAGS_* env var  >  cudaflags.yml  >  default

Environment variables:
    CUDAFLAGS_CUDA_VERSION     e.g. "12.0"
    CUDAFLAGS_CAPABILITIES     e.g. "7.5,8.6" (comma, space or semicolon)
    CUDAFLAGS_FORWARD_COMPAT   1/0, true/false, yes/no, on/off
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Mapping

import yaml

from cudaflags.core.models.config import FlagsConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "cudaflags.yml"

ENV_CUDA_VERSION = "CUDAFLAGS_CUDA_VERSION"
ENV_CAPABILITIES = "CUDAFLAGS_CAPABILITIES"
ENV_FORWARD_COMPAT = "CUDAFLAGS_FORWARD_COMPAT"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for cudaflags.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to cudaflags.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path) -> FlagsConfig:
    """Load and validate a config file.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    if "cuda_version" in data:
        data["cuda_version"] = version_from_yaml(data["cuda_version"], "cuda_version", path)
    caps = data.get("cuda_capabilities")
    if isinstance(caps, list):
        data["cuda_capabilities"] = [
            version_from_yaml(c, "cuda_capabilities", path) for c in caps
        ]

    try:
        config = FlagsConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.info("Loaded config from %s", path)
    return config


def version_from_yaml(value: object, key: str, path: Path) -> object:
    """Turn an unquoted YAML number back into a version string.

    YAML reads `12.10` as the float 12.1, so the original digits may
    already be gone; the conversion is logged so the user can quote it.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    text = str(value)
    logger.warning(
        "%s: %s is an unquoted number, read as \"%s\"; quote versions "
        "(e.g. \"12.10\") to keep every digit",
        path, key, text,
    )
    return text


def parse_list_env(value: str | None) -> list[str]:
    """Split a capability list on comma/space/semicolon, dropping empties."""
    if not value:
        return []
    return [p for p in re.split(r"[,\s;]+", value.strip()) if p]


def parse_bool_env(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {value!r}")


def apply_env(config: FlagsConfig, environ: Mapping[str, str] | None = None) -> FlagsConfig:
    """Return a copy of ``config`` with CUDAFLAGS_* overrides applied."""
    env = os.environ if environ is None else environ
    updates: dict = {}

    if env.get(ENV_CUDA_VERSION):
        updates["cuda_version"] = env[ENV_CUDA_VERSION].strip()

    caps = parse_list_env(env.get(ENV_CAPABILITIES))
    if caps:
        updates["cuda_capabilities"] = caps

    if env.get(ENV_FORWARD_COMPAT):
        updates["cuda_forward_compat"] = parse_bool_env(
            ENV_FORWARD_COMPAT, env[ENV_FORWARD_COMPAT]
        )

    if updates:
        logger.debug("Environment overrides: %s", sorted(updates))
    return config.model_copy(update=updates)


def resolve_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[FlagsConfig, Path | None]:
    """Load the config file (if any) and apply environment overrides.

    A missing file is not an error: every value can come from the
    environment or the command line instead.

    Returns:
        The merged config and the file it was read from (or None).
    """
    if path is None:
        path = find_config_file()

    config = load_config(path) if path is not None else FlagsConfig()
    return apply_env(config, environ), path


def resolve_gpus_file(config: FlagsConfig, config_path: Path | None) -> Path | None:
    """Resolve ``gpus_file`` relative to the config file's directory."""
    if not config.gpus_file:
        return None
    gpus_path = Path(config.gpus_file)
    if not gpus_path.is_absolute() and config_path is not None:
        gpus_path = config_path.parent / gpus_path
    return gpus_path
