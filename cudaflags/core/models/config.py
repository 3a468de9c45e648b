"""
Config model — the contents of cudaflags.yml.
"""

from __future__ import annotations

from pydantic import BaseModel


class FlagsConfig(BaseModel):
    """Which toolkit to target and which capabilities to build for.

    Every field is optional in the file; the CLI and environment
    variables fill in or override what is missing.
    """

    cuda_version: str | None = None

    # Newest capability last; it becomes the forward-compatible (+PTX) target.
    cuda_capabilities: list[str] | None = None
    cuda_forward_compat: bool | None = None

    # Custom hardware table, relative to the config file.
    gpus_file: str | None = None

