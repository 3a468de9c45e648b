"""
Shared test fixtures and configuration.
"""

import logging
import textwrap
from pathlib import Path

import pytest

from cudaflags.core.models.gpu import GpuDescriptor


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CUDAFLAGS_* from the developer's shell out of the tests."""
    for name in (
        "CUDAFLAGS_CUDA_VERSION",
        "CUDAFLAGS_CAPABILITIES",
        "CUDAFLAGS_FORWARD_COMPAT",
        "CUDAFLAGS_LOG_LEVEL",
        "CUDAFLAGS_LOG_FILE",
        "CUDAFLAGS_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for h in root.handlers[:]:
        if type(h) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


@pytest.fixture
def isolated_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Chdir into an empty directory so no cudaflags.yml is found."""
    isolated = tmp_path / "isolated"
    isolated.mkdir()
    monkeypatch.chdir(isolated)
    return isolated


@pytest.fixture
def two_family_gpus() -> list[GpuDescriptor]:
    """A Turing + Ampere table, valid for any toolkit from 10.0 on."""
    return [
        GpuDescriptor(
            arch_name="Turing",
            compute_capability="7.5",
            min_cuda_version="10.0",
            max_cuda_version="99.0",
        ),
        GpuDescriptor(
            arch_name="Ampere",
            compute_capability="8.6",
            min_cuda_version="10.0",
            max_cuda_version="99.0",
        ),
    ]


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A cudaflags.yml pinning CUDA 12.0 and two capabilities."""
    path = tmp_path / "cudaflags.yml"
    path.write_text(textwrap.dedent("""\
        cuda_version: "12.0"
        cuda_capabilities: ["7.5", "8.6"]
        cuda_forward_compat: true
    """))
    return path
