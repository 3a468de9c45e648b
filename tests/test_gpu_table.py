"""
Tests for loading a custom GPU table from YAML.
"""

import textwrap
from pathlib import Path

import pytest

from cudaflags.core.config.loader import ConfigError
from cudaflags.core.config.table_loader import load_gpu_table
from cudaflags.core.services.capabilities import format_capabilities, resolve_environment


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "gpus.yml"
    path.write_text(textwrap.dedent(content))
    return path


class TestLoadGpuTable:
    def test_valid_table(self, tmp_path: Path):
        path = _write(tmp_path, """\
            gpus:
              - arch_name: Turing
                compute_capability: "7.5"
                min_cuda_version: "10.0"
                max_cuda_version: "12.4"
              - arch_name: Blackwell
                compute_capability: "10.0"
                min_cuda_version: "12.8"
                max_cuda_version: "12.9"
        """)
        gpus = load_gpu_table(path)
        assert [g.compute_capability for g in gpus] == ["7.5", "10.0"]
        assert gpus[1].arch_name == "Blackwell"

    def test_table_feeds_resolver(self, tmp_path: Path):
        path = _write(tmp_path, """\
            gpus:
              - arch_name: Blackwell
                compute_capability: "10.0"
                min_cuda_version: "12.8"
                max_cuda_version: "12.9"
        """)
        env = resolve_environment("12.8", load_gpu_table(path))
        result = format_capabilities(env, ["10.0"])
        assert result.arches == ["sm_100", "compute_100"]

    def test_unquoted_numbers_are_coerced(self, tmp_path: Path):
        path = _write(tmp_path, """\
            gpus:
              - arch_name: Ampere
                compute_capability: 8.6
                min_cuda_version: 11.2
                max_cuda_version: 12
        """)
        gpu = load_gpu_table(path)[0]
        assert gpu.compute_capability == "8.6"
        assert gpu.max_cuda_version == "12"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_gpu_table(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = _write(tmp_path, "gpus: [\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_gpu_table(path)

    def test_missing_gpus_key(self, tmp_path: Path):
        path = _write(tmp_path, "hardware: []\n")
        with pytest.raises(ConfigError, match="'gpus' list"):
            load_gpu_table(path)

    def test_entry_not_mapping(self, tmp_path: Path):
        path = _write(tmp_path, "gpus:\n  - just a string\n")
        with pytest.raises(ConfigError, match="not a mapping"):
            load_gpu_table(path)

    def test_missing_field(self, tmp_path: Path):
        path = _write(tmp_path, """\
            gpus:
              - arch_name: Ampere
                compute_capability: "8.6"
        """)
        with pytest.raises(ConfigError, match="Invalid GPU entry #0"):
            load_gpu_table(path)

    def test_malformed_version(self, tmp_path: Path):
        path = _write(tmp_path, """\
            gpus:
              - arch_name: Ampere
                compute_capability: "8.6"
                min_cuda_version: "eleven"
                max_cuda_version: "12.0"
        """)
        with pytest.raises(ConfigError, match="eleven"):
            load_gpu_table(path)

    def test_duplicate_capability(self, tmp_path: Path):
        path = _write(tmp_path, """\
            gpus:
              - arch_name: Ampere
                compute_capability: "8.6"
                min_cuda_version: "11.2"
                max_cuda_version: "12.0"
              - arch_name: Ampere
                compute_capability: "8.6"
                min_cuda_version: "12.1"
                max_cuda_version: "12.4"
        """)
        with pytest.raises(ConfigError, match="Duplicate compute capability 8.6"):
            load_gpu_table(path)
