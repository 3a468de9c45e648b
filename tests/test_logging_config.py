"""
Tests for logging setup — level resolution and stderr-only output.
"""

import io
import logging
import sys
from pathlib import Path

import pytest

from cudaflags.core.observability.logging_config import (
    parse_level,
    resolve_level,
    setup_logging,
    setup_logging_from_env,
)


class TestParseLevel:
    def test_known(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level(" ERROR ") == logging.ERROR

    def test_numeric(self):
        assert parse_level("10") == logging.DEBUG

    @pytest.mark.parametrize("level", ["LOUD", "", None])
    def test_unknown_falls_back(self, level):
        assert parse_level(level) == logging.WARNING


class TestResolveLevel:
    def test_flags_beat_env(self):
        env = {"CUDAFLAGS_LOG_LEVEL": "ERROR"}
        assert resolve_level(debug=True, environ=env) == "DEBUG"
        assert resolve_level(verbose=True, environ=env) == "INFO"

    def test_debug_beats_quiet(self):
        assert resolve_level(debug=True, quiet=True, environ={}) == "DEBUG"

    def test_quiet(self):
        assert resolve_level(quiet=True, environ={}) == "ERROR"

    def test_env(self):
        assert resolve_level(environ={"CUDAFLAGS_LOG_LEVEL": "info"}) == "info"

    def test_default(self):
        assert resolve_level(environ={}) == "WARNING"
        assert resolve_level(environ={"CUDAFLAGS_LOG_LEVEL": ""}) == "WARNING"


class TestSetupLogging:
    def test_console_goes_to_stderr(self):
        setup_logging("DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stderr

    def test_replaces_previous_handlers(self):
        setup_logging("INFO")
        setup_logging("INFO")
        assert len(logging.getLogger().handlers) == 1

    def test_warning_format(self):
        stream = io.StringIO()
        setup_logging("WARNING", stream=stream)
        logging.getLogger("cudaflags.core.config.loader").warning("quote %s", "12.10")
        assert stream.getvalue() == "cudaflags: WARNING: quote 12.10\n"

    def test_debug_format_names_module(self):
        stream = io.StringIO()
        setup_logging("DEBUG", stream=stream)
        logging.getLogger("cudaflags.core.services.capabilities").debug("resolved")
        assert "cudaflags.core.services.capabilities" in stream.getvalue()
        assert "resolved" in stream.getvalue()

    def test_below_level_is_dropped(self):
        stream = io.StringIO()
        setup_logging("ERROR", stream=stream)
        logging.getLogger("cudaflags.test").warning("hidden")
        assert stream.getvalue() == ""

    def test_file_level_lowers_root(self, tmp_path: Path):
        log_file = tmp_path / "cudaflags.log"
        stream = io.StringIO()
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG", stream=stream)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("cudaflags.test").debug("resolved %s", "12.0")
        for h in root.handlers:
            h.flush()
        assert "resolved 12.0" in log_file.read_text(encoding="utf-8")
        assert stream.getvalue() == ""


class TestSetupLoggingFromEnv:
    def test_log_file_from_env(self, tmp_path: Path):
        log_file = tmp_path / "cudaflags.log"
        setup_logging_from_env(
            "WARNING",
            environ={
                "CUDAFLAGS_LOG_FILE": str(log_file),
                "CUDAFLAGS_LOG_FILE_LEVEL": "INFO",
            },
        )
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert any(isinstance(h, logging.FileHandler) for h in root.handlers)

    def test_no_file_without_env(self):
        setup_logging_from_env("WARNING", environ={})
        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)
