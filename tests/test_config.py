"""
Unit tests for config.py module.

Tests:
- Defaults when sections are missing
- Loading and validating YAML files
- Logging setup
"""

import logging
import pytest
import sys
from pathlib import Path
from unittest.mock import patch

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from baduk.config import (
    DEFAULT_LOG_FORMAT,
    AppConfig,
    configure_logging,
    load_config,
    parse_config,
)


@pytest.fixture
def write_config(tmp_path):
    """Write YAML text to a temporary config.yaml and return its path."""
    def _write(text):
        path = tmp_path / "config.yaml"
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write


class TestParseConfig:
    """Tests for parse_config."""

    def test_defaults(self):
        config = parse_config({})
        assert config == AppConfig()
        assert config.session.default_board_size == 19
        assert config.session.strict_board_size is True
        assert config.logging.level == "INFO"
        assert config.logging.format == DEFAULT_LOG_FORMAT
        assert config.api.max_sessions == 1000

    def test_invalid_board_size(self):
        with pytest.raises(ValueError):
            parse_config({"session": {"default_board_size": 15}})

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            parse_config({"logging": {"level": "LOUD"}})

    def test_level_is_case_insensitive(self):
        assert parse_config({"logging": {"level": "debug"}}).logging.level == "DEBUG"

    def test_section_must_be_mapping(self):
        with pytest.raises(ValueError):
            parse_config({"session": [9, 13]})

    def test_invalid_max_sessions(self):
        with pytest.raises(ValueError):
            parse_config({"api": {"max_sessions": 0}})


class TestLoadConfig:
    """Tests for load_config."""

    def test_load_file(self, write_config):
        path = write_config(
            "session:\n"
            "  default_board_size: 9\n"
            "  strict_board_size: false\n"
            "logging:\n"
            "  level: WARNING\n"
        )
        config = load_config(path)

        assert config.session.default_board_size == 9
        assert config.session.strict_board_size is False
        assert config.logging.level == "WARNING"
        assert config.api.max_sessions == 1000

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, write_config):
        with pytest.raises(ValueError):
            load_config(write_config(""))

    def test_non_mapping_file(self, write_config):
        with pytest.raises(ValueError):
            load_config(write_config("- 9\n- 13\n"))

    def test_no_file_found_uses_defaults(self, tmp_path, monkeypatch):
        """Test searching with no config.yaml anywhere returns defaults."""
        monkeypatch.chdir(tmp_path)
        with patch("baduk.config.get_project_root", return_value=tmp_path):
            assert load_config() == AppConfig()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_applies_level(self):
        config = parse_config({"logging": {"level": "DEBUG"}})
        with patch("baduk.config.logging.basicConfig") as basic_config:
            configure_logging(config)
        basic_config.assert_called_once_with(level=logging.DEBUG, format=DEFAULT_LOG_FORMAT)
