"""
Configuration management for the Baduk engine.

Loads configuration from config.yaml and provides typed access.
Every section is optional; without a config file the defaults apply.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .board import BOARD_SIZES

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class SessionConfig:
    """Game session defaults."""
    default_board_size: int = 19
    strict_board_size: bool = True


@dataclass
class LoggingConfig:
    """Logging setup for the CLI and API entry points."""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT


@dataclass
class ApiConfig:
    """REST API configuration."""
    max_sessions: int = 1000


@dataclass
class AppConfig:
    """Main application configuration."""
    session: SessionConfig = field(default_factory=SessionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    api: ApiConfig = field(default_factory=ApiConfig)


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return section


def parse_config(data: Dict[str, Any]) -> AppConfig:
    """
    Build an AppConfig from parsed YAML data.

    Raises:
        ValueError: If a value is invalid
    """
    session_data = _section(data, "session")
    session_config = SessionConfig(
        default_board_size=int(session_data.get("default_board_size", 19)),
        strict_board_size=bool(session_data.get("strict_board_size", True)),
    )
    if session_config.default_board_size not in BOARD_SIZES:
        raise ValueError(
            f"default_board_size must be 9, 13, or 19, got {session_config.default_board_size}"
        )

    logging_data = _section(data, "logging")
    level = str(logging_data.get("level", "INFO")).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level: {level}")
    logging_config = LoggingConfig(
        level=level,
        format=logging_data.get("format", DEFAULT_LOG_FORMAT),
    )

    api_data = _section(data, "api")
    api_config = ApiConfig(
        max_sessions=int(api_data.get("max_sessions", 1000)),
    )
    if api_config.max_sessions < 1:
        raise ValueError(f"max_sessions must be positive, got {api_config.max_sessions}")

    return AppConfig(
        session=session_config,
        logging=logging_config,
        api=api_config,
    )


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config.yaml. If None, searches in:
                     1. Current directory
                     2. Project root (relative to this file)
                     and falls back to defaults when neither exists.

    Returns:
        AppConfig instance

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If config file is invalid
    """
    if config_path is None:
        search_paths = [
            Path.cwd() / "config.yaml",
            get_project_root() / "config.yaml",
        ]

        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break
        else:
            return AppConfig()

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data:
        raise ValueError(f"Config file is empty: {config_path}")
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    return parse_config(data)


def configure_logging(config: AppConfig) -> None:
    """Apply the configured level and format to the root logger."""
    logging.basicConfig(
        level=getattr(logging, config.logging.level),
        format=config.logging.format,
    )
