"""
Configuration management for super-env.

This module handles loading the optional project configuration file that
overrides the default locations of the key, plaintext and encrypted files.

Example .super-env.yaml:

    key_file: secrets/MASTER_KEY.key
    env_file: .env
    encrypted_file: .env.enc
    editor: code --wait
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from .crypto import DEFAULT_ENCRYPTED_FILE, DEFAULT_ENV_FILE
from .errors import SuperEnvError
from .keys import MASTER_KEY_FILENAME


@dataclass
class SuperEnvConfig:
    """Main configuration for super-env."""

    key_file: str = MASTER_KEY_FILENAME
    env_file: str = DEFAULT_ENV_FILE
    encrypted_file: str = DEFAULT_ENCRYPTED_FILE
    editor: str | None = None

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "SuperEnvConfig":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the configuration file. If None, searches
                        for config in standard locations.

        Returns:
            A SuperEnvConfig instance with the loaded configuration.
        """
        if config_path is None:
            config_path = cls._find_config_file()

        if config_path is None or not Path(config_path).exists():
            return cls()

        return cls._parse_config_file(config_path)

    @classmethod
    def _find_config_file(cls) -> str | None:
        """Search for config file in standard locations."""
        search_paths = [
            Path.cwd() / ".super-env.yaml",
            Path.cwd() / ".super-env.yml",
            Path.cwd() / "super-env.yaml",
            Path.cwd() / "super-env.yml",
            Path.home() / ".config" / "super-env.yaml",
        ]

        for path in search_paths:
            if path.exists():
                return str(path)

        return None

    @classmethod
    def _parse_config_file(cls, config_path: str | Path) -> "SuperEnvConfig":
        """Parse a YAML configuration file."""
        path = Path(config_path)

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in config file: {exc}", exc) from exc

        if data is None:
            return cls()

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        values = {}
        for name, value in data.items():
            if name not in known or value is None:
                continue
            if not isinstance(value, str):
                raise ConfigurationError(f"Config option '{name}' must be a string")
            values[name] = value

        return cls(**values)


class ConfigurationError(SuperEnvError):
    """Exception raised for configuration errors."""
