#!/usr/bin/env python3
"""
Configuration Manager for the p0f client

Features:
- JSON configuration file
- Environment variable overrides (P0F_ prefix)
- Schema validation with jsonschema
- Default values
"""

import json
import logging
import os
import copy
from typing import Dict, Any, Optional
from pathlib import Path

import jsonschema

from ..core.errors import ConfigError

logger = logging.getLogger(__name__)


DEFAULT_SOCKET_PATH = "/var/run/p0f.sock"


class ConfigSchema:
    """Configuration schema with validation"""

    SCHEMA = {
        "type": "object",
        "required": ["version", "client", "general"],
        "properties": {
            "version": {"type": "string", "pattern": r"^\d+\.\d+\.\d+$"},
            "client": {
                "type": "object",
                "required": ["socket_path"],
                "properties": {
                    "socket_path": {"type": "string", "minLength": 1},
                },
                "additionalProperties": False,
            },
            "general": {
                "type": "object",
                "required": ["log_level", "output_format"],
                "properties": {
                    "log_level": {"type": "string", "enum": ["DEBUG", "INFO", "WARNING", "ERROR"]},
                    "output_format": {"type": "string", "enum": ["simple", "detailed", "json"]},
                    "colors_enabled": {"type": "boolean"},
                },
                "additionalProperties": False,
            },
        },
    }

    @staticmethod
    def get_defaults() -> Dict[str, Any]:
        """Return default configuration"""
        return {
            "version": "1.0.0",
            "client": {
                "socket_path": DEFAULT_SOCKET_PATH,
            },
            "general": {
                "log_level": "WARNING",
                "output_format": "simple",
                "colors_enabled": True,
            },
        }


class ConfigManager:
    """
    Configuration manager with file, env, and validation support

    Usage:
        config = ConfigManager("p0f_client.json")
        config.load()
        path = config.get("client.socket_path")
        config.set("general.output_format", "json")
        config.save()
    """

    ENV_PREFIX = "P0F_"

    def __init__(self, config_file: Optional[str] = None):
        """
        Args:
            config_file: Path to JSON config file (default: p0f_client.json)
        """
        self.config_file = config_file or "p0f_client.json"
        self.config = ConfigSchema.get_defaults()
        self.modified = False

    def load(self, config_file: Optional[str] = None) -> bool:
        """
        Load configuration from file

        Args:
            config_file: Optional path override

        Returns:
            True if the file was loaded, False if it does not exist

        Raises:
            ConfigError: If the file cannot be parsed or fails validation
        """
        if config_file:
            self.config_file = config_file

        path = Path(self.config_file)

        if not path.exists():
            logger.warning(f"Config file not found: {self.config_file}, using defaults")
            return False

        try:
            with open(path, 'r') as f:
                loaded_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"config parse error in {self.config_file}: {e}") from e
        except OSError as e:
            raise ConfigError(f"config load error in {self.config_file}: {e}") from e

        if not isinstance(loaded_config, dict):
            raise ConfigError(f"config in {self.config_file} must be a JSON object")

        merged = ConfigSchema.get_defaults()
        self._merge_config(merged, loaded_config)
        self._validate_config(merged)

        self.config = merged
        self.modified = False
        logger.info(f"Config loaded: {self.config_file}")
        return True

    def save(self, config_file: Optional[str] = None) -> None:
        """Save configuration to file. Raises ConfigError on failure."""
        if config_file:
            self.config_file = config_file

        self.validate()
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            raise ConfigError(f"config save error in {self.config_file}: {e}") from e

        logger.info(f"Config saved: {self.config_file}")
        self.modified = False

    def _merge_config(self, base: Dict, override: Dict) -> None:
        """Deep merge configuration"""
        for key, value in override.items():
            if (key in base and
                    isinstance(base[key], dict) and
                    isinstance(value, dict)):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    @staticmethod
    def _validate_config(config: Dict[str, Any]) -> None:
        try:
            jsonschema.validate(instance=config, schema=ConfigSchema.SCHEMA)
        except jsonschema.ValidationError as e:
            location = ".".join(str(p) for p in e.absolute_path) or "<root>"
            raise ConfigError(f"invalid config at {location}: {e.message}") from e

    def validate(self) -> None:
        """Validate the current configuration. Raises ConfigError."""
        self._validate_config(self.config)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation

        Environment variables win over file values, e.g.
        P0F_CLIENT_SOCKET_PATH overrides "client.socket_path".

        Args:
            key: Configuration key (e.g., "client.socket_path")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = self.ENV_PREFIX + key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            if self._schema_type(key) == "string":
                return env_value
            return self._parse_env_value(env_value)

        value = self.config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @staticmethod
    def _schema_type(key: str) -> Optional[str]:
        """Schema type of a dot-notation key, or None if the key is unknown"""
        spec: Dict[str, Any] = ConfigSchema.SCHEMA
        for k in key.split("."):
            spec = spec.get("properties", {}).get(k)
            if spec is None:
                return None
        return spec.get("type")

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value"""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation"""
        keys = key.split(".")

        current = self.config
        for k in keys[:-1]:
            current = current.setdefault(k, {})

        current[keys[-1]] = value
        self.modified = True

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.config)


def create_default_config(filename: str = "p0f_client.json") -> None:
    """Create default configuration file"""
    ConfigManager(filename).save()
