"""
FIXSPEC - Configuration Management

This module provides configuration management for the dictionary compiler,
supporting YAML configuration files and environment variable overrides.
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
from pathlib import Path
from enum import Enum
import logging

from .constants import (
    DEFAULT_MAX_TAG,
    DEFAULT_REFERENCE_DIR,
    ENV_PREFIX,
    MAX_CONFIGURABLE_TAG,
)
from .exceptions import ConfigurationException

logger = logging.getLogger(__name__)


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class VersionOverride:
    """Per schema version settings, keyed by "<major><minor>" (e.g. "44")."""

    max_tag: Optional[int] = None
    derive_max_tag: Optional[bool] = None


@dataclass
class CompilerConfig:
    """Main compiler configuration."""

    # Logging
    log_level: LogLevel = LogLevel.INFO
    json_logs: bool = False

    # Tag sequence table bounds
    max_tag: int = DEFAULT_MAX_TAG
    derive_max_tag: bool = False
    version_overrides: Dict[str, VersionOverride] = field(default_factory=dict)

    # Resolution
    expand_components: bool = True

    # Output
    language: str = "c"
    reference_dir: str = DEFAULT_REFERENCE_DIR

    @classmethod
    def load_from_file(cls, config_path: Union[str, Path]) -> "CompilerConfig":
        """Load configuration from YAML file."""
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationException(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationException(f"Invalid YAML in configuration file: {e}")
        except OSError as e:
            raise ConfigurationException(f"Error loading configuration file: {e}")

        if not isinstance(config_data, dict):
            raise ConfigurationException(
                f"Configuration file must contain a mapping: {config_path}"
            )

        return cls._from_dict(config_data)

    @classmethod
    def load_from_env(cls, prefix: str = ENV_PREFIX) -> "CompilerConfig":
        """Load configuration from environment variables."""
        config = cls()
        config.apply_env(prefix)
        return config

    def apply_env(self, prefix: str = ENV_PREFIX) -> None:
        """Overlay environment variables onto this configuration."""
        try:
            self.log_level = LogLevel(
                os.getenv(f"{prefix}LOG_LEVEL", self.log_level.value).upper()
            )
        except ValueError:
            raise ConfigurationException(
                f"Invalid log level: {os.getenv(f'{prefix}LOG_LEVEL')}",
                config_key="log_level",
            )

        self.json_logs = (
            os.getenv(f"{prefix}JSON_LOGS", str(self.json_logs)).lower() == "true"
        )
        self.derive_max_tag = (
            os.getenv(f"{prefix}DERIVE_MAX_TAG", str(self.derive_max_tag)).lower()
            == "true"
        )
        self.expand_components = (
            os.getenv(f"{prefix}EXPAND_COMPONENTS", str(self.expand_components)).lower()
            == "true"
        )

        if os.getenv(f"{prefix}MAX_TAG"):
            try:
                self.max_tag = int(os.getenv(f"{prefix}MAX_TAG", str(self.max_tag)))
            except ValueError:
                raise ConfigurationException(
                    f"Invalid max tag: {os.getenv(f'{prefix}MAX_TAG')}",
                    config_key="max_tag",
                )

        self.language = os.getenv(f"{prefix}LANGUAGE", self.language)
        self.reference_dir = os.getenv(f"{prefix}REFERENCE_DIR", self.reference_dir)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "CompilerConfig":
        """Create configuration from dictionary."""
        config = cls()

        if "log_level" in data:
            try:
                config.log_level = LogLevel(str(data["log_level"]).upper())
            except ValueError:
                raise ConfigurationException(
                    f"Invalid log level: {data['log_level']}", config_key="log_level"
                )

        if "version_overrides" in data:
            overrides = data["version_overrides"] or {}
            if not isinstance(overrides, dict):
                raise ConfigurationException(
                    "version_overrides must be a mapping", config_key="version_overrides"
                )
            try:
                config.version_overrides = {
                    str(version): VersionOverride(**(values or {}))
                    for version, values in overrides.items()
                }
            except TypeError as e:
                raise ConfigurationException(
                    f"Invalid version override: {e}", config_key="version_overrides"
                )

        for key in [
            "json_logs",
            "max_tag",
            "derive_max_tag",
            "expand_components",
            "language",
            "reference_dir",
        ]:
            if key in data:
                setattr(config, key, data[key])

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "log_level": self.log_level.value,
            "json_logs": self.json_logs,
            "max_tag": self.max_tag,
            "derive_max_tag": self.derive_max_tag,
            "version_overrides": {
                version: {
                    "max_tag": override.max_tag,
                    "derive_max_tag": override.derive_max_tag,
                }
                for version, override in self.version_overrides.items()
            },
            "expand_components": self.expand_components,
            "language": self.language,
            "reference_dir": self.reference_dir,
        }

    def max_tag_for(self, major: str, minor: str, registry_max_tag: int = 0) -> int:
        """
        Resolve the tag sequence table bound for one schema version.

        Args:
            major: Schema major version
            minor: Schema minor version
            registry_max_tag: Largest tag registered in that version

        Returns:
            Largest tag number the table can index
        """
        override = self.version_overrides.get(f"{major}{minor}")

        derive = self.derive_max_tag
        max_tag = self.max_tag
        if override is not None:
            if override.derive_max_tag is not None:
                derive = override.derive_max_tag
            if override.max_tag is not None:
                max_tag = override.max_tag

        if derive and registry_max_tag > 0:
            return registry_max_tag
        return max_tag

    def validate(self) -> None:
        """Validate configuration settings."""
        errors = []

        if not isinstance(self.max_tag, int) or isinstance(self.max_tag, bool):
            errors.append("max_tag must be an integer")
        elif not 0 < self.max_tag <= MAX_CONFIGURABLE_TAG:
            errors.append(f"max_tag must be between 1 and {MAX_CONFIGURABLE_TAG}")

        for version, override in self.version_overrides.items():
            if override.max_tag is not None and not 0 < override.max_tag <= MAX_CONFIGURABLE_TAG:
                errors.append(
                    f"max_tag override for version {version} must be between 1 and {MAX_CONFIGURABLE_TAG}"
                )

        if not self.language:
            errors.append("language must not be empty")

        if errors:
            raise ConfigurationException(
                f"Configuration validation failed: {'; '.join(errors)}"
            )


# Global configuration instance
_config: Optional[CompilerConfig] = None


def get_config() -> CompilerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = CompilerConfig.load_from_env()
    return _config


def set_config(config: CompilerConfig) -> None:
    """Set the global configuration instance."""
    global _config
    config.validate()
    _config = config


def load_config(config_path: Union[str, Path]) -> CompilerConfig:
    """Load and set configuration from file."""
    config = CompilerConfig.load_from_file(config_path)
    set_config(config)
    return config
