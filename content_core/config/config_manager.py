"""
Centralized Configuration Management System

This module provides the configuration system for the versioning engine:
- Centralizes all configuration settings
- Supports environment-specific overrides
- Validates configuration on load and on every update
- Provides type-safe access to configuration values
"""

import os
import json
import yaml
import logging
import threading
from typing import Any, Dict, Optional, Union
from pathlib import Path
from dataclasses import dataclass, field
from enum import Enum


class Environment(Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StorageBackendType(Enum):
    MEMORY = "memory"
    JSON_FILE = "json_file"
    SQLITE = "sqlite"


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


@dataclass
class LoggingConfig:
    """Logging configuration"""

    level: LogLevel = LogLevel.INFO
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    json_format: bool = False


@dataclass
class JsonFileStoreConfig:
    """JSON file record store configuration"""

    path: str = "./data/records.json"
    pretty_print: bool = True


@dataclass
class SqliteStoreConfig:
    """SQLite record store configuration"""

    database_path: str = "./data/records.db"


@dataclass
class StorageConfig:
    """Record store configuration"""

    backend: StorageBackendType = StorageBackendType.MEMORY
    json_file: JsonFileStoreConfig = field(default_factory=JsonFileStoreConfig)
    sqlite: SqliteStoreConfig = field(default_factory=SqliteStoreConfig)


@dataclass
class VersioningConfig:
    """Versioning and retention configuration"""

    # Snapshots are dated this far in the past so they sort as superseded
    snapshot_offset_seconds: float = 1.0
    # 0 disables trimming
    maximum_versions_per_record: int = 0


@dataclass
class AppConfig:
    """Main application configuration"""

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    versioning: VersioningConfig = field(default_factory=VersioningConfig)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""

    pass


class ConfigManager:
    """
    Centralized configuration manager with support for:
    - Environment-specific configurations
    - Configuration validation
    - Dynamic configuration updates
    """

    _instance: Optional["ConfigManager"] = None
    _lock = threading.Lock()

    # Values read from files that must be converted to enums
    _ENUM_PATHS = {
        "environment": lambda x: Environment(x.lower()),
        "logging.level": lambda x: LogLevel(x.upper()),
        "storage.backend": lambda x: StorageBackendType(x.lower()),
    }

    def __new__(cls, *args, **kwargs):
        """Singleton pattern implementation"""
        if not cls._instance:
            with cls._lock:
                if not cls._instance:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        # Avoid re-initialization in singleton
        if hasattr(self, "_initialized"):
            return

        self._initialized = True
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            # Look for config directory relative to project root
            project_root = Path(__file__).parent.parent.parent
            self.config_dir = project_root / "config"

        self.config: AppConfig = AppConfig()
        self.loaded_files = []
        self.logger = logging.getLogger(__name__)

        self._load_configuration()

    def _load_configuration(self):
        """Load configuration from multiple sources in priority order"""
        # 1. Load default configuration
        self.config = AppConfig()
        self.loaded_files = []

        # 2. Load base configuration file
        self._load_from_file("config.yaml")
        self._load_from_file("config.json")

        # 3. Load environment-specific configuration
        env = os.getenv("ENVIRONMENT", "development").lower()
        self._load_from_file(f"environments/config.{env}.yaml")
        self._load_from_file(f"environments/config.{env}.json")

        # 4. Load from environment variables (highest priority)
        self._load_from_environment()

        # 5. Validate configuration
        self._validate_configuration()

    def _load_from_file(self, filename: str):
        """Load configuration from YAML/JSON file"""
        file_path = self.config_dir / filename
        if not file_path.exists():
            return

        try:
            with open(file_path, "r") as f:
                if filename.endswith(".yaml") or filename.endswith(".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)

            if data:
                self._update_config_from_dict(data)
                self.loaded_files.append(str(file_path))
                self.logger.info(f"Loaded configuration from {filename}")

        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            self.logger.warning(f"Failed to load configuration from {filename}: {e}")

    def _load_from_environment(self):
        """Load configuration from environment variables"""
        env_mappings = {
            # Environment
            "ENVIRONMENT": ("environment", lambda x: Environment(x.lower())),
            "DEBUG": ("debug", _parse_bool),
            # Logging
            "LOG_LEVEL": ("logging.level", lambda x: LogLevel(x.upper())),
            "LOG_FORMAT": ("logging.format", str),
            "LOG_JSON": ("logging.json_format", _parse_bool),
            # Storage
            "STORAGE_BACKEND": ("storage.backend", lambda x: StorageBackendType(x.lower())),
            "SQLITE_DATABASE_PATH": ("storage.sqlite.database_path", str),
            "JSON_STORE_PATH": ("storage.json_file.path", str),
            # Versioning
            "SNAPSHOT_OFFSET_SECONDS": ("versioning.snapshot_offset_seconds", float),
            "MAXIMUM_VERSIONS_PER_RECORD": ("versioning.maximum_versions_per_record", int),
        }

        for env_var, (config_path, converter) in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                try:
                    self._set_nested_attr(self.config, config_path, converter(value))
                except (ValueError, TypeError) as e:
                    self.logger.warning(f"Invalid value for {env_var}: {value}, error: {e}")

    def _update_config_from_dict(self, data: Dict[str, Any], prefix: str = ""):
        """Update configuration from dictionary recursively"""
        for key, value in data.items():
            config_path = f"{prefix}.{key}" if prefix else key

            if isinstance(value, dict):
                self._update_config_from_dict(value, config_path)
            else:
                try:
                    converter = self._ENUM_PATHS.get(config_path)
                    if converter and isinstance(value, str):
                        value = converter(value)

                    self._set_nested_attr(self.config, config_path, value)

                except AttributeError:
                    self.logger.warning(f"Unknown configuration key: {config_path}")
                except ValueError as e:
                    self.logger.warning(f"Invalid value for {config_path}: {value}, error: {e}")

    def _set_nested_attr(self, obj: Any, path: str, value: Any):
        """Set nested attribute using dot notation"""
        parts = path.split(".")
        for part in parts[:-1]:
            obj = getattr(obj, part)
        if not hasattr(obj, parts[-1]):
            raise AttributeError(path)
        setattr(obj, parts[-1], value)

    def _validate_configuration(self):
        """Validate configuration settings"""
        errors = []

        if not isinstance(self.config.storage.backend, StorageBackendType):
            errors.append(f"Unknown storage backend: {self.config.storage.backend}")

        if (
            self.config.storage.backend == StorageBackendType.SQLITE
            and not self.config.storage.sqlite.database_path
        ):
            errors.append("SQLITE_DATABASE_PATH is required for the sqlite backend")

        if (
            self.config.storage.backend == StorageBackendType.JSON_FILE
            and not self.config.storage.json_file.path
        ):
            errors.append("JSON_STORE_PATH is required for the json_file backend")

        if self.config.versioning.snapshot_offset_seconds <= 0:
            errors.append("Snapshot offset must be a positive number of seconds")

        if self.config.versioning.maximum_versions_per_record < 0:
            errors.append("Maximum versions per record must not be negative")

        if errors:
            raise ConfigValidationError(f"Configuration validation failed: {'; '.join(errors)}")

        self.logger.info("Configuration validation passed")

    def reload_configuration(self):
        """Reload configuration from all sources"""
        self._load_configuration()
        self.logger.info("Configuration reloaded successfully")

    def get(self, path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        try:
            obj = self.config
            for part in path.split("."):
                obj = getattr(obj, part)
            return obj
        except AttributeError:
            return default

    def set(self, path: str, value: Any):
        """Set configuration value using dot notation"""
        self._set_nested_attr(self.config, path, value)
        self._validate_configuration()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""

        def _asdict_recursive(obj):
            if hasattr(obj, "__dict__"):
                result = {}
                for key, value in obj.__dict__.items():
                    if isinstance(value, Enum):
                        result[key] = value.value
                    elif hasattr(value, "__dict__"):
                        result[key] = _asdict_recursive(value)
                    else:
                        result[key] = value
                return result
            return obj

        return _asdict_recursive(self.config)

    def save_to_file(self, filename: str, format: str = "yaml"):
        """Save current configuration to file"""
        file_path = self.config_dir / filename
        file_path.parent.mkdir(parents=True, exist_ok=True)
        config_dict = self.to_dict()

        with open(file_path, "w") as f:
            if format.lower() == "yaml":
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)
            else:
                json.dump(config_dict, f, indent=2)

        self.logger.info(f"Configuration saved to {filename}")


# Global configuration instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the global configuration manager instance"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def init_config(config_dir: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Initialize the global configuration manager"""
    global _config_manager
    ConfigManager._instance = None
    _config_manager = ConfigManager(config_dir)
    return _config_manager
