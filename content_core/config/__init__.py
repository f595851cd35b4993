from .config_manager import (
    ConfigManager,
    AppConfig,
    get_config,
    init_config,
    ConfigValidationError,
    Environment,
    StorageBackendType,
)

__all__ = [
    "ConfigManager",
    "AppConfig",
    "get_config",
    "init_config",
    "ConfigValidationError",
    "Environment",
    "StorageBackendType",
]
