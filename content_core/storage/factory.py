"""
Storage factory for creating record store backend instances.

This module provides a factory function to instantiate the appropriate
record store backend based on configuration settings.
"""

import logging
from dataclasses import asdict
from typing import Dict, Any, Optional, List

from content_core.config import get_config
from content_core.storage.interfaces.record_store_interface import RecordStoreInterface


class StorageFactory:
    """
    Factory class for creating record store backend instances.

    Backends are registered by name and configured from the ``storage``
    section of the application configuration.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._backends = {}
        self._register_backends()

    def _register_backends(self):
        """Register available storage backends."""
        from content_core.storage.backends.memory import MemoryRecordStore
        from content_core.storage.backends.json_file import JsonFileRecordStore
        from content_core.storage.backends.sqlite import SqliteRecordStore

        self._backends["memory"] = MemoryRecordStore
        self._backends["json_file"] = JsonFileRecordStore
        self._backends["sqlite"] = SqliteRecordStore

    def create_store(
        self, backend_type: Optional[str] = None, config_override: Optional[Dict[str, Any]] = None
    ) -> RecordStoreInterface:
        """
        Create a record store backend instance.

        Args:
            backend_type: Type of backend to create ('memory', 'json_file', 'sqlite').
                         If None, uses configuration setting.
            config_override: Optional configuration override for the backend.

        Returns:
            Configured record store instance

        Raises:
            ValueError: If the backend type is not supported
        """
        config = get_config()

        if backend_type is None:
            backend_type = config.config.storage.backend.value

        if backend_type not in self._backends:
            available_backends = list(self._backends.keys())
            raise ValueError(
                f"Unsupported backend type '{backend_type}'. "
                f"Available backends: {available_backends}"
            )

        backend_class = self._backends[backend_type]
        backend_config = self._get_backend_config(backend_type, config, config_override)

        if backend_type == "json_file":
            store = backend_class(
                path=backend_config.get("path", "./data/records.json"),
                pretty_print=backend_config.get("pretty_print", True),
            )
        elif backend_type == "sqlite":
            store = backend_class(
                database_path=backend_config.get("database_path", "./data/records.db")
            )
        else:
            store = backend_class(**backend_config)

        self.logger.info(f"Created {backend_type} record store")
        return store

    def _get_backend_config(
        self, backend_type: str, config: Any, config_override: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """Get configuration for a specific backend."""
        backend_config = {}

        backend_specific_config = getattr(config.config.storage, backend_type, None)
        if backend_specific_config is not None:
            backend_config = asdict(backend_specific_config)

        if config_override:
            backend_config.update(config_override)

        return backend_config

    def list_available_backends(self) -> List[str]:
        """
        List all available storage backends.

        Returns:
            List of backend type names
        """
        return list(self._backends.keys())

    def is_backend_available(self, backend_type: str) -> bool:
        """
        Check if a specific backend is available.

        Args:
            backend_type: Type of backend to check

        Returns:
            True if backend is available, False otherwise
        """
        return backend_type in self._backends


# Global factory instance
_storage_factory = StorageFactory()


def create_store(
    backend_type: Optional[str] = None, config_override: Optional[Dict[str, Any]] = None
) -> RecordStoreInterface:
    """
    Create a record store backend instance using the global factory.

    Args:
        backend_type: Type of backend to create ('memory', 'json_file', 'sqlite').
                     If None, uses configuration setting.
        config_override: Optional configuration override for the backend.

    Returns:
        Configured record store instance
    """
    return _storage_factory.create_store(backend_type, config_override)


def list_available_backends() -> List[str]:
    """List all available storage backends."""
    return _storage_factory.list_available_backends()


def is_backend_available(backend_type: str) -> bool:
    """Check if a specific backend is available."""
    return _storage_factory.is_backend_available(backend_type)
