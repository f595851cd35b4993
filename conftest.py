"""
Configuration file for pytest.

This file configures pytest to properly load environment variables
and isolates the global configuration between tests.
"""
import pytest
import dotenv

import content_core.config.config_manager as config_module
from content_core.config.config_manager import ConfigManager

# Load environment variables from .env file
dotenv.load_dotenv()


@pytest.fixture(autouse=True)
def reset_config_singleton():
    """Give every test a freshly loaded configuration."""
    ConfigManager._instance = None
    config_module._config_manager = None
    yield
    ConfigManager._instance = None
    config_module._config_manager = None
