"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging (Loguru)
- JSON record storage for persisted client state
- Console management (Rich)

Clean architecture principle: The core layer has no dependencies on
domain or application layers.
"""

# Configuration
from .config import (
    Config,
    PlayerConfig,
    LoggingConfig,
    WebConfig,
    load_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    create_default_config,
    ensure_directories,
)

# Storage
from .storage import (
    get_storage_path,
    load_record,
    save_record,
    delete_record,
)

# Output
from .output import setup_loguru, setup_from_config, log

# Console
from .console import get_console, get_error_console, print_message

__all__ = [
    # Config
    "Config",
    "PlayerConfig",
    "LoggingConfig",
    "WebConfig",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "create_default_config",
    "ensure_directories",
    # Storage
    "get_storage_path",
    "load_record",
    "save_record",
    "delete_record",
    # Output
    "setup_loguru",
    "setup_from_config",
    "log",
    # Console
    "get_console",
    "get_error_console",
    "print_message",
]
