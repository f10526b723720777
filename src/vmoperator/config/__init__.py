# src/vmoperator/config/__init__.py
"""
Configuration module for the vmoperator library.

Settings are merged from packaged defaults, a TOML file, environment
variables and runtime overrides, then validated with pydantic.

Configuration files:
    - User config: ~/.vmoperator/config.toml
    - Custom config: $VMOPERATOR_CONFIG_PATH or load_config(config_path=...)

Environment variables:
    - Prefix: VMOPERATOR_
    - Section and key separated by double underscores:
      VMOPERATOR_STORAGE_USAGE__QUEUE_SIZE
"""

from .loader import DEFAULT_CONFIG, generate_sample_config, load_config, load_toml_config
from .models import LoggingConfig, ProviderConfig, StorageUsageConfig, VMOperatorConfig

__all__ = [
    "DEFAULT_CONFIG",
    "LoggingConfig",
    "ProviderConfig",
    "StorageUsageConfig",
    "VMOperatorConfig",
    "generate_sample_config",
    "load_config",
    "load_toml_config",
]
