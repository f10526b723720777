# src/vmoperator/config/loader.py
"""
Configuration loading for vmoperator.

Configuration Hierarchy:
    1. Default values (defined in this module)
    2. TOML config file (~/.vmoperator/config.toml, [vmoperator] table)
    3. Environment variables (VMOPERATOR_<SECTION>__<KEY>)
    4. Runtime overrides (passed to load_config)

Example TOML configuration:
    [vmoperator.logging]
    console_level = "INFO"
    file_enabled = true

    [vmoperator.storage_usage]
    queue_size = 256

    [vmoperator.provider]
    pod_namespace = "vmware-system-vmop"
"""

import logging
import os
import tomllib
from copy import deepcopy
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..exceptions import ConfigError
from .models import VMOperatorConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "VMOPERATOR_"
ENV_CONFIG_PATH = "VMOPERATOR_CONFIG_PATH"
DEFAULT_CONFIG_PATH = Path.home() / ".vmoperator" / "config.toml"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = VMOperatorConfig().model_dump()


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in override take precedence. Nested dictionaries are merged recursively.
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _parse_env_value(value: str) -> Any:
    """
    Parse environment variable value to appropriate type.

    Returns:
        Parsed value (bool, int, float, list, or string)
    """
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    if "," in value:
        return [v.strip() for v in value.split(",")]

    return value


def _apply_env_overrides(config: dict[str, Any], environ: dict[str, str] | None = None) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern:
        VMOPERATOR_<SECTION>__<KEY>=value

    Examples:
        VMOPERATOR_STORAGE_USAGE__QUEUE_SIZE=256
        VMOPERATOR_LOGGING__CONSOLE_LEVEL=DEBUG

    Unknown sections and keys are ignored.
    """
    environ = os.environ if environ is None else environ

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or key == ENV_CONFIG_PATH:
            continue

        parts = key[len(ENV_PREFIX) :].lower().split("__")
        if len(parts) != 2:
            continue

        section, nested_key = parts
        if section in config and isinstance(config[section], dict):
            if nested_key in config[section]:
                config[section][nested_key] = _parse_env_value(value)
                logger.debug(f"Config override from environment: {section}.{nested_key}")

    return config


def load_toml_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load the [vmoperator] table from a TOML file.

    Args:
        config_path: Path to TOML file (default: $VMOPERATOR_CONFIG_PATH or
            ~/.vmoperator/config.toml)

    Returns:
        Configuration dictionary; empty if the file does not exist

    Raises:
        ConfigError: If the file exists but is not valid TOML
    """
    if config_path is None:
        env_path = os.environ.get(ENV_CONFIG_PATH)
        config_path = Path(env_path).expanduser() if env_path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        logger.debug(f"Config file not found: {config_path}")
        return {}

    try:
        with open(config_path, "rb") as f:
            full_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    logger.debug(f"Loaded config from {config_path}")
    return full_config.get("vmoperator", {})


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    environ: dict[str, str] | None = None,
) -> VMOperatorConfig:
    """
    Load complete vmoperator configuration.

    Configuration is loaded and merged in order:
        1. Default values
        2. TOML config file
        3. Environment variables
        4. Runtime overrides

    Args:
        config_path: Optional path to TOML config file
        overrides: Optional runtime overrides
        environ: Environment to read overrides from (default: os.environ)

    Returns:
        VMOperatorConfig instance

    Raises:
        ConfigError: If the merged configuration is invalid
    """
    config = deepcopy(DEFAULT_CONFIG)

    toml_config = load_toml_config(config_path)
    if toml_config:
        config = _deep_merge(config, toml_config)

    config = _apply_env_overrides(config, environ)

    if overrides:
        config = _deep_merge(config, overrides)

    try:
        return VMOperatorConfig.model_validate(config)
    except ValidationError as e:
        raise ConfigError(f"Invalid vmoperator configuration: {e}") from e


def generate_sample_config() -> str:
    """
    Generate a sample TOML configuration file content.

    Returns:
        TOML configuration string
    """
    return """# vmoperator configuration
# Place this in ~/.vmoperator/config.toml or point VMOPERATOR_CONFIG_PATH at it

[vmoperator.logging]
console_enabled = true
console_level = "WARNING"

# File logging: "per_run" writes a new timestamped file per run,
# "single" writes one file and rotates it
file_enabled = false
file_level = "DEBUG"
file_directory = "~/.local/share/vmoperator/logs"
file_mode = "per_run"
rotation_max_bytes = 10485760
rotation_backup_count = 5

[vmoperator.logging.components]
vmoperator = "INFO"

[vmoperator.storage_usage]
# Capacity of the storage usage event queue; producers block when it is full
queue_size = 100

[vmoperator.provider]
pod_namespace = "vmware-system-vmop"
config_map_name = "vsphere.provider.config.vmoperator.vmware.com"
network_config_map_name = "vmoperator-network-config"
"""
