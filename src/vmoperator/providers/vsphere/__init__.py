# src/vmoperator/providers/vsphere/__init__.py
"""vSphere VM provider support."""

from .config import (
    DEFAULT_VC_PORT,
    NETWORK_CONFIG_MAP_NAME,
    PROVIDER_CONFIG_MAP_NAME,
    VSphereVMProviderConfig,
    config_map_to_provider_config,
    credentials_secret_name,
    dns_information_from_config_map,
    parse_bool,
    provider_config_to_config_map,
    provider_config_to_config_map_data,
    update_vc_in_config_map_data,
)

__all__ = [
    "DEFAULT_VC_PORT",
    "NETWORK_CONFIG_MAP_NAME",
    "PROVIDER_CONFIG_MAP_NAME",
    "VSphereVMProviderConfig",
    "config_map_to_provider_config",
    "credentials_secret_name",
    "dns_information_from_config_map",
    "parse_bool",
    "provider_config_to_config_map",
    "provider_config_to_config_map_data",
    "update_vc_in_config_map_data",
]
