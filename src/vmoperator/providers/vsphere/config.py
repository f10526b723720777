# src/vmoperator/providers/vsphere/config.py
"""
vSphere VM provider settings stored in Kubernetes ConfigMaps.

The provider ConfigMap (``vsphere.provider.config.vmoperator.vmware.com`` in
the operator namespace) carries the vCenter endpoint and placement defaults
as flat string keys. The network ConfigMap (``vmoperator-network-config``)
carries DNS settings applied to guest customization.

This module converts between ConfigMap ``data`` mappings and a typed
VSphereVMProviderConfig. Fetching and patching the ConfigMaps is left to
the caller's Kubernetes client.

Example:
    >>> config = config_map_to_provider_config({"VcPNID": "vc.example.com"})
    >>> config.vc_port
    '443'
"""

import logging
from collections.abc import Mapping

from pydantic import BaseModel, Field

from ...exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_VC_PORT = "443"

PROVIDER_CONFIG_MAP_NAME = "vsphere.provider.config.vmoperator.vmware.com"
NETWORK_CONFIG_MAP_NAME = "vmoperator-network-config"

# Provider ConfigMap keys
VC_PNID_KEY = "VcPNID"
VC_PORT_KEY = "VcPort"
VC_CREDS_SECRET_NAME_KEY = "VcCredsSecretName"
DATACENTER_KEY = "Datacenter"
RESOURCE_POOL_KEY = "ResourcePool"
FOLDER_KEY = "Folder"
DATASTORE_KEY = "Datastore"
NETWORK_NAME_KEY = "Network"
SC_REQUIRED_KEY = "StorageClassRequired"
USE_INVENTORY_KEY = "UseInventoryAsContentSource"
INSECURE_SKIP_TLS_VERIFY_KEY = "InsecureSkipTLSVerify"
CA_FILE_PATH_KEY = "CAFilePath"

# Network ConfigMap keys
NAMESERVERS_KEY = "nameservers"
SEARCH_SUFFIXES_KEY = "searchsuffixes"

WORKER_DNS_PLACEHOLDER = "<worker_dns>"

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class VSphereVMProviderConfig(BaseModel):
    """Connection and placement settings for a vSphere VM provider."""

    vc_pnid: str = Field(..., description="vCenter primary network identifier")
    vc_port: str = Field(DEFAULT_VC_PORT, description="vCenter port")
    vc_creds_secret_name: str = Field("", description="Secret holding vCenter credentials")
    datacenter: str = ""
    storage_class_required: bool = False
    use_inventory_as_content_source: bool = False
    ca_file_path: str = ""
    insecure_skip_tls_verify: bool = False

    # Zone and/or namespace specific
    resource_pool: str = ""
    folder: str = ""

    # Only set in simulated environments
    datastore: str = ""
    network: str = ""

    @property
    def vc_url(self) -> str:
        """Get the vCenter SDK endpoint."""
        return f"https://{self.vc_pnid}:{self.vc_port}/sdk"


def parse_bool(value: str) -> bool:
    """
    Parse a boolean the way ConfigMap values are written by the platform.

    Accepts 1, t, T, TRUE, true, True, 0, f, F, FALSE, false, False.

    Raises:
        ValueError: For any other string
    """
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid syntax: {value!r}")


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def _bool_field(data: Mapping[str, str], key: str, label: str) -> bool:
    if key not in data:
        return False
    try:
        return parse_bool(data[key])
    except ValueError as e:
        raise ConfigError(f"unable to parse value of {label}: {e}") from e


def config_map_to_provider_config(data: Mapping[str, str]) -> VSphereVMProviderConfig:
    """
    Convert provider ConfigMap data to a VSphereVMProviderConfig.

    Args:
        data: The ConfigMap ``data`` mapping

    Returns:
        Parsed provider configuration

    Raises:
        ConfigError: If VcPNID is missing or a boolean value does not parse
    """
    if VC_PNID_KEY not in data:
        raise ConfigError(f"missing configMap data field {VC_PNID_KEY}")

    insecure_skip_tls_verify = _bool_field(data, INSECURE_SKIP_TLS_VERIFY_KEY, "InsecureSkipTLSVerify")

    # The CA bundle only matters when TLS is verified.
    ca_file_path = ""
    if not insecure_skip_tls_verify:
        ca_file_path = data.get(CA_FILE_PATH_KEY, "")

    return VSphereVMProviderConfig(
        vc_pnid=data[VC_PNID_KEY],
        vc_port=data.get(VC_PORT_KEY, DEFAULT_VC_PORT),
        vc_creds_secret_name=data.get(VC_CREDS_SECRET_NAME_KEY, ""),
        datacenter=data.get(DATACENTER_KEY, ""),
        resource_pool=data.get(RESOURCE_POOL_KEY, ""),
        folder=data.get(FOLDER_KEY, ""),
        datastore=data.get(DATASTORE_KEY, ""),
        network=data.get(NETWORK_NAME_KEY, ""),
        storage_class_required=_bool_field(data, SC_REQUIRED_KEY, "StorageClassRequired"),
        use_inventory_as_content_source=_bool_field(data, USE_INVENTORY_KEY, "UseInventory"),
        insecure_skip_tls_verify=insecure_skip_tls_verify,
        ca_file_path=ca_file_path,
    )


def provider_config_to_config_map_data(
    config: VSphereVMProviderConfig,
    vc_creds_secret_name: str | None = None,
) -> dict[str, str]:
    """
    Render a provider config as ConfigMap data.

    The Network key is not written; it is only read in simulated setups.

    Args:
        config: Provider configuration
        vc_creds_secret_name: Secret name to record (default: config.vc_creds_secret_name)
    """
    if vc_creds_secret_name is None:
        vc_creds_secret_name = config.vc_creds_secret_name

    return {
        VC_PNID_KEY: config.vc_pnid,
        VC_PORT_KEY: config.vc_port,
        VC_CREDS_SECRET_NAME_KEY: vc_creds_secret_name,
        DATACENTER_KEY: config.datacenter,
        RESOURCE_POOL_KEY: config.resource_pool,
        FOLDER_KEY: config.folder,
        DATASTORE_KEY: config.datastore,
        SC_REQUIRED_KEY: format_bool(config.storage_class_required),
        USE_INVENTORY_KEY: format_bool(config.use_inventory_as_content_source),
        CA_FILE_PATH_KEY: config.ca_file_path,
        INSECURE_SKIP_TLS_VERIFY_KEY: format_bool(config.insecure_skip_tls_verify),
    }


def provider_config_to_config_map(
    namespace: str,
    config: VSphereVMProviderConfig,
    vc_creds_secret_name: str | None = None,
) -> dict:
    """Build a complete provider ConfigMap object for the given namespace."""
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": PROVIDER_CONFIG_MAP_NAME, "namespace": namespace},
        "data": provider_config_to_config_map_data(config, vc_creds_secret_name),
    }


def credentials_secret_name(data: Mapping[str, str]) -> str:
    """
    Get the name of the Secret holding vCenter credentials.

    Raises:
        ConfigError: If the ConfigMap does not name a Secret
    """
    secret_name = data.get(VC_CREDS_SECRET_NAME_KEY, "")
    if not secret_name:
        raise ConfigError(f"{VC_CREDS_SECRET_NAME_KEY} creds secret not set in vmop system namespace")
    return secret_name


def dns_information_from_config_map(data: Mapping[str, str]) -> tuple[list[str], list[str]]:
    """
    Read nameservers and search suffixes from network ConfigMap data.

    Both values are whitespace separated lists.

    Returns:
        Tuple of (nameservers, search_suffixes)

    Raises:
        ConfigError: If nameservers still holds only the install-time placeholder
    """
    nameservers = data.get(NAMESERVERS_KEY, "").split()
    if nameservers == [WORKER_DNS_PLACEHOLDER]:
        raise ConfigError(
            f"no valid nameservers in {NETWORK_CONFIG_MAP_NAME} ConfigMap. "
            f"It still contains {WORKER_DNS_PLACEHOLDER} key"
        )

    search_suffixes = data.get(SEARCH_SUFFIXES_KEY, "").split()
    return nameservers, search_suffixes


def update_vc_in_config_map_data(
    data: Mapping[str, str],
    vc_pnid: str,
    vc_port: str,
) -> tuple[bool, dict[str, str]]:
    """
    Point the provider ConfigMap at a new vCenter endpoint.

    Args:
        data: Current ConfigMap data; left unmodified
        vc_pnid: New vCenter PNID
        vc_port: New vCenter port

    Returns:
        Tuple of (changed, new_data). When nothing changes, new_data is a copy
        of the input and changed is False.
    """
    new_data = dict(data)
    if data.get(VC_PNID_KEY) == vc_pnid and data.get(VC_PORT_KEY) == vc_port:
        return False, new_data

    new_data[VC_PNID_KEY] = vc_pnid
    new_data[VC_PORT_KEY] = vc_port
    logger.info(f"Updating provider ConfigMap vCenter endpoint to {vc_pnid}:{vc_port}")
    return True, new_data
