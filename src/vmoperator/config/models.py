# src/vmoperator/config/models.py
"""
Pydantic models for vmoperator configuration validation.

The loader merges defaults, the TOML file, environment variables and
runtime overrides into a plain dictionary; these models validate the
result and give typed access to each section.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Logging configuration, consumed by vmoperator.logging_config."""

    console_enabled: bool = Field(True, description="Emit log records to stderr")
    console_level: str = Field("WARNING", description="Console handler level")
    file_enabled: bool = Field(False, description="Write log records to a file")
    file_level: str = Field("DEBUG", description="File handler level")
    file_directory: str = Field(
        "~/.local/share/vmoperator/logs", description="Directory for log files"
    )
    file_mode: Literal["per_run", "single"] = Field(
        "per_run", description="New timestamped file per run, or one rotating file"
    )
    rotation_max_bytes: int = Field(10 * 1024 * 1024, gt=0, description="Rotate after this size")
    rotation_backup_count: int = Field(5, ge=0, description="Rotated files to keep")
    components: dict[str, str] = Field(
        default_factory=lambda: {"vmoperator": "INFO"},
        description="Per-logger level overrides",
    )

    @field_validator("console_level", "file_level")
    @classmethod
    def check_level(cls, v: str) -> str:
        """Ensure the level is a standard logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class StorageUsageConfig(BaseModel):
    """Storage usage notification queue configuration."""

    queue_size: int = Field(100, gt=0, description="Capacity of the storage usage event queue")


class ProviderConfig(BaseModel):
    """Where the vSphere provider settings are read from."""

    pod_namespace: str = Field(
        "vmware-system-vmop", description="Namespace the operator runs in"
    )
    config_map_name: str = Field(
        "vsphere.provider.config.vmoperator.vmware.com",
        description="Name of the provider ConfigMap",
    )
    network_config_map_name: str = Field(
        "vmoperator-network-config", description="Name of the network ConfigMap"
    )


class VMOperatorConfig(BaseModel):
    """Complete vmoperator configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    storage_usage: StorageUsageConfig = Field(default_factory=StorageUsageConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
