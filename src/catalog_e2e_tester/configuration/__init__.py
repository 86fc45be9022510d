"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import (
    KUBECONFIG_ENV_VAR,
    MODE_ENV_VAR,
    ConfigurationError,
    load_configuration,
)
from .runtime_settings import (
    ClusterSettings,
    ExecutionMode,
    ExecutionSettings,
    HarnessConfiguration,
    ManagedBuildSettings,
)

__all__ = [
    "ClusterSettings",
    "ExecutionMode",
    "ExecutionSettings",
    "HarnessConfiguration",
    "ManagedBuildSettings",
    "ConfigurationError",
    "load_configuration",
    "KUBECONFIG_ENV_VAR",
    "MODE_ENV_VAR",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
