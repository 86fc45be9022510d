"""Configuration loader service."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    ClusterSettings,
    ExecutionMode,
    ExecutionSettings,
    HarnessConfiguration,
    ManagedBuildSettings,
)

MODE_ENV_VAR = "CATALOG_E2E_EXECUTION_MODE"
KUBECONFIG_ENV_VAR = "KUBECONFIG"

DEFAULT_EXPECTED_CONDITION = "Succeeded"
DEFAULT_WATCH_TIMEOUT_SECONDS = 600
DEFAULT_POLL_INTERVAL_SECONDS = 5
DEFAULT_COMMAND_TIMEOUT_SECONDS = 300
DEFAULT_NAME_PREFIX = "e2e-"


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(
    config_path: Path | str | None,
    *,
    environ: Mapping[str, str] | None = None,
) -> HarnessConfiguration:
    """Load and validate the configuration file, then apply environment overrides.

    A missing `config_path` yields the defaults, which is enough for direct mode.
    """
    env = os.environ if environ is None else environ
    path = Path(config_path) if config_path is not None else None
    parsed = _read_document(path) if path is not None else {}

    execution = _parse_execution_section(parsed.get("execution"), env)
    cluster = _parse_cluster_section(parsed.get("cluster"), env)
    managed_section = parsed.get("managed")
    managed = None
    if execution.mode is ExecutionMode.MANAGED:
        managed = _parse_managed_section(managed_section)
    elif managed_section is not None:
        _require_mapping(managed_section, "managed")

    return HarnessConfiguration(
        path=path,
        execution=execution,
        cluster=cluster,
        managed=managed,
    )


def _read_document(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc
    if parsed is None:
        parsed = {}
    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")
    return parsed


def _parse_execution_section(value: Any, env: Mapping[str, str]) -> ExecutionSettings:
    section = _optional_mapping(value, "execution")
    raw_mode = env.get(MODE_ENV_VAR) or section.get("mode", ExecutionMode.DIRECT.value)
    mode = _parse_mode(raw_mode)
    expected_condition = _require_non_empty_string(
        section.get("expected_condition", DEFAULT_EXPECTED_CONDITION),
        "execution.expected_condition",
    )
    return ExecutionSettings(
        mode=mode,
        expected_condition=expected_condition,
        watch_timeout_seconds=_require_positive_int(
            section.get("watch_timeout_seconds", DEFAULT_WATCH_TIMEOUT_SECONDS),
            "execution.watch_timeout_seconds",
        ),
        poll_interval_seconds=_require_positive_int(
            section.get("poll_interval_seconds", DEFAULT_POLL_INTERVAL_SECONDS),
            "execution.poll_interval_seconds",
        ),
        command_timeout_seconds=_require_positive_int(
            section.get("command_timeout_seconds", DEFAULT_COMMAND_TIMEOUT_SECONDS),
            "execution.command_timeout_seconds",
        ),
    )


def _parse_mode(value: Any) -> ExecutionMode:
    mode_text = _require_non_empty_string(value, "execution.mode").lower()
    try:
        return ExecutionMode(mode_text)
    except ValueError as exc:
        choices = ", ".join(mode.value for mode in ExecutionMode)
        raise ConfigurationError(
            f"execution.mode must be one of: {choices} (got '{mode_text}')."
        ) from exc


def _parse_cluster_section(value: Any, env: Mapping[str, str]) -> ClusterSettings:
    section = _optional_mapping(value, "cluster")
    kubeconfig = env.get(KUBECONFIG_ENV_VAR) or _optional_string(
        section.get("kubeconfig"), "cluster.kubeconfig"
    )
    return ClusterSettings(kubeconfig=Path(kubeconfig).expanduser() if kubeconfig else None)


def _parse_managed_section(value: Any) -> ManagedBuildSettings:
    section = _require_mapping(value, "managed")
    bundle_repository = _require_non_empty_string(
        section.get("bundle_repository"), "managed.bundle_repository"
    ).rstrip("/")
    name_prefix = _optional_string(section.get("name_prefix"), "managed.name_prefix")
    return ManagedBuildSettings(
        project=_require_non_empty_string(section.get("project"), "managed.project"),
        region=_require_non_empty_string(section.get("region"), "managed.region"),
        bundle_repository=bundle_repository,
        service_account=_require_non_empty_string(
            section.get("service_account"), "managed.service_account"
        ),
        name_prefix=DEFAULT_NAME_PREFIX if name_prefix is None else name_prefix,
    )


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
