"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "catalog-e2e.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Harness configuration template for catalog-e2e-tester.
# Replace every <REQUIRED> placeholder before running `run`.
# Replace <OPTIONAL> placeholders only when your setup needs them.

execution:
  # direct applies manifests to the cluster; managed submits Cloud Build v2 runs.
  # CATALOG_E2E_EXECUTION_MODE overrides this value.
  mode: direct
  expected_condition: Succeeded
  watch_timeout_seconds: 600
  poll_interval_seconds: 5
  command_timeout_seconds: 300

cluster:
  # KUBECONFIG overrides this value.
  # kubeconfig: "<OPTIONAL>"

# Only read when execution.mode is managed.
managed:
  project: "<REQUIRED>"
  region: "<REQUIRED>"
  # OCI repository receiving StepAction bundles tagged with the scope id.
  bundle_repository: "<REQUIRED>"
  service_account: "<REQUIRED>"
  # name_prefix: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML harness configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
