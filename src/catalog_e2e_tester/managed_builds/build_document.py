"""Rewriting of test run manifests into Cloud Build v2 submissions."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import yaml

from catalog_e2e_tester.run_identification import RunIdentifier, RunKind

_RUN_KINDS = {kind.manifest_kind for kind in RunKind}


class BuildDocumentError(Exception):
    """Raised when a test manifest cannot be turned into a managed submission."""


@dataclass(frozen=True)
class ManagedBuildDocument:
    """A run document ready for `gcloud builds runs apply`."""

    run: RunIdentifier
    text: str


def prepare_managed_document(
    manifest_text: str,
    *,
    name: str,
    service_account: str,
    step_action_name: str | None = None,
    bundle_ref: str | None = None,
) -> ManagedBuildDocument:
    """Select the run document and adapt it for the managed build API.

    The run is renamed to `name`, gets `spec.security.serviceAccount` when it
    has none, keeps only the first workspace name, and, when a bundle is given,
    resolves StepAction references to `step_action_name` from that bundle.
    """
    document = copy.deepcopy(_select_run_document(manifest_text))
    kind = RunKind.from_manifest_kind(document["kind"])

    metadata = document.setdefault("metadata", {})
    if not isinstance(metadata, dict):
        raise BuildDocumentError("metadata must be a mapping.")
    metadata["name"] = name
    metadata.pop("generateName", None)

    spec = document.setdefault("spec", {})
    if not isinstance(spec, dict):
        raise BuildDocumentError("spec must be a mapping.")
    security = spec.setdefault("security", {})
    if not isinstance(security, dict):
        raise BuildDocumentError("spec.security must be a mapping.")
    security.setdefault("serviceAccount", service_account)
    _truncate_workspaces(spec)

    if step_action_name and bundle_ref:
        _resolve_step_action_refs(document, step_action_name, bundle_ref)

    return ManagedBuildDocument(
        run=RunIdentifier(name=name, kind=kind),
        text=yaml.safe_dump(document, sort_keys=False),
    )


def _select_run_document(manifest_text: str) -> dict[str, Any]:
    try:
        documents = [doc for doc in yaml.safe_load_all(manifest_text) if doc is not None]
    except yaml.YAMLError as exc:
        raise BuildDocumentError(f"Failed to parse test manifest: {exc}") from exc
    runs = [
        doc for doc in documents if isinstance(doc, dict) and doc.get("kind") in _RUN_KINDS
    ]
    if not runs:
        raise BuildDocumentError("Test manifest does not contain a TaskRun or PipelineRun.")
    if len(runs) > 1:
        raise BuildDocumentError("Test manifest contains more than one TaskRun or PipelineRun.")
    return runs[0]


def _truncate_workspaces(spec: dict[str, Any]) -> None:
    workspaces = spec.get("workspaces")
    if not workspaces:
        return
    first = workspaces[0]
    if not isinstance(first, Mapping) or not first.get("name"):
        raise BuildDocumentError("spec.workspaces entries must have a name.")
    spec["workspaces"] = [{"name": first["name"]}]


def _resolve_step_action_refs(node: Any, step_action_name: str, bundle_ref: str) -> None:
    if isinstance(node, dict):
        ref = node.get("ref")
        if isinstance(ref, Mapping) and ref.get("name") == step_action_name:
            node["ref"] = {
                "resolver": "bundles",
                "params": [
                    {"name": "bundle", "value": bundle_ref},
                    {"name": "name", "value": step_action_name},
                    {"name": "kind", "value": "stepaction"},
                ],
            }
        for value in node.values():
            _resolve_step_action_refs(value, step_action_name, bundle_ref)
    elif isinstance(node, list):
        for item in node:
            _resolve_step_action_refs(item, step_action_name, bundle_ref)
