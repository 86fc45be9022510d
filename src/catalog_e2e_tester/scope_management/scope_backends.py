"""Mode-specific provisioning of execution scopes."""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Protocol

from catalog_e2e_tester.cluster_access import KubectlClient
from catalog_e2e_tester.managed_builds import BundleRegistry

from .execution_scope import ExecutionScope, PublishedStepAction
from .finalizer_chain import FinalizerChain

_LOGGER = logging.getLogger(__name__)


class ScopeBackend(Protocol):
    """Creates the resources backing a scope and registers their teardown."""

    def provision(self, scope: ExecutionScope, chain: FinalizerChain) -> None: ...

    def publish_step_action(
        self,
        scope: ExecutionScope,
        step_action_file: Path,
        step_action_name: str,
        chain: FinalizerChain,
    ) -> PublishedStepAction: ...


class NamespaceScopeBackend:
    """Direct path: one namespace per scope, StepActions applied into it."""

    def __init__(self, kubectl: KubectlClient) -> None:
        self._kubectl = kubectl

    def provision(self, scope: ExecutionScope, chain: FinalizerChain) -> None:
        self._kubectl.create_namespace(scope.namespace)
        _LOGGER.info("created namespace %s", scope.namespace)
        chain.register(
            f"delete namespace {scope.namespace}",
            functools.partial(self._kubectl.delete_namespace, scope.namespace),
        )

    def publish_step_action(
        self,
        scope: ExecutionScope,
        step_action_file: Path,
        step_action_name: str,
        chain: FinalizerChain,
    ) -> PublishedStepAction:
        # Namespace deletion removes the StepAction with everything else.
        self._kubectl.apply(step_action_file, scope.namespace)
        return PublishedStepAction(name=step_action_name)


class BundleScopeBackend:
    """Managed path: StepActions are pushed as OCI bundles tagged with the scope id."""

    def __init__(self, registry: BundleRegistry) -> None:
        self._registry = registry

    def provision(self, scope: ExecutionScope, chain: FinalizerChain) -> None:
        _LOGGER.debug("managed scope %s needs no cluster resources", scope.id)

    def publish_step_action(
        self,
        scope: ExecutionScope,
        step_action_file: Path,
        step_action_name: str,
        chain: FinalizerChain,
    ) -> PublishedStepAction:
        bundle_ref = self._registry.reference(step_action_name, scope.id)
        self._registry.push(bundle_ref, step_action_file)
        _LOGGER.info("pushed bundle %s", bundle_ref)
        chain.register(
            f"delete bundle {bundle_ref}",
            functools.partial(self._registry.delete, bundle_ref),
        )
        return PublishedStepAction(name=step_action_name, bundle_ref=bundle_ref)
