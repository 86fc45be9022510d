"""Allocation and guaranteed release of execution scopes."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from catalog_e2e_tester.cluster_access import KubectlClient
from catalog_e2e_tester.command_running import CommandRunner, run_command
from catalog_e2e_tester.configuration.runtime_settings import ExecutionMode, HarnessConfiguration
from catalog_e2e_tester.managed_builds import BundleRegistry

from .execution_scope import ExecutionScope, PublishedStepAction
from .finalizer_chain import FinalizerChain, FinalizerFailure
from .scope_backends import BundleScopeBackend, NamespaceScopeBackend, ScopeBackend

_LOGGER = logging.getLogger(__name__)


class ScopeError(Exception):
    """Raised when a scope is used after release or was never acquired."""


def _random_scope_id() -> str:
    return str(uuid.uuid4())


class ScopeManager:
    """Hands out unique scopes and owns the teardown chain of each one."""

    def __init__(
        self,
        mode: ExecutionMode,
        backend: ScopeBackend,
        *,
        id_factory: Callable[[], str] = _random_scope_id,
    ) -> None:
        self._mode = mode
        self._backend = backend
        self._id_factory = id_factory
        self._issued: set[str] = set()
        self._chains: dict[str, FinalizerChain] = {}

    @property
    def mode(self) -> ExecutionMode:
        return self._mode

    def acquire(self) -> ExecutionScope:
        """Allocate a fresh scope and provision its backing resources."""
        scope = ExecutionScope(id=self._next_id(), mode=self._mode)
        chain = FinalizerChain()
        self._chains[scope.id] = chain
        try:
            self._backend.provision(scope, chain)
        except Exception:
            self.release(scope)
            raise
        _LOGGER.info("acquired %s scope %s", self._mode.value, scope.id)
        return scope

    def publish_step_action(
        self,
        scope: ExecutionScope,
        step_action_file: Path,
        step_action_name: str,
    ) -> PublishedStepAction:
        """Make the StepAction under test available inside the scope."""
        chain = self._chains.get(scope.id)
        if chain is None:
            raise ScopeError(f"scope {scope.id} is not active")
        return self._backend.publish_step_action(scope, step_action_file, step_action_name, chain)

    def release(self, scope: ExecutionScope) -> tuple[FinalizerFailure, ...]:
        """Tear the scope down; failures are reported, never raised."""
        chain = self._chains.pop(scope.id, None)
        if chain is None:
            return ()
        failures = chain.run()
        if failures:
            _LOGGER.warning("released scope %s with %d cleanup failure(s)", scope.id, len(failures))
        else:
            _LOGGER.info("released scope %s", scope.id)
        return failures

    @contextmanager
    def scoped(self) -> Iterator[ExecutionScope]:
        """Acquire a scope and release it on every exit path."""
        scope = self.acquire()
        try:
            yield scope
        finally:
            self.release(scope)

    def _next_id(self) -> str:
        scope_id = self._id_factory()
        while scope_id in self._issued:
            _LOGGER.debug("scope id %s already issued, drawing another", scope_id)
            scope_id = self._id_factory()
        self._issued.add(scope_id)
        return scope_id


def build_scope_manager(
    configuration: HarnessConfiguration,
    *,
    runner: CommandRunner = run_command,
    id_factory: Callable[[], str] = _random_scope_id,
) -> ScopeManager:
    """Select the scope backend for the configured mode."""
    timeout = configuration.execution.command_timeout_seconds
    backend: ScopeBackend
    if configuration.mode is ExecutionMode.MANAGED:
        if configuration.managed is None:
            raise ScopeError("managed mode requires the managed configuration section")
        backend = BundleScopeBackend(
            BundleRegistry(
                configuration.managed.bundle_repository,
                runner=runner,
                timeout_seconds=timeout,
            )
        )
    else:
        backend = NamespaceScopeBackend(
            KubectlClient(
                runner=runner,
                kubeconfig=configuration.cluster.kubeconfig,
                timeout_seconds=timeout,
            )
        )
    return ScopeManager(configuration.mode, backend, id_factory=id_factory)
