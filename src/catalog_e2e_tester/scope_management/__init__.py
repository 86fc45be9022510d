"""Scope management exports."""

from .execution_scope import ExecutionScope, PublishedStepAction
from .finalizer_chain import FinalizerChain, FinalizerFailure
from .scope_backends import BundleScopeBackend, NamespaceScopeBackend, ScopeBackend
from .scope_manager import ScopeError, ScopeManager, build_scope_manager

__all__ = [
    "BundleScopeBackend",
    "ExecutionScope",
    "FinalizerChain",
    "FinalizerFailure",
    "NamespaceScopeBackend",
    "PublishedStepAction",
    "ScopeBackend",
    "ScopeError",
    "ScopeManager",
    "build_scope_manager",
]
