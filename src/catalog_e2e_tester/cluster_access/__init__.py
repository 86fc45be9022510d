"""Cluster access exports."""

from .kubectl_client import KubectlClient
from .run_watcher import KubernetesRunWatcher, RunWatcher, WatchEvent

__all__ = [
    "KubectlClient",
    "KubernetesRunWatcher",
    "RunWatcher",
    "WatchEvent",
]
