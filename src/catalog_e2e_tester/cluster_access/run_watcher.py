"""Change-notification streams for Tekton runs."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from kubernetes import client, config, watch
from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError, ReadTimeoutError

from catalog_e2e_tester.run_identification import RunIdentifier

TEKTON_GROUP = "tekton.dev"
TEKTON_VERSION = "v1"

ADDED = "ADDED"
MODIFIED = "MODIFIED"
ERROR = "ERROR"
TIMEOUT = "TIMEOUT"

READ_TIMEOUT_MARGIN_SECONDS = 10

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatchEvent:
    """One event from a run watch stream."""

    type: str
    object: Mapping[str, Any] = field(default_factory=dict)


class RunWatcher(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol implemented by both the Kubernetes watcher and fakes."""

    def stream(
        self, run: RunIdentifier, namespace: str, timeout_seconds: int
    ) -> Iterator[WatchEvent]: ...


class KubernetesRunWatcher:  # pylint: disable=too-few-public-methods
    """Watch one TaskRun/PipelineRun by name using the Kubernetes API."""

    def __init__(
        self,
        *,
        kubeconfig: Path | None = None,
        api: client.CustomObjectsApi | None = None,
    ) -> None:
        self._kubeconfig = kubeconfig
        self._api = api

    def stream(
        self, run: RunIdentifier, namespace: str, timeout_seconds: int
    ) -> Iterator[WatchEvent]:
        """Yield events until the server closes the stream or the timeout elapses.

        A stalled connection ends with a `TIMEOUT` event; API and connection
        failures end with an `ERROR` event.
        """
        api = self._custom_objects_api()
        watcher = watch.Watch()
        try:
            for event in watcher.stream(
                api.list_namespaced_custom_object,
                group=TEKTON_GROUP,
                version=TEKTON_VERSION,
                namespace=namespace,
                plural=run.kind.plural,
                field_selector=f"metadata.name={run.name}",
                timeout_seconds=timeout_seconds,
                _request_timeout=timeout_seconds + READ_TIMEOUT_MARGIN_SECONDS,
            ):
                yield WatchEvent(type=event.get("type", ""), object=event.get("object") or {})
        except ReadTimeoutError as exc:
            _LOGGER.warning("watch for %s stalled: %s", run.resource, exc)
            yield WatchEvent(type=TIMEOUT, object={"message": str(exc)})
        except (ApiException, HTTPError) as exc:
            _LOGGER.warning("watch for %s failed: %s", run.resource, exc)
            yield WatchEvent(type=ERROR, object={"message": str(exc)})
        finally:
            watcher.stop()

    def _custom_objects_api(self) -> client.CustomObjectsApi:
        if self._api is None:
            config_file = str(self._kubeconfig) if self._kubeconfig is not None else None
            config.load_kube_config(config_file=config_file)
            self._api = client.CustomObjectsApi()
        return self._api
