"""Best-effort ordered teardown actions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinalizerFailure:
    """A teardown action that raised."""

    description: str
    error: Exception


@dataclass(frozen=True)
class _Finalizer:
    description: str
    action: Callable[[], None]


class FinalizerChain:
    """Teardown actions run newest first; a failing action never stops the others."""

    def __init__(self) -> None:
        self._finalizers: list[_Finalizer] = []
        self._finished = False

    def register(self, description: str, action: Callable[[], None]) -> None:
        if self._finished:
            raise RuntimeError("Cannot register finalizers on a chain that already ran.")
        self._finalizers.append(_Finalizer(description=description, action=action))

    @property
    def descriptions(self) -> tuple[str, ...]:
        return tuple(finalizer.description for finalizer in reversed(self._finalizers))

    def run(self) -> tuple[FinalizerFailure, ...]:
        """Run every registered action once, in reverse registration order."""
        if self._finished:
            return ()
        self._finished = True
        failures: list[FinalizerFailure] = []
        for finalizer in reversed(self._finalizers):
            try:
                finalizer.action()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                _LOGGER.warning("cleanup step '%s' failed: %s", finalizer.description, exc)
                failures.append(FinalizerFailure(description=finalizer.description, error=exc))
            else:
                _LOGGER.debug("cleanup step '%s' done", finalizer.description)
        return tuple(failures)
