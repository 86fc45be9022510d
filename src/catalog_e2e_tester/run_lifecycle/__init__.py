"""Run lifecycle exports."""

from .direct_strategy import DirectExecutionStrategy
from .execution_strategies import ExecutionStrategy, select_strategy
from .lifecycle_controller import RunLifecycleController
from .lifecycle_states import (
    LifecycleStateError,
    RunState,
    RunWaitError,
    WaitOutcome,
    WaitResult,
)
from .managed_strategy import ManagedExecutionStrategy

__all__ = [
    "DirectExecutionStrategy",
    "ExecutionStrategy",
    "LifecycleStateError",
    "ManagedExecutionStrategy",
    "RunLifecycleController",
    "RunState",
    "RunWaitError",
    "WaitOutcome",
    "WaitResult",
    "select_strategy",
]
