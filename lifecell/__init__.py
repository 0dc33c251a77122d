"""Lifecell package."""

from .shared.core.errors import GateClosedError
from .shared.core.lifecycle import HostLifecycle, LifecycleEvent, LifecycleState, observe
from .shared.core.lifecycle_gate import LifecycleGate
from .shared.core.state_cell import StateCell

__all__ = [
    "GateClosedError",
    "HostLifecycle",
    "LifecycleEvent",
    "LifecycleGate",
    "LifecycleState",
    "StateCell",
    "observe",
]
