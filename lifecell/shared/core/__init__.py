"""
Shared Core Module
==================

Reactive state, lifecycle gating, configuration and errors.
"""

# Errors
from .errors import ConfigurationError, GateClosedError, LifecellError

# Reactive state
from .state_cell import CellView, Observer, StateCell, Subscription
from .writer import SerializedWriter

# Lifecycle
from .lifecycle_gate import GateState, LifecycleGate
from .lifecycle import HostLifecycle, LifecycleEvent, LifecycleState, observe, resolve_threshold
from .event_bus import LifecycleEventBus

# Configuration
from .configuration import (
    ConfigManager,
    SystemConfig,
    ValidationLevel,
    get_config,
    get_config_manager,
)

__all__ = [
    # Errors
    "ConfigurationError",
    "GateClosedError",
    "LifecellError",
    # Reactive state
    "CellView",
    "Observer",
    "StateCell",
    "Subscription",
    "SerializedWriter",
    # Lifecycle
    "GateState",
    "LifecycleGate",
    "HostLifecycle",
    "LifecycleEvent",
    "LifecycleState",
    "observe",
    "resolve_threshold",
    "LifecycleEventBus",
    # Configuration
    "ConfigManager",
    "SystemConfig",
    "ValidationLevel",
    "get_config",
    "get_config_manager",
]
