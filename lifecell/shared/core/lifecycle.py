"""Host lifecycle state machine and its binding onto LifecycleGate.

A host (a screen, a view, a worker) moves through ordered states. A gate
bound to the host is active whenever the host sits at or above the active
threshold, inactive below it, and destroyed together with the host.
"""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import Callable, List, Optional, TypeAlias, TypeVar, Union

from .lifecycle_gate import LifecycleGate
from .state_cell import CellView, Observer, StateCell

T = TypeVar("T")

LifecycleObserver: TypeAlias = Callable[["LifecycleState"], None]

logger = logging.getLogger(__name__)


class LifecycleState(IntEnum):
    DESTROYED = 0
    INITIALIZED = 1
    CREATED = 2
    STARTED = 3
    RESUMED = 4

    def is_at_least(self, other: "LifecycleState") -> bool:
        return self >= other


class LifecycleEvent(str, Enum):
    ON_CREATE = "on_create"
    ON_START = "on_start"
    ON_RESUME = "on_resume"
    ON_PAUSE = "on_pause"
    ON_STOP = "on_stop"
    ON_DESTROY = "on_destroy"

    @property
    def target_state(self) -> LifecycleState:
        return _EVENT_TARGETS[self]


_EVENT_TARGETS = {
    LifecycleEvent.ON_CREATE: LifecycleState.CREATED,
    LifecycleEvent.ON_START: LifecycleState.STARTED,
    LifecycleEvent.ON_RESUME: LifecycleState.RESUMED,
    LifecycleEvent.ON_PAUSE: LifecycleState.STARTED,
    LifecycleEvent.ON_STOP: LifecycleState.CREATED,
    LifecycleEvent.ON_DESTROY: LifecycleState.DESTROYED,
}

THRESHOLDS = {
    "started": LifecycleState.STARTED,
    "resumed": LifecycleState.RESUMED,
}


class HostLifecycle:
    """Tracks one host's lifecycle state and fans transitions out to observers."""

    def __init__(self, name: str = "host") -> None:
        self.name = name
        self._state = LifecycleState.INITIALIZED
        self._observers: List[LifecycleObserver] = []

    @property
    def state(self) -> LifecycleState:
        return self._state

    def add_observer(self, observer: LifecycleObserver) -> None:
        """Register ``observer`` and call it once with the current state."""
        if observer in self._observers:
            return
        self._observers.append(observer)
        observer(self._state)

    def remove_observer(self, observer: LifecycleObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def handle_event(self, event: Union[LifecycleEvent, str]) -> None:
        event = LifecycleEvent(event)
        if self._state is LifecycleState.DESTROYED:
            logger.warning(f"Host '{self.name}' is destroyed, ignoring {event.value}")
            return

        target = event.target_state
        if target == self._state:
            return
        logger.debug(f"Host '{self.name}': {self._state.name} -> {target.name} ({event.value})")
        self._state = target

        # Every observer hears about the transition even if an earlier one
        # fails; the first failure is re-raised afterwards.
        first_error: Optional[Exception] = None
        for observer in list(self._observers):
            try:
                observer(target)
            except Exception as exc:
                logger.exception(f"Lifecycle observer failed on host '{self.name}' at {target.name}")
                if first_error is None:
                    first_error = exc

        if target is LifecycleState.DESTROYED:
            self._observers.clear()
        if first_error is not None:
            raise first_error

    def __repr__(self) -> str:
        return f"HostLifecycle(name={self.name!r}, state={self._state.name})"


def resolve_threshold(threshold: Union[LifecycleState, str]) -> LifecycleState:
    if isinstance(threshold, LifecycleState):
        state = threshold
    else:
        try:
            state = THRESHOLDS[str(threshold).lower()]
        except KeyError:
            raise ValueError(f"Unknown active threshold '{threshold}'") from None
    if state not in (LifecycleState.STARTED, LifecycleState.RESUMED):
        raise ValueError(f"Active threshold must be STARTED or RESUMED, got {state.name}")
    return state


class _GateBinding:
    """Lifecycle observer that drives one gate from host state changes."""

    def __init__(self, lifecycle: HostLifecycle, gate: LifecycleGate, threshold: LifecycleState) -> None:
        self.lifecycle = lifecycle
        self.gate = gate
        self.threshold = threshold

    def __call__(self, state: LifecycleState) -> None:
        if state is LifecycleState.DESTROYED:
            self.gate.on_host_destroyed()
            self.lifecycle.remove_observer(self)
        elif state.is_at_least(self.threshold):
            self.gate.on_host_reaches_active_threshold()
        else:
            self.gate.on_host_leaves_active_threshold()


def observe(
    lifecycle: HostLifecycle,
    cell: Union[StateCell[T], CellView[T]],
    callback: Observer[T],
    threshold: Union[LifecycleState, str] = LifecycleState.STARTED,
    name: Optional[str] = None,
) -> LifecycleGate[T]:
    """Keep ``callback`` subscribed to ``cell`` while ``lifecycle`` is active.

    Returns the gate so callers can inspect it. A lifecycle that is already
    destroyed yields a destroyed gate that never subscribes.
    """
    gate: LifecycleGate[T] = LifecycleGate(cell, callback, name=name or f"{lifecycle.name}:{cell.name}")
    if lifecycle.state is LifecycleState.DESTROYED:
        gate.on_host_destroyed()
        return gate
    lifecycle.add_observer(_GateBinding(lifecycle, gate, resolve_threshold(threshold)))
    return gate
