"""Lifecycle-gated subscription to a StateCell."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from .errors import GateClosedError
from .state_cell import CellView, Observer, StateCell, Subscription

T = TypeVar("T")

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    DESTROYED = "destroyed"


class LifecycleGate(Generic[T]):
    """Keeps ``callback`` subscribed to ``cell`` only while the host is active.

    The gate owns the subscription handle. Entering the active window
    subscribes (which replays the current value); leaving it unsubscribes
    before returning, so no notification reaches the host afterwards.
    Repeated enters and leaves are no-ops. Once destroyed, the gate refuses
    to activate again.
    """

    def __init__(
        self,
        cell: Union[StateCell[T], CellView[T]],
        callback: Observer[T],
        name: Optional[str] = None,
    ) -> None:
        self._cell = cell
        self._callback = callback
        self.name = name or f"gate:{cell.name}"
        self._state = GateState.INACTIVE
        self._subscription: Optional[Subscription[T]] = None

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is GateState.ACTIVE

    @property
    def is_destroyed(self) -> bool:
        return self._state is GateState.DESTROYED

    @property
    def active_subscription(self) -> Optional[Subscription[T]]:
        return self._subscription

    def on_host_reaches_active_threshold(self) -> None:
        if self._state is GateState.DESTROYED:
            raise GateClosedError(self.name)
        if self._state is GateState.ACTIVE:
            logger.debug(f"{self.name}: already active, ignoring activation")
            return

        # Mark active before subscribing: the replay may re-enter the gate.
        self._state = GateState.ACTIVE
        try:
            subscription = self._cell.subscribe(self._callback)
        except Exception:
            self._state = GateState.INACTIVE
            raise

        if self._state is not GateState.ACTIVE:
            # The replay callback deactivated or destroyed the gate.
            self._cell.unsubscribe(subscription)
            return
        self._subscription = subscription
        logger.debug(f"{self.name}: activated (subscription #{subscription.id})")

    def on_host_leaves_active_threshold(self) -> None:
        if self._state is not GateState.ACTIVE:
            return
        self._state = GateState.INACTIVE
        self._teardown()
        logger.debug(f"{self.name}: deactivated")

    def on_host_destroyed(self) -> None:
        if self._state is GateState.DESTROYED:
            return
        self.on_host_leaves_active_threshold()
        self._state = GateState.DESTROYED
        logger.debug(f"{self.name}: destroyed")

    def _teardown(self) -> None:
        subscription, self._subscription = self._subscription, None
        self._cell.unsubscribe(subscription)

    def __repr__(self) -> str:
        return f"LifecycleGate(name={self.name!r}, state={self._state.value})"
