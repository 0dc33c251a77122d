"""Single-value observable state holder with replay-on-subscribe."""

from __future__ import annotations

import itertools
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Generic, List, Optional, Tuple, TypeAlias, TypeVar

T = TypeVar("T")

Observer: TypeAlias = Callable[[T], None]

logger = logging.getLogger(__name__)

_subscription_ids = itertools.count(1)


@dataclass(eq=False)
class Subscription(Generic[T]):
    """Handle for one observer registered on a StateCell.

    ``last_version`` is the cell version this observer has already seen.
    Deliveries at or below it are skipped, so an observer never receives a
    value older than one it was already given.
    """

    observer: Observer[T]
    last_version: int = 0
    active: bool = True
    id: int = field(default_factory=lambda: next(_subscription_ids))

    def deliver(self, version: int, value: T) -> None:
        if not self.active or version <= self.last_version:
            return
        self.last_version = version
        self.observer(value)


class StateCell(Generic[T]):
    """Owns one current value and notifies observers on every ``set``.

    Notification is synchronous and runs on the caller's context. A ``set``
    issued from inside an observer callback updates ``current`` right away,
    but its notification is queued until the in-flight batch has reached
    every observer.
    """

    def __init__(self, initial: T, name: str = "cell") -> None:
        self.name = name
        self._current: T = initial
        self._version = 0
        self._subscriptions: List[Subscription[T]] = []
        self._pending: Deque[Tuple[int, T]] = deque()
        self._dispatching = False

    @classmethod
    def create(cls, initial: T, name: str = "cell") -> "StateCell[T]":
        return cls(initial, name=name)

    # --- Reads ---

    def get(self) -> T:
        return self._current

    @property
    def value(self) -> T:
        return self._current

    @property
    def version(self) -> int:
        return self._version

    @property
    def observer_count(self) -> int:
        return len(self._subscriptions)

    @property
    def has_observers(self) -> bool:
        return bool(self._subscriptions)

    def view(self) -> "CellView[T]":
        """Return a read-only view suitable for handing to observers."""
        return CellView(self)

    # --- Mutation ---

    def set(self, new_value: T) -> None:
        """Replace the current value and notify every observer.

        There is no equality check: setting the same value twice produces two
        notifications.
        """
        self._current = new_value
        self._version += 1
        self._pending.append((self._version, new_value))
        logger.debug(f"StateCell '{self.name}' set to {new_value!r} (version {self._version})")

        if self._dispatching:
            # Reentrant write, drained by the outer dispatch loop.
            return
        self._drain()

    def _drain(self, replay: Optional[Subscription[T]] = None) -> None:
        self._dispatching = True
        try:
            if replay is not None:
                self._replay(replay)
            while self._pending:
                version, value = self._pending.popleft()
                for subscription in list(self._subscriptions):
                    subscription.deliver(version, value)
        except Exception:
            dropped = len(self._pending)
            self._pending.clear()
            logger.exception(
                f"Observer failed while notifying StateCell '{self.name}'; "
                f"discarded {dropped} queued notification(s)"
            )
            raise
        finally:
            self._dispatching = False

    # --- Observation ---

    def subscribe(self, observer: Observer[T]) -> Subscription[T]:
        """Register ``observer`` and immediately replay the current value to it."""
        subscription: Subscription[T] = Subscription(observer=observer, last_version=self._version)
        self._subscriptions.append(subscription)
        logger.debug(
            f"StateCell '{self.name}' subscription #{subscription.id} added "
            f"({len(self._subscriptions)} active)"
        )
        if not self._dispatching:
            # Writes made during the replay are queued and drained after it returns.
            self._drain(replay=subscription)
            return subscription

        try:
            self._replay(subscription)
        except Exception:
            logger.exception(f"Observer failed during replay on StateCell '{self.name}'")
            raise
        return subscription

    def _replay(self, subscription: Subscription[T]) -> None:
        try:
            subscription.observer(self._current)
        except Exception:
            self.unsubscribe(subscription)
            raise

    def unsubscribe(self, handle: Optional[Subscription[T]]) -> None:
        """Remove ``handle``. Unknown or already-removed handles are ignored."""
        if handle is None:
            return
        handle.active = False
        if handle in self._subscriptions:
            self._subscriptions.remove(handle)
            logger.debug(
                f"StateCell '{self.name}' subscription #{handle.id} removed "
                f"({len(self._subscriptions)} active)"
            )

    def __repr__(self) -> str:
        return f"StateCell(name={self.name!r}, value={self._current!r}, observers={len(self._subscriptions)})"


class CellView(Generic[T]):
    """Read-only face of a StateCell. It has no ``set``."""

    __slots__ = ("_cell",)

    def __init__(self, cell: StateCell[T]) -> None:
        self._cell = cell

    @property
    def name(self) -> str:
        return self._cell.name

    def get(self) -> T:
        return self._cell.get()

    @property
    def value(self) -> T:
        return self._cell.get()

    def subscribe(self, observer: Observer[T]) -> Subscription[T]:
        return self._cell.subscribe(observer)

    def unsubscribe(self, handle: Optional[Subscription[T]]) -> None:
        self._cell.unsubscribe(handle)

    @property
    def has_observers(self) -> bool:
        return self._cell.has_observers

    def __repr__(self) -> str:
        return f"CellView({self._cell!r})"
