"""Single-writer queue in front of StateCell.set for cross-thread producers."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Deque, Generic, Tuple, TypeVar

from .state_cell import StateCell

T = TypeVar("T")

logger = logging.getLogger(__name__)

_VALUE = "value"
_UPDATE = "update"


class SerializedWriter(Generic[T]):
    """Queues writes from any thread and applies them on the owning context.

    ``post`` and ``submit`` only append under a lock; nothing touches the cell
    until ``flush`` runs. Every queued write becomes its own ``set`` call, in
    FIFO order, so observers see each one.
    """

    def __init__(self, cell: StateCell[T]) -> None:
        self._cell = cell
        self._queue: Deque[Tuple[str, object]] = deque()
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    def post(self, value: T) -> None:
        with self._lock:
            self._queue.append((_VALUE, value))

    def submit(self, update: Callable[[T], T]) -> None:
        """Queue a read-modify-write evaluated against the value current at flush time."""
        with self._lock:
            self._queue.append((_UPDATE, update))

    def flush(self) -> int:
        """Apply queued writes on the calling context; returns how many were applied.

        Writes are taken one at a time, so if applying one raises, the writes
        behind it stay queued for the next flush. Writes posted while the
        flush runs wait for the next one.
        """
        with self._lock:
            limit = len(self._queue)

        applied = 0
        while applied < limit:
            with self._lock:
                if not self._queue:
                    break
                kind, payload = self._queue.popleft()
            applied += 1
            if kind == _UPDATE:
                self._cell.set(payload(self._cell.get()))  # type: ignore[operator]
            else:
                self._cell.set(payload)  # type: ignore[arg-type]

        if applied:
            logger.debug(f"Flushed {applied} queued write(s) to StateCell '{self._cell.name}'")
        return applied
