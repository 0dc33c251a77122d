"""Counter Owner State.

Holds the counter's StateCell and exposes the user intents that mutate it.
Hosts only ever see the read-only view, so every write goes through here.
"""

from __future__ import annotations

import logging
from typing import Optional

from lifecell.shared.core.state_cell import CellView, StateCell

logger = logging.getLogger(__name__)


class CounterState:
    """Owner of a single integer counter.

    This class outlives the hosts that display it: the Store retains it while
    hosts are destroyed and recreated, and each new host observes the same
    cell. Each intent is a read-modify-write against the value current at
    call time; there is no other mutable state and no I/O.
    """

    def __init__(self, initial: int = 0, name: str = "counter") -> None:
        """Initialize counter state.

        Args:
            initial: Starting count
            name: Name used for the cell in logs
        """
        self.name = name
        self._cell: StateCell[int] = StateCell.create(initial, name=name)
        self._view = self._cell.view()
        self._cleared = False

    # --- Reads ---

    @property
    def count(self) -> CellView[int]:
        """Read-only view of the counter cell, for hosts to observe."""
        return self._view

    @property
    def value(self) -> int:
        return self._cell.get()

    @property
    def cleared(self) -> bool:
        return self._cleared

    # --- Intents ---

    def increment(self) -> None:
        self._cell.set(self._cell.get() + 1)

    def decrement(self) -> None:
        self._cell.set(self._cell.get() - 1)

    def reset(self) -> None:
        self._cell.set(0)

    def add_n(self, n: int) -> None:
        """Add ``n`` (which may be negative) to the count."""
        self._cell.set(self._cell.get() + n)

    # --- Teardown ---

    def on_cleared(self) -> None:
        """Called by the Store when this owner is dropped for good."""
        if self._cleared:
            return
        self._cleared = True
        observers = self._cell.observer_count
        if observers:
            logger.warning(
                f"CounterState '{self.name}' cleared with {observers} live observer(s); "
                "their hosts were not destroyed"
            )
        logger.debug(f"CounterState '{self.name}' cleared at {self._cell.get()}")

    def __repr__(self) -> str:
        return f"CounterState(name={self.name!r}, value={self._cell.get()!r})"

    @classmethod
    def from_config(cls, initial: Optional[int] = None, name: str = "counter") -> "CounterState":
        """Build a counter seeded from configuration unless ``initial`` is given."""
        if initial is None:
            from lifecell.shared.core.configuration import get_config

            initial = get_config().cell.initial_value
        return cls(initial=initial, name=name)
