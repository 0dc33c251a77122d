"""Owner Store - explicit composition root.

Retains owners (such as CounterState) across host recreation. Whoever
manages host recreation builds one Store and hands each new host the owner it
retrieves from it; nothing here is global.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from .counter_state import CounterState

O = TypeVar("O")

logger = logging.getLogger(__name__)


class Store:
    """Keyed container of owners that survive host recreation.

    Usage:
        store = Store()

        # Every time the screen is (re)built
        counter = store.counter("main")
        controller = CounterController(counter, lifecycle)

        # When the screen goes away for good
        store.clear()
    """

    def __init__(self, initial_value: Optional[int] = None) -> None:
        """Initialize an empty store.

        Args:
            initial_value: Seed for counters created through ``counter()``;
                None means read it from configuration.
        """
        self._owners: Dict[str, Any] = {}
        self._initial_value = initial_value

    def get_or_create(self, key: str, factory: Callable[[], O]) -> O:
        """Return the owner retained under ``key``, building it on first use."""
        owner = self._owners.get(key)
        if owner is None:
            owner = factory()
            self._owners[key] = owner
            logger.debug(f"Store created owner for '{key}': {owner!r}")
        return owner

    def counter(self, key: str = "default", initial: Optional[int] = None) -> CounterState:
        """Return the CounterState retained under ``key``.

        ``initial`` only applies when the counter is created here.

        Raises:
            TypeError: If ``key`` already holds a different kind of owner
        """
        seed = initial if initial is not None else self._initial_value
        owner = self.get_or_create(key, lambda: CounterState.from_config(seed, name=key))
        if not isinstance(owner, CounterState):
            raise TypeError(f"Owner under '{key}' is {type(owner).__name__}, not CounterState")
        return owner

    def remove(self, key: str) -> None:
        """Clear and drop the owner under ``key``, if any."""
        owner = self._owners.pop(key, None)
        if owner is not None:
            self._clear_owner(key, owner)

    def clear(self) -> None:
        """Clear every retained owner and empty the store."""
        owners, self._owners = self._owners, {}
        for key, owner in owners.items():
            self._clear_owner(key, owner)
        if owners:
            logger.info(f"Store cleared {len(owners)} owner(s)")

    def keys(self) -> List[str]:
        return list(self._owners)

    def __contains__(self, key: object) -> bool:
        return key in self._owners

    def __len__(self) -> int:
        return len(self._owners)

    @staticmethod
    def _clear_owner(key: str, owner: Any) -> None:
        on_cleared = getattr(owner, "on_cleared", None)
        if callable(on_cleared):
            on_cleared()
        logger.debug(f"Store released owner '{key}'")
