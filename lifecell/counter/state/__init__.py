"""Counter State Management.

Owner-side state for the counter screen, kept apart from the hosts that
display it.

Architecture:
- CounterState: Owner of the counter cell and its intents
- Store: Composition root retaining owners across host recreation
"""

from .counter_state import CounterState
from .store import Store

__all__ = ["CounterState", "Store"]
