"""Host-side controllers for the counter screen."""

from .counter_controller import CounterController

__all__ = ["CounterController"]
