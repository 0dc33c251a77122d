"""Controller for presenting the counter and forwarding taps to its owner."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, List, Optional, Union

from lifecell.shared.core.lifecycle import HostLifecycle, LifecycleState, observe

if TYPE_CHECKING:
    from lifecell.counter.state.counter_state import CounterState
    from lifecell.shared.core.lifecycle_gate import LifecycleGate

logger = logging.getLogger(__name__)

Renderer = Callable[[str], None]


class CounterController:
    """Host that shows the counter while its lifecycle is active.

    One controller exists per host instance. On recreation a new controller
    is built around the same CounterState and a fresh HostLifecycle; the gate
    replays the latest count as soon as the new host becomes active.
    """

    def __init__(
        self,
        counter: CounterState,
        lifecycle: HostLifecycle,
        render: Optional[Renderer] = None,
        threshold: Optional[Union[LifecycleState, str]] = None,
    ):
        self.counter = counter
        self.lifecycle = lifecycle
        self._render = render
        self.text = ""
        self.rendered: List[int] = []

        if threshold is None:
            from lifecell.shared.core.configuration import get_config

            threshold = get_config().lifecycle.active_threshold

        self.gate: LifecycleGate[int] = observe(
            lifecycle,
            counter.count,
            self._on_count_changed,
            threshold=threshold,
            name=f"{lifecycle.name}:{counter.name}",
        )

    def _on_count_changed(self, value: int) -> None:
        self.rendered.append(value)
        self.text = f"Count: {value}"
        logger.debug(f"{self.lifecycle.name} rendered '{self.text}'")
        if self._render is not None:
            self._render(self.text)

    # --- Button handlers ---

    def on_increment_clicked(self) -> None:
        self.counter.increment()

    def on_decrement_clicked(self) -> None:
        self.counter.decrement()

    def on_reset_clicked(self) -> None:
        self.counter.reset()

    def on_add_clicked(self, n: int) -> None:
        self.counter.add_n(n)
