from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Union

from .lifecycle import HostLifecycle, LifecycleEvent


class LifecycleEventBus:
    """Async hub delivering externally-produced lifecycle events to hosts.

    Whatever owns the real host runtime (a UI toolkit, a test harness, an
    event loop) publishes events by host id; the bus forwards each one to
    the registered HostLifecycle. Deliveries run as tasks in publish order.
    Registration and lookup happen on the event loop thread without awaiting,
    so the host table needs no lock.
    """

    def __init__(self) -> None:
        self._hosts: Dict[str, HostLifecycle] = {}
        self._logger = logging.getLogger(__name__)
        self._pending_tasks: set[asyncio.Task] = set()

    def register(self, host_id: str, lifecycle: HostLifecycle) -> None:
        """Route events for ``host_id`` to ``lifecycle``, replacing any previous host."""
        previous = self._hosts.get(host_id)
        if previous is not None and previous is not lifecycle:
            self._logger.debug(f"Replacing lifecycle registered for host '{host_id}'")
        self._hosts[host_id] = lifecycle

    def unregister(self, host_id: str) -> None:
        self._hosts.pop(host_id, None)

    def lifecycle_for(self, host_id: str) -> Optional[HostLifecycle]:
        return self._hosts.get(host_id)

    async def publish(self, host_id: str, event: Union[LifecycleEvent, str]) -> None:
        """Schedule delivery of ``event`` to the host registered as ``host_id``."""
        event = LifecycleEvent(event)
        lifecycle = self._hosts.get(host_id)

        if lifecycle is None:
            self._logger.warning(f"No host registered as '{host_id}', dropping {event.value}")
            return

        self._logger.debug(f"Publishing {event.value} to host '{host_id}'")
        task = asyncio.create_task(self._safe_dispatch(host_id, lifecycle, event))
        self._pending_tasks.add(task)
        task.add_done_callback(self._pending_tasks.discard)

    async def wait_until_idle(self, timeout: float = 5.0) -> bool:
        """Wait for all pending deliveries to complete.

        Returns:
            True if all tasks completed, False if timeout reached
        """
        if not self._pending_tasks:
            return True

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while self._pending_tasks:
            remaining = deadline - loop.time()
            if remaining <= 0:
                self._logger.warning(
                    f"LifecycleEventBus: timeout with {len(self._pending_tasks)} deliveries pending"
                )
                return False
            await asyncio.wait(list(self._pending_tasks), timeout=remaining)
        return True

    async def _safe_dispatch(self, host_id: str, lifecycle: HostLifecycle, event: LifecycleEvent) -> None:
        """Keep one failing host from stopping the bus."""
        try:
            lifecycle.handle_event(event)
        except Exception as exc:
            self._logger.exception(
                f"Lifecycle delivery of {event.value} to host '{host_id}' failed",
                exc_info=exc,
            )

    def clear(self) -> None:
        """Remove all host registrations."""
        self._hosts.clear()
