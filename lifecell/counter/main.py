"""Lifecell counter - scripted walkthrough entry point.

Drives a counter screen through taps, a rotation (host destroyed and rebuilt
around the retained owner) and a background/foreground cycle, with lifecycle
events delivered through the LifecycleEventBus the way a host runtime would.
"""

from __future__ import annotations

import asyncio
import logging
import logging.handlers
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

from lifecell.counter.controllers import CounterController
from lifecell.counter.state import Store
from lifecell.shared.core.configuration import SystemConfig, get_config
from lifecell.shared.core.event_bus import LifecycleEventBus
from lifecell.shared.core.lifecycle import HostLifecycle, LifecycleEvent

logger = logging.getLogger(__name__)

HOST_ID = "counter_screen"


def configure_logging(config: SystemConfig, base_dir: Optional[Path] = None) -> None:
    """Configure root logging from ``config.logging``.

    File handler: everything at the configured level, rotated by size.
    Console handler: only ``console_level`` and above.
    """
    log_config = config.logging
    file_log_level = getattr(logging, log_config.level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(file_log_level)

    # Remove existing handlers to avoid duplicates
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    if log_config.log_file:
        log_file_path = Path(log_config.log_file)
        if not log_file_path.is_absolute():
            log_file_path = (base_dir or Path.cwd()) / log_file_path
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(file_log_level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, log_config.console_level, logging.WARNING))
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)

    logger.info(f"Logging configured: level={log_config.level}, file={log_config.log_file}")


class Walkthrough:
    """Plays the host runtime's part: builds hosts and publishes their lifecycle."""

    def __init__(self, store: Store, bus: LifecycleEventBus, threshold: str) -> None:
        self.store = store
        self.bus = bus
        self.threshold = threshold
        self.screens: List[CounterController] = []

    def build_screen(self) -> CounterController:
        lifecycle = HostLifecycle(f"{HOST_ID}#{len(self.screens) + 1}")
        screen = CounterController(self.store.counter(HOST_ID), lifecycle, threshold=self.threshold)
        self.bus.register(HOST_ID, lifecycle)
        self.screens.append(screen)
        return screen

    async def send(self, *events: LifecycleEvent) -> None:
        for event in events:
            await self.bus.publish(HOST_ID, event)
        await self.bus.wait_until_idle()

    async def run(self) -> Dict[str, List[int]]:
        screen = self.build_screen()
        await self.send(LifecycleEvent.ON_CREATE, LifecycleEvent.ON_START, LifecycleEvent.ON_RESUME)
        screen.on_increment_clicked()
        screen.on_increment_clicked()
        screen.on_add_clicked(10)
        screen.on_decrement_clicked()
        logger.info(f"First screen shows '{screen.text}'")

        # Rotation: the host is torn down and rebuilt, the owner is not.
        await self.send(LifecycleEvent.ON_PAUSE, LifecycleEvent.ON_STOP, LifecycleEvent.ON_DESTROY)
        screen = self.build_screen()
        await self.send(LifecycleEvent.ON_CREATE, LifecycleEvent.ON_START, LifecycleEvent.ON_RESUME)
        logger.info(f"Rotated screen restored '{screen.text}'")

        # Background: writes while stopped are not delivered individually.
        await self.send(LifecycleEvent.ON_PAUSE, LifecycleEvent.ON_STOP)
        counter = self.store.counter(HOST_ID)
        counter.reset()
        counter.increment()
        await self.send(LifecycleEvent.ON_START, LifecycleEvent.ON_RESUME)
        logger.info(f"Foregrounded screen shows '{screen.text}'")

        await self.send(LifecycleEvent.ON_PAUSE, LifecycleEvent.ON_STOP, LifecycleEvent.ON_DESTROY)
        self.bus.unregister(HOST_ID)
        return {s.lifecycle.name: list(s.rendered) for s in self.screens}


async def run_walkthrough(config: Optional[SystemConfig] = None) -> Dict[str, List[int]]:
    """Run the scripted walkthrough and return what each screen rendered."""
    config = config or get_config()
    store = Store(initial_value=config.cell.initial_value)
    bus = LifecycleEventBus()
    try:
        return await Walkthrough(store, bus, config.lifecycle.active_threshold).run()
    finally:
        bus.clear()
        store.clear()


def main() -> int:
    """Console entry point."""
    load_dotenv()
    config = get_config()
    configure_logging(config)

    logger.info("Starting Lifecell counter walkthrough")
    observed = asyncio.run(run_walkthrough(config))
    for screen, values in observed.items():
        print(f"{screen}: {values}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
