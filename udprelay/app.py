#!/usr/bin/env python3
"""Tiny host application: owns a :class:`Network` and polls it at a fixed rate.

Systems are plain callables taking the relay; each one runs once per tick on
the caller's thread, so they must only use the non-blocking relay API.
"""

from __future__ import annotations
import threading                         # Stop flag shared with run()
import time                              # Tick pacing
from typing import Callable, List, Optional, Union

from .network import Network
from .protocol import DEFAULT_TICK, Address, format_address
from .tasks import TaskPool
from .util import LOG

System = Callable[[Network], None]


class App:
    """Starts the relay once, then drives every registered system each tick."""

    def __init__(
        self,
        bind_address: Union[Address, str],
        tick: float = DEFAULT_TICK,
        network: Optional[Network] = None,
    ) -> None:
        self.bind_address = bind_address
        self.tick = tick
        self.network = network or Network()
        self.pool = TaskPool()
        self.systems: List[System] = []

        # Flag to shut the tick loop down cooperatively.
        self.running = threading.Event()

    def add_system(self, system: System) -> "App":
        self.systems.append(system)
        return self

    def startup(self) -> None:
        """Bind and spawn the relay loops.  ``BindError`` propagates."""
        self.network.start(self.bind_address, self.pool)
        self.running.set()

    def update(self) -> None:
        """Run each system once, in registration order."""
        for system in self.systems:
            system(self.network)

    def stop(self) -> None:
        self.running.clear()

    def run(self, ticks: Optional[int] = None) -> None:
        """Blocking run-loop: forever, or for ``ticks`` iterations."""
        self.startup()
        done = 0
        try:
            while self.running.is_set() and (ticks is None or done < ticks):
                started = time.monotonic()
                self.update()
                done += 1
                time.sleep(max(0.0, self.tick - (time.monotonic() - started)))
        except KeyboardInterrupt:  # Graceful Ctrl‑C
            LOG.info("Shutdown requested")
        finally:
            self.running.clear()
            address = self.network.local_address
            self.network.close()
            if address is not None:
                LOG.info("relay on %s closed", format_address(address))
