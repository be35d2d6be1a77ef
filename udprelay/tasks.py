#!/usr/bin/env python3
"""Minimal task pool running long-lived loops on background daemon threads."""

from __future__ import annotations
import threading                         # Worker threads
from typing import Any, Callable, List, Optional


class Task:
    """Handle to a spawned loop.  Stored by the relay; never required to join."""

    def __init__(self, thread: threading.Thread) -> None:
        self._thread = thread

    @property
    def name(self) -> str:
        return self._thread.name

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the task to finish; return ``True`` once it has."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def __repr__(self) -> str:
        state = "running" if self.is_alive() else "finished"
        return f"<Task {self.name} {state}>"


class TaskPool:
    """Spawns daemon threads so loops never outlive the process."""

    def __init__(self, name: str = "udprelay") -> None:
        self.name = name
        self.tasks: List[Task] = []
        self._lock = threading.Lock()
        self._counter = 0

    def spawn(self, fn: Callable[..., Any], *args: Any, name: str | None = None) -> Task:
        with self._lock:
            self._counter += 1
            thread_name = f"{self.name}-{name or fn.__name__}-{self._counter}"
        thread = threading.Thread(target=fn, args=args, name=thread_name, daemon=True)
        task = Task(thread)
        thread.start()
        with self._lock:
            self.tasks.append(task)
        return task

    def alive(self) -> List[Task]:
        """Tasks that are still running."""
        with self._lock:
            return [t for t in self.tasks if t.is_alive()]
