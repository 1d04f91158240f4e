"""
cellicon Dispatcher - Serialized Change Delivery
================================================

Every writable signal belongs to a Dispatcher. Writes coming from any thread
are queued and drained one at a time under a re-entrant lock, so each update
propagates through the whole graph before the next one starts.

A write issued from inside a propagation (an observer setting another signal)
does not recurse: it is appended to the queue and runs after the current
update completes. This keeps propagation breadth-first and prevents two
updates from interleaving on the same node.
"""

import threading
from collections import deque
from typing import Callable


class Dispatcher:
    """Serializes writes into one connection's signal graph."""

    __slots__ = ("_lock", "_pending", "_draining_thread", "_name")

    def __init__(self, name: str = "dispatcher"):
        self._name = name
        self._lock = threading.RLock()
        self._pending: deque = deque()
        self._draining_thread = None

    @property
    def lock(self) -> threading.RLock:
        """Lock guarding propagation and subscription bookkeeping."""
        return self._lock

    @property
    def is_draining(self) -> bool:
        """True while the calling thread is propagating an update."""
        return self._draining_thread == threading.get_ident()

    def submit(self, task: Callable[[], None]) -> None:
        """
        Queue a task and drain the queue unless this thread already is.

        When the call returns on a thread that was not propagating, the task
        and everything queued before it have run.
        """
        self._pending.append(task)
        if self.is_draining:
            return
        self._drain()

    def _drain(self) -> None:
        with self._lock:
            self._draining_thread = threading.get_ident()
            try:
                while self._pending:
                    task = self._pending.popleft()
                    task()
            finally:
                self._draining_thread = None

    def __repr__(self) -> str:
        return f"Dispatcher({self._name}, pending={len(self._pending)})"
