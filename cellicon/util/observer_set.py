"""
Disposable Observer Set
=======================

Insertion-ordered observer storage where every registration is an entry that
can be disposed. Notification iterates a snapshot, so observers may subscribe
or unsubscribe while a value is being delivered; a disposed entry is skipped
even if it is still part of the snapshot being walked.
"""

from typing import Any, Callable, Dict


class ObserverEntry:
    """A single registration inside an ObserverSet."""

    __slots__ = ("callback", "active")

    def __init__(self, callback: Callable[[Any], None]):
        self.callback = callback
        self.active = True

    def __call__(self, value: Any) -> None:
        if self.active:
            self.callback(value)


class ObserverSet:
    """
    Ordered set of observer entries.

    Entries are keyed by identity, so the same callable may be registered
    twice and each registration is disposed independently.
    """

    __slots__ = ("_entries",)

    def __init__(self):
        self._entries: Dict[int, ObserverEntry] = {}

    def add(self, callback: Callable[[Any], None]) -> ObserverEntry:
        entry = ObserverEntry(callback)
        self._entries[id(entry)] = entry
        return entry

    def discard(self, entry: ObserverEntry) -> bool:
        """Dispose an entry. Returns False if it was already disposed."""
        if not entry.active:
            return False
        entry.active = False
        self._entries.pop(id(entry), None)
        return True

    def notify_all(self, value: Any) -> None:
        for entry in list(self._entries.values()):
            entry(value)

    def clear(self) -> None:
        for entry in self._entries.values():
            entry.active = False
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
