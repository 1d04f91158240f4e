"""
cellicon Signal - Hot, Stateful Observable Values
=================================================

A Signal always has a current value and notifies observers when it changes.
Writable roots are MutableSignals; everything else is derived through the
operators in ``cellicon.operators`` and is read-only.

Subscription protocol:

- ``subscribe(callback, call_immediately=False)`` returns an unsubscribe
  function. Calling it more than once is harmless.
- Internally, operators use ``_observe(observer)``: stateful signals replay
  their current value to the observer during the call, derived signals forward
  whatever their upstream replays. ``subscribe`` hides that replay unless
  ``call_immediately`` is set.

Example:
    level = MutableSignal(2, name="level")
    shown = level >> (lambda lvl: lvl + 1)
    unsubscribe = shown.subscribe(print)
    level.value = 3  # prints 4
"""

from typing import Any, Callable, Generic, Optional, TypeVar

from .dispatcher import Dispatcher
from .util.observer_set import ObserverSet

T = TypeVar("T")
R = TypeVar("R")

Observer = Callable[[Any], None]
Unsubscribe = Callable[[], None]


# ============================================================================
# SENTINEL VALUES
# ============================================================================


class _NULL_EVENT:
    """Sentinel for 'no value yet'."""

    def __repr__(self):
        return "NULL_EVENT"


NULL_EVENT = _NULL_EVENT()


# ============================================================================
# EXCEPTIONS
# ============================================================================


class SignalError(Exception):
    """Base class for signal engine errors."""

    pass


class ReadOnlySignalError(SignalError, TypeError):
    """Raised when writing to a derived signal."""

    pass


# ============================================================================
# SIGNAL - Read-only base
# ============================================================================


class Signal(Generic[T]):
    """
    Read-only reactive value.

    Subclasses implement ``value`` and ``_observe``. Everything else, the
    public subscription API and the operator methods, lives here.
    """

    __slots__ = ("_name", "_dispatcher")

    def __init__(self, name: Optional[str] = None, dispatcher: Optional[Dispatcher] = None):
        self._name = name or "<unnamed>"
        self._dispatcher = dispatcher if dispatcher is not None else Dispatcher(self._name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def value(self) -> T:
        raise NotImplementedError

    def get(self) -> T:
        """Explicit getter (alias for value property)."""
        return self.value

    def set(self, new_value: T) -> None:
        raise ReadOnlySignalError(
            f"{type(self).__name__} '{self._name}' is derived and cannot be set directly"
        )

    def _observe(self, observer: Observer) -> Unsubscribe:
        raise NotImplementedError

    def subscribe(
        self, callback: Callable[[T], None], call_immediately: bool = False
    ) -> Unsubscribe:
        """
        Subscribe to value changes.

        Args:
            callback: Called with each new value
            call_immediately: Also deliver the value replayed at subscription

        Returns:
            Unsubscribe function
        """
        primed = False

        def deliver(value):
            if primed or call_immediately:
                callback(value)

        unsubscribe = self._observe(deliver)
        primed = True
        return unsubscribe

    # ========================================================================
    # OPERATORS
    # ========================================================================

    def map(self, transform: Callable[[T], R], name: Optional[str] = None) -> "Signal[R]":
        """Derived signal holding ``transform(value)``."""
        from .operators import MappedSignal

        return MappedSignal(self, transform, name=name)

    def __rshift__(self, transform: Callable[[T], R]) -> "Signal[R]":
        """Map operator: signal >> f"""
        return self.map(transform)

    def then(self, transform: Callable[[T], R]) -> "Signal[R]":
        """Alias for >> operator."""
        return self >> transform

    def distinct_until_changed(self, name: Optional[str] = None) -> "Signal[T]":
        """Drop emissions equal to the previous one."""
        from .operators import DistinctSignal

        return DistinctSignal(self, name=name)

    def switch_latest(
        self, selector: Callable[[T], "Signal[R]"], name: Optional[str] = None
    ) -> "Signal[R]":
        """Follow the inner signal chosen by ``selector`` for the latest value."""
        from .operators import SwitchLatestSignal

        return SwitchLatestSignal(self, selector, name=name)

    def share(self, initial: Any = NULL_EVENT, name: Optional[str] = None) -> "Signal[T]":
        """Share upstream among subscribers while at least one is attached."""
        from .operators import SharedSignal

        return SharedSignal(self, initial=initial, name=name)

    def log_diffs(
        self,
        table_log_buffer,
        column_name: str = "",
        initial_value: Any = NULL_EVENT,
        column_prefix: str = "",
    ) -> "Signal[T]":
        """Record every change of this signal into a table log buffer."""
        from .table_log import DiffLoggedSignal

        return DiffLoggedSignal(
            self,
            table_log_buffer,
            column_prefix=column_prefix,
            column_name=column_name,
            initial_value=initial_value,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name})"


# ============================================================================
# MUTABLE SIGNAL - Writable root
# ============================================================================


class MutableSignal(Signal[T]):
    """
    Writable state holder.

    Writing a value equal to the current one does nothing. Writes go through
    the dispatcher, so they are serialized with every other write sharing it.
    """

    __slots__ = ("_value", "_observers")

    def __init__(
        self,
        initial_value: T,
        name: Optional[str] = None,
        dispatcher: Optional[Dispatcher] = None,
    ):
        super().__init__(name, dispatcher)
        self._value = initial_value
        self._observers = ObserverSet()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        self.set(new_value)

    def set(self, new_value: T) -> None:
        self._dispatcher.submit(lambda: self._apply(new_value))

    def _apply(self, new_value: T) -> None:
        if self._value == new_value:
            return
        self._value = new_value
        self._observers.notify_all(new_value)

    def _observe(self, observer: Observer) -> Unsubscribe:
        with self._dispatcher.lock:
            entry = self._observers.add(observer)
            try:
                observer(self._value)
            except Exception:
                self._observers.discard(entry)
                raise

        def unsubscribe():
            with self._dispatcher.lock:
                self._observers.discard(entry)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._observers)

    def as_read_only(self) -> "Signal[T]":
        """Read-only view sharing this signal's state."""
        return ReadOnlySignal(self)

    def __repr__(self) -> str:
        return f"MutableSignal({self._name}={self._value!r})"


class ReadOnlySignal(Signal[T]):
    """Read-only view over another signal."""

    __slots__ = ("_source",)

    def __init__(self, source: Signal[T]):
        super().__init__(source.name, source.dispatcher)
        self._source = source

    @property
    def value(self) -> T:
        return self._source.value

    def _observe(self, observer: Observer) -> Unsubscribe:
        return self._source._observe(observer)


class ConstantSignal(Signal[T]):
    """Signal whose value never changes."""

    __slots__ = ("_value",)

    def __init__(self, value: T, name: Optional[str] = None, dispatcher: Optional[Dispatcher] = None):
        super().__init__(name, dispatcher)
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    def _observe(self, observer: Observer) -> Unsubscribe:
        observer(self._value)
        return lambda: None


def constant(value: T, name: Optional[str] = None, dispatcher: Optional[Dispatcher] = None) -> Signal[T]:
    """Create a signal that always holds ``value``."""
    return ConstantSignal(value, name=name, dispatcher=dispatcher)


__all__ = [
    "NULL_EVENT",
    "Signal",
    "MutableSignal",
    "ReadOnlySignal",
    "ConstantSignal",
    "constant",
    "SignalError",
    "ReadOnlySignalError",
    "Observer",
    "Unsubscribe",
]
