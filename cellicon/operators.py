"""
cellicon Operators - The Combinator Engine
==========================================

Derived signals built on top of ``cellicon.signal``:

- MappedSignal: single-source transform, with map fusion
- CombinedSignal: combine-latest over several sources
- DistinctSignal: drop consecutive equal values
- SwitchLatestSignal: follow one inner signal chosen from a mode signal
- SharedSignal: while-subscribed multicast with a cached last value

Cold operators (map, combine, distinct, switch) keep their state per
subscription: two subscribers get two independent upstream chains. Wrap a
node with ``share()`` to multicast it.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from .signal import NULL_EVENT, Observer, Signal, Unsubscribe
from .util.observer_set import ObserverSet

T = TypeVar("T")
R = TypeVar("R")


# ============================================================================
# SIMPLE MAP - Single-source transform with fusion
# ============================================================================


class MappedSignal(Signal[R]):
    """
    Single-source transform.

    Chaining maps fuses them into one transform chain over the root source,
    so ``s >> f >> g`` subscribes to ``s`` once and applies ``g(f(x))``.
    """

    __slots__ = ("_source", "_transform_chain")

    def __init__(
        self,
        source: Signal[Any],
        transform: Optional[Callable[[Any], R]],
        name: Optional[str] = None,
    ):
        super().__init__(name or f"map({source.name})", source.dispatcher)
        self._source = source
        self._transform_chain: List[Callable] = [transform] if transform else []

    def _apply_chain(self, value: Any) -> R:
        result = value
        for transform in self._transform_chain:
            result = transform(result)
        return result

    @property
    def value(self) -> R:
        return self._apply_chain(self._source.value)

    def _observe(self, observer: Observer) -> Unsubscribe:
        return self._source._observe(lambda value: observer(self._apply_chain(value)))

    def map(self, transform: Callable[[R], Any], name: Optional[str] = None) -> Signal[Any]:
        """Functor composition: (f >> g) = g ∘ f, fused over the root source."""
        fused = MappedSignal(self._source, None, name=name or self._name)
        fused._transform_chain = self._transform_chain + [transform]
        return fused


# ============================================================================
# COMBINE LATEST - Multi-source product
# ============================================================================


class CombinedSignal(Signal[R]):
    """
    Combine-latest over several sources.

    Emission is withheld until every source has delivered a value. After
    that, each source emission triggers exactly one recomputation using the
    latest value of every other source.
    """

    __slots__ = ("_sources", "_transform")

    def __init__(
        self,
        sources: Sequence[Signal[Any]],
        transform: Callable[..., R],
        name: Optional[str] = None,
    ):
        if not sources:
            raise ValueError("combine_latest requires at least one source")
        names = ", ".join(source.name for source in sources)
        super().__init__(name or f"combine({names})", sources[0].dispatcher)
        self._sources = tuple(sources)
        self._transform = transform

    @property
    def value(self) -> R:
        return self._transform(*(source.value for source in self._sources))

    def _observe(self, observer: Observer) -> Unsubscribe:
        latest = [NULL_EVENT] * len(self._sources)
        missing = [len(self._sources)]

        def make_change_handler(index: int):
            def on_source_change(new_value):
                if latest[index] is NULL_EVENT:
                    missing[0] -= 1
                latest[index] = new_value
                if missing[0] == 0:
                    observer(self._transform(*latest))

            return on_source_change

        unsubscribers = [
            source._observe(make_change_handler(i))
            for i, source in enumerate(self._sources)
        ]

        def unsubscribe():
            for unsub in unsubscribers:
                unsub()

        return unsubscribe


def combine_latest(*args: Any, name: Optional[str] = None) -> Signal[Any]:
    """
    Combine sources with a transform.

    The transform is the last positional argument:

        combine_latest(a, b, c, lambda a, b, c: a + b + c)
    """
    if len(args) < 2 or not callable(args[-1]) or isinstance(args[-1], Signal):
        raise TypeError("combine_latest expects one or more signals followed by a transform")
    *sources, transform = args
    for source in sources:
        if not isinstance(source, Signal):
            raise TypeError(f"Cannot combine Signal with {type(source)}")
    return CombinedSignal(sources, transform, name=name)


# ============================================================================
# DISTINCT - Suppress consecutive duplicates
# ============================================================================


class DistinctSignal(Signal[T]):
    """Forwards a value only when it differs (==) from the previous one."""

    __slots__ = ("_source",)

    def __init__(self, source: Signal[T], name: Optional[str] = None):
        super().__init__(name or source.name, source.dispatcher)
        self._source = source

    @property
    def value(self) -> T:
        return self._source.value

    def _observe(self, observer: Observer) -> Unsubscribe:
        last = [NULL_EVENT]

        def on_source_change(new_value):
            if last[0] is not NULL_EVENT and last[0] == new_value:
                return
            last[0] = new_value
            observer(new_value)

        return self._source._observe(on_source_change)


# ============================================================================
# SWITCH LATEST - Dynamic re-subscription
# ============================================================================


class _InnerSlot:
    """The current inner subscription of one SwitchLatestSignal observer."""

    __slots__ = ("token", "unsubscribe")

    def __init__(self):
        self.token = None
        self.unsubscribe = None

    def dispose(self) -> None:
        unsubscribe = self.unsubscribe
        self.token = None
        self.unsubscribe = None
        if unsubscribe is not None:
            unsubscribe()


class SwitchLatestSignal(Signal[R]):
    """
    Follows the inner signal selected for the latest mode value.

    On every mode emission the current inner subscription is disposed first,
    then the newly selected inner signal is subscribed. Inner emissions are
    tagged with the token of the slot they were created for; anything arriving
    with a stale token is dropped.
    """

    __slots__ = ("_modes", "_selector")

    def __init__(
        self,
        modes: Signal[Any],
        selector: Callable[[Any], Signal[R]],
        name: Optional[str] = None,
    ):
        super().__init__(name or f"switch({modes.name})", modes.dispatcher)
        self._modes = modes
        self._selector = selector

    @property
    def value(self) -> R:
        return self._selector(self._modes.value).value

    def _observe(self, observer: Observer) -> Unsubscribe:
        slot = _InnerSlot()

        def on_mode_change(mode):
            slot.dispose()
            inner = self._selector(mode)
            token = object()
            slot.token = token
            logging.debug(f"{self._name}: switching to {inner.name} for mode {mode!r}")

            def on_inner_change(value):
                if slot.token is token:
                    observer(value)

            unsubscribe = inner._observe(on_inner_change)
            if slot.token is token:
                slot.unsubscribe = unsubscribe
            else:
                # A nested mode change already replaced this inner signal.
                unsubscribe()

        unsubscribe_modes = self._modes._observe(on_mode_change)

        def unsubscribe():
            unsubscribe_modes()
            slot.dispose()

        return unsubscribe


# ============================================================================
# SHARED SIGNAL - While-subscribed multicast
# ============================================================================


class SharedSignal(Signal[T]):
    """
    Hot, lazily activated multicast of an upstream signal.

    The upstream is subscribed on the first subscriber and released as soon as
    the last one leaves. The last value is cached: late subscribers receive it
    immediately, and it survives deactivation. Equal consecutive values are
    conflated.

    Subscription bookkeeping runs under the dispatcher lock, so concurrent
    subscribe/unsubscribe calls cannot double-activate or leak upstream.
    """

    __slots__ = (
        "_upstream",
        "_value",
        "_observers",
        "_subscriber_count",
        "_upstream_unsubscribe",
    )

    def __init__(self, upstream: Signal[T], initial: Any = NULL_EVENT, name: Optional[str] = None):
        super().__init__(name or upstream.name, upstream.dispatcher)
        self._upstream = upstream
        self._value = initial
        self._observers = ObserverSet()
        self._subscriber_count = 0
        self._upstream_unsubscribe: Optional[Unsubscribe] = None

    @property
    def value(self) -> T:
        if self._value is NULL_EVENT:
            return self._upstream.value
        return self._value

    @property
    def subscriber_count(self) -> int:
        return self._subscriber_count

    @property
    def is_active(self) -> bool:
        return self._upstream_unsubscribe is not None

    def _on_upstream(self, new_value: T) -> None:
        if self._value is not NULL_EVENT and self._value == new_value:
            return
        self._value = new_value
        self._observers.notify_all(new_value)

    def _observe(self, observer: Observer) -> Unsubscribe:
        with self._dispatcher.lock:
            self._subscriber_count += 1
            if self._subscriber_count == 1:
                logging.debug(f"{self._name}: activating upstream")
                try:
                    self._upstream_unsubscribe = self._upstream._observe(self._on_upstream)
                except Exception:
                    self._subscriber_count -= 1
                    raise
            entry = self._observers.add(observer)
            if self._value is not NULL_EVENT:
                try:
                    observer(self._value)
                except Exception:
                    self._release(entry)
                    raise

        return lambda: self._release(entry)

    def _release(self, entry) -> None:
        with self._dispatcher.lock:
            if not self._observers.discard(entry):
                return
            self._subscriber_count -= 1
            if self._subscriber_count == 0:
                self._deactivate()

    def _deactivate(self) -> None:
        upstream_unsubscribe = self._upstream_unsubscribe
        self._upstream_unsubscribe = None
        if upstream_unsubscribe is not None:
            logging.debug(f"{self._name}: releasing upstream")
            upstream_unsubscribe()

    def __repr__(self) -> str:
        state = "active" if self.is_active else "idle"
        return f"SharedSignal({self._name}={self._value!r}, {state}, subscribers={self._subscriber_count})"


__all__ = [
    "MappedSignal",
    "CombinedSignal",
    "DistinctSignal",
    "SwitchLatestSignal",
    "SharedSignal",
    "combine_latest",
]
