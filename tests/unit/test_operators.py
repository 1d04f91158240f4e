"""
Tests for the combinator engine: map, combine_latest, distinct_until_changed,
switch_latest and share.
"""

import logging

import pytest

from cellicon import (
    CombinedSignal,
    MappedSignal,
    MutableSignal,
    SharedSignal,
    combine_latest,
    constant,
)
from tests.utils import EventSignal, Recorder


class TestMap:
    """Single-source transforms and map fusion."""

    @pytest.mark.unit
    def test_map_recomputes_on_change(self):
        """Test that a mapped signal follows its source."""
        level = MutableSignal(1)
        shown = level >> (lambda x: x + 1)
        received = []

        shown.subscribe(received.append, call_immediately=True)
        level.set(3)

        assert shown.value == 4
        assert received == [2, 4]

    @pytest.mark.unit
    def test_chained_maps_are_fused(self):
        """Test that s >> f >> g subscribes to s once and applies g(f(x))."""
        source = MutableSignal(2)
        chained = (source >> (lambda x: x + 1)) >> (lambda x: x * 10)

        assert isinstance(chained, MappedSignal)
        assert chained._source is source
        assert len(chained._transform_chain) == 2
        assert chained.value == 30

        unsubscribe = chained.subscribe(lambda value: None)
        assert source.subscriber_count == 1
        unsubscribe()
        assert source.subscriber_count == 0

    @pytest.mark.unit
    def test_then_is_an_alias_for_map(self):
        """Test that then() behaves like >>."""
        source = MutableSignal("lte")

        assert source.then(str.upper).value == "LTE"
        assert source.map(len, name="length").name == "length"


class TestCombineLatest:
    """Combine-latest semantics."""

    @pytest.mark.unit
    def test_withholds_until_every_input_has_a_value(self):
        """Test that nothing is emitted before each source delivered once."""
        a = EventSignal("a")
        b = EventSignal("b")
        received = Recorder()

        combine_latest(a, b, lambda x, y: (x, y)).subscribe(received, call_immediately=True)
        a.push(1)
        a.push(2)
        assert received.values == []

        b.push("x")
        assert received.values == [(2, "x")]

    @pytest.mark.unit
    def test_one_recomputation_per_upstream_change(self):
        """Test that each source emission triggers exactly one recomputation."""
        call_count = 0

        def add(x, y):
            nonlocal call_count
            call_count += 1
            return x + y

        a = MutableSignal(1)
        b = MutableSignal(2)
        total = combine_latest(a, b, add)
        received = []

        total.subscribe(received.append)
        calls_after_subscribe = call_count
        a.set(10)
        b.set(20)

        assert received == [12, 30]
        assert call_count - calls_after_subscribe == 2

    @pytest.mark.unit
    def test_value_pulls_from_sources(self):
        """Test that an unsubscribed combine still reports a current value."""
        a = MutableSignal(1)
        b = MutableSignal(2)

        assert combine_latest(a, b, lambda x, y: x * y).value == 2

    @pytest.mark.unit
    def test_name_defaults_to_source_names(self):
        """Test that the default name lists the combined sources."""
        combined = combine_latest(
            MutableSignal(1, name="a"), MutableSignal(2, name="b"), lambda x, y: x
        )

        assert isinstance(combined, CombinedSignal)
        assert combined.name == "combine(a, b)"

    @pytest.mark.unit
    def test_rejects_missing_transform(self):
        """Test that the transform must be the last argument."""
        a = MutableSignal(1)

        with pytest.raises(TypeError):
            combine_latest(a)
        with pytest.raises(TypeError):
            combine_latest(a, a)

    @pytest.mark.unit
    def test_rejects_non_signal_sources(self):
        """Test that plain values cannot be combined."""
        with pytest.raises(TypeError, match="Cannot combine"):
            combine_latest(MutableSignal(1), 5, lambda x, y: x)

    @pytest.mark.unit
    def test_unsubscribe_releases_every_source(self):
        """Test that unsubscribing detaches from all sources."""
        a = MutableSignal(1)
        b = MutableSignal(2)

        unsubscribe = combine_latest(a, b, lambda x, y: x).subscribe(lambda value: None)
        assert (a.subscriber_count, b.subscriber_count) == (1, 1)
        unsubscribe()
        assert (a.subscriber_count, b.subscriber_count) == (0, 0)


class TestDistinct:
    """Consecutive-duplicate suppression."""

    @pytest.mark.unit
    def test_no_two_equal_consecutive_emissions(self):
        """Test that repeated equal values are dropped."""
        source = EventSignal()
        received = Recorder()

        source.distinct_until_changed().subscribe(received, call_immediately=True)
        for value in [1, 1, 2, 2, 2, 1, 3, 3]:
            source.push(value)

        assert received.values == [1, 2, 1, 3]
        assert all(a != b for a, b in zip(received.values, received.values[1:]))

    @pytest.mark.unit
    def test_first_value_always_passes(self):
        """Test that the first value is forwarded even if it looks like a default."""
        source = MutableSignal(None)
        received = []

        source.distinct_until_changed().subscribe(received.append, call_immediately=True)

        assert received == [None]

    @pytest.mark.unit
    def test_distinct_over_derived_values(self):
        """Test that distinct filters recomputations producing the same result."""
        level = MutableSignal(1)
        parity = (level >> (lambda x: x % 2)).distinct_until_changed()
        received = []

        parity.subscribe(received.append)
        level.set(3)
        level.set(5)
        level.set(6)

        assert received == [0]


class TestSwitchLatest:
    """Dynamic re-subscription."""

    @pytest.mark.unit
    def test_follows_the_selected_inner_signal(self):
        """Test that the output tracks whichever inner signal is selected."""
        mode = MutableSignal(False)
        cellular = MutableSignal("c1")
        satellite = MutableSignal("s1")
        output = mode.switch_latest(lambda ntn: satellite if ntn else cellular)
        received = []

        output.subscribe(received.append, call_immediately=True)
        cellular.set("c2")
        mode.set(True)
        satellite.set("s2")

        assert received == ["c1", "c2", "s1", "s2"]
        assert output.value == "s2"

    @pytest.mark.unit
    def test_old_inner_is_released_before_new_one_is_subscribed(self):
        """Test that a switch disposes the old inner subscription with no overlap."""
        mode = MutableSignal("a")
        inners = {"a": MutableSignal(1), "b": MutableSignal(2)}
        counts_at_subscribe = []

        def select(key):
            counts_at_subscribe.append(
                {name: signal.subscriber_count for name, signal in inners.items()}
            )
            return inners[key]

        output = mode.switch_latest(select)
        output.subscribe(lambda value: None)
        mode.set("b")

        assert counts_at_subscribe[1] == {"a": 0, "b": 0}
        assert inners["a"].subscriber_count == 0
        assert inners["b"].subscriber_count == 1

    @pytest.mark.unit
    def test_no_value_from_old_inner_after_switch(self):
        """Test that emissions of a deselected inner never reach the output."""
        mode = MutableSignal(0)
        old = EventSignal("old")
        new = EventSignal("new")
        output = mode.switch_latest(lambda m: new if m else old)
        received = Recorder()

        output.subscribe(received)
        old.push("old-1")
        mode.set(1)
        old.push("old-2")
        new.push("new-1")

        assert received.values == ["old-1", "new-1"]
        assert old.subscriber_count == 0

    @pytest.mark.unit
    def test_unsubscribe_releases_mode_and_inner(self):
        """Test that unsubscribing the output releases both levels."""
        mode = MutableSignal(True)
        inner = MutableSignal(0)

        unsubscribe = mode.switch_latest(lambda m: inner).subscribe(lambda value: None)
        unsubscribe()

        assert mode.subscriber_count == 0
        assert inner.subscriber_count == 0

    @pytest.mark.unit
    def test_switch_is_logged(self, caplog):
        """Test that re-subscription is reported at debug level."""
        mode = MutableSignal(False)
        output = mode.switch_latest(
            lambda m: constant("x", name="inner"), name="out"
        )

        with caplog.at_level(logging.DEBUG):
            output.subscribe(lambda value: None)

        assert "out: switching to inner" in caplog.text


class TestShare:
    """While-subscribed sharing."""

    @pytest.mark.unit
    def test_upstream_is_not_subscribed_until_first_subscriber(self):
        """Test that sharing is lazy."""
        source = MutableSignal(1)
        shared = source.map(lambda x: x * 2).share()

        assert isinstance(shared, SharedSignal)
        assert not shared.is_active
        assert source.subscriber_count == 0

        unsubscribe = shared.subscribe(lambda value: None)
        assert shared.is_active
        assert source.subscriber_count == 1

        unsubscribe()
        assert not shared.is_active
        assert source.subscriber_count == 0

    @pytest.mark.unit
    def test_subscribers_share_one_upstream_subscription(self):
        """Test that several subscribers multicast a single upstream chain."""
        call_count = 0

        def double(x):
            nonlocal call_count
            call_count += 1
            return x * 2

        source = MutableSignal(1)
        shared = source.map(double).share()
        first = Recorder()
        second = Recorder()

        unsub_first = shared.subscribe(first)
        unsub_second = shared.subscribe(second)
        calls_before = call_count
        source.set(5)

        assert first.values == [10]
        assert second.values == [10]
        assert call_count - calls_before == 1
        assert shared.subscriber_count == 2
        assert source.subscriber_count == 1

        unsub_first()
        assert shared.is_active
        unsub_second()
        assert shared.subscriber_count == 0
        assert not shared.is_active

    @pytest.mark.unit
    def test_late_subscriber_receives_last_value(self):
        """Test that a late subscriber immediately gets the last computed value."""
        source = MutableSignal(1)
        shared = (source >> (lambda x: x + 100)).share()
        early = Recorder()
        late = Recorder()

        shared.subscribe(early)
        source.set(2)
        shared.subscribe(late, call_immediately=True)

        assert late.values == [102]

    @pytest.mark.unit
    def test_initial_value_is_replayed_when_upstream_is_silent(self):
        """Test that the initial value stands in until upstream emits."""
        events = EventSignal()
        shared = events.share("idle")
        received = Recorder()

        shared.subscribe(received, call_immediately=True)
        events.push("busy")

        assert received.values == ["idle", "busy"]

    @pytest.mark.unit
    def test_equal_values_are_conflated(self):
        """Test that the shared value does not re-emit an equal value."""
        events = EventSignal()
        shared = events.share()
        received = Recorder()

        shared.subscribe(received)
        for value in ["a", "a", "b", "b"]:
            events.push(value)

        assert received.values == ["a", "b"]

    @pytest.mark.unit
    def test_cached_value_survives_deactivation(self):
        """Test that .value keeps the last value after the last subscriber leaves."""
        events = EventSignal()
        shared = events.share()

        unsubscribe = shared.subscribe(lambda value: None)
        events.push(7)
        unsubscribe()

        assert not shared.is_active
        assert shared.value == 7

    @pytest.mark.unit
    def test_value_pulls_upstream_when_nothing_cached(self):
        """Test that an idle share with no initial reads through to upstream."""
        source = MutableSignal(3)

        assert source.map(lambda x: x * 3).share().value == 9

    @pytest.mark.unit
    def test_resubscribe_reactivates_upstream(self):
        """Test that a share can go idle and become active again."""
        source = MutableSignal(0)
        shared = source.share()
        received = Recorder()

        shared.subscribe(lambda value: None)()
        source.set(4)
        shared.subscribe(received, call_immediately=True)

        assert received.values == [4]
        assert shared.subscriber_count == 1

    @pytest.mark.unit
    def test_double_unsubscribe_counts_once(self):
        """Test that calling an unsubscribe twice does not corrupt the refcount."""
        shared = MutableSignal(0).share()

        first = shared.subscribe(lambda value: None)
        shared.subscribe(lambda value: None)
        first()
        first()

        assert shared.subscriber_count == 1
        assert shared.is_active

    @pytest.mark.unit
    def test_failed_activation_rolls_back_refcount(self):
        """Test that an upstream failure on activation leaves the share idle."""
        source = MutableSignal(0)

        def failing(value):
            raise ValueError("bad value")

        shared = source.map(failing).share()

        with pytest.raises(ValueError):
            shared.subscribe(lambda value: None)

        assert shared.subscriber_count == 0
        assert not shared.is_active

    @pytest.mark.unit
    def test_failing_subscriber_replay_releases_upstream(self):
        """Test that a callback raising on the replayed value leaves no subscription behind."""
        source = MutableSignal(1)
        shared = source.map(lambda x: x * 2).share()

        def failing(value):
            raise RuntimeError("render failed")

        with pytest.raises(RuntimeError):
            shared.subscribe(failing, call_immediately=True)

        assert shared.subscriber_count == 0
        assert not shared.is_active
        assert source.subscriber_count == 0

    @pytest.mark.unit
    def test_failing_late_subscriber_keeps_others_attached(self):
        """Test that a failing late subscriber does not disturb existing subscribers."""
        source = MutableSignal(1)
        shared = source.share()
        received = Recorder()
        shared.subscribe(received)

        def failing(value):
            raise RuntimeError("render failed")

        with pytest.raises(RuntimeError):
            shared.subscribe(failing, call_immediately=True)
        source.set(2)

        assert shared.subscriber_count == 1
        assert shared.is_active
        assert received.values == [2]

    @pytest.mark.unit
    def test_activation_and_release_are_logged(self, caplog):
        """Test that lifecycle transitions are reported at debug level."""
        shared = MutableSignal(0).share(name="level")

        with caplog.at_level(logging.DEBUG):
            shared.subscribe(lambda value: None)()

        assert "level: activating upstream" in caplog.text
        assert "level: releasing upstream" in caplog.text
