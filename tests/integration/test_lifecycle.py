"""
Lifecycle tests: activation, release and thread safety of the derivation graph.
"""

import threading

import pytest

from cellicon import CellularIcon, MutableSignal, SatelliteIcon, SharedSignal
from tests.utils import Recorder

OUTPUTS = [
    "network_name",
    "carrier_name",
    "customized_carrier_name",
    "customized_network_name",
    "is_roaming",
    "is_default_data_sub",
    "network_type_icon_customization",
    "ims_info",
    "customized_icon",
    "vowifi_available",
    "network_type_icon_group",
    "show_exclamation_mark",
    "shown_level",
    "signal_level_icon",
    "is_data_connected",
]


def input_signals(*bundles):
    return [
        signal
        for bundle in bundles
        for signal in vars(bundle).values()
        if isinstance(signal, MutableSignal)
    ]


def shared_nodes(interactor):
    return {
        name: signal
        for name, signal in vars(interactor).items()
        if isinstance(signal, SharedSignal)
    }


@pytest.mark.integration
def test_graph_is_idle_until_subscribed(interactor, connection, policies):
    """Test that building the interactor subscribes to nothing."""
    assert all(signal.subscriber_count == 0 for signal in input_signals(connection, policies))
    assert not any(node.is_active for node in shared_nodes(interactor).values())


@pytest.mark.integration
def test_unsubscribing_every_output_releases_everything(interactor, connection, policies):
    """Test that the last unsubscribe propagates up and releases every input."""
    unsubscribers = [getattr(interactor, name).subscribe(lambda value: None) for name in OUTPUTS]
    assert connection.primary_level.subscriber_count > 0
    assert policies.default_data_sub_id.subscriber_count > 0

    for unsubscribe in unsubscribers:
        unsubscribe()

    leaked = [s.name for s in input_signals(connection, policies) if s.subscriber_count]
    assert leaked == []
    active = [name for name, node in shared_nodes(interactor).items() if node.is_active]
    assert active == []


@pytest.mark.integration
def test_shared_outputs_keep_last_value_after_release(interactor, connection):
    """Test that an idle output still reports the last value it computed."""
    unsubscribe = interactor.shown_level.subscribe(lambda value: None)
    connection.update(is_in_service=True, primary_level=3)
    unsubscribe()

    connection.primary_level.set(1)

    assert not interactor.shown_level.is_active
    assert interactor.shown_level.value == 3


@pytest.mark.integration
def test_late_subscriber_gets_last_icon(interactor, connection):
    """Test that a second consumer immediately receives the current icon."""
    interactor.signal_level_icon.subscribe(lambda value: None)
    connection.update(is_in_service=True, primary_level=2)

    late = Recorder()
    interactor.signal_level_icon.subscribe(late, call_immediately=True)

    assert late.values == [CellularIcon(2, 4, False, False)]
    assert interactor.signal_level_icon.subscriber_count == 2


@pytest.mark.integration
def test_satellite_to_cellular_switch_releases_satellite_pipeline(interactor, connection):
    """Test that leaving satellite mode disposes the satellite icon subscription."""
    satellite = interactor._satellite_icon
    icon = Recorder()
    interactor.signal_level_icon.subscribe(icon, call_immediately=True)
    connection.update(is_in_service=True, primary_level=2)

    assert not satellite.is_active
    assert interactor.customized_icon.is_active

    connection.is_non_terrestrial.set(True)
    assert satellite.is_active
    assert satellite.subscriber_count == 1
    assert not interactor.customized_icon.is_active
    assert isinstance(icon.last, SatelliteIcon)

    connection.is_non_terrestrial.set(False)
    switched_at = len(icon.values)
    assert not satellite.is_active
    assert satellite.subscriber_count == 0
    assert interactor.customized_icon.is_active

    # Level changes after the switch never surface as satellite icons
    connection.update(primary_level=4)
    connection.update(primary_level=1)
    after_switch = icon.values[switched_at - 1:]
    assert all(isinstance(value, CellularIcon) for value in after_switch)
    assert icon.last == CellularIcon(1, 4, False, False)


@pytest.mark.integration
def test_concurrent_subscribe_and_unsubscribe(interactor, connection):
    """Test that racing consumers and writers leave no subscription behind."""
    errors = []

    def consumer():
        try:
            for _ in range(100):
                unsubscribe = interactor.signal_level_icon.subscribe(lambda value: None)
                unsubscribe()
        except Exception as e:
            errors.append(e)

    def writer():
        try:
            for i in range(100):
                connection.update(is_in_service=bool(i % 2), primary_level=i % 5)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=consumer) for _ in range(4)]
    threads.append(threading.Thread(target=writer))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert interactor.signal_level_icon.subscriber_count == 0
    assert not interactor.signal_level_icon.is_active
    assert connection.primary_level.subscriber_count == 0
    assert connection.is_non_terrestrial.subscriber_count == 0
