"""
Shared pytest fixtures and configuration for cellicon tests.
"""

import pytest

from cellicon import (
    Dispatcher,
    MobileConnectionRepository,
    MobileIconInteractor,
    MobileIconPolicies,
    TableLogBuffer,
)
from tests.utils import Recorder


@pytest.fixture
def dispatcher():
    return Dispatcher("test")


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def table_log():
    return TableLogBuffer("test-log", max_size=50, clock=lambda: 0.0)


@pytest.fixture
def connection(dispatcher, table_log):
    """Connection with sub_id 1 sharing the test dispatcher."""
    return MobileConnectionRepository(sub_id=1, dispatcher=dispatcher, table_log_buffer=table_log)


@pytest.fixture
def policies(dispatcher):
    return MobileIconPolicies(dispatcher=dispatcher)


@pytest.fixture
def interactor(connection, policies):
    return MobileIconInteractor(connection, policies)
