import pytest

from session_refresh.session.coordinator import RefreshCoordinator
from session_refresh.session.store import SessionStore
from session_refresh.storage.memory import MemoryKeyValueStore
from tests.fixtures.session_fixtures import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv):
    return SessionStore(kv)


@pytest.fixture
def coordinator(store, clock):
    return RefreshCoordinator(store, clock=clock)
