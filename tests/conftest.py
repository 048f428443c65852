import random

import pytest
from fastapi.testclient import TestClient

from opsboard.app.config import DEFAULT_TOPOLOGY_PATH, Settings
from opsboard.app.main import create_app
from opsboard.app.state import StateStore
from opsboard.app.topology import load_topology


@pytest.fixture
def store():
    nodes, edges = load_topology(DEFAULT_TOPOLOGY_PATH)
    return StateStore(nodes, edges, rng=random.Random(7))


@pytest.fixture
def test_settings():
    return Settings(EVENT_INTERVAL_S=0.05, BLACKBOX_APPROVAL_DELAY_S=0.05,
                    TOPOLOGY_PATH=DEFAULT_TOPOLOGY_PATH, LOG_LEVEL="WARNING")


@pytest.fixture
def app(test_settings, store):
    return create_app(test_settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
