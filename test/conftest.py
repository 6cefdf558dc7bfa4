from types import SimpleNamespace

import pytest

from fakes import FakeModbusClient, RecordingSink


@pytest.fixture
def fake_client() -> FakeModbusClient:
    client = FakeModbusClient()
    client.connected = True
    return client


@pytest.fixture
def connection(fake_client):
    """Minimal connection holder exposing the borrowed client."""
    return SimpleNamespace(client=fake_client)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
