"""Shared test fixtures for requests list tests."""

import sys
from pathlib import Path

import pytest

# Ensure the package is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from requests_list.bus import NotificationBus
from requests_list.memory_store import InMemoryRecordStore


@pytest.fixture
def bus():
    return NotificationBus()


@pytest.fixture
def store(bus):
    store = InMemoryRecordStore(bus)
    store.attach()
    yield store
    store.detach()
