"""
Shared test fixtures: in-memory storage, fake share sinks, test client.
"""

import os
import threading

import pytest
from fastapi.testclient import TestClient

# Point the default backend at a throwaway database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from craftbiz.dependencies import get_document_renderer, get_share_sink, get_stores
from craftbiz.main import app
from craftbiz.sharing import FpdfDocumentRenderer
from craftbiz.storage import MemoryKeyValueStore
from craftbiz.stores import StoreRegistry


@pytest.fixture
def kv():
    """Empty in-memory key-value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def stores(kv):
    """Recipes/orders/replies over the in-memory store."""
    registry = StoreRegistry(kv)
    yield registry
    if not registry.closed:
        registry.close()


class RecordingShareSink:
    """Keeps every shared text, newest last."""

    def __init__(self):
        self._lock = threading.Lock()
        self.sent = []

    def share(self, text):
        with self._lock:
            self.sent.append(text)


@pytest.fixture
def share_sink():
    return RecordingShareSink()


@pytest.fixture
def client(stores, share_sink, tmp_path):
    """FastAPI test client wired to the in-memory collaborators."""
    app.dependency_overrides[get_stores] = lambda: stores
    app.dependency_overrides[get_share_sink] = lambda: share_sink
    app.dependency_overrides[get_document_renderer] = lambda: FpdfDocumentRenderer(tmp_path / "exports")
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_recipe():
    """The default preset, as the calculator posts it."""
    return {
        "id": "preset-1",
        "name": "Cutie gravată 20×20",
        "materialCost": 30,
        "laborMinutes": 25,
        "hourlyRate": 60,
        "markupPct": 30,
        "vatPct": 19,
        "notes": "Placaj 4 mm; gravură față; bandă dublu-adezivă",
    }
