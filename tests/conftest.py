"""
Shared test fixtures and configuration for docstore tests.
"""
import os
import tempfile
from pathlib import Path

# Keep the import-time store out of the repo's data/ directory.
os.environ.setdefault("DOCSTORE_DATA_DIR", tempfile.mkdtemp(prefix="docstore-test-"))

import pytest
from flask import Flask
from flask.testing import FlaskClient

from docstore import create_app
from docstore.storage import JsonStore, LocalFileStore, MemoryFileStore


@pytest.fixture(scope="session")
def app() -> Flask:
    """Create and configure a test Flask application instance."""
    app = create_app()
    app.config.update({
        "TESTING": True,
    })
    yield app


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Create a temporary data directory for JsonStore tests."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def json_store(temp_data_dir: Path) -> JsonStore:
    """Create a disk-backed JsonStore in a temporary directory."""
    return JsonStore(LocalFileStore(temp_data_dir))


@pytest.fixture
def memory_store() -> JsonStore:
    """Create a JsonStore over the in-memory file store."""
    return JsonStore(MemoryFileStore())


@pytest.fixture
def client(app: Flask, json_store: JsonStore, mocker) -> FlaskClient:
    """Flask test client whose routes talk to a fresh temporary store."""
    mocker.patch("docstore.routes.collections_api.store", json_store)
    mocker.patch("docstore.routes.documents_api.store", json_store)
    return app.test_client()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set up mock environment variables for testing."""
    env_vars = {
        "DOCSTORE_SERVER": "http://docstore.test:9000",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def seeded_store(json_store: JsonStore) -> JsonStore:
    """Store with an "items" collection holding three small documents."""
    json_store.create_collection("items")
    json_store.create_or_update_document("items", "one", {"x": 1, "y": "a"})
    json_store.create_or_update_document("items", "two", {"x": 1, "y": "b"})
    json_store.create_or_update_document("items", "three", {"x": 2, "y": "a"})
    return json_store
