"""Pytest fixtures for the task service tests."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from task_service.api.http_server import create_http_server
from task_service.config import Settings
from task_service.core import TaskStore


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with fixed values."""
    return Settings(
        host="127.0.0.1",
        port=6969,
        log_level="DEBUG",
        log_format="console",
        metrics_enabled=True,
    )


@pytest.fixture
def store() -> TaskStore:
    """Create an empty task store."""
    return TaskStore()


@pytest.fixture
def client(store: TaskStore, test_settings: Settings) -> TestClient:
    """Create test client over a fresh store."""
    app = create_http_server(store, test_settings)
    return TestClient(app)


@pytest.fixture
def milk_due() -> datetime:
    """Due timestamp of the 'buy milk' sample task."""
    return datetime(2024, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def taxes_due() -> datetime:
    """Due timestamp of the 'file taxes' sample task."""
    return datetime(2024, 4, 15, tzinfo=timezone.utc)


@pytest.fixture
def populated_store(store: TaskStore, milk_due: datetime, taxes_due: datetime) -> TaskStore:
    """Store holding 'buy milk' (id 0) and 'file taxes' (id 1)."""
    store.create_task("buy milk", ["errand", "home"], milk_due)
    store.create_task("file taxes", ["finance"], taxes_due)
    return store
