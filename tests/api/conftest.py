"""
API test fixtures and configuration.

Provides a FastAPI test client wired to an in-memory store, a fake
completion client and a seeded result generator.
"""

from collections.abc import Generator

import pytest

# Try to import test dependencies
try:
    from fastapi.testclient import TestClient

    FASTAPI_AVAILABLE = True
except ImportError:
    FASTAPI_AVAILABLE = False
    TestClient = None


def pytest_collection_modifyitems(config, items):  # noqa: ARG001
    """Skip API tests if FastAPI is not available."""
    if not FASTAPI_AVAILABLE:
        skip_api = pytest.mark.skip(reason="FastAPI not installed")
        for item in items:
            if "api" in item.keywords:
                item.add_marker(skip_api)


@pytest.fixture
def api_settings():
    """Settings with small chat and upload limits so they are easy to hit."""
    from petcheck.config import APISettings, Settings

    return Settings(api=APISettings(chat_rate_limit=2, chat_rate_window_seconds=60, max_upload_size_mb=1))


@pytest.fixture
def app(api_settings, store, fake_client):
    """Create the FastAPI application for testing."""
    if not FASTAPI_AVAILABLE:
        pytest.skip("FastAPI not installed")

    from petcheck.api.server import create_app
    from petcheck.dipstick import RandomResultGenerator

    return create_app(
        settings=api_settings,
        store=store,
        completion_client=fake_client,
        result_generator=RandomResultGenerator(abnormal_probability=0.0, seed=0),
    )


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def other_client(app) -> Generator[TestClient, None, None]:
    """A second client with its own cookie jar, i.e. a different user."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def pet(client) -> dict:
    """A pet registered by `client`."""
    response = client.post(
        "/api/pets",
        json={"name": "Bori", "breed": "Maltese", "age": 3, "gender": "female", "weight": 3.2},
    )
    assert response.status_code == 201
    return response.json()
