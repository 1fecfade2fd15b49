"""Pytest fixtures for task service testing."""

import os

import pytest


# Disable OpenTelemetry for tests
os.environ["OTEL_SDK_DISABLED"] = "true"


@pytest.fixture
def app():
    """Create test application backed by a fresh in-memory database."""
    from taskapi import create_app
    from taskapi.config import TestConfig

    app = create_app(TestConfig)

    yield app

    app.extensions["task_store"].engine.dispose()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def store(app):
    """Task store the application serves from."""
    return app.extensions["task_store"]


@pytest.fixture
def standalone_store():
    """Task store not attached to any application."""
    from taskapi.config import TestConfig
    from taskapi.storage import open_store

    store = open_store(TestConfig.DATABASE_URL, **TestConfig.SQLALCHEMY_ENGINE_OPTIONS)

    yield store

    store.engine.dispose()
