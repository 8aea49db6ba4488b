"""
Test configuration and fixtures for the shortlinks service.
This centralizes all test setup, making individual tests clean.
"""

import asyncio
import base64
import os

# Settings are read from the environment; set them before the app is imported
os.environ["ADMIN_PASSWORD"] = "test-secret"
os.environ["STORE_BACKEND"] = "memory"

import pytest
from fastapi.testclient import TestClient

from main import app
from shortlinks_app.config import Settings, get_settings
from shortlinks_app.database.connection import create_session_factory
from shortlinks_app.dependencies import get_store
from shortlinks_app.store.strategies import InMemoryLinkStore, SQLLinkStore

ADMIN_PASSWORD = "test-secret"


def basic_auth(password: str, username: str = "admin") -> dict:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest.fixture(scope="function")
def settings():
    """Explicit settings, independent of any local .env file"""
    return Settings(
        _env_file=None,
        admin_password=ADMIN_PASSWORD,
        store_backend="memory",
        fallback_url="https://fallback.example.com/",
        store_list_limit=1000,
    )


@pytest.fixture(scope="function")
def store():
    """Fresh in-memory store for each test"""
    return InMemoryLinkStore()


@pytest.fixture(scope="function")
def sql_store(tmp_path):
    """SQL store on a throwaway SQLite file"""
    store = SQLLinkStore(create_session_factory(f"sqlite:///{tmp_path / 'links.db'}"))
    yield store
    asyncio.run(store.close())


@pytest.fixture(scope="function")
def client(settings, store):
    """
    Create a test client with settings and store overridden.
    This is the main fixture that tests will use.
    """
    get_settings.cache_clear()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_store] = lambda: store
    
    with TestClient(app) as test_client:
        yield test_client
    
    app.dependency_overrides.clear()
    get_settings.cache_clear()


@pytest.fixture
def auth_headers():
    return basic_auth(ADMIN_PASSWORD)


@pytest.fixture
def make_auth_headers():
    """Build Authorization headers for any password/username"""
    return basic_auth
