"""
Test configuration and fixtures for the URI shortener.
Every test gets its own StoreRegistry, so in-memory stores never leak
between tests.
"""

import pytest
from fastapi.testclient import TestClient

from main import app
from uri_shortener.dependencies import get_shortener
from uri_shortener.services.shortener import URIShortener
from uri_shortener.storage import StoreRegistry, MEMORY

SECRET = "zUTibXjNDAmFKPglvdnJLsxqOMYRhrGakBucteyQpSoWfHwVZICE"
PREFIX = "https://go.mydomain.test/short"


class FakeClock:
    """Settable clock for deterministic created timestamps"""

    def __init__(self, now: float = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def secret():
    return SECRET


@pytest.fixture
def prefix():
    return PREFIX


@pytest.fixture(scope="function")
def registry():
    """Fresh registry, disposed after the test"""
    reg = StoreRegistry()
    try:
        yield reg
    finally:
        reg.dispose()


@pytest.fixture(scope="function")
def clock():
    return FakeClock()


@pytest.fixture(scope="function")
def shortener(registry, clock):
    """Shortener over an in-memory store"""
    return URIShortener(
        secret=SECRET,
        prefix=PREFIX,
        store_location=MEMORY,
        registry=registry,
        clock=clock,
    )


@pytest.fixture(scope="function")
def store(shortener):
    return shortener.store


@pytest.fixture(scope="function")
def client(shortener):
    """
    Create a test client with the shortener dependency overridden.
    This is the main fixture that API tests will use.
    """
    app.dependency_overrides[get_shortener] = lambda: shortener

    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
