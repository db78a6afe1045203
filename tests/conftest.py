"""
Pytest configuration and fixtures for LightPersist tests.
"""
import sys
from pathlib import Path

import pytest

# Make the package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from lightpersist.config import CONFIGURATION_NAME, COOKIE_NAME
from lightpersist.repositories.cache import MemoryCacheHandler


class FakeCookies:
    """In-memory cookie transport recording every outbound operation."""

    def __init__(self, inbound=None):
        self.inbound = dict(inbound or {})
        self.written = []
        self.removed = []

    def read_cookie(self, name):
        return self.inbound.get(name)

    def write_cookie(self, name, value, expires, path="/"):
        self.written.append({"name": name, "value": value, "expires": expires, "path": path})

    def remove_cookie(self, name):
        self.removed.append(name)


class RecordingCache(MemoryCacheHandler):
    """Memory backend that also records calls."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.adds = []
        self.invalidations = []

    def add(self, namespace, record):
        self.adds.append((namespace, record))
        super().add(namespace, record)

    def invalidate(self, namespace, identifier):
        self.invalidations.append((namespace, identifier))
        super().invalidate(namespace, identifier)


@pytest.fixture
def cache():
    """Provide an empty recording cache with the LightPersist namespace."""
    return RecordingCache()


@pytest.fixture
def new_cookies():
    """Cookie transport for a first-time visitor."""
    return FakeCookies()


@pytest.fixture
def returning(cache):
    """Cookie transport for visitor 'X' whose record holds {'a': 1}."""
    cache.add(CONFIGURATION_NAME, {"value": {"a": 1}, "filename": "X"})
    cache.adds.clear()
    return FakeCookies({COOKIE_NAME: "X"})


@pytest.fixture
def app(cache):
    """Provide a Flask app backed by the recording cache."""
    from lightpersist.app import create_app

    app = create_app(cache)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_cookies():
    """Factory for cookie transports with the given inbound cookies."""
    return FakeCookies


@pytest.fixture
def seeded(cache, make_cookies):
    """Factory building a returning-visitor store whose record holds `content`."""
    from lightpersist.store import LightPersist

    def build(content, identifier="X"):
        cache.add(CONFIGURATION_NAME, {"value": content, "filename": identifier})
        cache.adds.clear()
        return LightPersist(make_cookies({COOKIE_NAME: identifier}), cache)

    return build
