"""
Flask integration: one LightPersist store per request
"""
from typing import Optional

from flask import Flask, current_app, g, has_request_context

from .errors import CollaboratorMissingError
from .http_headers.cookies import FlaskCookieTransport
from .logger import get_logger
from .repositories.cache import CacheHandler, create_cache_handler
from .store import LightPersist

log = get_logger(__name__)

EXTENSION_KEY = "light_persist"


class LightPersistExtension:
    """
    Wires LightPersist into the Flask request lifecycle.

    The store is built on first access in a request. Queued cookie changes
    go onto the response in after_request, and the flush runs in
    teardown_request, which Flask calls whether or not the view raised.
    """

    def __init__(self, app: Optional[Flask] = None, cache: Optional[CacheHandler] = None):
        self.cache = cache
        if app is not None:
            self.init_app(app, cache)

    def init_app(self, app: Flask, cache: Optional[CacheHandler] = None):
        if cache is not None:
            self.cache = cache
        if self.cache is None:
            self.cache = create_cache_handler()
        app.extensions[EXTENSION_KEY] = self
        app.after_request(self._apply_cookies)
        app.teardown_request(self._close)

    def open_store(self) -> LightPersist:
        store = g.get("_light_persist")
        if store is None:
            g._light_persist_cookies = FlaskCookieTransport()
            store = LightPersist(g._light_persist_cookies, self.cache)
            g._light_persist = store
        return store

    def _apply_cookies(self, response):
        cookies = g.get("_light_persist_cookies")
        if cookies is not None:
            cookies.apply(response)
        return response

    def _close(self, exc: Optional[BaseException] = None):
        store = g.pop("_light_persist", None)
        g.pop("_light_persist_cookies", None)
        if store is None:
            return
        if exc is not None:
            log.warning(f"[light_persist] request for {store.identifier} ended with {type(exc).__name__}; flushing anyway")
        try:
            store.flush()
        except Exception as e:
            log.error(f"[light_persist] flush failed for {store.identifier}: {e}")
            raise


def get_light_persist() -> LightPersist:
    """Return the current request's store, creating it on first use"""
    if not has_request_context():
        raise CollaboratorMissingError("LightPersist is only available inside a Flask request")
    ext = current_app.extensions.get(EXTENSION_KEY)
    if ext is None:
        raise CollaboratorMissingError("LightPersistExtension is not registered on this app")
    return ext.open_store()
