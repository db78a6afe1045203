"""
Scoped acquisition of a LightPersist store
"""
from contextlib import contextmanager
from typing import Iterator, Optional

from .http_headers.cookies import CookieTransport
from .repositories.cache import CacheHandler
from .store import LightPersist


@contextmanager
def persist_scope(cookies: Optional[CookieTransport], cache: Optional[CacheHandler]) -> Iterator[LightPersist]:
    """
    Yield a store for one unit of work and flush it on the way out.

    The flush runs on every exit path, including when the body raises. A
    failing flush is not caught here.
    """
    store = LightPersist(cookies, cache)
    try:
        yield store
    finally:
        store.flush()
