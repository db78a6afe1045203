"""
LightPersist: per-visitor key/value store persisted through a cache backend.

A store is built once per request scope. Construction resolves the visitor
identity and, for returning visitors, loads the stored mapping. The mapping
is written back exactly once by `flush()`, which the owning scope calls on
every exit path (see scope.py and extension.py).
"""
import copy
from typing import Any, Dict, Hashable, Mapping, Optional

from .config import CONFIGURATION_NAME, COOKIE_NAME
from .errors import CollaboratorMissingError, InvalidPayloadError, StaleReferenceError
from .http_headers.cookies import CookieTransport
from .identity import IdentityResolver
from .logger import get_logger
from .repositories.cache import CacheHandler

log = get_logger(__name__)

# Bulk-read key for get()
ALL = "*"


class ValueRef:
    """
    Mutable handle onto one key of a LightPersist mapping.

    The handle addresses the value by key, so writes land in the store's own
    mapping. It goes stale once the key is removed, the mapping is reloaded
    or the store is flushed; any access after that raises StaleReferenceError.
    """

    def __init__(self, store: "LightPersist", key: Hashable):
        self._store = store
        self._key = key
        self._generation = store._generation

    @property
    def key(self) -> Hashable:
        return self._key

    @property
    def alive(self) -> bool:
        store = self._store
        return (
            not store.closed
            and store._generation == self._generation
            and store._content is not None
            and self._key in store._content
        )

    def _mapping(self) -> Dict[Hashable, Any]:
        if not self.alive:
            raise StaleReferenceError(f"reference to {self._key!r} is no longer valid")
        return self._store._content

    def get(self) -> Any:
        return self._mapping()[self._key]

    def set(self, value: Any) -> None:
        """Replace the referenced value outright (no merge)"""
        self._mapping()[self._key] = value

    def __getitem__(self, item):
        return self.get()[item]

    def __setitem__(self, item, value):
        self.get()[item] = value

    def __delitem__(self, item):
        del self.get()[item]

    def __repr__(self):
        state = "alive" if self.alive else "stale"
        return f"<ValueRef {self._key!r} {state}>"


class LightPersist:
    """Identity-bound, lazily loaded, flush-once visitor mapping"""

    def __init__(self, cookies: Optional[CookieTransport], cache: Optional[CacheHandler]):
        if cache is None:
            raise CollaboratorMissingError("LightPersist needs a cache backend")
        self._resolver = IdentityResolver(cookies)
        self.cookies = cookies
        self.cache = cache

        self._id: Optional[str] = None
        self._is_new: Optional[bool] = None
        self._content: Optional[Dict[Hashable, Any]] = None
        self._generation = 0
        self._closed = False

        self._ensure_loaded()

    @property
    def identifier(self) -> Optional[str]:
        return self._id

    @property
    def is_new(self) -> Optional[bool]:
        return self._is_new

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_loaded(self) -> None:
        """Resolve identity and load content, once"""
        if self._id is not None:
            return

        identifier, is_new = self._resolver.resolve()
        if not is_new:
            self._content = self._load(identifier)
            self._generation += 1
        self._id = identifier
        self._is_new = is_new

    def _load(self, identifier: str) -> Optional[Dict[Hashable, Any]]:
        stored = self.cache.get(CONFIGURATION_NAME, identifier)
        if stored is not None and not isinstance(stored, dict):
            raise InvalidPayloadError(
                f"expected a mapping for {identifier}, backend returned {type(stored).__name__}"
            )
        log.debug(f"[light_persist] loaded {identifier} ({'empty' if not stored else len(stored)} keys)")
        return stored

    def has(self, key: Hashable) -> bool:
        return self._content is not None and key in self._content

    __contains__ = has

    def get(self, key: Hashable) -> Any:
        """
        Return a copy of the value stored under `key`, or None.

        Mutating the result does not touch the store; use get_reference()
        for in-place changes. `get("*")` returns a copy of the whole mapping
        (an empty dict when nothing is loaded), unless a literal "*" key has
        been stored.
        """
        if self._content is not None and key in self._content:
            return copy.deepcopy(self._content[key])
        if key == ALL:
            return copy.deepcopy(self._content) if self._content is not None else {}
        return None

    def get_reference(self, key: Hashable) -> Optional[ValueRef]:
        """Borrow a mutable handle on `key`; None if the key is absent"""
        if not self.has(key):
            return None
        return ValueRef(self, key)

    def set(self, key: Hashable, value: Any, reset: bool = False) -> None:
        """
        Store `value` under `key`.

        Mapping values are merged into the mapping already held at `key`
        (a non-mapping previous value is discarded first). Anything else
        replaces the key. With `reset`, the previous value is dropped before
        writing, so a mapping value starts from scratch.
        """
        if self._content is None:
            self._content = {}

        if reset:
            self._content.pop(key, None)

        if isinstance(value, Mapping):
            target = self._content.get(key)
            if not isinstance(target, dict):
                target = self._content[key] = {}
            for sub_key, sub_value in value.items():
                target[sub_key] = sub_value
        else:
            self._content[key] = value

    def delete(self, key: Hashable) -> None:
        """Remove `key`; missing keys are ignored"""
        self._ensure_loaded()
        if self._content is not None:
            self._content.pop(key, None)

    def purge(self) -> None:
        """
        Drop the identity cookie and invalidate the backend entry now.

        The in-memory mapping is left as is, so the end-of-scope flush will
        write it back under the same identifier.
        """
        self.cookies.remove_cookie(COOKIE_NAME)
        self.cache.invalidate(CONFIGURATION_NAME, self._id)
        log.info(f"[light_persist] purged {self._id}")

    def flush(self) -> None:
        """Write the final mapping to the backend; only the first call does anything"""
        if self._closed:
            log.debug(f"[light_persist] {self._id} already flushed")
            return
        self._closed = True
        self.cache.add(CONFIGURATION_NAME, {
            "value": self._content,
            "filename": self._id,
        })
        log.debug(f"[light_persist] flushed {self._id}")

    def __repr__(self):
        state = "closed" if self._closed else "open"
        return f"<LightPersist {self._id} {state}>"
