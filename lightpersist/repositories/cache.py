"""
Cache backends that hold persisted visitor mappings.

Every backend is namespaced: a namespace must be registered when the backend
is built, and any call against an unknown namespace raises
ConfigurationNotFoundError. Records written through `add` have the shape
``{"value": <mapping or None>, "filename": <identifier>}``.
"""
import os
import re
import tempfile
from threading import Lock
from typing import Any, Dict, Iterable, Optional, Protocol, Tuple

from ..config import CONFIGURATION_NAME, LIGHT_PERSIST_BACKEND, LIGHT_PERSIST_CACHE_DIR
from ..errors import ConfigurationNotFoundError, InvalidPayloadError
from ..logger import get_logger
from ..utils.jsonx import dumps_payload, loads_payload

log = get_logger(__name__)

_FILENAME_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class CacheHandler(Protocol):
    """Opaque key -> blob store consumed by LightPersist"""

    def get(self, namespace: str, identifier: str) -> Any: ...

    def add(self, namespace: str, record: Dict[str, Any]) -> None: ...

    def invalidate(self, namespace: str, identifier: str) -> None: ...


def unpack_record(record: Any) -> Tuple[str, Any]:
    """Validate a record and return (filename, value)"""
    if not isinstance(record, dict) or "value" not in record or "filename" not in record:
        raise InvalidPayloadError("record must be a dict with 'value' and 'filename' keys")
    filename = record["filename"]
    if not isinstance(filename, str) or not filename:
        raise InvalidPayloadError(f"record filename must be a non-empty string, got {filename!r}")
    return filename, record["value"]


class MemoryCacheHandler:
    """Process-local backend; values are stored serialized so readers get copies"""

    def __init__(self, namespaces: Iterable[str] = (CONFIGURATION_NAME,)):
        self._entries: Dict[str, Dict[str, str]] = {ns: {} for ns in namespaces}
        self._lock = Lock()

    def _bucket(self, namespace: str) -> Dict[str, str]:
        try:
            return self._entries[namespace]
        except KeyError:
            raise ConfigurationNotFoundError(namespace) from None

    def get(self, namespace: str, identifier: str) -> Any:
        with self._lock:
            raw = self._bucket(namespace).get(identifier)
        return None if raw is None else loads_payload(raw)

    def add(self, namespace: str, record: Dict[str, Any]) -> None:
        filename, value = unpack_record(record)
        raw = dumps_payload(value)
        with self._lock:
            self._bucket(namespace)[filename] = raw

    def invalidate(self, namespace: str, identifier: str) -> None:
        with self._lock:
            self._bucket(namespace).pop(identifier, None)


class FileCacheHandler:
    """One JSON file per identifier under <root>/<namespace>/"""

    def __init__(self, root: str = LIGHT_PERSIST_CACHE_DIR, namespaces: Iterable[str] = (CONFIGURATION_NAME,)):
        self.root = root
        self._namespaces = frozenset(namespaces)
        self._lock = Lock()

    def _path(self, namespace: str, identifier: str) -> str:
        if namespace not in self._namespaces:
            raise ConfigurationNotFoundError(namespace)
        if not isinstance(identifier, str) or not _FILENAME_RE.match(identifier):
            raise InvalidPayloadError(f"unusable cache filename {identifier!r}")
        return os.path.join(self.root, namespace, f"{identifier}.json")

    def get(self, namespace: str, identifier: str) -> Any:
        path = self._path(namespace, identifier)
        with self._lock:
            if not os.path.exists(path):
                return None
            with open(path, "r", encoding="utf-8") as f:
                raw = f.read()
        return loads_payload(raw)

    def add(self, namespace: str, record: Dict[str, Any]) -> None:
        filename, value = unpack_record(record)
        path = self._path(namespace, filename)
        raw = dumps_payload(value)
        directory = os.path.dirname(path)
        with self._lock:
            os.makedirs(directory, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(raw)
                os.replace(tmp, path)
            except BaseException:
                if os.path.exists(tmp):
                    os.remove(tmp)
                raise

    def invalidate(self, namespace: str, identifier: str) -> None:
        path = self._path(namespace, identifier)
        with self._lock:
            if os.path.exists(path):
                os.remove(path)


def create_cache_handler(backend: Optional[str] = None, root: Optional[str] = None) -> CacheHandler:
    """Build the configured backend with the LightPersist namespace registered"""
    backend = (backend or LIGHT_PERSIST_BACKEND).lower()
    if backend == "memory":
        log.info("[cache] using in-memory backend")
        return MemoryCacheHandler()
    if backend == "file":
        root = root or LIGHT_PERSIST_CACHE_DIR
        log.info(f"[cache] using file backend at {root}")
        return FileCacheHandler(root)
    raise ValueError(f"unknown cache backend {backend!r}")
