"""
Exceptions raised by LightPersist
"""


class LightPersistError(RuntimeError):
    """Base class for every error raised by this package"""


class CollaboratorMissingError(LightPersistError):
    """A request, response or cache collaborator is not available"""


class ConfigurationNotFoundError(LightPersistError):
    """The cache backend has no configuration registered for a namespace"""

    def __init__(self, namespace: str):
        super().__init__(f"no cache configuration registered for namespace {namespace!r}")
        self.namespace = namespace


class InvalidPayloadError(LightPersistError):
    """A record sent to, or read back from, the cache backend is malformed"""


class StaleReferenceError(LightPersistError):
    """A ValueRef was used after its key, mapping or scope went away"""
