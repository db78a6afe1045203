"""
Cookie transport between LightPersist and the HTTP layer
"""
from typing import List, Optional, Protocol, Tuple

from flask import Response, has_request_context, request

from ..config import COOKIE_PATH, COOKIE_SAMESITE, COOKIE_SECURE
from ..errors import CollaboratorMissingError


class CookieTransport(Protocol):
    """Read inbound cookies, schedule outbound ones"""

    def read_cookie(self, name: str) -> Optional[str]: ...

    def write_cookie(self, name: str, value: str, expires: int, path: str = COOKIE_PATH) -> None: ...

    def remove_cookie(self, name: str) -> None: ...


class FlaskCookieTransport:
    """
    Reads cookies from the current Flask request and queues outbound changes.

    The queued operations are replayed, in order, onto the response by
    `apply()`, which the extension calls from an after_request hook.
    """

    def __init__(self):
        if not has_request_context():
            raise CollaboratorMissingError("cookie transport needs an active Flask request context")
        self._inbound = dict(request.cookies)
        self._pending: List[Tuple[str, str, Optional[str], Optional[int], str]] = []

    def read_cookie(self, name: str) -> Optional[str]:
        return self._inbound.get(name)

    def write_cookie(self, name: str, value: str, expires: int, path: str = COOKIE_PATH) -> None:
        self._pending.append(("set", name, value, expires, path))

    def remove_cookie(self, name: str) -> None:
        self._pending.append(("delete", name, None, None, COOKIE_PATH))

    def apply(self, response: Response) -> Response:
        """Replay queued cookie operations onto the response"""
        for op, name, value, expires, path in self._pending:
            if op == "set":
                response.set_cookie(
                    name,
                    value,
                    expires=expires,
                    path=path,
                    secure=COOKIE_SECURE,
                    httponly=True,
                    samesite=COOKIE_SAMESITE,
                )
            else:
                response.delete_cookie(name, path=path, secure=COOKIE_SECURE, httponly=True, samesite=COOKIE_SAMESITE)
        self._pending.clear()
        return response
