"""
Visitor identity, carried in a long-lived cookie
"""
import re
import uuid
from typing import Optional, Tuple

from .config import COOKIE_LIFETIME, COOKIE_NAME, COOKIE_PATH
from .errors import CollaboratorMissingError
from .http_headers.cookies import CookieTransport
from .logger import get_logger
from .utils.time import expires_in

log = get_logger(__name__)

IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def new_identifier() -> str:
    """Mint a fresh visitor identifier"""
    return uuid.uuid4().hex


class IdentityResolver:
    """
    Resolves the visitor identifier for one request.

    An inbound cookie wins; otherwise a new identifier is minted and a cookie
    carrying it is scheduled on the response with a ten year expiry.
    """

    def __init__(self, cookies: Optional[CookieTransport]):
        if cookies is None:
            raise CollaboratorMissingError("identity resolution needs a cookie transport")
        self.cookies = cookies

    def resolve(self) -> Tuple[str, bool]:
        """
        Return (identifier, is_new).

        A cookie that is not a plausible identifier (empty, or outside
        `IDENTIFIER_RE`) counts as absent, so a new identifier is minted.
        Cookie text therefore never reaches backend keys such as file names.
        """
        existing = self.cookies.read_cookie(COOKIE_NAME)
        if existing is not None:
            if IDENTIFIER_RE.match(existing):
                return existing, False
            log.warning(f"[identity] ignoring malformed {COOKIE_NAME} cookie ({len(existing)} chars)")

        identifier = new_identifier()
        self.cookies.write_cookie(COOKIE_NAME, identifier, expires_in(COOKIE_LIFETIME), COOKIE_PATH)
        log.info(f"[identity] issued new visitor id {identifier}")
        return identifier, True
