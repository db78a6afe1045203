"""
Unit tests for visitor identity resolution.
"""
import time

import pytest

from lightpersist.config import COOKIE_LIFETIME, COOKIE_NAME
from lightpersist.errors import CollaboratorMissingError
from lightpersist.identity import IdentityResolver, new_identifier


def test_existing_cookie_is_reused(make_cookies):
    cookies = make_cookies({COOKIE_NAME: "abc123"})

    identifier, is_new = IdentityResolver(cookies).resolve()

    assert (identifier, is_new) == ("abc123", False)
    assert cookies.written == []


def test_missing_cookie_mints_and_schedules_cookie(new_cookies):
    before = int(time.time())

    identifier, is_new = IdentityResolver(new_cookies).resolve()

    assert is_new is True
    assert len(new_cookies.written) == 1
    cookie = new_cookies.written[0]
    assert cookie["name"] == COOKIE_NAME
    assert cookie["value"] == identifier
    assert cookie["path"] == "/"
    assert before + COOKIE_LIFETIME <= cookie["expires"] <= int(time.time()) + COOKIE_LIFETIME


def test_cookie_lifetime_is_ten_years():
    assert COOKIE_LIFETIME == 60 * 60 * 24 * 3650


@pytest.mark.parametrize("value", ["", "../../etc/passwd", "a" * 65, "has space"])
def test_malformed_cookie_is_replaced(make_cookies, value):
    cookies = make_cookies({COOKIE_NAME: value})

    identifier, is_new = IdentityResolver(cookies).resolve()

    assert is_new is True
    assert identifier != value
    assert cookies.written[0]["value"] == identifier


def test_identifiers_are_unique():
    assert len({new_identifier() for _ in range(1000)}) == 1000


def test_missing_transport_is_fatal():
    with pytest.raises(CollaboratorMissingError):
        IdentityResolver(None)
