"""Tests for UsernameToken freshness and nonce replay checks."""

import base64
from datetime import datetime, timezone

import pytest
from lxml import etree

from globalbooks.errors import AuthenticationError
from globalbooks.security import NonceCache, StaticCredentialVerifier, password_digest
from globalbooks.soap.wsse import authenticate, check_freshness, parse_created

from conftest import SOAP_ENV_NS, username_token


VERIFIER = StaticCredentialVerifier({"admin": "admin123"})
NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def header_for(security):
    return etree.fromstring(
        f'<soapenv:Header xmlns:soapenv="{SOAP_ENV_NS}">{security}</soapenv:Header>'
    )


def digest_header(created, nonce=b"abcdefgh12345678"):
    return header_for(
        username_token(
            "admin",
            password_digest(nonce, created, "admin123"),
            password_type="PasswordDigest",
            nonce=base64.b64encode(nonce).decode("ascii"),
            created=created,
        )
    )


def test_parse_created_formats():
    assert parse_created("2024-05-01T12:00:00Z") == NOW
    assert parse_created("2024-05-01T14:00:00+02:00") == NOW
    assert parse_created("2024-05-01T12:00:00") == NOW
    assert parse_created("2024-05-01T12:00:00.000Z") == NOW


def test_parse_created_rejects_garbage():
    with pytest.raises(AuthenticationError):
        parse_created("yesterday")


def test_check_freshness_window():
    check_freshness("2024-05-01T11:55:00Z", ttl=300, now=NOW)
    check_freshness("2024-05-01T12:00:59Z", ttl=300, now=NOW)
    with pytest.raises(AuthenticationError, match="expired"):
        check_freshness("2024-05-01T11:54:59Z", ttl=300, now=NOW)
    with pytest.raises(AuthenticationError, match="future"):
        check_freshness("2024-05-01T12:01:01Z", ttl=300, now=NOW)


def test_fresh_digest_is_accepted():
    assert authenticate(digest_header("2024-05-01T11:59:00Z"), VERIFIER, now=NOW) == "admin"


def test_stale_digest_is_rejected():
    with pytest.raises(AuthenticationError, match="expired"):
        authenticate(digest_header("2001-01-01T00:00:00Z"), VERIFIER, now=NOW)


def test_ttl_is_configurable():
    header = digest_header("2024-05-01T11:50:00Z")
    with pytest.raises(AuthenticationError):
        authenticate(header, VERIFIER, ttl=300, now=NOW)
    assert authenticate(header, VERIFIER, ttl=900, now=NOW) == "admin"


def test_replayed_nonce_is_rejected():
    nonces = NonceCache()
    header = digest_header("2024-05-01T11:59:00Z")
    authenticate(header, VERIFIER, nonces, now=NOW)
    with pytest.raises(AuthenticationError, match="already been used"):
        authenticate(header, VERIFIER, nonces, now=NOW)


def test_rejected_password_does_not_consume_nonce():
    nonces = NonceCache()
    nonce = b"abcdefgh12345678"
    created = "2024-05-01T11:59:00Z"
    bad = header_for(
        username_token(
            "admin",
            password_digest(nonce, created, "wrong"),
            password_type="PasswordDigest",
            nonce=base64.b64encode(nonce).decode("ascii"),
            created=created,
        )
    )
    with pytest.raises(AuthenticationError):
        authenticate(bad, VERIFIER, nonces, now=NOW)
    assert authenticate(digest_header(created, nonce), VERIFIER, nonces, now=NOW) == "admin"


def test_plain_text_token_with_stale_created_is_rejected():
    header = header_for(username_token("admin", "admin123", created="2001-01-01T00:00:00Z"))
    with pytest.raises(AuthenticationError, match="expired"):
        authenticate(header, VERIFIER, now=NOW)


def test_nonce_cache_expires_entries():
    nonces = NonceCache(ttl=300)
    assert nonces.add("n1", now=0.0)
    assert not nonces.add("n1", now=299.0)
    assert nonces.add("n1", now=301.0)


def test_nonce_cache_is_bounded():
    nonces = NonceCache(ttl=300, max_size=2)
    for i, nonce in enumerate(["a", "b", "c"]):
        assert nonces.add(nonce, now=float(i))
    assert len(nonces) == 2
    # The oldest nonce was evicted to make room.
    assert nonces.add("a", now=3.0)
