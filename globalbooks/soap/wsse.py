"""
WS-Security UsernameToken validation.

Only the ``wsse:Security/wsse:UsernameToken`` element of the SOAP header
is inspected. Both ``PasswordText`` and ``PasswordDigest`` password
types are accepted; an omitted ``Type`` attribute means plain text.
Tokens carrying a ``wsu:Created`` older than the TTL are rejected, and a
``NonceCache`` refuses nonces it has already seen.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from lxml import etree

from ..errors import AuthenticationError
from ..security import (
    DEFAULT_TOKEN_TTL,
    CredentialVerifier,
    NonceCache,
    check_password,
    check_password_digest,
)


logger = logging.getLogger(__name__)

WSSE_NS = "http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-wssecurity-secext-1.0.xsd"
WSU_NS = "http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-wssecurity-utility-1.0.xsd"

_TOKEN_PROFILE = "http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-username-token-profile-1.0"
PASSWORD_TEXT = _TOKEN_PROFILE + "#PasswordText"
PASSWORD_DIGEST = _TOKEN_PROFILE + "#PasswordDigest"

_FAILED = "The security token could not be authenticated or authorized"

# Seconds a client clock may run ahead of ours.
FUTURE_SKEW = 60


def _wsse(local: str) -> str:
    return "{%s}%s" % (WSSE_NS, local)


def _text(parent: etree._Element, tag: str) -> Optional[str]:
    el = parent.find(tag)
    if el is None:
        return None
    return (el.text or "").strip()


def parse_created(value: str) -> datetime:
    """Parse a ``wsu:Created`` timestamp; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        created = datetime.fromisoformat(text)
    except ValueError:
        raise AuthenticationError(f"Invalid Created timestamp: {value!r}") from None
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


def check_freshness(
    created: str,
    ttl: int = DEFAULT_TOKEN_TTL,
    now: Optional[datetime] = None,
) -> None:
    """Reject tokens created more than ``ttl`` seconds ago or too far ahead."""
    now = now or datetime.now(timezone.utc)
    age = (now - parse_created(created)).total_seconds()
    if age > ttl:
        raise AuthenticationError("The security token has expired")
    if age < -FUTURE_SKEW:
        raise AuthenticationError("The security token is created in the future")


def authenticate(
    header: Optional[etree._Element],
    verifier: CredentialVerifier,
    nonces: Optional[NonceCache] = None,
    ttl: int = DEFAULT_TOKEN_TTL,
    now: Optional[datetime] = None,
) -> str:
    """Validate the UsernameToken in ``header`` and return the username.

    A ``wsu:Created`` value, when present, must be fresh. When ``nonces``
    is given, a ``wsse:Nonce`` may only be used once.

    Raises
    ------
    AuthenticationError
        If the header has no UsernameToken, the token is incomplete, stale
        or replayed, the password type is unsupported, or the credentials
        are rejected.
    """
    token = None
    if header is not None:
        token = header.find("%s/%s" % (_wsse("Security"), _wsse("UsernameToken")))
    if token is None:
        raise AuthenticationError("No WS-Security header found")

    username = _text(token, _wsse("Username"))
    password_el = token.find(_wsse("Password"))
    if not username or password_el is None:
        raise AuthenticationError("UsernameToken requires Username and Password")

    password_type = password_el.get("Type") or PASSWORD_TEXT
    password = password_el.text or ""
    nonce = _text(token, _wsse("Nonce"))
    created = _text(token, "{%s}Created" % WSU_NS)

    if password_type == PASSWORD_TEXT:
        if created is not None:
            check_freshness(created, ttl, now)
        ok = check_password(verifier, username, password)
    elif password_type == PASSWORD_DIGEST:
        if nonce is None or created is None:
            raise AuthenticationError("PasswordDigest requires Nonce and Created")
        check_freshness(created, ttl, now)
        ok = check_password_digest(verifier, username, password, nonce, created)
    else:
        raise AuthenticationError(f"Unsupported password type: {password_type}")

    if not ok:
        raise AuthenticationError(_FAILED)
    if nonce is not None and nonces is not None and not nonces.add(nonce):
        logger.warning("Rejected replayed nonce for user %r", username)
        raise AuthenticationError("The security token has already been used")
    logger.debug("Authenticated SOAP request for user %r", username)
    return username
