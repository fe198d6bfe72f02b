"""
Credential verification shared by the SOAP and JSON transports.

A ``CredentialVerifier`` only has to answer "what is the password for this
user?"; that is enough to check both plain-text passwords and WS-Security
``PasswordDigest`` tokens, which need the clear password to recompute the
digest. ``StaticCredentialVerifier`` backs it with the table from
configuration.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import threading
import time
from collections import OrderedDict
from typing import Dict, Mapping, Optional

from typing_extensions import Protocol


logger = logging.getLogger(__name__)

# Seconds a WS-Security token (its Created time and its nonce) stays valid.
DEFAULT_TOKEN_TTL = 300


class CredentialVerifier(Protocol):
    def password_for(self, username: str) -> Optional[str]:
        ...


class StaticCredentialVerifier:
    """Looks users up in a fixed ``username -> password`` mapping."""

    def __init__(self, users: Mapping[str, str]):
        self._users: Dict[str, str] = dict(users)

    def password_for(self, username: str) -> Optional[str]:
        return self._users.get(username)


def check_password(verifier: CredentialVerifier, username: str, password: str) -> bool:
    expected = verifier.password_for(username)
    if expected is None:
        logger.warning("Rejected credentials for unknown user %r", username)
        return False
    if not hmac.compare_digest(expected.encode("utf-8"), password.encode("utf-8")):
        logger.warning("Rejected password for user %r", username)
        return False
    return True


def password_digest(nonce: bytes, created: str, password: str) -> str:
    """Compute a UsernameToken digest: ``Base64(SHA-1(nonce + created + password))``."""
    sha = hashlib.sha1()
    sha.update(nonce)
    sha.update(created.encode("utf-8"))
    sha.update(password.encode("utf-8"))
    return base64.b64encode(sha.digest()).decode("ascii")


def check_password_digest(
    verifier: CredentialVerifier,
    username: str,
    digest: str,
    nonce_b64: str,
    created: str,
) -> bool:
    expected = verifier.password_for(username)
    if expected is None:
        logger.warning("Rejected digest for unknown user %r", username)
        return False
    try:
        nonce = base64.b64decode(nonce_b64, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Rejected digest for user %r: nonce is not base64", username)
        return False
    computed = password_digest(nonce, created, expected)
    if not hmac.compare_digest(computed.encode("ascii"), digest.strip().encode("utf-8")):
        logger.warning("Rejected digest for user %r", username)
        return False
    return True


class NonceCache:
    """Remembers nonces seen within the last ``ttl`` seconds.

    At most ``max_size`` nonces are kept; when full, the oldest entry is
    dropped. Safe to share between request threads.
    """

    def __init__(self, ttl: int = DEFAULT_TOKEN_TTL, max_size: int = 10000):
        self.ttl = ttl
        self.max_size = max_size
        self._seen: "OrderedDict[str, float]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._seen)

    def add(self, nonce: str, now: Optional[float] = None) -> bool:
        """Record ``nonce``; return ``False`` if it was already seen."""
        now = time.monotonic() if now is None else now
        with self._lock:
            while self._seen:
                oldest, expires = next(iter(self._seen.items()))
                if expires > now:
                    break
                del self._seen[oldest]
            if nonce in self._seen:
                return False
            if len(self._seen) >= self.max_size:
                self._seen.popitem(last=False)
            self._seen[nonce] = now + self.ttl
            return True
