"""
Runtime configuration for the catalog service.

Settings are read from ``GLOBALBOOKS_*`` environment variables by
``Settings.from_env()``; anything not set falls back to the defaults
below. Malformed values raise ``ValueError`` so a misconfigured service
never starts.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator


ENV_PREFIX = "GLOBALBOOKS_"

DEFAULT_USERS = "admin:admin123,client:client456"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_users(raw: str) -> Dict[str, str]:
    """Parse a ``user:password,user:password`` credential table.

    Whitespace around entries is ignored and empty entries are skipped.
    Passwords may contain ``:``; only the first one separates the pair.
    """
    users: Dict[str, str] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        username, sep, password = entry.partition(":")
        if not sep or not username.strip():
            raise ValueError(f"Invalid credential entry: {entry!r}")
        users[username.strip()] = password
    return users


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


class Settings(BaseModel):
    log_level: str = "INFO"
    # When unset the built-in catalog is used.
    catalog_file: Optional[Path] = None
    users: Dict[str, str] = Field(default_factory=lambda: parse_users(DEFAULT_USERS))
    auth_enabled: bool = True
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    # Lifetime of WS-Security Created timestamps and remembered nonces.
    token_ttl: int = Field(default=300, ge=1)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Parameters
        ----------
        environ : Mapping[str, str], optional
            The environment to read; defaults to ``os.environ``.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            return value if value not in (None, "") else None

        values = {}
        if get("LOG_LEVEL"):
            values["log_level"] = get("LOG_LEVEL")
        if get("CATALOG_FILE"):
            values["catalog_file"] = Path(get("CATALOG_FILE"))
        if get("USERS"):
            values["users"] = parse_users(get("USERS"))
        if get("AUTH_ENABLED"):
            values["auth_enabled"] = _parse_bool(
                ENV_PREFIX + "AUTH_ENABLED", get("AUTH_ENABLED")
            )
        if get("HOST"):
            values["host"] = get("HOST")
        if get("PORT"):
            try:
                values["port"] = int(get("PORT"))
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}PORT must be an integer") from None
        if get("TOKEN_TTL"):
            try:
                values["token_ttl"] = int(get("TOKEN_TTL"))
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}TOKEN_TTL must be an integer") from None
        return cls(**values)
