"""
FastAPI dependencies giving routes access to the objects built by
``create_app()``. Everything lives on ``app.state``; nothing is global.
"""

from typing import Optional

from fastapi import Depends, Request

from .catalog.handlers import CatalogHandler
from .config import Settings
from .security import CredentialVerifier, NonceCache


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_handler(request: Request) -> CatalogHandler:
    return request.app.state.catalog_handler


def get_verifier(
    request: Request, settings: Settings = Depends(get_settings)
) -> Optional[CredentialVerifier]:
    """Return the credential verifier, or ``None`` when auth is disabled."""
    if not settings.auth_enabled:
        return None
    return request.app.state.verifier


def get_nonce_cache(request: Request) -> NonceCache:
    return request.app.state.nonce_cache
