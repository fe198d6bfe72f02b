"""
Route definitions for the JSON catalog API.

Endpoints under /api/catalog:
- GET /books          : keyword search over title/author
- GET /books/{isbn}   : look up one book by ISBN

Both require HTTP Basic credentials unless authentication is disabled.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ..dependencies import get_handler, get_verifier
from ..security import CredentialVerifier, check_password
from .handlers import CatalogHandler
from .schemas import (
    GetBookRequest,
    GetBookResponse,
    SearchBooksRequest,
    SearchBooksResponse,
)


basic_auth = HTTPBasic(auto_error=False)


def require_user(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
    verifier: Optional[CredentialVerifier] = Depends(get_verifier),
) -> Optional[str]:
    """Check HTTP Basic credentials and return the username.

    Returns ``None`` without checking anything when authentication is
    disabled.
    """
    if verifier is None:
        return None
    if credentials is None or not check_password(
        verifier, credentials.username, credentials.password
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username


router = APIRouter(
    prefix="/api/catalog",
    tags=["catalog"],
    dependencies=[Depends(require_user)],
)


@router.get("/books", response_model=SearchBooksResponse)
def search_books(
    keyword: Optional[str] = Query(default=None, description="Text searched in title and author"),
    handler: CatalogHandler = Depends(get_handler),
) -> SearchBooksResponse:
    """Return every book whose title or author contains ``keyword``.

    Omitting the keyword returns the whole catalog.
    """
    return handler.search_books(SearchBooksRequest(keyword=keyword))


@router.get("/books/{isbn}", response_model=GetBookResponse)
def get_book(isbn: str, handler: CatalogHandler = Depends(get_handler)) -> GetBookResponse:
    # An unknown ISBN yields {"book": null}, matching the SOAP response.
    return handler.get_book(GetBookRequest(isbn=isbn))
