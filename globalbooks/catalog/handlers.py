"""
Request handlers for the two catalog operations.

Handlers are transport-agnostic: they take and return the pydantic
request/response models from ``schemas`` and leave envelope parsing,
authentication and serialisation to the SOAP and JSON adapters.
"""

from __future__ import annotations

import logging

from .schemas import (
    GetBookRequest,
    GetBookResponse,
    SearchBooksRequest,
    SearchBooksResponse,
)
from .store import CatalogStore


logger = logging.getLogger(__name__)


class CatalogHandler:
    """Adapts operation requests to ``CatalogStore`` queries."""

    def __init__(self, store: CatalogStore):
        self.store = store

    def get_book(self, request: GetBookRequest) -> GetBookResponse:
        logger.info("Received request for ISBN: %r", request.isbn)
        book = self.store.find_by_isbn(request.isbn)
        if book is None:
            # A miss is reported as a response without a book, not a fault.
            logger.info("No book found for ISBN: %r", request.isbn)
            return GetBookResponse()
        logger.info("Found book: %s", book.title)
        return GetBookResponse(book=book)

    def search_books(self, request: SearchBooksRequest) -> SearchBooksResponse:
        keyword = (request.keyword or "").lower()
        books = self.store.search(keyword)
        logger.info("Search for keyword %r matched %d books", keyword, len(books))
        return SearchBooksResponse(books=books)
