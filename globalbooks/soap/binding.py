"""
XML binding between catalog payloads and the pydantic schemas.

All elements live in the catalog target namespace. Request children are
also accepted unqualified, since some clients omit the namespace on
nested elements.
"""

from __future__ import annotations

from typing import Optional

from lxml import etree

from ..catalog.schemas import (
    Book,
    GetBookRequest,
    GetBookResponse,
    SearchBooksRequest,
    SearchBooksResponse,
)


NAMESPACE_URI = "http://globalbooks.com/catalog"
PREFIX = "tns"

BOOK_FIELDS = ("isbn", "title", "author", "price", "stock")


def qname(local: str) -> str:
    return "{%s}%s" % (NAMESPACE_URI, local)


def _child_text(parent: etree._Element, local: str) -> Optional[str]:
    child = parent.find(qname(local))
    if child is None:
        child = parent.find(local)
    if child is None:
        return None
    return child.text or ""


def parse_get_book_request(payload: etree._Element) -> GetBookRequest:
    return GetBookRequest(isbn=_child_text(payload, "isbn") or "")


def parse_search_books_request(payload: etree._Element) -> SearchBooksRequest:
    return SearchBooksRequest(keyword=_child_text(payload, "keyword"))


def book_element(book: Book, tag: str) -> etree._Element:
    el = etree.Element(qname(tag), nsmap={PREFIX: NAMESPACE_URI})
    for field in BOOK_FIELDS:
        etree.SubElement(el, qname(field)).text = str(getattr(book, field))
    return el


def _response_root(local: str) -> etree._Element:
    return etree.Element(qname(local), nsmap={PREFIX: NAMESPACE_URI})


def get_book_response_element(response: GetBookResponse) -> etree._Element:
    root = _response_root("GetBookResponse")
    # A miss leaves the optional book element out entirely.
    if response.book is not None:
        root.append(book_element(response.book, "book"))
    return root


def search_books_response_element(response: SearchBooksResponse) -> etree._Element:
    root = _response_root("SearchBooksResponse")
    for book in response.books:
        root.append(book_element(book, "books"))
    return root
