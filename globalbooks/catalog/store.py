"""
In-memory data store for the catalog.

The store is built once at startup and never mutated afterwards: the
books are kept in a tuple of frozen ``Book`` models, so concurrent
requests can read it without any locking. By default it is seeded with
the three built-in titles returned by ``default_books()``; a JSON file
with the same fields can be supplied instead via ``load_books()``.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import ValidationError

from ..errors import CatalogLoadError, DuplicateIsbnError
from .schemas import Book


logger = logging.getLogger(__name__)


def default_books() -> List[Book]:
    """Return the built-in catalog, in catalog order."""
    return [
        Book(
            isbn="978-0134685991",
            title="Effective Java",
            author="Joshua Bloch",
            price=Decimal("45.99"),
            stock=50,
        ),
        Book(
            isbn="978-0596009205",
            title="Head First Java",
            author="Kathy Sierra",
            price=Decimal("35.99"),
            stock=30,
        ),
        Book(
            isbn="978-0132350884",
            title="Clean Code",
            author="Robert Martin",
            price=Decimal("40.00"),
            stock=25,
        ),
    ]


def load_books(path: Union[str, Path]) -> List[Book]:
    """Load catalog entries from a JSON file.

    Parameters
    ----------
    path : str or Path
        A file containing a JSON list of objects with ``isbn``, ``title``,
        ``author``, ``price`` and ``stock`` keys. Prices are parsed as
        ``Decimal`` so ``"40.00"`` and ``40.00`` keep their scale.

    Returns
    -------
    List[Book]
        The entries in file order.

    Raises
    ------
    CatalogLoadError
        If the file is missing, is not valid JSON, or an entry does not
        validate.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f, parse_float=Decimal)
    except (OSError, ValueError) as exc:
        raise CatalogLoadError(f"Cannot read catalog file {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise CatalogLoadError(f"Catalog file {path} must contain a JSON list")

    books: List[Book] = []
    for index, entry in enumerate(raw):
        try:
            books.append(Book.model_validate(entry))
        except ValidationError as exc:
            raise CatalogLoadError(
                f"Invalid catalog entry #{index} in {path}: {exc}"
            ) from exc
    logger.info("Loaded %d books from %s", len(books), path)
    return books


def _norm(s: Optional[str]) -> str:
    return (s or "").lower()


class CatalogStore:
    """Read-only, ordered collection of books.

    ISBNs must be unique; a duplicate raises ``DuplicateIsbnError`` when
    the store is built.
    """

    def __init__(self, books: Iterable[Book]):
        self._books: Tuple[Book, ...] = tuple(books)
        seen = set()
        for book in self._books:
            if book.isbn in seen:
                raise DuplicateIsbnError(book.isbn)
            seen.add(book.isbn)

    @property
    def books(self) -> Tuple[Book, ...]:
        return self._books

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self._books)

    def find_by_isbn(self, isbn: Optional[str]) -> Optional[Book]:
        """Return the book whose ISBN equals ``isbn`` exactly, or ``None``.

        The comparison is case-sensitive and no normalisation (trimming,
        hyphen removal) is applied.
        """
        for book in self._books:
            if book.isbn == isbn:
                return book
        return None

    def search(self, keyword: Optional[str]) -> List[Book]:
        """Return books whose title or author contains ``keyword``.

        Matching is a case-insensitive substring test. An empty or
        ``None`` keyword matches every book. Results keep catalog order.
        """
        nk = _norm(keyword)
        return [
            b for b in self._books
            if nk in _norm(b.title) or nk in _norm(b.author)
        ]
