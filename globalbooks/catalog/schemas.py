"""
Pydantic schema definitions for the catalog module.

The ``Book`` model is the single record type held by the catalog store.
It is frozen so that the shared, read-only catalog can be handed to
concurrent requests without copying. The request/response pairs mirror
the two catalog operations (``GetBook`` and ``SearchBooks``) and are the
shapes both transports (SOAP and JSON) marshal to and from.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Book(BaseModel):
    """A single catalog entry.

    ``price`` is kept as a ``Decimal`` so its scale survives marshaling
    (``40.00`` is rendered as ``40.00``, not ``40.0``). Both ``price`` and
    ``stock`` are non-negative.
    """

    model_config = ConfigDict(frozen=True)

    isbn: str
    title: str
    author: str
    price: Decimal = Field(ge=0)
    stock: int = Field(ge=0)

    @field_validator("price")
    @classmethod
    def _plain_price(cls, value: Decimal) -> Decimal:
        # xs:decimal has no exponent form; 1E+2 becomes 100, 40.00 is kept.
        return Decimal(format(value, "f"))


class GetBookRequest(BaseModel):
    # An absent ISBN is treated like any other value that matches nothing.
    isbn: str = ""


class GetBookResponse(BaseModel):
    """Result of a ``GetBook`` call.

    ``book`` is ``None`` when no entry has the requested ISBN. A miss is a
    normal outcome, not an error.
    """

    book: Optional[Book] = None


class SearchBooksRequest(BaseModel):
    keyword: Optional[str] = None


class SearchBooksResponse(BaseModel):
    """Books matching a keyword, in catalog order (possibly empty)."""

    books: List[Book] = Field(default_factory=list)
