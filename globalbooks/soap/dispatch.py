"""
Routing of SOAP payloads to catalog operations.

``OPERATIONS`` maps the qualified name of a request payload to the
function that handles it. ``handle_request()`` runs the full pipeline:
parse the envelope, check credentials (when a verifier is given), look
up the operation and wrap its result in a response envelope.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from lxml import etree

from ..catalog.handlers import CatalogHandler
from ..errors import UnknownOperationError
from ..security import DEFAULT_TOKEN_TTL, CredentialVerifier, NonceCache
from . import binding
from .envelope import build_envelope, parse_envelope
from .wsse import authenticate


logger = logging.getLogger(__name__)

Operation = Callable[[CatalogHandler, etree._Element], etree._Element]


def _get_book(handler: CatalogHandler, payload: etree._Element) -> etree._Element:
    request = binding.parse_get_book_request(payload)
    return binding.get_book_response_element(handler.get_book(request))


def _search_books(handler: CatalogHandler, payload: etree._Element) -> etree._Element:
    request = binding.parse_search_books_request(payload)
    return binding.search_books_response_element(handler.search_books(request))


OPERATIONS: Dict[str, Operation] = {
    binding.qname("GetBookRequest"): _get_book,
    binding.qname("SearchBooksRequest"): _search_books,
}


def handle_request(
    body: bytes,
    handler: CatalogHandler,
    verifier: Optional[CredentialVerifier] = None,
    nonces: Optional[NonceCache] = None,
    ttl: int = DEFAULT_TOKEN_TTL,
) -> bytes:
    """Process one SOAP request body and return the response document.

    Raises a ``SoapFault`` subclass for malformed envelopes, failed
    authentication and unknown payloads.
    """
    header, payload = parse_envelope(body)
    if verifier is not None:
        authenticate(header, verifier, nonces, ttl)

    operation = OPERATIONS.get(payload.tag)
    if operation is None:
        raise UnknownOperationError(payload.tag)
    logger.debug("Dispatching %s", etree.QName(payload).localname)
    return build_envelope(operation(handler, payload))
