"""
Exception types raised by the service.

Catalog lookups never fail, so everything here belongs either to startup
(loading the catalog) or to the SOAP transport. Each ``SoapFault`` carries
the SOAP 1.1 fault code it is rendered with.
"""

from typing import Optional


class CatalogLoadError(Exception):
    """The configured catalog file could not be read or parsed."""


class DuplicateIsbnError(ValueError):
    """Two catalog entries share the same ISBN."""

    def __init__(self, isbn: str):
        super().__init__(f"Duplicate ISBN in catalog: {isbn}")
        self.isbn = isbn


class SoapFault(Exception):
    """Base class for errors reported to SOAP clients as a ``Fault``.

    ``code`` is the local part of the SOAP 1.1 fault code, either
    ``"Client"`` (the request was at fault) or ``"Server"``.
    """

    code = "Server"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class MalformedEnvelopeError(SoapFault):
    code = "Client"


class UnknownOperationError(SoapFault):
    code = "Client"

    def __init__(self, qname: str):
        super().__init__(f"No endpoint mapping found for {qname}")
        self.qname = qname


class AuthenticationError(SoapFault):
    code = "Client"
