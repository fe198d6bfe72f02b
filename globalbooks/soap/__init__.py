"""
SOAP transport for the catalog.

Exposes the ``GetBook`` and ``SearchBooks`` operations as document/literal
SOAP 1.1 under ``/ws``, with WS-Security UsernameToken authentication and
the service WSDL at ``/ws/catalog.wsdl``.
"""

from .router import router as soap_router  # noqa: F401
