"""
Catalog package for the GlobalBooks catalog service.

This package holds the book schemas, the read-only in-memory store, the
transport-agnostic request handlers and a small JSON API exposing the
same two operations (``GetBook`` and ``SearchBooks``) that the SOAP
endpoint offers. The store is populated once at startup and never
changes while the service runs.
"""

from .router import router as catalog_router  # noqa: F401
