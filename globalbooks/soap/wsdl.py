"""
Serving of the bundled ``catalog.wsdl``.

The document on disk carries a placeholder ``soap:address``; it is
rewritten on every request so clients see the URL they actually used to
reach the service.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from lxml import etree


WSDL_FILE = Path(__file__).resolve().parent / "catalog.wsdl"

WSDL_SOAP_NS = "http://schemas.xmlsoap.org/wsdl/soap/"


@lru_cache(maxsize=1)
def _load_template() -> bytes:
    return WSDL_FILE.read_bytes()


def render_wsdl(location: str) -> bytes:
    """Return the WSDL with every ``soap:address/@location`` set to ``location``."""
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    root = etree.fromstring(_load_template(), parser)
    for address in root.iter("{%s}address" % WSDL_SOAP_NS):
        address.set("location", location)
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8")
