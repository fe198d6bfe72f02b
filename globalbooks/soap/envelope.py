"""
SOAP 1.1 envelope handling.

``parse_envelope()`` turns a raw request body into its ``Header`` and
payload elements, and ``build_envelope()`` / ``build_fault()`` produce
response documents. Parsing uses an lxml parser with entity resolution
and network access disabled.
"""

from __future__ import annotations

from typing import Optional, Tuple

from lxml import etree

from ..errors import MalformedEnvelopeError, SoapFault


SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP_ENV_PREFIX = "SOAP-ENV"

CONTENT_TYPE = "text/xml; charset=utf-8"

_ENVELOPE = "{%s}Envelope" % SOAP_ENV_NS
_HEADER = "{%s}Header" % SOAP_ENV_NS
_BODY = "{%s}Body" % SOAP_ENV_NS
_FAULT = "{%s}Fault" % SOAP_ENV_NS


def _parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_blank_text=True,
        huge_tree=False,
    )


def _first_element(parent: etree._Element) -> Optional[etree._Element]:
    for child in parent.iterchildren(tag=etree.Element):
        return child
    return None


def parse_envelope(body: bytes) -> Tuple[Optional[etree._Element], etree._Element]:
    """Parse a SOAP request and return ``(header, payload)``.

    ``header`` is ``None`` when the envelope has no ``Header``. The
    payload is the first element child of ``Body``.

    Raises
    ------
    MalformedEnvelopeError
        If the body is empty, is not well-formed XML, is not a SOAP 1.1
        envelope, or carries no payload.
    """
    if not body or not body.strip():
        raise MalformedEnvelopeError("Empty request body")
    try:
        root = etree.fromstring(body, _parser())
    except etree.XMLSyntaxError as exc:
        raise MalformedEnvelopeError(f"Could not parse request: {exc}") from exc

    if root.tag != _ENVELOPE:
        raise MalformedEnvelopeError(
            f"Expected a SOAP 1.1 Envelope, got {root.tag}"
        )
    header = root.find(_HEADER)
    body_el = root.find(_BODY)
    if body_el is None:
        raise MalformedEnvelopeError("SOAP Envelope has no Body")
    payload = _first_element(body_el)
    if payload is None:
        raise MalformedEnvelopeError("SOAP Body is empty")
    return header, payload


def _new_envelope() -> Tuple[etree._Element, etree._Element]:
    envelope = etree.Element(_ENVELOPE, nsmap={SOAP_ENV_PREFIX: SOAP_ENV_NS})
    etree.SubElement(envelope, _HEADER)
    body = etree.SubElement(envelope, _BODY)
    return envelope, body


def _serialize(envelope: etree._Element) -> bytes:
    return etree.tostring(envelope, xml_declaration=True, encoding="UTF-8")


def build_envelope(payload: etree._Element) -> bytes:
    envelope, body = _new_envelope()
    body.append(payload)
    return _serialize(envelope)


def build_fault(fault: SoapFault) -> bytes:
    """Render ``fault`` as a SOAP 1.1 ``Fault`` document."""
    envelope, body = _new_envelope()
    fault_el = etree.SubElement(body, _FAULT)
    etree.SubElement(fault_el, "faultcode").text = "%s:%s" % (SOAP_ENV_PREFIX, fault.code)
    faultstring = etree.SubElement(fault_el, "faultstring")
    faultstring.set("{http://www.w3.org/XML/1998/namespace}lang", "en")
    faultstring.text = fault.message
    return _serialize(envelope)
