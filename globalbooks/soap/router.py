"""
HTTP routes for the SOAP endpoint.

Endpoints under /ws:
- POST /ws              : SOAP 1.1 requests (GetBook, SearchBooks)
- GET  /ws?wsdl         : service description
- GET  /ws/catalog.wsdl : service description
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ..catalog.handlers import CatalogHandler
from ..config import Settings
from ..dependencies import get_handler, get_nonce_cache, get_settings, get_verifier
from ..errors import SoapFault
from ..security import CredentialVerifier, NonceCache
from .dispatch import handle_request
from .envelope import CONTENT_TYPE, build_fault
from .wsdl import render_wsdl


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["soap"])


def _fault_response(fault: SoapFault) -> Response:
    # SOAP 1.1 over HTTP reports faults with status 500.
    return Response(content=build_fault(fault), status_code=500, media_type=CONTENT_TYPE)


def _wsdl_response(request: Request) -> Response:
    location = str(request.url_for("soap_endpoint"))
    return Response(content=render_wsdl(location), media_type=CONTENT_TYPE)


@router.post("", name="soap_endpoint")
async def soap_endpoint(
    request: Request,
    handler: CatalogHandler = Depends(get_handler),
    verifier: Optional[CredentialVerifier] = Depends(get_verifier),
    nonces: NonceCache = Depends(get_nonce_cache),
    settings: Settings = Depends(get_settings),
) -> Response:
    body = await request.body()
    try:
        content = handle_request(body, handler, verifier, nonces, settings.token_ttl)
    except SoapFault as fault:
        logger.warning("SOAP %s fault: %s", fault.code, fault.message)
        return _fault_response(fault)
    except Exception:
        logger.exception("Unhandled error while processing SOAP request")
        return _fault_response(SoapFault("Internal server error", code="Server"))
    return Response(content=content, media_type=CONTENT_TYPE)


@router.get("")
def soap_get(request: Request) -> Response:
    if "wsdl" not in {key.lower() for key in request.query_params.keys()}:
        raise HTTPException(status_code=405, detail="SOAP requests must use POST")
    return _wsdl_response(request)


@router.get("/catalog.wsdl")
def catalog_wsdl(request: Request) -> Response:
    return _wsdl_response(request)
