"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from globalbooks.catalog.handlers import CatalogHandler
from globalbooks.catalog.store import CatalogStore, default_books
from globalbooks.config import Settings
from globalbooks.main import create_app


NS = "http://globalbooks.com/catalog"
SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
WSSE_NS = "http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-wssecurity-secext-1.0.xsd"
WSU_NS = "http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-wssecurity-utility-1.0.xsd"

EFFECTIVE_JAVA = "978-0134685991"
HEAD_FIRST_JAVA = "978-0596009205"
CLEAN_CODE = "978-0132350884"


@pytest.fixture
def store():
    """The built-in three-book catalog."""
    return CatalogStore(default_books())


@pytest.fixture
def handler(store):
    return CatalogHandler(store)


@pytest.fixture
def settings():
    return Settings(users={"admin": "admin123", "client": "client456"})


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def open_client():
    """A client for a service with authentication disabled."""
    return TestClient(create_app(Settings(auth_enabled=False)))


def username_token(username, password, password_type="PasswordText", nonce=None, created=None):
    """Render a WS-Security header block."""
    extra = ""
    if nonce is not None:
        extra += f"<wsse:Nonce>{nonce}</wsse:Nonce>"
    if created is not None:
        extra += f"<wsu:Created>{created}</wsu:Created>"
    type_uri = (
        "http://docs.oasis-open.org/wss/2004/01/"
        f"oasis-200401-wss-username-token-profile-1.0#{password_type}"
    )
    return (
        f'<wsse:Security xmlns:wsse="{WSSE_NS}" xmlns:wsu="{WSU_NS}">'
        "<wsse:UsernameToken>"
        f"<wsse:Username>{username}</wsse:Username>"
        f'<wsse:Password Type="{type_uri}">{password}</wsse:Password>'
        f"{extra}"
        "</wsse:UsernameToken>"
        "</wsse:Security>"
    )


def soap_envelope(payload, security=None):
    """Wrap ``payload`` (an XML string using the ``tns`` prefix) in an envelope."""
    header = f"<soapenv:Header>{security}</soapenv:Header>" if security else ""
    return (
        f'<soapenv:Envelope xmlns:soapenv="{SOAP_ENV_NS}" xmlns:tns="{NS}">'
        f"{header}"
        f"<soapenv:Body>{payload}</soapenv:Body>"
        "</soapenv:Envelope>"
    ).encode("utf-8")


@pytest.fixture
def admin_token():
    return username_token("admin", "admin123")
