# globalbooks/main.py
import logging
from typing import Optional

from fastapi import FastAPI

from .catalog import catalog_router
from .catalog.handlers import CatalogHandler
from .catalog.store import CatalogStore, default_books, load_books
from .config import Settings
from .security import CredentialVerifier, NonceCache, StaticCredentialVerifier
from .soap import soap_router


logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> CatalogStore:
    if settings.catalog_file is not None:
        return CatalogStore(load_books(settings.catalog_file))
    return CatalogStore(default_books())


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[CatalogStore] = None,
    verifier: Optional[CredentialVerifier] = None,
) -> FastAPI:
    """Build the service: catalog store, handler, verifier and routes.

    Anything not passed in is built from ``settings`` (itself read from
    the environment by default).
    """
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    store = store if store is not None else build_store(settings)
    verifier = verifier if verifier is not None else StaticCredentialVerifier(settings.users)

    app = FastAPI(
        title="GlobalBooks Catalog Service",
        description=(
            "Read-only book catalog exposing GetBook and SearchBooks over "
            "SOAP (/ws) and JSON (/api/catalog)."
        ),
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.catalog_handler = CatalogHandler(store)
    app.state.verifier = verifier
    app.state.nonce_cache = NonceCache(ttl=settings.token_ttl)

    @app.get("/")
    def health_check():
        return {"status": "ok", "books": len(app.state.store)}

    app.include_router(soap_router)
    app.include_router(catalog_router)

    logger.info(
        "Catalog service ready with %d books (authentication %s)",
        len(store),
        "enabled" if settings.auth_enabled else "disabled",
    )
    return app


if __name__ == "__main__":
    import uvicorn

    _settings = Settings.from_env()
    uvicorn.run(create_app(_settings), host=_settings.host, port=_settings.port)
