"""Marketplace FastAPI application.

Buyers check out carts that may span several curators; curators manage their
catalogue, inventory, orders and payment settings. Commands are processed
synchronously inside the request.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.api import (
    correlation_middleware,
    curator_router,
    inventory_router,
    order_router,
    payment_router,
    product_router,
    register_error_handlers,
)
from marketplace.domain import marketplace
from marketplace.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Lifespan: domain init and provider shutdown
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    # PROTEAN_ENV selects the domain.toml overlay ("test", "production")
    configure_logging()
    marketplace.init()
    logger.info("app.started", domain=marketplace.name)
    yield
    for name, provider in marketplace.providers.items():
        if hasattr(provider, "close"):
            provider.close()
        logger.info("app.provider_closed", provider=name)


def create_app(lifespan=lifespan) -> FastAPI:
    app = FastAPI(
        title="Marketplace API",
        description="Curated marketplace: multi-curator checkout, inventory and payment settings",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the Protean domain context for each request."""
        with marketplace.domain_context():
            return await call_next(request)

    # Added last so it wraps everything, including the domain context
    app.middleware("http")(correlation_middleware)

    register_error_handlers(app)

    app.include_router(curator_router)
    app.include_router(product_router)
    app.include_router(inventory_router)
    app.include_router(order_router)
    app.include_router(payment_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": marketplace.name})

    return app


app = create_app()
