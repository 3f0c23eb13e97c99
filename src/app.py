"""Merchant FastAPI application.

Serves the catalogue and receives orders from the storefront. Every route
lives under ``/api`` and runs inside the merchant domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 3000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV controls which config overlay is applied.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from merchant.domain import merchant  # noqa: E402
from protean.integrations.fastapi import register_exception_handlers
from shared.logging import configure_logging

configure_logging()
merchant.init()

API_PREFIX = "/api"

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Merchant API",
    description="Catalogue and order intake for the storefront",
)

# The storefront is served from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the merchant domain context for API requests."""
    if request.url.path.startswith(API_PREFIX):
        with merchant.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from merchant.api import category_router, order_router, product_router  # noqa: E402

app.include_router(product_router, prefix=API_PREFIX)
app.include_router(category_router, prefix=API_PREFIX)
app.include_router(order_router, prefix=API_PREFIX)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": merchant.name})
