"""ChronoShop FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import os

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV controls which config overlay is applied:
#   - default      → in-memory stores, handlers run inside the request
#   - "production" → PostgreSQL stores
from careers.domain import careers  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from storefront.domain import storefront  # noqa: E402

from shared.errors import register_error_handlers
from shared.logging import add_context, clear_context

storefront.init()
careers.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
# Longest prefixes first: /admin/applications belongs to careers, the rest of /admin to storefront.
_ROUTE_DOMAIN_MAP = {
    "/admin/applications": careers,
    "/maintenance": careers,
    "/vacancies": careers,
    "/applications": careers,
    "/messages": careers,
    "/admin": storefront,
    "/auth": storefront,
    "/customers": storefront,
    "/products": storefront,
    "/cart": storefront,
    "/orders": storefront,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="ChronoShop API",
    description="Watch and wall-clock storefront with bank-transfer checkout, plus the careers desk",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[os.getenv("FRONTEND_URL", "http://localhost:3000")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    clear_context()
    add_context(path=request.url.path, method=request.method)

    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: pass through (health check, docs, etc.)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from careers.api import (  # noqa: E402
    admin_application_router,
    application_router,
    maintenance_router,
    message_router,
    vacancy_router,
)
from storefront.api import (  # noqa: E402
    admin_router,
    auth_router,
    cart_router,
    customer_router,
    order_router,
    product_router,
)

app.include_router(auth_router)
app.include_router(customer_router)
app.include_router(product_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(admin_application_router)
app.include_router(admin_router)
app.include_router(vacancy_router)
app.include_router(application_router)
app.include_router(message_router)
app.include_router(maintenance_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "storefront": {"name": storefront.name},
                "careers": {"name": careers.name},
            },
        }
    )
