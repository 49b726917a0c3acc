"""PurePlatter FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from ordering.utils.logging import configure_logging

configure_logging()

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV controls which config overlay is applied:
#   - default      → event_processing = "sync"  (handlers fire in UoW)
#   - "production" → event_processing = "async" (handlers fire via Engine)
from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from notifications.domain import notifications  # noqa: E402
from ordering.domain import ordering  # noqa: E402
from reviews.domain import reviews  # noqa: E402

ordering.init()
notifications.init()
reviews.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/cart": ordering,
    "/orders": ordering,
    "/admin": ordering,
    "/delivery": ordering,
    "/payments": ordering,
    "/notifications": notifications,
    "/contact": notifications,
    "/quote": notifications,
    "/notify-admin-order": notifications,
    "/reviews": reviews,
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
    title="PurePlatter API",
    description="Storefront backend: carts, orders, delivery, reviews and notifications",
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
    """Push the correct Protean domain context for each request."""
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
from notifications.api.routes import inquiry_router  # noqa: E402
from notifications.api.routes import router as notification_router  # noqa: E402
from ordering.api import (  # noqa: E402
    admin_router,
    cart_router,
    delivery_router,
    order_router,
    payment_router,
)
from reviews.api.routes import review_router  # noqa: E402
from shared.api import register_exception_handlers  # noqa: E402

register_exception_handlers(app)

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(admin_router)
app.include_router(delivery_router)
app.include_router(payment_router)
app.include_router(notification_router)
app.include_router(inquiry_router)
app.include_router(review_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "ordering": {"name": ordering.name},
                "notifications": {"name": notifications.name},
                "reviews": {"name": reviews.name},
            },
        }
    )
