import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from sqlalchemy.orm import configure_mappers

import qios.models  # registers all models via models/__init__.py
from qios.api import (
    analytics_routes,
    customer_routes,
    dashboard_routes,
    dev_routes,
    expense_routes,
    inventory_routes,
    notification_routes,
    order_routes,
    payment_routes,
    product_routes,
)
from qios.auth import routes as auth_routes
from qios.core.config import settings
from qios.core.errors import register_exception_handlers
from qios.crud.store import get_or_create_store
from qios.db import async_session, create_db_and_tables
from qios.middleware.auth_middleware import AuthMiddleware

configure_mappers()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
log = logging.getLogger(__name__)


# Create the FastAPI app
app = FastAPI(title="QIOS API", version="1.0.0")

register_exception_handlers(app)

# ✅ Bearer JWT check on the protected /api prefixes
app.add_middleware(AuthMiddleware)

# ✅ CORS (outermost, so preflight never hits auth)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ✅ Swagger Bearer token support for "Authorize" button
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="QIOS API",
        version="1.0.0",
        description="Point-of-sale back office: catalog, inventory, orders, payments and AI insights.",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT"
        }
    }
    for path in openapi_schema["paths"].values():
        for operation in path.values():
            operation["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


@app.on_event("startup")
async def on_startup():
    log.info("Starting DB setup (environment=%s)", settings.environment)
    await create_db_and_tables()

    # ⬇️ Seed the configured default store so storeId fallbacks resolve
    if settings.default_store_id:
        async with async_session() as db:
            store = await get_or_create_store(db, settings.default_store_id, name="Default Store")
            log.info("Default store ready: %s", store.id)


@app.get("/health")
async def health():
    return {"status": "ok"}


# ✅ Routers
app.include_router(auth_routes.router)
app.include_router(product_routes.router, prefix="/api/products")
app.include_router(order_routes.router, prefix="/api/orders")
app.include_router(customer_routes.router, prefix="/api/customers")
app.include_router(inventory_routes.router, prefix="/api/inventory")
app.include_router(dashboard_routes.router, prefix="/api/dashboard")
app.include_router(notification_routes.router, prefix="/api/notifications")
app.include_router(expense_routes.router, prefix="/api/expenses")
app.include_router(analytics_routes.router, prefix="/api/analytics")
app.include_router(payment_routes.router, prefix="/api/payment")
app.include_router(dev_routes.router, prefix="/api/dev")
