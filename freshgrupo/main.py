import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from freshgrupo.api.routes_address import router as address_router
from freshgrupo.api.routes_auth import router as auth_router
from freshgrupo.api.routes_cart import router as cart_router
from freshgrupo.api.routes_category import router as category_router
from freshgrupo.api.routes_maintenance import router as maintenance_router
from freshgrupo.api.routes_order import router as order_router
from freshgrupo.api.routes_pack import pack_products_router
from freshgrupo.api.routes_pack import router as pack_router
from freshgrupo.api.routes_pack_type import router as pack_type_router
from freshgrupo.api.routes_payment import router as payment_router
from freshgrupo.api.routes_product import router as product_router
from freshgrupo.api.routes_public import router as public_router
from freshgrupo.api.routes_unit_type import router as unit_type_router
from freshgrupo.api.routes_user import router as user_router
from freshgrupo.core.config import settings
from freshgrupo.core.logging import configure_logging
from freshgrupo.core.monitoring import monitoring
from freshgrupo.db.seed import seed_database
from freshgrupo.db.session import SessionLocal, engine
from freshgrupo.models.registry import create_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    create_tables(engine)
    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()
    logger.info(f"FreshGrupo API started ({settings.ENVIRONMENT})")
    yield
    engine.dispose()


app = FastAPI(
    title="freshgrupo-api",
    description="Catalog, subscription packs, cart, orders and payments for FreshGrupo",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def record_request_metrics(request: Request, call_next):
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        monitoring.record_request(False, (time.perf_counter() - start) * 1000)
        raise
    monitoring.record_request(response.status_code < 500, (time.perf_counter() - start) * 1000)
    return response


@app.exception_handler(StarletteHTTPException)
async def route_not_found_handler(request: Request, exc: StarletteHTTPException):
    # Unmatched paths carry Starlette's default detail; our own 404s keep theirs
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(status_code=404, content={"detail": "Route not found"})
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    monitoring.record_error(str(exc), request.url.path)
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Something went wrong!"})


# Register endpoints
app.include_router(maintenance_router, tags=["Maintenance"])
app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
app.include_router(user_router, prefix="/api/users", tags=["User"])
app.include_router(address_router, prefix="/api/addresses", tags=["Address"])
app.include_router(category_router, prefix="/api/categories", tags=["Category"])
app.include_router(unit_type_router, prefix="/api/unit-types", tags=["Unit Type"])
app.include_router(product_router, prefix="/api/products", tags=["Product"])
app.include_router(pack_type_router, prefix="/api/pack-types", tags=["Pack Type"])
app.include_router(pack_router, prefix="/api/packs", tags=["Pack"])
app.include_router(pack_products_router, prefix="/api/pack-products", tags=["Pack"])
app.include_router(cart_router, prefix="/api/cart", tags=["Cart"])
app.include_router(order_router, prefix="/api/orders", tags=["Order"])
app.include_router(payment_router, prefix="/api", tags=["Payment"])
app.include_router(public_router, prefix="/api/public", tags=["Public"])


# 👇 Add custom OpenAPI with Bearer Auth
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title="FreshGrupo API",
        version="1.0.0",
        description="Storefront, admin and checkout endpoints for FreshGrupo subscription packs.",
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
    }
    for path in openapi_schema["paths"].values():
        for method in path.values():
            method["security"] = [{"BearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
