from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.errors import DomainError
from app.routers import admin_coupons, coupons, orders

OPENAPI_TAGS = [
    {"name": "Orders", "description": "Place, list and cancel food-delivery orders."},
    {"name": "Coupons", "description": "Browse and validate discount coupons."},
    {"name": "Admin Coupons", "description": "Create, update and disable coupons."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Order creation and coupon discount API for a food-delivery platform. "
        "Prices carts, applies coupons and records redemptions atomically."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count", "Idempotency-Replayed"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(orders.router, prefix="/v1/orders", tags=["Orders"])
app.include_router(coupons.router, prefix="/v1/coupons", tags=["Coupons"])
app.include_router(
    admin_coupons.router,
    prefix="/v1/admin/coupons",
    tags=["Admin Coupons"],
)


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "domain": settings.APP_DOMAIN,
        "status": "running",
    }
