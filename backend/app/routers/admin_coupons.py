"""Coupon administration endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.core.auth import get_current_admin
from app.core.database import get_db
from app.models.coupon import Coupon, CouponStatus
from app.repositories.coupon_repository import CouponRepository
from app.schemas.coupon import CouponCreate, CouponResponse, CouponUpdate
from app.services.coupon_service import CouponService

router = APIRouter()


@router.post(
    "/",
    response_model=CouponResponse,
    status_code=201,
    summary="Create coupon",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Admin privileges required"},
        422: {"description": "Validation error or duplicate code"},
    },
)
async def create_coupon(
    data: CouponCreate,
    db: Session = Depends(get_db),
    admin_id: UUID = Depends(get_current_admin),
) -> Coupon:
    """Create a new coupon."""
    return CouponService(db).create_coupon(data)


@router.get(
    "/",
    response_model=list[CouponResponse],
    summary="List coupons",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Admin privileges required"},
    },
)
async def list_coupons(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    order_by: str | None = Query(default=None),
    status: CouponStatus | None = None,
    db: Session = Depends(get_db),
    admin_id: UUID = Depends(get_current_admin),
) -> list[Coupon]:
    """List coupons with optional status filter."""
    repo = CouponRepository(db)
    response.headers["X-Total-Count"] = str(repo.count(status=status))
    return repo.get_all(skip=skip, limit=limit, status=status, order_by=order_by)


@router.get(
    "/{coupon_id}",
    response_model=CouponResponse,
    summary="Get coupon",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Admin privileges required"},
        404: {"description": "Coupon not found"},
    },
)
async def get_coupon(
    coupon_id: UUID,
    db: Session = Depends(get_db),
    admin_id: UUID = Depends(get_current_admin),
) -> Coupon:
    """Get a coupon by ID."""
    return CouponService(db).get_coupon(coupon_id)


@router.put(
    "/{coupon_id}",
    response_model=CouponResponse,
    summary="Update coupon",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Admin privileges required"},
        404: {"description": "Coupon not found"},
        422: {"description": "Validation error"},
    },
)
async def update_coupon(
    coupon_id: UUID,
    data: CouponUpdate,
    db: Session = Depends(get_db),
    admin_id: UUID = Depends(get_current_admin),
) -> Coupon:
    """Update a coupon. The usage counter is not writable."""
    return CouponService(db).update_coupon(coupon_id, data)


@router.delete(
    "/{coupon_id}",
    response_model=CouponResponse,
    summary="Disable coupon",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Admin privileges required"},
        404: {"description": "Coupon not found"},
    },
)
async def disable_coupon(
    coupon_id: UUID,
    db: Session = Depends(get_db),
    admin_id: UUID = Depends(get_current_admin),
) -> Coupon:
    """Disable a coupon. Redemption history is kept."""
    return CouponService(db).disable_coupon(coupon_id)
