"""Customer-facing coupon endpoints."""

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.models.coupon import Coupon
from app.schemas.coupon import (
    CouponResponse,
    CouponValidateRequest,
    CouponValidationResponse,
)
from app.services.coupon_service import CouponService

router = APIRouter()


@router.get(
    "/",
    response_model=list[CouponResponse],
    summary="List available coupons",
    responses={401: {"description": "Unauthorized"}},
)
async def list_available_coupons(
    merchant_id: UUID | None = Query(default=None),
    order_amount: Decimal | None = Query(default=None, ge=0),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> list[Coupon]:
    """List coupons the current user can redeem now."""
    return CouponService(db).list_available_coupons(
        user_id, merchant_id=merchant_id, order_amount=order_amount
    )


@router.post(
    "/validate",
    response_model=CouponValidationResponse,
    summary="Validate coupon",
    responses={
        401: {"description": "Unauthorized"},
        422: {"description": "Validation error"},
    },
)
async def validate_coupon(
    data: CouponValidateRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> CouponValidationResponse:
    """Check a coupon against an order amount without consuming it.

    An ineligible coupon is a normal outcome and is reported with ``valid: false``.
    """
    result = CouponService(db).validate_coupon(
        user_id, data.code, data.merchant_id, data.order_amount
    )
    return CouponValidationResponse(
        valid=result.valid,
        discount_amount=result.discount_amount,
        reason=result.reason.value if result.reason else None,
        message=result.message,
        coupon=CouponResponse.model_validate(result.coupon) if result.coupon else None,
    )
