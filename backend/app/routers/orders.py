"""Order API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.core.idempotency import (
    IdempotencyResult,
    check_idempotency,
    record_idempotency_response,
)
from app.models.order import Order, OrderStatus
from app.models.order_item import OrderItem
from app.repositories.order_item_repository import OrderItemRepository
from app.repositories.order_repository import OrderRepository
from app.schemas.order import (
    OrderCancelRequest,
    OrderCreate,
    OrderCreateResponse,
    OrderItemResponse,
    OrderResponse,
)
from app.services.order_service import OrderService

router = APIRouter()


def _order_response(order: Order, items: list[OrderItem]) -> OrderResponse:
    response = OrderResponse.model_validate(order)
    response.items = [OrderItemResponse.model_validate(item) for item in items]
    return response


@router.post(
    "/",
    response_model=OrderCreateResponse,
    status_code=201,
    summary="Create order",
    responses={
        400: {"description": "Merchant, product or minimum order precondition failed"},
        401: {"description": "Unauthorized"},
        404: {"description": "Merchant or address not found"},
        409: {"description": "Coupon redemption race lost or order number exhausted"},
        422: {"description": "Validation error"},
    },
)
async def create_order(
    data: OrderCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> OrderCreateResponse | JSONResponse:
    """Place an order. The returned payable amount is due before ``payment_expires_at``."""
    idempotency = check_idempotency(request, db, user_id)
    if isinstance(idempotency, JSONResponse):
        return idempotency

    result = OrderService(db).create_order(user_id, data)
    response = OrderCreateResponse.model_validate(result)

    if isinstance(idempotency, IdempotencyResult):
        body = response.model_dump(mode="json")
        record_idempotency_response(db, user_id, idempotency.key, 201, body)

    return response


@router.get(
    "/",
    response_model=list[OrderResponse],
    summary="List orders",
    responses={401: {"description": "Unauthorized"}},
)
async def list_orders(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    order_by: str | None = Query(default=None),
    status: OrderStatus | None = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> list[OrderResponse]:
    """List the current user's orders, newest first by default."""
    repo = OrderRepository(db)
    response.headers["X-Total-Count"] = str(repo.count(user_id, status=status))
    orders = repo.get_all(user_id, skip=skip, limit=limit, status=status, order_by=order_by)
    items = OrderItemRepository(db).get_by_order_ids(order.id for order in orders)
    return [_order_response(order, items[order.id]) for order in orders]  # type: ignore[index]


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order",
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "Order not found"},
    },
)
async def get_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> OrderResponse:
    """Get one of the current user's orders with its items."""
    service = OrderService(db)
    order = service.get_order(user_id, order_id)
    return _order_response(order, service.get_order_items(order_id))


@router.post(
    "/{order_id}/cancel",
    response_model=OrderResponse,
    summary="Cancel order",
    responses={
        400: {"description": "Order cannot be cancelled in current status"},
        401: {"description": "Unauthorized"},
        404: {"description": "Order not found"},
        422: {"description": "Validation error"},
    },
)
async def cancel_order(
    order_id: UUID,
    data: OrderCancelRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> OrderResponse:
    """Cancel an order that is still awaiting payment or merchant confirmation."""
    service = OrderService(db)
    order = service.cancel_order(user_id, order_id, data.reason)
    return _order_response(order, service.get_order_items(order_id))
