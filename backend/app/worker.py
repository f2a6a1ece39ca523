import logging
from typing import Any

from arq import cron
from arq.connections import RedisSettings

from app.core.config import settings
from app.core.database import SessionLocal
from app.repositories.idempotency_repository import IdempotencyRepository
from app.services.order_service import OrderService

logger = logging.getLogger(__name__)

redis_settings = RedisSettings.from_dsn(settings.REDIS_URL)


async def expire_unpaid_orders_task(ctx: dict[str, Any]) -> int:
    """Background task: cancel orders still unpaid after their payment window.

    Runs every minute. Coupon redemptions on expired orders are kept.
    """
    db = SessionLocal()
    try:
        return OrderService(db).expire_unpaid_orders()
    finally:
        db.close()


async def cleanup_idempotency_records_task(ctx: dict[str, Any]) -> int:
    """Background task: delete idempotency records older than the configured TTL.

    Runs daily.
    """
    db = SessionLocal()
    try:
        count = IdempotencyRepository(db).delete_expired(settings.IDEMPOTENCY_TTL_HOURS)
        if count > 0:
            logger.info("Deleted %d expired idempotency records", count)
        return count
    finally:
        db.close()


class WorkerSettings:
    functions = [
        expire_unpaid_orders_task,
        cleanup_idempotency_records_task,
    ]
    cron_jobs = [
        cron(expire_unpaid_orders_task),  # every minute
        cron(cleanup_idempotency_records_task, hour=3, minute=0),  # daily at 03:00
    ]
    redis_settings = redis_settings
