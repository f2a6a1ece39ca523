"""Idempotency-Key support for order submission.

A client that retries ``POST /v1/orders`` with the same ``Idempotency-Key``
header gets the first successful response back instead of a second order.
Keys are scoped per user. A key whose first attempt failed stays pending and
the next submission with it runs normally.
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.repositories.idempotency_repository import IdempotencyRepository

IDEMPOTENCY_HEADER = "Idempotency-Key"
REPLAYED_HEADER = "Idempotency-Replayed"
MAX_KEY_LENGTH = 255


@dataclass
class IdempotencyResult:
    """A reserved key waiting for the response to be recorded."""

    key: str
    method: str
    path: str


def check_idempotency(
    request: Request,
    db: Session,
    user_id: UUID,
) -> JSONResponse | IdempotencyResult | None:
    """Look up the request's ``Idempotency-Key``.

    Returns ``None`` without the header, a replay ``JSONResponse`` when the key
    already completed, or an ``IdempotencyResult`` to record once the request
    succeeds.
    """
    key = request.headers.get(IDEMPOTENCY_HEADER)
    if not key:
        return None
    if len(key) > MAX_KEY_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"{IDEMPOTENCY_HEADER} must be at most {MAX_KEY_LENGTH} characters",
        )

    record = IdempotencyRepository(db).reserve(
        user_id, key, request.method, request.url.path
    )
    if record.response_status is not None:
        replay = JSONResponse(
            content=record.response_body,
            status_code=int(record.response_status),
        )
        replay.headers[REPLAYED_HEADER] = "true"
        return replay

    return IdempotencyResult(key=key, method=request.method, path=request.url.path)


def record_idempotency_response(
    db: Session,
    user_id: UUID,
    key: str,
    status: int,
    body: dict[str, Any],
) -> None:
    """Store the response so later submissions with the same key replay it."""
    repo = IdempotencyRepository(db)
    record = repo.get_by_key(user_id, key)
    if record is not None:
        repo.update_response(record, status, body)
