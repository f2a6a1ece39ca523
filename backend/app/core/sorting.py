"""Sorting helper for list queries."""

from __future__ import annotations

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from app.core.database import Base


def apply_order_by(
    query: Query,  # type: ignore[type-arg]
    model: type[Base],
    order_by: str | None,
    default_field: str = "created_at",
    default_direction: str = "desc",
) -> Query:  # type: ignore[type-arg]
    """Order a query by a ``"field:direction"`` string such as ``"payable_amount:asc"``.

    Only real table columns are accepted; anything else falls back to the
    default ordering. A missing direction means ascending.
    """
    field = default_field
    direction = default_direction

    if order_by:
        candidate_field, _, candidate_direction = order_by.partition(":")
        if candidate_field in model.__table__.columns:
            field = candidate_field
            direction = candidate_direction or "asc"
            if direction not in ("asc", "desc"):
                direction = default_direction

    column = getattr(model, field)
    order_func = asc if direction == "asc" else desc
    return query.order_by(order_func(column))
