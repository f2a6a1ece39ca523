from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Request

from app.core.config import settings


def _decode_bearer_token(request: Request) -> dict[str, object]:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Authorization header is required")

    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = auth_header[7:]
    if not token:
        raise HTTPException(status_code=401, detail="Bearer token is required")

    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired") from None
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token") from None


def get_current_user(request: Request) -> UUID:
    """Return the acting user's id from the ``sub`` claim of the bearer token."""
    claims = _decode_bearer_token(request)
    try:
        return UUID(str(claims["sub"]))
    except (KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token subject") from None


def get_current_admin(
    request: Request,
    user_id: UUID = Depends(get_current_user),
) -> UUID:
    """Like ``get_current_user`` but requires an ``admin`` role claim."""
    claims = _decode_bearer_token(request)
    if claims.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return user_id
