"""
Bearer token validation.

Access tokens are issued by the identity provider as HS256 JWTs carrying
the user id in ``sub`` and one of admin/coach/client in ``role``.
"""

import logging

import jwt
from fastapi import HTTPException

from backend.settings import Settings
from models.program import Actor, ActorRole

logger = logging.getLogger(__name__)


def validate_access_token(token: str, settings: Settings) -> Actor:
    """Validate an access token and return the actor it identifies."""
    if not settings.jwt_secret:
        raise HTTPException(
            status_code=401, detail="Token authentication not configured"
        )

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid access token: {e}")
        raise HTTPException(status_code=401, detail=f"Invalid token: {str(e)}")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token missing user ID")
    try:
        role = ActorRole(payload.get("role"))
    except ValueError:
        raise HTTPException(status_code=401, detail="Token missing a valid role")

    logger.debug(f"Access token validated for user: {user_id} ({role.value})")
    return Actor(id=str(user_id), role=role)


def parse_bearer(authorization: str) -> str:
    """Extract the token from an Authorization header value."""
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")
    token = authorization[7:]  # Remove "Bearer " prefix
    if not token:
        raise HTTPException(status_code=401, detail="Invalid token")
    return token
