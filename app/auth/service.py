import logging
from typing import Any, Dict
from uuid import UUID

from fastapi import HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from app.auth.schemas import RequestContext
from app.core.config import (
    ADMIN_EMAILS,
    AUTH_JWT_ALGORITHM,
    AUTH_JWT_AUDIENCE,
    AUTH_JWT_SECRET,
)

logger = logging.getLogger(__name__)
bearer = HTTPBearer(auto_error=False)

ANONYMOUS = RequestContext()


def decode_token(token: str) -> dict:
    """
    Decodes and validates a JWT issued by the hosted auth provider.

    Args:
        token (str): JWT string.

    Returns:
        dict: Decoded payload.

    Raises:
        HTTPException: If auth is not configured, or the token is invalid or expired.
    """
    if not AUTH_JWT_SECRET:
        logger.error("AUTH_JWT_SECRET is not configured")
        raise HTTPException(status_code=500, detail="Authentication not configured")
    try:
        return jwt.decode(
            token,
            AUTH_JWT_SECRET,
            algorithms=[AUTH_JWT_ALGORITHM],
            audience=AUTH_JWT_AUDIENCE,
            options={"verify_aud": AUTH_JWT_AUDIENCE is not None},
        )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired authentication token")


def context_from_claims(payload: Dict[str, Any]) -> RequestContext:
    """
    Maps token claims to a request context.

    The user type lives in `user_metadata.user_type`; anything other than
    "therapist" or "admin" is treated as a regular user. Admins are either
    typed as such or listed in ADMIN_EMAILS.
    """
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token missing subject field")
    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid user ID in token")

    email = (payload.get("email") or "").lower().strip() or None
    metadata = payload.get("user_metadata") or {}
    user_type = metadata.get("user_type")
    if user_type not in ("therapist", "admin"):
        user_type = "user"

    is_admin = user_type == "admin" or (email is not None and email in ADMIN_EMAILS)
    return RequestContext(user_id=user_uuid, email=email, user_type=user_type, is_admin=is_admin)


def get_request_context(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
) -> RequestContext:
    """
    Builds the caller's context from the bearer token. Requests without a
    token get the anonymous context; a present but invalid token is a 401.
    """
    if creds is None:
        return ANONYMOUS
    return context_from_claims(decode_token(creds.credentials))


def require_user(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
    if not ctx.is_authenticated:
        raise HTTPException(status_code=401, detail="Authentication required")
    return ctx


def require_therapist(ctx: RequestContext = Depends(require_user)) -> RequestContext:
    if ctx.user_type != "therapist":
        raise HTTPException(status_code=403, detail="Therapist account required")
    return ctx


def require_admin(ctx: RequestContext = Depends(require_user)) -> RequestContext:
    if not ctx.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return ctx
