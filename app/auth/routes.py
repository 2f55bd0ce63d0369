import logging

from fastapi import APIRouter, Depends

from app.auth.schemas import ContextOut, RequestContext
from app.auth.service import get_request_context

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get(
    "/me",
    response_model=ContextOut,
    summary="Get the caller's identity",
    description="Returns the identity and user type carried by the bearer token, or an anonymous context.",
    responses={
        200: {"description": "Context returned"},
        401: {"description": "Invalid or expired token"},
    },
)
def get_me_route(ctx: RequestContext = Depends(get_request_context)) -> ContextOut:
    return ContextOut(
        user_id=ctx.user_id,
        email=ctx.email,
        user_type=ctx.user_type,
        is_admin=ctx.is_admin,
        is_authenticated=ctx.is_authenticated,
    )
