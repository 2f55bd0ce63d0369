import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.auth.schemas import RequestContext
from app.auth.service import require_admin, require_user
from app.core.database import get_db, two_phase_update
from app.core.datasource import DataSource
from app.core.dependency import get_public_data_source, require_writable
from app.core.timeutils import utcnow
from app.moderation.db import add_violation, create_flag, get_chat_rule, get_flag, get_violations
from app.moderation.schemas import (
    ChatRuleBase,
    FlaggedMessageBase,
    FlaggedMessageCreate,
    FlagList,
    FlagStatus,
    ReviewAction,
    ReviewOutcome,
    UserViolationBase,
)
from app.moderation.service import (
    FlagAlreadyResolved,
    ModerationError,
    dismiss_flag,
    filter_by_status,
    filter_flags,
    review_flag,
)
from app.profiles.db import get_profile

router = APIRouter(prefix="/moderation", tags=["Moderation"])
logger = logging.getLogger(__name__)


@router.get(
    "/rules",
    response_model=List[ChatRuleBase],
    summary="Community guidelines",
    description="Chat rules with their severity: 1 warning, 2 suspension, 3 ban.",
)
def list_rules_route(source: DataSource = Depends(get_public_data_source)) -> List[ChatRuleBase]:
    try:
        return source.chat_rules()
    except Exception as e:
        logger.error(f"Error loading chat rules: {e}")
        raise HTTPException(status_code=500, detail="Failed to load community guidelines")


@router.post(
    "/flags",
    response_model=FlaggedMessageBase,
    status_code=201,
    summary="Report a chat message",
    responses={
        201: {"description": "Message flagged for review."},
        401: {"description": "Unauthorized."},
        422: {"description": "Missing message, content or reason."},
        500: {"description": "Failed to flag message."},
    },
    dependencies=[Depends(require_writable)],
)
def flag_message_route(
    flag: FlaggedMessageCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> FlaggedMessageBase:
    try:
        profile = get_profile(db, ctx.user_id)
        created = create_flag(db, flag, ctx.user_id, profile.nickname if profile else None)
        logger.info(f"User {ctx.user_id} flagged message {flag.message_id}: {flag.reason}")
        return created
    except Exception as e:
        db.rollback()
        logger.error(f"Error flagging message {flag.message_id} for user {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to flag message")


@router.get(
    "/flags",
    response_model=FlagList,
    summary="Moderation queue",
    description="Flagged messages, newest first, optionally narrowed by status and a search over content, reporter name and reason.",
    responses={
        200: {"description": "Flags returned."},
        401: {"description": "Unauthorized."},
        403: {"description": "Admin access required."},
    },
)
def list_flags_route(
    search: str = Query(""),
    status: Optional[FlagStatus] = Query(None),
    source: DataSource = Depends(get_public_data_source),
    ctx: RequestContext = Depends(require_admin),
) -> FlagList:
    try:
        flags = source.flagged_messages()
        pending_count = sum(1 for f in flags if f.status == "pending")
        return FlagList(items=filter_flags(filter_by_status(flags, status), search), pending_count=pending_count)
    except Exception as e:
        logger.error(f"Error loading moderation queue for admin {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load flagged messages")


def _load_flag(db: Session, flag_id: UUID):
    flag = get_flag(db, flag_id)
    if flag is None:
        raise HTTPException(status_code=404, detail="Flagged message not found")
    return flag


@router.post(
    "/flags/{flag_id}/review",
    response_model=ReviewOutcome,
    summary="Act on a flagged message",
    description="Apply a community rule with a justification. Records a violation with the action for the rule's severity.",
    responses={
        200: {"description": "Flag reviewed and violation recorded."},
        400: {"description": "No rule selected or no reason given."},
        403: {"description": "Admin access required."},
        404: {"description": "Flagged message not found."},
        409: {"description": "Flag was already resolved."},
        500: {"description": "Failed to record review."},
    },
    dependencies=[Depends(require_writable)],
)
def review_flag_route(
    flag_id: UUID,
    action: ReviewAction,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_admin),
) -> ReviewOutcome:
    flag = _load_flag(db, flag_id)
    rule = get_chat_rule(db, action.rule_id) if action.rule_id else None
    try:
        outcome = review_flag(flag, rule, action.reason, ctx.user_id, utcnow())
    except FlagAlreadyResolved as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ModerationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        with two_phase_update(db, flag):
            for field, value in outcome["flag"].items():
                setattr(flag, field, value)
            violation = add_violation(db, outcome["violation"])
    except Exception as e:
        logger.error(f"Error reviewing flag {flag_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to record review")

    logger.info(
        f"Admin {ctx.user_id} reviewed flag {flag_id}: rule '{rule.title}' -> {violation.action}"
    )
    return ReviewOutcome(
        flag=FlaggedMessageBase.model_validate(flag),
        violation=UserViolationBase.model_validate(violation),
    )


@router.post(
    "/flags/{flag_id}/dismiss",
    response_model=FlaggedMessageBase,
    summary="Dismiss a flagged message",
    responses={
        200: {"description": "Flag dismissed (or already was)."},
        403: {"description": "Admin access required."},
        404: {"description": "Flagged message not found."},
        409: {"description": "Flag was already reviewed."},
        500: {"description": "Failed to dismiss flag."},
    },
    dependencies=[Depends(require_writable)],
)
def dismiss_flag_route(
    flag_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_admin),
) -> FlaggedMessageBase:
    flag = _load_flag(db, flag_id)
    try:
        updates = dismiss_flag(flag, ctx.user_id, utcnow())
    except FlagAlreadyResolved as e:
        raise HTTPException(status_code=409, detail=str(e))
    if updates is None:
        return flag

    try:
        with two_phase_update(db, flag):
            for field, value in updates.items():
                setattr(flag, field, value)
    except Exception as e:
        logger.error(f"Error dismissing flag {flag_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to dismiss flag")

    logger.info(f"Admin {ctx.user_id} dismissed flag {flag_id}")
    return flag


@router.get(
    "/violations",
    response_model=List[UserViolationBase],
    summary="Violation history",
    responses={
        200: {"description": "Violations returned, newest first."},
        403: {"description": "Admin access required."},
    },
)
def list_violations_route(
    user_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_admin),
) -> List[UserViolationBase]:
    try:
        return get_violations(db, user_id)
    except Exception as e:
        logger.error(f"Error loading violations for admin {ctx.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load violations")
