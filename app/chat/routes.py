import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.schemas import RequestContext
from app.auth.service import require_user
from app.chat.providers.base import ChatProvider
from app.chat.schemas import ChatFeedback, ChatFeedbackResult, ChatMessage, ChatReply, ChatRequest
from app.chat.service import GREETING, respond
from app.core.database import get_db
from app.core.dependency import fixtures_configured, get_chat_provider
from app.gamification.service import award

router = APIRouter(prefix="/chat", tags=["Chat"])
logger = logging.getLogger(__name__)


@router.get(
    "/greeting",
    response_model=ChatMessage,
    summary="Assistant's opening message",
)
def greeting_route() -> ChatMessage:
    return ChatMessage(role="assistant", content=GREETING)


@router.post(
    "/messages",
    response_model=ChatReply,
    summary="Send a message to the assistant",
    description="""
                Send the conversation so far plus a new message and get the assistant's reply.
                If the model is unavailable the reply is a fixed apology and `ok` is false.
                A successful exchange earns points.
                """,
    responses={
        200: {"description": "Reply returned (possibly the apology)."},
        401: {"description": "Unauthorized."},
        422: {"description": "Empty message."},
    },
)
def send_message_route(
    request: ChatRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
    provider: ChatProvider = Depends(get_chat_provider),
) -> ChatReply:
    text, ok = respond(provider, request.history, request.message)
    points = None
    if ok and not fixtures_configured():
        points = award(db, ctx.user_id, "chat_exchange")
    return ChatReply(reply=ChatMessage(role="assistant", content=text), ok=ok, points=points)


@router.post(
    "/feedback",
    response_model=ChatFeedbackResult,
    summary="Rate an assistant reply",
    description="Helpful feedback earns points; unhelpful feedback is only logged.",
    responses={
        200: {"description": "Feedback recorded."},
        401: {"description": "Unauthorized."},
    },
)
def feedback_route(
    feedback: ChatFeedback,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_user),
) -> ChatFeedbackResult:
    logger.info(f"User {ctx.user_id} rated message {feedback.message_id} helpful={feedback.helpful}")
    points = None
    if feedback.helpful and not fixtures_configured():
        points = award(db, ctx.user_id, "chat_feedback")
    return ChatFeedbackResult(recorded=True, points=points)
