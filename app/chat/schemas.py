from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from app.gamification.schemas import GrantResult


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class ChatMessage(BaseSchema):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseSchema):
    message: str = Field(..., min_length=1, max_length=4000)
    history: List[ChatMessage] = []


class ChatReply(BaseSchema):
    reply: ChatMessage
    ok: bool
    points: Optional[GrantResult] = None


class ChatFeedback(BaseSchema):
    message_id: str = Field(..., min_length=1)
    helpful: bool


class ChatFeedbackResult(BaseSchema):
    recorded: bool
    points: Optional[GrantResult] = None
