from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

FlagStatus = Literal["pending", "reviewed", "dismissed"]
ViolationAction = Literal["warning", "suspension", "ban"]


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class ChatRuleBase(BaseSchema):
    id: UUID
    title: str
    description: str
    severity: int = Field(..., ge=1, le=3)


class FlaggedMessageBase(BaseSchema):
    id: UUID
    message_id: str
    user_id: Optional[UUID] = None
    user_name: str
    content: str
    reason: str
    status: FlagStatus
    created_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[UUID] = None


class FlaggedMessageCreate(BaseSchema):
    message_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=1, max_length=200)


class ReviewAction(BaseSchema):
    rule_id: Optional[UUID] = None
    reason: Optional[str] = None


class UserViolationBase(BaseSchema):
    id: UUID
    user_id: Optional[UUID] = None
    flagged_message_id: UUID
    rule_id: UUID
    severity: int
    action: ViolationAction
    reason: str
    moderator_id: UUID
    created_at: datetime


class ReviewOutcome(BaseSchema):
    flag: FlaggedMessageBase
    violation: UserViolationBase


class FlagList(BaseSchema):
    items: List[FlaggedMessageBase]
    pending_count: int
