import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Uuid
from app.core.database import Base


class ChatRule(Base):
    __tablename__ = "chat_rules"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=False)
    severity = Column(Integer, nullable=False)  # 1 warning, 2 suspension, 3 ban


class FlaggedMessage(Base):
    __tablename__ = "flagged_messages"

    id = Column(Uuid(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4)
    message_id = Column(String, nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), index=True, nullable=True)  # author of the flagged message
    user_name = Column(String, nullable=False, default="Anonymous User")
    reporter_id = Column(Uuid(as_uuid=True), nullable=True)

    content = Column(Text, nullable=False)
    reason = Column(String, nullable=False)
    status = Column(String, nullable=False, default="pending", index=True)  # pending | reviewed | dismissed

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(Uuid(as_uuid=True), nullable=True)


class UserViolation(Base):
    __tablename__ = "user_violations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), index=True, nullable=True)
    flagged_message_id = Column(Uuid(as_uuid=True), ForeignKey("flagged_messages.id"), nullable=False)
    rule_id = Column(Uuid(as_uuid=True), ForeignKey("chat_rules.id"), nullable=False)
    severity = Column(Integer, nullable=False)
    action = Column(String, nullable=False)  # warning | suspension | ban
    reason = Column(Text, nullable=False)
    moderator_id = Column(Uuid(as_uuid=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
