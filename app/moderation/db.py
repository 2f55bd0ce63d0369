from uuid import UUID
from typing import Dict, List, Optional

from sqlalchemy.orm import Session
from app.moderation.models import ChatRule, FlaggedMessage, UserViolation
from app.moderation.schemas import FlaggedMessageCreate
from app.moderation.service import DEFAULT_CHAT_RULES


def get_chat_rules(db: Session) -> List[ChatRule]:
    return db.query(ChatRule).order_by(ChatRule.severity.asc(), ChatRule.title.asc()).all()


def get_chat_rule(db: Session, rule_id: UUID) -> Optional[ChatRule]:
    return db.query(ChatRule).filter(ChatRule.id == rule_id).first()


def seed_chat_rules(db: Session) -> int:
    """
    Inserts the default community guidelines that are not stored yet.

    Args:
        db (Session): SQLAlchemy session.

    Returns:
        int: Number of rules added.
    """
    existing = {title for (title,) in db.query(ChatRule.title).all()}
    added = 0
    for rule in DEFAULT_CHAT_RULES:
        if rule["title"] not in existing:
            db.add(ChatRule(**rule))
            added += 1
    if added:
        db.commit()
    return added


def create_flag(db: Session, flag: FlaggedMessageCreate, user_id: UUID, user_name: Optional[str]) -> FlaggedMessage:
    """
    Queues a message from the caller's own conversation for review. The
    message owner and the reporter are both the caller.
    """
    new_flag = FlaggedMessage(
        message_id=flag.message_id,
        user_id=user_id,
        user_name=user_name or "Anonymous User",
        reporter_id=user_id,
        content=flag.content,
        reason=flag.reason.strip(),
        status="pending",
    )
    db.add(new_flag)
    db.commit()
    db.refresh(new_flag)
    return new_flag


def get_flag(db: Session, flag_id: UUID) -> Optional[FlaggedMessage]:
    return db.query(FlaggedMessage).filter(FlaggedMessage.id == flag_id).first()


def get_flags(db: Session) -> List[FlaggedMessage]:
    """Every flag, newest first."""
    return db.query(FlaggedMessage).order_by(FlaggedMessage.created_at.desc()).all()


def add_violation(db: Session, values: Dict) -> UserViolation:
    violation = UserViolation(**values)
    db.add(violation)
    return violation


def get_violations(db: Session, user_id: Optional[UUID] = None) -> List[UserViolation]:
    query = db.query(UserViolation)
    if user_id is not None:
        query = query.filter(UserViolation.user_id == user_id)
    return query.order_by(UserViolation.created_at.desc()).all()
