import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, Date, DateTime, UniqueConstraint, Uuid
from app.core.database import Base


class UserPoints(Base):
    __tablename__ = "user_points"

    user_id = Column(Uuid(as_uuid=True), primary_key=True)
    total_points = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    streak_days = Column(Integer, nullable=False, default=0)
    last_activity_date = Column(Date, nullable=True)


class PointActivity(Base):
    __tablename__ = "point_activities"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), index=True, nullable=False)
    action = Column(String, nullable=False)  # chat_exchange, mood_entry, achievement_unlocked, ...
    points = Column(Integer, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)


class UserAchievement(Base):
    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), index=True, nullable=False)
    achievement_id = Column(String, nullable=False)
    achieved_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
