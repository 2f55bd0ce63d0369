from uuid import UUID
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.timeutils import as_aware
from app.gamification.models import PointActivity, UserAchievement, UserPoints
from app.profiles.models import Profile


def get_points(db: Session, user_id: UUID) -> Optional[UserPoints]:
    return db.query(UserPoints).filter(UserPoints.user_id == user_id).first()


def get_or_create_points(db: Session, user_id: UUID) -> UserPoints:
    """
    Returns the user's points row, adding a zeroed one to the session if missing.
    The new row is flushed but not committed.
    """
    points = get_points(db, user_id)
    if points is None:
        points = UserPoints(user_id=user_id, total_points=0, level=1, streak_days=0)
        db.add(points)
        db.flush()
    return points


def add_activity(db: Session, user_id: UUID, action: str, points: int, description: Optional[str]) -> PointActivity:
    activity = PointActivity(user_id=user_id, action=action, points=points, description=description)
    db.add(activity)
    return activity


def get_recent_activities(db: Session, user_id: UUID, limit: int = 20) -> List[PointActivity]:
    return (
        db.query(PointActivity)
        .filter(PointActivity.user_id == user_id)
        .order_by(PointActivity.created_at.desc())
        .limit(limit)
        .all()
    )


def count_activities_by_action(db: Session, user_id: UUID) -> Dict[str, int]:
    rows = (
        db.query(PointActivity.action, func.count(PointActivity.id))
        .filter(PointActivity.user_id == user_id)
        .group_by(PointActivity.action)
        .all()
    )
    return {action: count for action, count in rows}


def count_activity_days(db: Session, user_id: UUID, action: str) -> int:
    """Number of distinct UTC calendar days on which `action` was granted."""
    timestamps = (
        db.query(PointActivity.created_at)
        .filter(PointActivity.user_id == user_id, PointActivity.action == action)
        .all()
    )
    return len({as_aware(created_at).date() for (created_at,) in timestamps})


def has_profile(db: Session, user_id: UUID) -> bool:
    return db.query(Profile.id).filter(Profile.id == user_id).first() is not None


def get_unlocked_achievements(db: Session, user_id: UUID) -> List[UserAchievement]:
    return (
        db.query(UserAchievement)
        .filter(UserAchievement.user_id == user_id)
        .order_by(UserAchievement.achieved_at.asc())
        .all()
    )


def add_unlocked_achievement(db: Session, user_id: UUID, achievement_id: str) -> UserAchievement:
    unlocked = UserAchievement(user_id=user_id, achievement_id=achievement_id)
    db.add(unlocked)
    return unlocked
